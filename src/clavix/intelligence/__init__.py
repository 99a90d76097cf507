"""
Prompt intelligence pipeline.

- Intent detection: weighted keyword classifier
- Quality assessment: six heuristic dimensions plus a weighted overall score
- Pattern library: registry and orchestrator for enrichment patterns
- Escalation: fast / deep / prd recommendation
- Universal optimizer: runs the whole pipeline for one prompt
"""

from .escalation import EscalationScorer, score_escalation
from .exceptions import ClavixError, ConfigError, PatternConfigError, PatternRegistrationError
from .intent_detector import IntentDetector, detect_intent
from .pattern_library import PatternLibrary, PatternOrchestrator, build_default_registry
from .quality_assessor import QualityAssessor, assess_quality
from .types import (
    EscalationResult,
    ImpactLevel,
    Improvement,
    IntentAnalysis,
    IntentCharacteristics,
    OptimizationMode,
    OptimizationResult,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternResult,
    PromptIntent,
    QualityDimension,
    QualityMetrics,
    Recommendation,
)
from .universal_optimizer import UniversalOptimizer, optimize_prompt

__all__ = [
    'EscalationScorer',
    'score_escalation',
    'ClavixError',
    'ConfigError',
    'PatternConfigError',
    'PatternRegistrationError',
    'IntentDetector',
    'detect_intent',
    'PatternLibrary',
    'PatternOrchestrator',
    'build_default_registry',
    'QualityAssessor',
    'assess_quality',
    'EscalationResult',
    'ImpactLevel',
    'Improvement',
    'IntentAnalysis',
    'IntentCharacteristics',
    'OptimizationMode',
    'OptimizationResult',
    'PatternContext',
    'PatternMode',
    'PatternPhase',
    'PatternResult',
    'PromptIntent',
    'QualityDimension',
    'QualityMetrics',
    'Recommendation',
    'UniversalOptimizer',
    'optimize_prompt',
]
