"""
Core types for the prompt intelligence pipeline.

Every record here is created fresh for a single optimization run and
returned by value; nothing is shared between runs except the pattern
registry, which is read-only once built.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .confidence import confidence_category


class PromptIntent(str, Enum):
    """Task category a prompt belongs to. Declaration order is the tie-break order."""

    CODE_GENERATION = "code-generation"
    PLANNING = "planning"
    REFINEMENT = "refinement"
    DEBUGGING = "debugging"
    DOCUMENTATION = "documentation"
    PRD_GENERATION = "prd-generation"
    TESTING = "testing"
    MIGRATION = "migration"
    SECURITY_REVIEW = "security-review"
    LEARNING = "learning"


class OptimizationMode(str, Enum):
    FAST = "fast"
    DEEP = "deep"


class PatternMode(str, Enum):
    FAST = "fast"
    DEEP = "deep"
    BOTH = "both"


class PatternPhase(str, Enum):
    """Lifecycle phase a pattern participates in."""

    ALL = "all"
    OPTIMIZATION = "optimization"
    QUESTION_VALIDATION = "question-validation"
    OUTPUT_GENERATION = "output-generation"
    CONVERSATION_TRACKING = "conversation-tracking"
    SUMMARIZATION = "summarization"


class QualityDimension(str, Enum):
    CLARITY = "clarity"
    EFFICIENCY = "efficiency"
    STRUCTURE = "structure"
    COMPLETENESS = "completeness"
    ACTIONABILITY = "actionability"
    SPECIFICITY = "specificity"


class ImpactLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Recommendation(str, Enum):
    FAST = "fast"
    DEEP = "deep"
    PRD = "prd"


@dataclass(frozen=True)
class IntentCharacteristics:
    """Independent boolean signals about a prompt (not mutually exclusive)."""

    has_code_context: bool = False
    has_technical_terms: bool = False
    is_open_ended: bool = False
    needs_structure: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            "hasCodeContext": self.has_code_context,
            "hasTechnicalTerms": self.has_technical_terms,
            "isOpenEnded": self.is_open_ended,
            "needsStructure": self.needs_structure,
        }


@dataclass(frozen=True)
class IntentAnalysis:
    """Result of intent classification."""

    primary_intent: PromptIntent
    confidence: int  # 0-100
    characteristics: IntentCharacteristics = field(default_factory=IntentCharacteristics)
    suggested_mode: Optional[OptimizationMode] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primaryIntent": self.primary_intent.value,
            "confidence": self.confidence,
            "confidenceCategory": confidence_category(self.confidence),
            "characteristics": self.characteristics.to_dict(),
            "suggestedMode": self.suggested_mode.value if self.suggested_mode else None,
        }


@dataclass
class QualityMetrics:
    """Per-dimension quality scores (0-100) and their explanations."""

    clarity: float
    efficiency: float
    structure: float
    completeness: float
    actionability: float
    specificity: float
    overall: float
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    remaining_issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clarity": self.clarity,
            "efficiency": self.efficiency,
            "structure": self.structure,
            "completeness": self.completeness,
            "actionability": self.actionability,
            "specificity": self.specificity,
            "overall": self.overall,
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
            "remainingIssues": list(self.remaining_issues),
        }


@dataclass(frozen=True)
class Improvement:
    """One enhancement made by a pattern."""

    dimension: QualityDimension
    description: str
    impact: ImpactLevel

    def to_dict(self) -> Dict[str, str]:
        return {
            "dimension": self.dimension.value,
            "description": self.description,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class PatternContext:
    """Snapshot shared by every pattern in one run. The evolving prompt is passed separately."""

    intent: IntentAnalysis
    mode: OptimizationMode
    original_prompt: str


@dataclass(frozen=True)
class PatternResult:
    enhanced_prompt: str
    improvement: Improvement
    applied: bool


@dataclass(frozen=True)
class PatternSummary:
    id: str
    name: str
    description: str
    impact: ImpactLevel

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class SkippedPattern:
    """A pattern whose apply() raised and was skipped."""

    id: str
    note: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "note": self.note}


@dataclass(frozen=True)
class PipelineStep:
    """Prompt text after one pattern ran (unchanged when it did not apply)."""

    pattern_id: str
    applied: bool
    prompt: str


@dataclass
class PipelineOutcome:
    """What the orchestrator hands back after folding the patterns over a prompt."""

    final_prompt: str
    improvements: List[Improvement] = field(default_factory=list)
    applied_patterns: List[PatternSummary] = field(default_factory=list)
    skipped_patterns: List[SkippedPattern] = field(default_factory=list)
    steps: List[PipelineStep] = field(default_factory=list)


@dataclass
class EscalationResult:
    score: int  # 0-100
    recommend: Recommendation
    factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "recommend": self.recommend.value,
            "factors": list(self.factors),
        }


@dataclass
class OptimizationResult:
    """Aggregate returned to the CLI/agent layer."""

    original: str
    enhanced: str
    intent: IntentAnalysis
    quality_before: QualityMetrics
    quality: QualityMetrics
    improvements: List[Improvement]
    applied_patterns: List[PatternSummary]
    skipped_patterns: List[SkippedPattern]
    mode: OptimizationMode
    phase: PatternPhase
    escalation: EscalationResult
    processing_time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Flat JSON-compatible record (primitives, lists and dicts only)."""
        return {
            "original": self.original,
            "enhanced": self.enhanced,
            "intent": self.intent.to_dict(),
            "qualityBefore": self.quality_before.to_dict(),
            "quality": self.quality.to_dict(),
            "improvements": [i.to_dict() for i in self.improvements],
            "appliedPatterns": [p.to_dict() for p in self.applied_patterns],
            "skippedPatterns": [s.to_dict() for s in self.skipped_patterns],
            "mode": self.mode.value,
            "phase": self.phase.value,
            "escalation": self.escalation.to_dict(),
            "processingTimeMs": self.processing_time_ms,
        }
