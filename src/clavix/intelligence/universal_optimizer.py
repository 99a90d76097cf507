"""
Universal Optimizer - composition root of the prompt intelligence pipeline.

intent -> baseline quality -> pattern pipeline -> final quality -> escalation

Nothing flows backwards and nothing is kept between calls; one optimizer
(and its pattern library) can serve any number of prompts.
"""

import dataclasses
import logging
import time
from typing import Dict, Optional, Union

from .escalation import EscalationScorer
from .intent_detector import IntentDetector
from .pattern_library import PatternLibrary, PatternOrchestrator, build_default_registry
from .quality_assessor import QualityAssessor
from .types import (
    OptimizationMode,
    OptimizationResult,
    PatternContext,
    PatternPhase,
    PipelineOutcome,
    PromptIntent,
)

logger = logging.getLogger(__name__)

DEEP_MODE_HINT = (
    "This prompt would benefit from comprehensive analysis. "
    "Run: clavix deep for edge cases, ambiguity checks and a validation checklist"
)


class UniversalOptimizer:
    """
    Runs one prompt through the full pipeline.

    Args:
        library: Pattern registry; the default catalog is built when omitted
        intent_detector: Intent classifier
        quality_assessor: Quality scorer
        escalation_scorer: Escalation rule table
        verbose: Log every pattern decision at INFO instead of DEBUG
    """

    def __init__(
        self,
        library: Optional[PatternLibrary] = None,
        intent_detector: Optional[IntentDetector] = None,
        quality_assessor: Optional[QualityAssessor] = None,
        escalation_scorer: Optional[EscalationScorer] = None,
        verbose: bool = False,
    ):
        self.library = library if library is not None else build_default_registry()
        self.intent_detector = intent_detector or IntentDetector()
        self.quality_assessor = quality_assessor or QualityAssessor()
        self.escalation_scorer = escalation_scorer or EscalationScorer()
        self.orchestrator = PatternOrchestrator(self.library, verbose=verbose)

    def optimize(
        self,
        prompt: str,
        mode: Union[OptimizationMode, str] = OptimizationMode.FAST,
        phase: Union[PatternPhase, str] = PatternPhase.ALL,
        intent: Optional[Union[PromptIntent, str]] = None,
    ) -> OptimizationResult:
        """
        Optimize a prompt.

        Args:
            prompt: Raw prompt text (empty input yields a degenerate result)
            mode: fast or deep
            phase: Lifecycle phase to run; ALL applies no phase filter
            intent: Force a primary intent (e.g. prd-generation from a PRD flow)

        Returns:
            OptimizationResult

        Raises:
            ValueError: if mode, phase or intent is not a known value
        """
        start_time = time.perf_counter()
        prompt = prompt or ""
        mode = OptimizationMode(mode)
        phase = PatternPhase(phase)

        analysis = self.intent_detector.analyze(prompt)
        if intent is not None:
            analysis = dataclasses.replace(analysis, primary_intent=PromptIntent(intent))

        quality_before = self.quality_assessor.score(prompt, analysis)

        if prompt.strip():
            context = PatternContext(intent=analysis, mode=mode, original_prompt=prompt)
            outcome = self.orchestrator.run(prompt, context, phase)
        else:
            logger.info("Empty prompt; skipping pattern pipeline")
            outcome = PipelineOutcome(final_prompt=prompt)

        quality = self.quality_assessor.assess(prompt, outcome.final_prompt, analysis)
        escalation = self.escalation_scorer.score(analysis, quality_before)

        processing_time_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(
            "Optimized prompt in %dms: %d applied, %d skipped",
            processing_time_ms,
            len(outcome.applied_patterns),
            len(outcome.skipped_patterns),
        )

        return OptimizationResult(
            original=prompt,
            enhanced=outcome.final_prompt,
            intent=analysis,
            quality_before=quality_before,
            quality=quality,
            improvements=outcome.improvements,
            applied_patterns=outcome.applied_patterns,
            skipped_patterns=outcome.skipped_patterns,
            mode=mode,
            phase=phase,
            escalation=escalation,
            processing_time_ms=processing_time_ms,
        )

    def should_recommend_deep_mode(self, result: OptimizationResult) -> bool:
        if result.intent.primary_intent == PromptIntent.PLANNING:
            return True
        if result.quality.overall < 65:
            return True
        characteristics = result.intent.characteristics
        if characteristics.is_open_ended and characteristics.needs_structure:
            return True
        return len(result.original) < 50 and result.quality.completeness < 70

    def recommendation_message(self, result: OptimizationResult) -> Optional[str]:
        """Human-readable hint for the CLI, or None when there is nothing to say."""
        if result.mode == OptimizationMode.FAST and self.should_recommend_deep_mode(result):
            return DEEP_MODE_HINT
        if result.quality.overall >= 90:
            return "Excellent! Your prompt is AI-ready."
        if result.quality.overall >= 80:
            return "Good quality. Ready to use!"
        if result.quality.overall >= 70:
            return "Decent quality. Consider the improvements listed above."
        return None

    def statistics(self) -> Dict[str, int]:
        stats = self.library.statistics()
        return {
            "total_patterns": stats["total_patterns"],
            "fast_mode_patterns": stats["fast_mode_patterns"],
            "deep_mode_patterns": stats["deep_mode_patterns"],
        }


def optimize_prompt(prompt: str, mode: Union[OptimizationMode, str] = OptimizationMode.FAST) -> OptimizationResult:
    """
    Quick optimization with the default pattern catalog.

    Args:
        prompt: Prompt to optimize
        mode: fast or deep

    Returns:
        OptimizationResult
    """
    return UniversalOptimizer().optimize(prompt, mode)
