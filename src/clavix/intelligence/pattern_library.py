"""
Pattern Library - registry of enrichment patterns and the orchestrator that applies them.

The registry is built once (see build_default_registry) and only read
afterwards. Every run filters it by mode, intent and phase, orders the
survivors and folds them over the prompt: each pattern receives the
output of the previous one.

Ordering:
1. priority, highest first
2. within a priority, soft hints: a pattern runs after everything in its
   `run_after`, and before every pattern that lists it in `enhanced_by`
3. remaining ties fall back to registration order
"""

import logging
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Tuple

from .exceptions import PatternConfigError, PatternRegistrationError
from .patterns import PATTERN_CATALOG
from .patterns.base import BasePattern
from .types import (
    IntentAnalysis,
    OptimizationMode,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternResult,
    PatternSummary,
    PipelineOutcome,
    PipelineStep,
    SkippedPattern,
)

if TYPE_CHECKING:
    from ..config import IntelligenceConfig

logger = logging.getLogger(__name__)


class PatternLibrary:
    """
    Ordered, id-unique collection of patterns.

    Registration order is remembered and used as the final ordering tie-break.
    """

    def __init__(self, *patterns: BasePattern):
        self.patterns: Tuple[BasePattern, ...] = ()
        self.pattern_map: Dict[str, BasePattern] = {}
        for pattern in patterns:
            self.register(pattern)

    def __iter__(self) -> Iterator[BasePattern]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def __contains__(self, pattern_id: str) -> bool:
        return pattern_id in self.pattern_map

    def register(self, pattern: BasePattern) -> "PatternLibrary":
        """
        Add a pattern to the library.

        Raises:
            PatternRegistrationError: if the object is not a pattern or its id is taken
        """
        if not isinstance(pattern, BasePattern):
            raise PatternRegistrationError(
                f"Expected a BasePattern instance, got {type(pattern).__name__}"
            )
        if pattern.id in self.pattern_map:
            raise PatternRegistrationError(f"Pattern '{pattern.id}' is already registered")

        self.patterns += (pattern,)
        self.pattern_map[pattern.id] = pattern
        logger.debug("Registered pattern %s (priority %d)", pattern.id, pattern.priority)
        return self

    def get(self, pattern_id: str) -> Optional[BasePattern]:
        return self.pattern_map.get(pattern_id)

    def by_mode(self, mode: OptimizationMode) -> List[BasePattern]:
        """Patterns eligible in the given optimization mode."""
        return [p for p in self.patterns if p.info.supports_mode(mode)]

    def select(
        self,
        intent: IntentAnalysis,
        mode: OptimizationMode,
        phase: PatternPhase = PatternPhase.ALL,
    ) -> List[BasePattern]:
        """Applicable patterns in execution order."""
        applicable = [
            p for p in self.patterns
            if p.info.is_applicable(intent.primary_intent, mode, phase)
        ]
        return order_patterns(applicable, self.patterns)

    def statistics(self) -> Dict[str, int]:
        return {
            "total_patterns": len(self.patterns),
            "fast_mode_patterns": len(self.by_mode(OptimizationMode.FAST)),
            "deep_mode_patterns": len(self.by_mode(OptimizationMode.DEEP)),
            "both_mode_patterns": len([p for p in self.patterns if p.mode == PatternMode.BOTH]),
        }


def order_patterns(patterns: Iterable[BasePattern], declared: Iterable[BasePattern]) -> List[BasePattern]:
    """
    Sort patterns by priority, then soft hints, then declaration order.

    Hints never move a pattern across priorities. Cyclic hints are ignored
    for the patterns involved, which then keep declaration order.
    """
    declaration_index = {p.id: i for i, p in enumerate(declared)}
    by_priority: Dict[int, List[BasePattern]] = {}
    for pattern in patterns:
        by_priority.setdefault(pattern.priority, []).append(pattern)

    ordered: List[BasePattern] = []
    for priority in sorted(by_priority, reverse=True):
        group = sorted(by_priority[priority], key=lambda p: declaration_index.get(p.id, len(declaration_index)))
        ordered.extend(_apply_hints(group))
    return ordered


def _apply_hints(group: List[BasePattern]) -> List[BasePattern]:
    ids = {p.id for p in group}
    predecessors: Dict[str, set] = {p.id: set() for p in group}
    for pattern in group:
        for earlier in pattern.info.run_after:
            if earlier in ids and earlier != pattern.id:
                predecessors[pattern.id].add(earlier)
        for enhancer in pattern.info.enhanced_by:
            if enhancer in ids and enhancer != pattern.id:
                predecessors[pattern.id].add(enhancer)

    # Kahn's algorithm, always taking the earliest-declared ready pattern.
    remaining = list(group)
    result: List[BasePattern] = []
    placed: set = set()
    while remaining:
        ready = next((p for p in remaining if predecessors[p.id] <= placed), None)
        if ready is None:
            logger.warning(
                "Cyclic ordering hints among %s; using declaration order",
                [p.id for p in remaining],
            )
            result.extend(remaining)
            break
        result.append(ready)
        placed.add(ready.id)
        remaining.remove(ready)
    return result


class PatternOrchestrator:
    """
    Folds the applicable patterns of a library over a prompt.

    A pattern that raises is logged, recorded as skipped and treated as not
    applied; the remaining patterns still run.
    """

    def __init__(self, library: PatternLibrary, verbose: bool = False):
        self.library = library
        self.verbose = verbose

    def run(
        self,
        prompt: str,
        context: PatternContext,
        phase: PatternPhase = PatternPhase.ALL,
    ) -> PipelineOutcome:
        patterns = self.library.select(context.intent, context.mode, phase)
        return self.apply_patterns(prompt, context, patterns)

    def apply_patterns(
        self, prompt: str, context: PatternContext, patterns: Iterable[BasePattern]
    ) -> PipelineOutcome:
        outcome = PipelineOutcome(final_prompt=prompt)
        log = logger.info if self.verbose else logger.debug

        for pattern in patterns:
            current = outcome.final_prompt
            try:
                result = pattern.apply(current, context)
                if not isinstance(result, PatternResult):
                    raise TypeError(
                        f"apply() returned {type(result).__name__}, expected PatternResult"
                    )
            except Exception as e:
                logger.warning("Pattern %s failed; skipping", pattern.id, exc_info=True)
                outcome.skipped_patterns.append(
                    SkippedPattern(id=pattern.id, note=f"Skipped due to error: {type(e).__name__}: {e}")
                )
                outcome.steps.append(PipelineStep(pattern_id=pattern.id, applied=False, prompt=current))
                continue

            if result.applied:
                outcome.final_prompt = result.enhanced_prompt
                outcome.improvements.append(result.improvement)
                outcome.applied_patterns.append(
                    PatternSummary(
                        id=pattern.id,
                        name=pattern.name,
                        description=pattern.description,
                        impact=result.improvement.impact,
                    )
                )
                log("Applied %s: %s", pattern.id, result.improvement.description)
            else:
                log("Skipped %s: %s", pattern.id, result.improvement.description)

            outcome.steps.append(
                PipelineStep(pattern_id=pattern.id, applied=result.applied, prompt=outcome.final_prompt)
            )

        return outcome


def build_default_registry(config: Optional["IntelligenceConfig"] = None) -> PatternLibrary:
    """
    Instantiate the built-in catalog with settings resolved from config.

    Raises:
        PatternConfigError: if config names unknown patterns or has invalid settings
    """
    known = {cls.info.id for cls in PATTERN_CATALOG}
    disabled = set(config.disabled_patterns) if config else set()
    settings = dict(config.pattern_settings) if config else {}

    unknown = sorted((disabled | set(settings)) - known)
    if unknown:
        raise PatternConfigError(f"Unknown pattern ids in configuration: {', '.join(unknown)}")

    library = PatternLibrary()
    for pattern_class in PATTERN_CATALOG:
        if pattern_class.info.id in disabled:
            logger.info("Pattern %s disabled by configuration", pattern_class.info.id)
            continue
        library.register(pattern_class(settings.get(pattern_class.info.id)))
    return library
