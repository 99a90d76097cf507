"""
Tests for PatternLibrary, pattern ordering and the orchestrator.
"""

import logging

import pytest
from conftest import make_context, make_intent

from clavix.config import IntelligenceConfig
from clavix.intelligence import (
    ImpactLevel,
    Improvement,
    OptimizationMode,
    PatternConfigError,
    PatternLibrary,
    PatternOrchestrator,
    PatternPhase,
    PatternRegistrationError,
    PatternResult,
    PromptIntent,
    QualityDimension,
    build_default_registry,
)
from clavix.intelligence.pattern_library import order_patterns
from clavix.intelligence.patterns.base import ALL_INTENTS, FunctionPattern, PatternInfo


def appender(tag):
    def apply(prompt, context):
        return PatternResult(
            enhanced_prompt=f"{prompt}[{tag}]",
            improvement=Improvement(QualityDimension.CLARITY, f"added {tag}", ImpactLevel.LOW),
            applied=True,
        )
    return apply


def make_pattern(pattern_id, priority=5, func=None, **info):
    info.setdefault("applicable_intents", ALL_INTENTS)
    return FunctionPattern(
        PatternInfo(id=pattern_id, name=pattern_id.title(), description=f"{pattern_id} pattern",
                    priority=priority, **info),
        func or appender(pattern_id),
    )


def ids(patterns):
    return [p.id for p in patterns]


class TestPatternInfo:
    @pytest.mark.parametrize("priority", [0, 11, 5.5, True])
    def test_priority_must_be_in_range(self, priority):
        with pytest.raises(PatternRegistrationError):
            make_pattern("a", priority=priority)

    def test_intents_required(self):
        with pytest.raises(PatternRegistrationError):
            make_pattern("a", applicable_intents=frozenset())

    def test_unknown_mode(self):
        with pytest.raises(PatternRegistrationError):
            make_pattern("a", mode="sometimes")

    def test_phases_must_be_a_collection(self):
        with pytest.raises(PatternRegistrationError):
            make_pattern("a", phases="optimization")

    def test_values_are_coerced(self):
        pattern = make_pattern("a", applicable_intents=["planning"], mode="deep", phases=["summarization"])
        assert pattern.info.applicable_intents == frozenset({PromptIntent.PLANNING})
        assert pattern.info.phases == frozenset({PatternPhase.SUMMARIZATION})

    def test_apply_must_be_callable(self):
        with pytest.raises(PatternRegistrationError):
            FunctionPattern(make_pattern("a").info, "not callable")


class TestPatternLibrary:
    def test_register_rejects_duplicates(self):
        library = PatternLibrary(make_pattern("a"))
        with pytest.raises(PatternRegistrationError):
            library.register(make_pattern("a"))

    def test_register_rejects_non_patterns(self):
        with pytest.raises(PatternRegistrationError):
            PatternLibrary(object())

    def test_lookup(self):
        library = PatternLibrary(make_pattern("a"), make_pattern("b"))
        assert "a" in library
        assert library.get("b").id == "b"
        assert library.get("missing") is None
        assert len(library) == 2

    def test_select_filters_by_mode(self):
        library = PatternLibrary(make_pattern("fast", mode="fast"), make_pattern("deep", mode="deep"),
                                 make_pattern("both"))
        assert ids(library.select(make_intent(), OptimizationMode.FAST)) == ["fast", "both"]
        assert ids(library.select(make_intent(), OptimizationMode.DEEP)) == ["deep", "both"]

    def test_select_filters_by_intent(self):
        library = PatternLibrary(make_pattern("plan", applicable_intents={PromptIntent.PLANNING}))
        assert library.select(make_intent(PromptIntent.DEBUGGING), OptimizationMode.FAST) == []
        assert ids(library.select(make_intent(PromptIntent.PLANNING), OptimizationMode.FAST)) == ["plan"]

    def test_select_filters_by_phase(self):
        library = PatternLibrary(
            make_pattern("always"),
            make_pattern("late", phases={PatternPhase.OUTPUT_GENERATION}),
        )
        intent = make_intent()
        assert ids(library.select(intent, OptimizationMode.FAST, PatternPhase.OPTIMIZATION)) == ["always"]
        assert ids(library.select(intent, OptimizationMode.FAST, PatternPhase.OUTPUT_GENERATION)) == [
            "always", "late"
        ]
        assert ids(library.select(intent, OptimizationMode.FAST, PatternPhase.ALL)) == ["always", "late"]

    def test_statistics(self):
        library = PatternLibrary(make_pattern("fast", mode="fast"), make_pattern("deep", mode="deep"),
                                 make_pattern("both"))
        assert library.statistics() == {
            "total_patterns": 3,
            "fast_mode_patterns": 2,
            "deep_mode_patterns": 2,
            "both_mode_patterns": 1,
        }


class TestOrdering:
    def test_priority_descending(self):
        patterns = [make_pattern("low", 1), make_pattern("high", 10), make_pattern("mid", 5)]
        assert ids(order_patterns(patterns, patterns)) == ["high", "mid", "low"]

    def test_ties_keep_declaration_order(self):
        patterns = [make_pattern("b"), make_pattern("a"), make_pattern("c")]
        assert ids(order_patterns(reversed(patterns), patterns)) == ["b", "a", "c"]

    def test_run_after_hint(self):
        patterns = [make_pattern("a"), make_pattern("b", run_after=("c",)), make_pattern("c")]
        assert ids(order_patterns(patterns, patterns)) == ["a", "c", "b"]

    def test_enhanced_by_hint(self):
        patterns = [make_pattern("x", enhanced_by=("y",)), make_pattern("y")]
        assert ids(order_patterns(patterns, patterns)) == ["y", "x"]

    def test_hints_never_cross_priorities(self):
        patterns = [make_pattern("a", 9, run_after=("b",)), make_pattern("b", 5)]
        assert ids(order_patterns(patterns, patterns)) == ["a", "b"]

    def test_missing_hint_targets_are_ignored(self):
        patterns = [make_pattern("a", run_after=("ghost",)), make_pattern("b")]
        assert ids(order_patterns(patterns, patterns)) == ["a", "b"]

    def test_cyclic_hints_fall_back_to_declaration_order(self, caplog):
        patterns = [make_pattern("a", run_after=("b",)), make_pattern("b", run_after=("a",))]
        with caplog.at_level(logging.WARNING):
            assert ids(order_patterns(patterns, patterns)) == ["a", "b"]
        assert "Cyclic ordering hints" in caplog.text

    def test_prd_catalog_order(self):
        library = build_default_registry()
        selected = library.select(make_intent(PromptIntent.PRD_GENERATION), OptimizationMode.DEEP)
        assert ids(selected)[:2] == ["conciseness-filter", "prd-structure-enforcer"]
        assert "scope-definer" in ids(selected)
        assert "step-decomposer" not in ids(selected)

    def test_default_catalog_order(self):
        library = build_default_registry()
        selected = library.select(make_intent(PromptIntent.CODE_GENERATION), OptimizationMode.DEEP)
        assert ids(selected) == [
            "conciseness-filter",
            "objective-clarifier",
            "structure-organizer",
            "output-format-enforcer",
            "success-criteria-enforcer",
            "actionability-enhancer",
            "completeness-validator",
            "ambiguity-detector",
            "prerequisite-identifier",
            "domain-context-enricher",
            "technical-context-enricher",
            "step-decomposer",
            "scope-definer",
            "edge-case-identifier",
            "validation-checklist-creator",
        ]


class TestPatternOrchestrator:
    def test_patterns_fold_left_to_right(self):
        orchestrator = PatternOrchestrator(PatternLibrary(make_pattern("a", 9), make_pattern("b", 3)))
        outcome = orchestrator.run("p", make_context("p"))
        assert outcome.final_prompt == "p[a][b]"
        assert [s.id for s in outcome.applied_patterns] == ["a", "b"]
        assert [step.prompt for step in outcome.steps] == ["p[a]", "p[a][b]"]
        assert [i.description for i in outcome.improvements] == ["added a", "added b"]

    def test_failing_pattern_is_isolated(self, caplog):
        def boom(prompt, context):
            raise RuntimeError("boom")

        orchestrator = PatternOrchestrator(
            PatternLibrary(make_pattern("a", 9), make_pattern("bad", 7, func=boom), make_pattern("c", 5))
        )
        with caplog.at_level(logging.WARNING):
            outcome = orchestrator.run("p", make_context("p"))

        assert outcome.final_prompt == "p[a][c]"
        assert [s.id for s in outcome.skipped_patterns] == ["bad"]
        assert "RuntimeError: boom" in outcome.skipped_patterns[0].note
        assert "Pattern bad failed" in caplog.text
        assert [step.applied for step in outcome.steps] == [True, False, True]

    def test_wrong_return_type_is_isolated(self):
        orchestrator = PatternOrchestrator(PatternLibrary(make_pattern("a", func=lambda p, c: p)))
        outcome = orchestrator.run("p", make_context("p"))
        assert outcome.final_prompt == "p"
        assert "TypeError" in outcome.skipped_patterns[0].note

    def test_not_applied_text_is_ignored(self):
        def declines(prompt, context):
            return PatternResult(
                enhanced_prompt="something else",
                improvement=Improvement(QualityDimension.CLARITY, "nothing to do", ImpactLevel.LOW),
                applied=False,
            )

        orchestrator = PatternOrchestrator(PatternLibrary(make_pattern("a", func=declines)))
        outcome = orchestrator.run("p", make_context("p"))
        assert outcome.final_prompt == "p"
        assert outcome.applied_patterns == []
        assert outcome.skipped_patterns == []

    def test_verbose_logs_at_info(self, caplog):
        orchestrator = PatternOrchestrator(PatternLibrary(make_pattern("a")), verbose=True)
        with caplog.at_level(logging.INFO, logger="clavix.intelligence.pattern_library"):
            orchestrator.run("p", make_context("p"))
        assert "Applied a: added a" in caplog.text


class TestBuildDefaultRegistry:
    def test_full_catalog(self):
        library = build_default_registry()
        assert library.statistics()["total_patterns"] == 18

    def test_disabled_patterns(self):
        config = IntelligenceConfig(disabled_patterns=["ambiguity-detector"])
        library = build_default_registry(config)
        assert "ambiguity-detector" not in library
        assert len(library) == 17

    def test_pattern_settings(self):
        config = IntelligenceConfig(pattern_settings={"edge-case-identifier": {"max_edge_cases": 3}})
        library = build_default_registry(config)
        assert library.get("edge-case-identifier").settings.max_edge_cases == 3

    @pytest.mark.parametrize(
        "config",
        [
            IntelligenceConfig(disabled_patterns=["no-such-pattern"]),
            IntelligenceConfig(pattern_settings={"no-such-pattern": {}}),
            IntelligenceConfig(pattern_settings={"edge-case-identifier": {"max_edge_cases": 99}}),
            IntelligenceConfig(pattern_settings={"conciseness-filter": {"typo": True}}),
        ],
    )
    def test_invalid_configuration(self, config):
        with pytest.raises(PatternConfigError):
            build_default_registry(config)
