"""
Success Criteria Enforcer - append a "done when" checklist for the task.
"""

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list, has_section

SUCCESS_INDICATORS = (
    "success criteria", "acceptance criteria", "done when", "complete when",
    "must pass", "should pass", "test coverage", "meets requirements",
    "criteria:", "validation:", "verify that", "ensure that", "should be able to",
)

INTENT_CRITERIA = {
    PromptIntent.CODE_GENERATION: (
        "Code runs without errors",
        "All tests pass (if tests are written)",
        "Follows project coding standards",
        "Functionality matches requirements",
        "Edge cases are handled",
    ),
    PromptIntent.PLANNING: (
        "All requirements are addressed",
        "Tasks are atomic and actionable",
        "Dependencies are identified",
        "Timeline/phases are realistic",
        "Risks are documented",
    ),
    PromptIntent.REFINEMENT: (
        "Target metric improved (state which: latency, readability, size)",
        "No regression in functionality",
        "Existing tests still pass",
    ),
    PromptIntent.DEBUGGING: (
        "Bug is reproducible and root cause identified",
        "Fix addresses root cause, not symptom",
        "No new bugs introduced",
        "Regression test added",
    ),
    PromptIntent.TESTING: (
        "Test coverage meets the agreed threshold (e.g., >80%)",
        "All critical paths tested",
        "Tests are deterministic",
    ),
    PromptIntent.MIGRATION: (
        "All features work as before",
        "No data loss",
        "Rollback plan exists",
    ),
    PromptIntent.PRD_GENERATION: (
        "All sections are complete",
        "Requirements are unambiguous",
        "Success metrics are measurable",
        "Scope is clearly defined",
    ),
}


class SuccessCriteriaSettings(PatternSettings):
    show_checkboxes: bool = True


class SuccessCriteriaEnforcer(BasePattern):
    info = PatternInfo(
        id="success-criteria-enforcer",
        name="Success Criteria Enforcer",
        description="Adds measurable success criteria for task completion validation",
        applicable_intents=frozenset(INTENT_CRITERIA),
        priority=7,
    )
    settings_model = SuccessCriteriaSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if has_section(prompt, SUCCESS_INDICATORS):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Success criteria already specified")

        intent = context.intent.primary_intent
        criteria = INTENT_CRITERIA.get(intent, INTENT_CRITERIA[PromptIntent.CODE_GENERATION])
        section = (
            "\n\n## Success Criteria\n\n"
            "This task is complete when:\n"
            f"{bullet_list(criteria, checkbox=self.settings.show_checkboxes)}"
        )
        return self.enhance(
            prompt.rstrip() + section,
            QualityDimension.COMPLETENESS,
            f"Added {len(criteria)} measurable success criteria for {intent.value}",
            ImpactLevel.MEDIUM,
        )
