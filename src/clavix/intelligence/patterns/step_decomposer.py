"""
Step Decomposer - break a multi-part request into an ordered list of steps.
"""

import re
from typing import Dict, Tuple

from pydantic import Field

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, count_words, mentions_any

MULTIPLE_ACTIONS = re.compile(r"\b(and|then|also|after|next|finally|additionally)\b", re.I)
LIST_ITEM = re.compile(r"^\s*[-•*]\s+", re.M)

EXISTING_STEPS = (
    re.compile(r"step\s*[1-9]", re.I),
    re.compile(r"^\s*[1-9]\.\s+", re.M),
    re.compile(r"first[\s,].*second[\s,]", re.I | re.S),
    re.compile(r"phase\s*[1-9]", re.I),
)

# (keywords, steps), first match wins
CODE_GENERATION_STEPS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        ("component", "ui", "interface"),
        (
            "Define component interface and props",
            "Implement core component logic",
            "Add styling and responsive design",
            "Add error handling and edge cases",
            "Write unit tests",
        ),
    ),
    (
        ("api", "endpoint", "route"),
        (
            "Define API contract (request/response)",
            "Implement endpoint handler",
            "Add input validation",
            "Implement error handling",
            "Add authentication/authorization if needed",
            "Write tests",
        ),
    ),
    (
        ("function", "utility", "helper"),
        (
            "Define function signature and types",
            "Implement core logic",
            "Handle edge cases",
            "Add documentation",
            "Write tests",
        ),
    ),
)

GENERIC_CODE_STEPS = (
    "Understand requirements and define interface",
    "Implement core functionality",
    "Add error handling",
    "Test and validate",
)

INTENT_STEPS: Dict[PromptIntent, Tuple[str, ...]] = {
    PromptIntent.PLANNING: (
        "Clarify goals and success criteria",
        "Identify key components and dependencies",
        "Define architecture and data flow",
        "Break down into implementable tasks",
        "Identify risks and mitigation strategies",
        "Create timeline and milestones",
    ),
    PromptIntent.MIGRATION: (
        "Assess current state and document existing behavior",
        "Define target state and requirements",
        "Create migration plan with rollback strategy",
        "Set up parallel environment for testing",
        "Migrate data in stages",
        "Validate functionality and performance",
        "Switch traffic and monitor",
        "Decommission old system after stabilization",
    ),
    PromptIntent.TESTING: (
        "Identify test cases from requirements",
        "Set up test environment and fixtures",
        "Write happy path tests",
        "Write edge case tests",
        "Write error scenario tests",
        "Verify coverage meets requirements",
        "Review and refactor tests for maintainability",
    ),
    PromptIntent.DEBUGGING: (
        "Reproduce the bug consistently",
        "Gather error logs and stack traces",
        "Isolate the problem area",
        "Form hypothesis about root cause",
        "Test hypothesis with targeted changes",
        "Implement fix",
        "Verify fix resolves issue without regression",
        "Add test to prevent recurrence",
    ),
    PromptIntent.DOCUMENTATION: (
        "Identify target audience and their needs",
        "Outline document structure",
        "Write introduction and overview",
        "Document main content with examples",
        "Add troubleshooting/FAQ section",
        "Review for accuracy and clarity",
    ),
}


class StepDecomposerSettings(PatternSettings):
    min_words_for_decomposition: int = Field(default=100, ge=50, le=500)


class StepDecomposer(BasePattern):
    info = PatternInfo(
        id="step-decomposer",
        name="Step-by-Step Decomposer",
        description="Break complex prompts into clear sequential steps",
        applicable_intents=frozenset(INTENT_STEPS) | {PromptIntent.CODE_GENERATION},
        priority=5,
    )
    settings_model = StepDecomposerSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if not self.needs_decomposition(context.original_prompt):
            return self.skip(prompt, QualityDimension.STRUCTURE, "Prompt is simple enough, no decomposition needed")
        if any(pattern.search(prompt) for pattern in EXISTING_STEPS):
            return self.skip(prompt, QualityDimension.STRUCTURE, "Prompt already has step structure")

        steps = self.decompose(context.original_prompt, context.intent.primary_intent)
        numbered = "\n".join(f"{index}. {step}" for index, step in enumerate(steps, 1))
        return self.enhance(
            f"{prompt.rstrip()}\n\n### Implementation Steps\n\n{numbered}",
            QualityDimension.STRUCTURE,
            f"Decomposed into {len(steps)} sequential steps",
            ImpactLevel.HIGH,
        )

    def needs_decomposition(self, prompt: str) -> bool:
        return (
            count_words(prompt) > self.settings.min_words_for_decomposition
            or MULTIPLE_ACTIONS.search(prompt) is not None
            or len(LIST_ITEM.findall(prompt)) >= 2
        )

    @staticmethod
    def decompose(prompt: str, intent: PromptIntent) -> Tuple[str, ...]:
        if intent != PromptIntent.CODE_GENERATION:
            return INTENT_STEPS[intent]
        for keywords, steps in CODE_GENERATION_STEPS:
            if mentions_any(prompt, keywords):
                return steps
        return GENERIC_CODE_STEPS
