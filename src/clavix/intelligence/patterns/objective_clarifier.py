"""
Objective Clarifier - put an explicit goal statement at the top of the prompt.
"""

import re
from typing import Optional

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo

OBJECTIVE_MARKERS = (
    re.compile(r"^#+\s*objective", re.I | re.M),
    re.compile(r"^objective:", re.I | re.M),
    re.compile(r"^goal:", re.I | re.M),
    re.compile(r"^purpose:", re.I | re.M),
)

GOAL_PATTERNS = (
    re.compile(
        r"(?:i need to|i want to|i'm trying to|goal is to|objective is to|purpose is to)\s+(.+?)(?:[.\n]|$)",
        re.I,
    ),
    re.compile(
        r"\b((?:create|build|make|implement|develop|write|design|add|fix|refactor|migrate|document)\s+.+?)(?:[.\n]|$)",
        re.I,
    ),
)

FALLBACK_OBJECTIVES = {
    PromptIntent.DEBUGGING: "Fix the identified error or bug",
    PromptIntent.REFINEMENT: "Improve and optimize the existing code",
    PromptIntent.DOCUMENTATION: "Provide clear documentation and explanation",
    PromptIntent.PLANNING: "Plan and design the described system or feature",
    PromptIntent.TESTING: "Write tests that verify the described behavior",
    PromptIntent.MIGRATION: "Migrate the described system without loss of functionality",
    PromptIntent.SECURITY_REVIEW: "Review the described code for security weaknesses",
    PromptIntent.LEARNING: "Explain the concept so it can be applied",
}


class ObjectiveClarifier(BasePattern):
    info = PatternInfo(
        id="objective-clarifier",
        name="Objective Clarifier",
        description="Extracts or infers clear goal statement",
        applicable_intents=frozenset(PromptIntent) - {PromptIntent.PRD_GENERATION},
        priority=9,
    )

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if any(marker.search(prompt) for marker in OBJECTIVE_MARKERS):
            return self.skip(prompt, QualityDimension.CLARITY, "Objective already clearly stated")

        objective = self.extract_objective(prompt, context.intent.primary_intent)
        if not objective:
            return self.skip(prompt, QualityDimension.CLARITY, "Could not infer clear objective")
        if objective.lower() == prompt.strip().rstrip(".!").lower():
            return self.skip(prompt, QualityDimension.CLARITY, "Prompt is already a single objective")

        return self.enhance(
            f"# Objective\n{objective}\n\n{prompt}",
            QualityDimension.CLARITY,
            "Added clear objective statement",
            ImpactLevel.HIGH,
        )

    def extract_objective(self, prompt: str, intent: PromptIntent) -> Optional[str]:
        for pattern in GOAL_PATTERNS:
            match = pattern.search(prompt)
            if match and match.group(1).strip():
                objective = match.group(1).strip()
                return objective[0].upper() + objective[1:]

        lower_prompt = prompt.lower()
        if intent == PromptIntent.CODE_GENERATION:
            if "function" in lower_prompt:
                return "Create a function that meets the specified requirements"
            if "component" in lower_prompt:
                return "Build a component with the described functionality"
            if "api" in lower_prompt:
                return "Implement an API endpoint as specified"
            return None

        return FALLBACK_OBJECTIVES.get(intent)
