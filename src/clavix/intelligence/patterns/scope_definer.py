"""
Scope Definer - add explicit in-scope / out-of-scope boundaries to head off scope creep.
"""

import re
from typing import List

from pydantic import Field

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list, has_section, mentions_any

SCOPE_HEADING = re.compile(r"^#+\s*scope definition", re.I | re.M)

SCOPE_INDICATORS = (
    "out of scope", "not included", "scope:", "in scope", "excluded",
    "will not", "won't include", "not part of",
)

REQUIREMENT_CLAUSES = (
    re.compile(r"\b(?:need|want|require|should have|must have)s?\s+(.+?)(?:[.,]|$)", re.I | re.M),
    re.compile(r"\b(?:create|build|implement|add)\s+(?:an?\s+)?(.+?)(?:[.,]|$)", re.I | re.M),
)

FRONTEND_WORDS = ("frontend", "ui", "component")
BACKEND_WORDS = ("backend", "api", "server")

INTENT_IN_SCOPE = {
    PromptIntent.PLANNING: ("High-level architecture design", "Task breakdown and sequencing"),
    PromptIntent.MIGRATION: ("Data migration from source to target", "Functionality preservation"),
}

INTENT_OUT_OF_SCOPE = {
    PromptIntent.CODE_GENERATION: ("Deployment and CI/CD configuration", "Production infrastructure setup"),
    PromptIntent.PLANNING: (
        "Actual implementation code",
        "Detailed technical specifications",
        "Resource allocation and team assignments",
    ),
    PromptIntent.MIGRATION: (
        "New feature development",
        "Performance optimization beyond parity",
        "Refactoring unrelated code",
    ),
    PromptIntent.DOCUMENTATION: ("Code implementation changes", "Architectural modifications"),
    PromptIntent.PRD_GENERATION: (
        "Technical implementation details",
        "Code or pseudocode",
        "Database schema design",
    ),
}

# (keywords, boundary)
BOUNDARY_RULES = (
    (("component", "module", "service"), "Limited to specified component/module boundaries"),
    (("integration", "third-party", "external"), "External integrations assumed to be available and configured"),
    (("database", "data", "storage"), "Database schema assumed to exist or specified separately"),
    (("auth", "user", "login"), "Authentication system assumed to be in place"),
)

INTENT_BOUNDARIES = {
    PromptIntent.CODE_GENERATION: "Following existing project conventions and patterns",
    PromptIntent.MIGRATION: "Maintaining backward compatibility where specified",
    PromptIntent.TESTING: "Testing within unit/integration test scope",
}

MAX_BOUNDARIES = 4


def _unique(items: List[str], limit: int) -> List[str]:
    return list(dict.fromkeys(items))[:limit]


class ScopeSettings(PatternSettings):
    max_in_scope_items: int = Field(default=5, ge=1, le=10)
    max_out_of_scope_items: int = Field(default=5, ge=1, le=10)


class ScopeDefiner(BasePattern):
    info = PatternInfo(
        id="scope-definer",
        name="Scope Definer",
        description="Add explicit scope boundaries to prevent scope creep",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.PLANNING,
            PromptIntent.PRD_GENERATION,
            PromptIntent.MIGRATION,
            PromptIntent.DOCUMENTATION,
        }),
        mode="deep",
        priority=5,
    )
    settings_model = ScopeSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        original = context.original_prompt
        if SCOPE_HEADING.search(prompt) or has_section(original, SCOPE_INDICATORS):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Scope already defined")

        intent = context.intent.primary_intent
        section = self.format_section(
            self.in_scope(original, intent),
            self.out_of_scope(original, intent),
            self.boundaries(original, intent),
        )
        return self.enhance(
            f"{prompt.rstrip()}\n\n{section}",
            QualityDimension.COMPLETENESS,
            "Added explicit scope boundaries",
            ImpactLevel.MEDIUM,
        )

    def in_scope(self, prompt: str, intent: PromptIntent) -> List[str]:
        items = []
        for clause in REQUIREMENT_CLAUSES:
            for match in clause.finditer(prompt):
                requirement = match.group(1).strip()
                if 3 < len(requirement) < 100:
                    items.append(requirement[0].upper() + requirement[1:])

        if intent == PromptIntent.CODE_GENERATION:
            if mentions_any(prompt, ("component", "ui")):
                items.append("Component implementation with specified functionality")
            if mentions_any(prompt, ("api", "endpoint")):
                items.append("API endpoint implementation")
        items.extend(INTENT_IN_SCOPE.get(intent, ()))
        return _unique(items, self.settings.max_in_scope_items)

    def out_of_scope(self, prompt: str, intent: PromptIntent) -> List[str]:
        items = list(INTENT_OUT_OF_SCOPE.get(intent, ()))
        if intent == PromptIntent.CODE_GENERATION:
            if not mentions_any(prompt, ("test",)):
                items.append("Comprehensive test suite (basic tests only)")
            if not mentions_any(prompt, ("doc", "docs", "documentation", "readme")):
                items.append("Extensive documentation")

        if mentions_any(prompt, FRONTEND_WORDS) and not mentions_any(prompt, BACKEND_WORDS):
            items.append("Backend/API implementation")
        if mentions_any(prompt, BACKEND_WORDS) and not mentions_any(prompt, ("frontend", "ui")):
            items.append("Frontend/UI implementation")
        return _unique(items, self.settings.max_out_of_scope_items)

    @staticmethod
    def boundaries(prompt: str, intent: PromptIntent) -> List[str]:
        items = [boundary for keywords, boundary in BOUNDARY_RULES if mentions_any(prompt, keywords)]
        if intent in INTENT_BOUNDARIES:
            items.append(INTENT_BOUNDARIES[intent])
        return _unique(items, MAX_BOUNDARIES)

    @staticmethod
    def format_section(in_scope: List[str], out_of_scope: List[str], boundaries: List[str]) -> str:
        lines = ["### Scope Definition", ""]
        for label, items in (
            ("In Scope", in_scope),
            ("Out of Scope", out_of_scope),
            ("Boundaries & Assumptions", boundaries),
        ):
            if items:
                lines.extend([f"**{label}:**", bullet_list(items), ""])
        return "\n".join(lines).rstrip()
