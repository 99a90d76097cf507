"""
Validation Checklist Creator - a closing "verify before done" checklist.
"""

import re
from typing import Dict, List, Tuple

from pydantic import Field

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, has_section

CHECKLIST_SECTION = re.compile(r"^#+\s*validation checklist", re.I | re.M)

ChecklistItem = Tuple[str, str]  # (description, category)

INTENT_CHECKLISTS: Dict[PromptIntent, Tuple[ChecklistItem, ...]] = {
    PromptIntent.CODE_GENERATION: (
        ("Code compiles/runs without errors", "functionality"),
        ("All requirements from the prompt are implemented", "functionality"),
        ("Edge cases are handled gracefully", "robustness"),
    ),
    PromptIntent.TESTING: (
        ("All test cases pass consistently", "functionality"),
        ("Tests are independent (no shared state)", "quality"),
        ("Edge cases have dedicated tests", "coverage"),
        ("Error scenarios are tested", "coverage"),
        ("Test names clearly describe what they test", "maintainability"),
    ),
    PromptIntent.MIGRATION: (
        ("Data migrated correctly (spot check sample records)", "data"),
        ("All functionality works in the new system", "functionality"),
        ("Performance is equal or better", "performance"),
        ("Rollback procedure tested and documented", "safety"),
        ("Integrations with other systems still work", "integration"),
    ),
    PromptIntent.SECURITY_REVIEW: (
        ("Authentication required for protected resources", "auth"),
        ("Authorization checks prevent privilege escalation", "auth"),
        ("User input is sanitized (no injection vulnerabilities)", "input"),
        ("Sensitive data is encrypted in transit and at rest", "data"),
        ("Error messages don't leak sensitive information", "info-disclosure"),
        ("Rate limiting prevents abuse", "protection"),
    ),
    PromptIntent.DEBUGGING: (
        ("Root cause identified and documented", "analysis"),
        ("Bug is consistently reproducible before fix", "verification"),
        ("Fix resolves the original issue", "functionality"),
        ("Fix doesn't introduce new bugs", "regression"),
        ("Test added to prevent recurrence", "prevention"),
    ),
}

CODE_GENERATION_EXTRAS: Tuple[Tuple[Tuple[str, ...], Tuple[ChecklistItem, ...]], ...] = (
    (
        ("api", "endpoint", "route"),
        (
            ("API returns correct status codes", "functionality"),
            ("API handles invalid requests gracefully", "robustness"),
        ),
    ),
    (
        ("ui", "component", "form", "page"),
        (
            ("UI renders correctly on different screen sizes", "ux"),
            ("Keyboard navigation works correctly", "accessibility"),
        ),
    ),
)

DOMAIN_CHECKLISTS: Tuple[Tuple[Tuple[str, ...], Tuple[ChecklistItem, ...]], ...] = (
    (
        ("payment", "transaction", "checkout"),
        (
            ("Payment processing works correctly", "functionality"),
            ("Duplicate transactions prevented", "safety"),
        ),
    ),
    (
        ("email", "notification", "message"),
        (("Notifications sent to correct recipients", "functionality"),),
    ),
    (
        ("upload", "file", "image"),
        (("Invalid or oversized files are rejected gracefully", "validation"),),
    ),
    (
        ("database", "query", "schema"),
        (
            ("Database queries perform well", "performance"),
            ("Database constraints are enforced", "data"),
        ),
    ),
)

GENERAL_CHECKLIST: Tuple[ChecklistItem, ...] = (
    ("Code follows project conventions/style guide", "quality"),
    ("No errors or warnings in logs", "quality"),
    ("Documentation updated if needed", "documentation"),
)


class ValidationChecklistSettings(PatternSettings):
    max_checklist_items: int = Field(default=12, ge=5, le=20)
    group_by_category: bool = True


class ValidationChecklistCreator(BasePattern):
    info = PatternInfo(
        id="validation-checklist-creator",
        name="Validation Checklist Creator",
        description="Create implementation validation checklist for verification",
        applicable_intents=frozenset(INTENT_CHECKLISTS),
        mode="deep",
        priority=4,
        run_after=("success-criteria-enforcer",),
    )
    settings_model = ValidationChecklistSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if CHECKLIST_SECTION.search(prompt):
            return self.skip(prompt, QualityDimension.ACTIONABILITY, "Validation checklist already present")

        items = self.create_checklist(context.original_prompt, context.intent.primary_intent)
        return self.enhance(
            f"{prompt.rstrip()}\n\n{self.format_checklist(items)}",
            QualityDimension.ACTIONABILITY,
            f"Created validation checklist with {len(items)} items",
            ImpactLevel.HIGH,
        )

    def create_checklist(self, prompt: str, intent: PromptIntent) -> List[ChecklistItem]:
        items = list(INTENT_CHECKLISTS.get(intent, ()))
        extras = CODE_GENERATION_EXTRAS if intent == PromptIntent.CODE_GENERATION else ()
        for keywords, keyword_items in extras + DOMAIN_CHECKLISTS:
            if has_section(prompt, keywords):
                items.extend(keyword_items)
        items.extend(GENERAL_CHECKLIST)
        return items[: self.settings.max_checklist_items]

    def format_checklist(self, items: List[ChecklistItem]) -> str:
        lines = ["### Validation Checklist", "", "Before considering this task complete, verify:"]

        by_category: Dict[str, List[str]] = {}
        for description, category in items:
            by_category.setdefault(category, []).append(description)

        if self.settings.group_by_category and len(by_category) > 3:
            for category, descriptions in by_category.items():
                lines.append("")
                lines.append(f"**{category[0].upper()}{category[1:].replace('-', ' ')}:**")
                lines.extend(f"- [ ] {d}" for d in descriptions)
        else:
            lines.append("")
            lines.extend(f"- [ ] {description}" for description, _ in items)
        return "\n".join(lines)
