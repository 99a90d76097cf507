"""
Edge Case Identifier - list failure modes worth handling, by intent and domain.
"""

import re
from typing import List, Tuple

from pydantic import Field

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, has_section

EDGE_CASES_HEADING = "### Edge Cases to Consider"
EDGE_CASES_SECTION = re.compile(r"^#+\s*edge cases", re.I | re.M)

EdgeCase = Tuple[str, str]  # (scenario, consideration)

GENERAL_CASES: Tuple[Tuple[Tuple[str, ...], Tuple[EdgeCase, ...]], ...] = (
    (
        ("input", "data", "form", "field"),
        (
            ("Empty or null inputs", "How should the system handle missing or undefined values?"),
            ("Invalid input types", "What happens if input is the wrong type (string vs number)?"),
        ),
    ),
    (
        ("api", "request", "fetch", "call"),
        (("Network failures", "How to handle timeouts, connection errors, and retries?"),),
    ),
)

INTENT_CASES = {
    PromptIntent.DEBUGGING: (
        ("Intermittent failures", "Can you reproduce the bug consistently? What conditions affect it?"),
        ("Environment differences", "Does it only happen in certain environments (dev/prod/test)?"),
        ("Data-dependent bugs", "Does specific data or data volume trigger the issue?"),
    ),
    PromptIntent.TESTING: (
        ("Test isolation", "Are tests independent or do they share state/data?"),
        ("Flaky tests", "Are there timing-dependent tests that may fail intermittently?"),
        ("Mock boundaries", "Are mocks accurately representing real dependencies?"),
    ),
    PromptIntent.MIGRATION: (
        ("Data incompatibility", "Can all existing data be converted to the new format?"),
        ("Rollback strategy", "How to revert if migration fails midway?"),
        ("Feature parity gaps", "Are there features in the old system not supported in the new one?"),
        ("Downtime requirements", "What is acceptable downtime during migration?"),
    ),
    PromptIntent.SECURITY_REVIEW: (
        ("Authentication bypass", "Can attackers access resources without proper credentials?"),
        ("Privilege escalation", "Can users gain access to resources they shouldn't have?"),
        ("Input injection", "Is user input sanitized before use (SQL, XSS, command)?"),
        ("Sensitive data exposure", "Is sensitive data encrypted in transit and at rest?"),
    ),
}

CODE_GENERATION_CASES: Tuple[Tuple[Tuple[str, ...], Tuple[EdgeCase, ...]], ...] = (
    (
        ("list", "array", "collection"),
        (("Empty collections", "How to handle collections with 0 or 1 elements?"),),
    ),
    (
        ("user", "auth", "login", "session"),
        (("Session expiration", "What happens when the user session expires mid-operation?"),),
    ),
    (
        ("concurrent", "parallel", "async"),
        (("Race conditions", "What if multiple operations access shared state simultaneously?"),),
    ),
)

DOMAIN_CASES: Tuple[Tuple[Tuple[str, ...], Tuple[EdgeCase, ...]], ...] = (
    (
        ("payment", "transaction", "money", "price", "cart"),
        (
            ("Duplicate transactions", "How to prevent accidental double charges?"),
            ("Currency/rounding issues", "How to handle different currencies and decimal precision?"),
        ),
    ),
    (
        ("file", "upload", "download", "image", "document"),
        (
            ("Large files", "What are the size limits? How to handle files that exceed them?"),
            ("Malicious files", "How to validate file types and scan for malware?"),
        ),
    ),
    (
        ("date", "time", "schedule", "calendar", "timezone"),
        (
            ("Timezone handling", "How to handle users in different timezones?"),
            ("Date boundaries", "What about daylight saving, leap years, month boundaries?"),
        ),
    ),
)


def _keyword_cases(prompt: str, table) -> List[EdgeCase]:
    cases: List[EdgeCase] = []
    for keywords, keyword_cases in table:
        if has_section(prompt, keywords):
            cases.extend(keyword_cases)
    return cases


class EdgeCaseSettings(PatternSettings):
    max_edge_cases: int = Field(default=8, ge=1, le=15)


class EdgeCaseIdentifier(BasePattern):
    info = PatternInfo(
        id="edge-case-identifier",
        name="Edge Case Identifier",
        description="Identify potential edge cases and failure modes by domain",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.DEBUGGING,
            PromptIntent.TESTING,
            PromptIntent.MIGRATION,
            PromptIntent.SECURITY_REVIEW,
        }),
        mode="deep",
        priority=5,
        enhanced_by=("ambiguity-detector",),
    )
    settings_model = EdgeCaseSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if EDGE_CASES_SECTION.search(prompt):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Edge cases already covered")

        edge_cases = self.identify_edge_cases(context.original_prompt, context.intent.primary_intent)
        if not edge_cases:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "No edge cases identified")

        lines = [EDGE_CASES_HEADING, ""]
        lines.extend(f"- **{scenario}**: {consideration}" for scenario, consideration in edge_cases)
        return self.enhance(
            f"{prompt.rstrip()}\n\n" + "\n".join(lines),
            QualityDimension.COMPLETENESS,
            f"Identified {len(edge_cases)} potential edge cases",
            ImpactLevel.HIGH,
        )

    def identify_edge_cases(self, prompt: str, intent: PromptIntent) -> List[EdgeCase]:
        cases = _keyword_cases(prompt, GENERAL_CASES)
        if intent == PromptIntent.CODE_GENERATION:
            cases.append(
                ("Boundary conditions", "What happens at min/max values, empty collections, or single items?")
            )
            cases.extend(_keyword_cases(prompt, CODE_GENERATION_CASES))
        else:
            cases.extend(INTENT_CASES.get(intent, ()))
        cases.extend(_keyword_cases(prompt, DOMAIN_CASES))

        seen = set()
        unique = []
        for scenario, consideration in cases:
            if scenario.lower() not in seen:
                seen.add(scenario.lower())
                unique.append((scenario, consideration))
        return unique[: self.settings.max_edge_cases]
