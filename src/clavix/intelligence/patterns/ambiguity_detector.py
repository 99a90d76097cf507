"""
Ambiguity Detector - flag unqualified terms and vague phrases for clarification.

A term counts as ambiguous only when none of its qualifiers appears next to
it ("database" is ambiguous, "PostgreSQL database" is not).
"""

import re
from typing import List

from pydantic import Field

from ..types import PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, impact_for_count

CLARIFICATIONS_HEADING = "## Clarifications Needed"

AMBIGUOUS_TERMS = {
    "app": ("web app", "mobile app", "desktop app", "CLI tool"),
    "system": ("backend system", "frontend system", "full-stack system", "microservice"),
    "component": ("React component", "Vue component", "service component", "module"),
    "service": ("REST API", "GraphQL API", "background worker", "microservice"),
    "database": ("PostgreSQL", "MongoDB", "MySQL", "SQLite", "Redis"),
    "authentication": ("OAuth", "JWT", "session-based", "API keys", "social login"),
    "cache": ("in-memory cache", "Redis cache", "CDN cache", "browser cache"),
    "storage": ("local storage", "cloud storage", "file system", "object storage"),
    "many": ("more than 10", "more than 100", "more than 1000", "unlimited"),
    "few": ("2-3", "5-10", "less than 10"),
    "large": (">1MB", ">100MB", ">1GB", "unbounded"),
    "small": ("<1KB", "<100KB", "<1MB"),
    "simple": ("single function", "minimal dependencies", "no external calls"),
    "complex": ("multi-step", "with dependencies", "requiring state"),
}

VAGUE_PHRASES = (
    (re.compile(r"\bshould work\b", re.I), "Define specific success criteria and test cases"),
    (re.compile(r"\bproperly\b", re.I), "Specify exact behavior or standards to follow"),
    (re.compile(r"\bcorrectly\b", re.I), 'Define what "correct" means with specific criteria'),
    (re.compile(r"\bappropriate(ly)?\b", re.I), "Specify the exact behavior or standards expected"),
    (re.compile(r"\bas needed\b", re.I), "Define when and what is needed specifically"),
    (re.compile(r"\bif necessary\b", re.I), "Define the conditions that trigger this action"),
    (re.compile(r"\betc\b\.?", re.I), "List all items explicitly or define a complete category"),
    (re.compile(r"\band so on\b", re.I), "Enumerate all items or define the pattern explicitly"),
    (re.compile(r"\bwhatever\b", re.I), "Specify the exact options or constraints"),
    (re.compile(r"\bsomething like\b", re.I), "Provide the exact specification or reference"),
    (re.compile(r"\bprobably\b", re.I), "Confirm if this is a requirement or not"),
)


class AmbiguitySettings(PatternSettings):
    check_vague_phrases: bool = True
    max_clarifications: int = Field(default=10, ge=1, le=20)


class AmbiguityDetector(BasePattern):
    info = PatternInfo(
        id="ambiguity-detector",
        name="Ambiguity Detector",
        description="Identifies and clarifies ambiguous terms and vague references",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.PLANNING,
            PromptIntent.REFINEMENT,
            PromptIntent.DEBUGGING,
            PromptIntent.DOCUMENTATION,
            PromptIntent.PRD_GENERATION,
            PromptIntent.TESTING,
            PromptIntent.MIGRATION,
        }),
        mode="deep",
        priority=6,
    )
    settings_model = AmbiguitySettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if CLARIFICATIONS_HEADING in prompt:
            return self.skip(prompt, QualityDimension.CLARITY, "Clarifications already requested")

        clarifications = self.find_clarifications(prompt)[: self.settings.max_clarifications]
        if not clarifications:
            return self.skip(prompt, QualityDimension.CLARITY, "No significant ambiguities detected")

        enhanced = f"{prompt.rstrip()}\n\n{CLARIFICATIONS_HEADING}\n" + "\n".join(clarifications)
        return self.enhance(
            enhanced,
            QualityDimension.CLARITY,
            f"Identified {len(clarifications)} ambiguous terms/phrases requiring clarification",
            impact_for_count(len(clarifications), high=4, medium=2),
        )

    def find_clarifications(self, prompt: str) -> List[str]:
        clarifications = []
        lower_prompt = prompt.lower()
        for term, options in AMBIGUOUS_TERMS.items():
            if not re.search(rf"\b{term}\b", prompt, re.I):
                continue
            alternatives = "|".join(re.escape(option) for option in options)
            qualified = re.search(
                rf"(?:{alternatives})\s+{term}\b|\b{term}\s+(?:{alternatives})", prompt, re.I
            ) or any(term in option.lower() and option.lower() in lower_prompt for option in options)
            if not qualified:
                clarifications.append(
                    f'[CLARIFY: "{term}" - specify: {", ".join(options[:3])}?]'
                )

        if self.settings.check_vague_phrases:
            for pattern, suggestion in VAGUE_PHRASES:
                if pattern.search(prompt):
                    clarifications.append(f"[CLARIFY: {suggestion}]")
        return clarifications
