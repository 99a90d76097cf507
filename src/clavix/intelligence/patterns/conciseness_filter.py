"""
Conciseness Filter - strip pleasantries, filler words and redundant phrasing.

The rewrite is only kept when at least `min_changes` substitutions were
made; below that the prompt is returned untouched. Fenced code blocks
are never rewritten.
"""

import re
from typing import Tuple

from pydantic import Field

from ..types import PatternContext, PatternResult, QualityDimension
from .base import (
    ALL_INTENTS,
    BasePattern,
    PatternInfo,
    PatternSettings,
    clean_whitespace,
    impact_for_count,
    split_code_fences,
)

PLEASANTRY_PATTERNS = (
    re.compile(
        r"^(?:(?:please|could you|would you mind|i would appreciate if you could|kindly)\s+)+", re.I | re.M
    ),
    re.compile(r"\s*\b(thanks in advance|thank you|thanks)\b[.!]*", re.I),
    re.compile(r"\s*\bi appreciate your help\b[.!]*", re.I),
)

FLUFF_WORDS = ("very", "really", "just", "basically", "simply", "actually", "literally")

REDUNDANT_PHRASES = (
    (re.compile(r"\bin order to\b", re.I), "to"),
    (re.compile(r"\bat this point in time\b", re.I), "now"),
    (re.compile(r"\bdue to the fact that\b", re.I), "because"),
    (re.compile(r"\bfor the purpose of\b", re.I), "for"),
    (re.compile(r"\bin the event that\b", re.I), "if"),
)


class ConcisenessSettings(PatternSettings):
    min_changes: int = Field(default=2, ge=0, le=20)
    remove_fluff: bool = True


class ConcisenessFilter(BasePattern):
    info = PatternInfo(
        id="conciseness-filter",
        name="Conciseness Filter",
        description="Removes unnecessary pleasantries, fluff words, and redundancy",
        applicable_intents=ALL_INTENTS,
        priority=10,
    )
    settings_model = ConcisenessSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        pieces = []
        changes = 0
        for is_code, chunk in split_code_fences(prompt):
            if not is_code:
                chunk, count = self.tighten(chunk)
                changes += count
            pieces.append(chunk)

        cleaned = clean_whitespace("".join(pieces))
        if cleaned and cleaned[0].islower() and prompt.lstrip()[:1].isupper():
            cleaned = cleaned[0].upper() + cleaned[1:]

        if changes == 0 or changes < self.settings.min_changes or cleaned == prompt:
            return self.skip(
                prompt,
                QualityDimension.EFFICIENCY,
                f"Only {changes} wording changes found (threshold {self.settings.min_changes})",
            )

        return self.enhance(
            cleaned,
            QualityDimension.EFFICIENCY,
            f"Removed {changes} unnecessary phrases for conciseness",
            impact_for_count(changes, high=4, medium=2),
        )

    def tighten(self, text: str) -> Tuple[str, int]:
        """Apply every substitution to a piece of prose; returns (text, substitution count)."""
        changes = 0
        for pattern in PLEASANTRY_PATTERNS:
            text, count = pattern.subn("", text)
            changes += count

        if self.settings.remove_fluff:
            for word in FLUFF_WORDS:
                text, count = re.subn(rf"\b{word}\b\s?", "", text, flags=re.I)
                changes += count

        for pattern, replacement in REDUNDANT_PHRASES:
            text, count = pattern.subn(replacement, text)
            changes += count
        return text, changes
