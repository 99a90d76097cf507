"""
Actionability Enhancer - annotate vague words and abstract goals with concrete prompts.

Annotations are only added where the word is not already annotated, so
running the pattern on its own output changes nothing.
"""

import re

from ..types import PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, impact_for_count

VAGUE_ADJECTIVES = {
    "better": "faster",
    "good": "high-performing",
    "nice": "polished",
    "fast": "< 100ms response time",
    "slow": "> 2s load time",
}

VAGUE_FILLERS = {
    "something": "[specify what]",
    "somehow": "[specify method]",
    "maybe": "[decide: yes/no]",
}

MEASURABLE_TERMS = {
    "efficient": "specify metrics: time, memory, CPU",
    "scalable": "specify: handle 1K, 10K, 100K users",
    "reliable": "specify: 99.9% uptime, < 0.1% error rate",
    "secure": "specify: HTTPS, auth required, encrypted",
}

ABSTRACT_GOALS = (
    (re.compile(r"\bmake\s+it\s+better\b", re.I), "improve it (specify: performance, UX, reliability)"),
    (re.compile(r"\bshould\s+be\s+nice\b", re.I), "should be polished (specify: UI and UX expectations)"),
    (re.compile(r"\bwant\s+it\s+to\s+be\s+good\b", re.I), "should meet (specify: quality standards, performance targets)"),
    (re.compile(r"\bless\s+complex\b(?! \()", re.I), "less complex (reduce from [X] to [Y] components)"),
)

SPECIFIC_METRIC = (
    re.compile(r"\d+\s*(?:ms|s|min|hours?)\b", re.I),
    re.compile(r"\d+\s*(?:kb|mb|gb)\b", re.I),
    re.compile(r"\d+\s*(?:%|percent)", re.I),
    re.compile(r"[<>]\s*\d+"),
    re.compile(r"\d+k?\s*(?:users?|requests?)\b", re.I),
)


class ActionabilityEnhancer(BasePattern):
    info = PatternInfo(
        id="actionability-enhancer",
        name="Actionability Enhancer",
        description="Converts vague goals into specific, actionable tasks",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.PLANNING,
            PromptIntent.REFINEMENT,
            PromptIntent.DEBUGGING,
        }),
        priority=7,
    )

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        enhanced = prompt
        changes = 0

        for pattern, replacement in ABSTRACT_GOALS:
            enhanced, count = pattern.subn(replacement, enhanced)
            changes += count

        for word, example in VAGUE_ADJECTIVES.items():
            enhanced, count = re.subn(
                rf"\b({word})\b(?! \()", rf"\1 (e.g., {example})", enhanced, flags=re.I
            )
            changes += count

        for word, placeholder in VAGUE_FILLERS.items():
            enhanced, count = re.subn(
                rf"\b({word})\b(?! \[)", rf"\1 {placeholder}", enhanced, flags=re.I
            )
            changes += count

        if not self.has_specific_metric(enhanced):
            for word, hint in MEASURABLE_TERMS.items():
                enhanced, count = re.subn(
                    rf"\b({word})\b(?! \()", rf"\1 ({hint})", enhanced, flags=re.I
                )
                changes += count

        if enhanced == prompt:
            return self.skip(prompt, QualityDimension.ACTIONABILITY, "No vague language to make concrete")

        return self.enhance(
            enhanced,
            QualityDimension.ACTIONABILITY,
            f"Made {changes} improvements to increase specificity",
            impact_for_count(changes),
        )

    @staticmethod
    def has_specific_metric(prompt: str) -> bool:
        return any(pattern.search(prompt) for pattern in SPECIFIC_METRIC)
