"""
Escalation Scorer - decide how much more processing a prompt needs.

Rules are evaluated in table order; each triggered rule adds its points and
a factor string. The running total is capped at 100.

Recommendation, first match wins:
1. prd-generation intent -> prd
2. score >= 60 or overall quality < 50 -> deep
3. score >= 35 -> deep
4. fast

Then, as a last word, planning/prd-generation/documentation intents with
score >= 50 are forced to prd whatever the branch above decided.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Tuple

from .types import EscalationResult, IntentAnalysis, PromptIntent, QualityMetrics, Recommendation

logger = logging.getLogger(__name__)

MAX_SCORE = 100
DEEP_THRESHOLD = 60
DEEP_SOFT_THRESHOLD = 35
LOW_QUALITY = 50
PRD_OVERRIDE_THRESHOLD = 50
PRD_OVERRIDE_INTENTS = frozenset({
    PromptIntent.PLANNING,
    PromptIntent.PRD_GENERATION,
    PromptIntent.DOCUMENTATION,
})


@dataclass(frozen=True)
class EscalationRule:
    points: int
    factor: str
    triggered: Callable[[IntentAnalysis, QualityMetrics], bool]


ESCALATION_RULES: Tuple[EscalationRule, ...] = (
    EscalationRule(30, "Low overall quality (< 50)", lambda i, q: q.overall < 50),
    EscalationRule(15, "Moderate overall quality (50-64)", lambda i, q: 50 <= q.overall < 65),
    EscalationRule(15, "Low clarity (< 50)", lambda i, q: q.clarity < 50),
    EscalationRule(20, "Low completeness (< 50)", lambda i, q: q.completeness < 50),
    EscalationRule(15, "Low actionability (< 50)", lambda i, q: q.actionability < 50),
    EscalationRule(15, "Planning intent benefits from exploration",
                   lambda i, q: i.primary_intent == PromptIntent.PLANNING),
    EscalationRule(25, "PRD generation needs structured discovery",
                   lambda i, q: i.primary_intent == PromptIntent.PRD_GENERATION),
    EscalationRule(10, "Open-ended prompt that needs structure",
                   lambda i, q: i.characteristics.is_open_ended and i.characteristics.needs_structure),
    EscalationRule(10, "Low intent confidence (< 70)", lambda i, q: i.confidence < 70),
)


class EscalationScorer:
    """Deterministic rule table turning intent and quality into a mode recommendation."""

    def __init__(self, rules: Tuple[EscalationRule, ...] = ESCALATION_RULES):
        self.rules = rules

    def score(self, intent: IntentAnalysis, quality: QualityMetrics) -> EscalationResult:
        total = 0
        factors = []
        for rule in self.rules:
            if rule.triggered(intent, quality):
                total += rule.points
                factors.append(rule.factor)
        total = min(MAX_SCORE, total)

        recommend = self.recommend(intent.primary_intent, total, quality.overall)
        logger.debug("Escalation score %d -> %s (%s)", total, recommend.value, factors)
        return EscalationResult(score=total, recommend=recommend, factors=factors)

    @staticmethod
    def recommend(intent: PromptIntent, score: int, overall: float) -> Recommendation:
        if intent == PromptIntent.PRD_GENERATION:
            recommend = Recommendation.PRD
        elif score >= DEEP_THRESHOLD or overall < LOW_QUALITY:
            recommend = Recommendation.DEEP
        elif score >= DEEP_SOFT_THRESHOLD:
            recommend = Recommendation.DEEP
        else:
            recommend = Recommendation.FAST

        if intent in PRD_OVERRIDE_INTENTS and score >= PRD_OVERRIDE_THRESHOLD:
            recommend = Recommendation.PRD
        return recommend


def score_escalation(intent: IntentAnalysis, quality: QualityMetrics) -> EscalationResult:
    """
    Quick escalation scoring.

    Args:
        intent: Intent analysis of the prompt
        quality: Quality metrics of the prompt

    Returns:
        EscalationResult
    """
    return EscalationScorer().score(intent, quality)
