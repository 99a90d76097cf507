"""
Success Metrics Enforcer - give PRD and planning content measurable KPIs.

KPIs are inferred from domain signals checked in a fixed order
(performance, engagement, conversion, quality, integration); the first
`max_kpis` inferred metrics are kept. With no signal a placeholder
scaffold is used instead.
"""

import re
from typing import List, Tuple

from pydantic import Field

from ..types import ImpactLevel, PatternContext, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list, has_section

SUCCESS_METRICS_HEADING = re.compile(r"^#+\s*success metrics", re.I | re.M)

METRICS_KEYWORDS = (
    "success metric", "success criteria", "kpi", "measure success", "acceptance criteria",
    "% increase", "% decrease", "conversion rate", "completion rate", "response time",
    "latency", "uptime", "sla", "benchmark",
)

PRD_KEYWORDS = ("feature", "build", "implement", "goal", "objective", "product", "launch", "release")

# (signals, metrics) in priority order
DOMAIN_METRICS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        ("performance", "fast", "speed"),
        ("Response time < [X]ms (p95)", "Page load time improvement by [X]%"),
    ),
    (
        ("user", "engagement", "retention"),
        ("User engagement increase by [X]%", "Task completion rate > [X]%"),
    ),
    (
        ("conversion", "sales", "revenue"),
        ("Conversion rate improvement by [X]%", "Revenue impact of $[X]"),
    ),
    (
        ("quality", "bug", "error"),
        ("Error rate < [X]%", "Test coverage > [X]%"),
    ),
    (
        ("api", "integration"),
        ("API availability > [X]%", "Integration success rate > [X]%"),
    ),
)

DEFAULT_METRICS = (
    "[Define primary success metric]",
    "[Define secondary success metric]",
    "[Define timeline for measurement]",
)


class SuccessMetricsSettings(PatternSettings):
    max_kpis: int = Field(default=4, ge=1, le=8)
    include_measurement_guidance: bool = True


class SuccessMetricsEnforcer(BasePattern):
    info = PatternInfo(
        id="success-metrics-enforcer",
        name="Success Metrics Enforcer",
        description="Ensures measurable success criteria exist",
        applicable_intents=frozenset({PromptIntent.PRD_GENERATION, PromptIntent.PLANNING}),
        mode="deep",
        priority=7,
        phases=frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION}),
    )
    settings_model = SuccessMetricsSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        original = context.original_prompt
        if SUCCESS_METRICS_HEADING.search(prompt) or has_section(original, METRICS_KEYWORDS):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Success metrics already present")
        if not has_section(original, PRD_KEYWORDS):
            return self.skip(
                prompt, QualityDimension.COMPLETENESS, "Content does not require success metrics"
            )

        metrics = self.infer_metrics(original)
        section = f"\n\n### Success Metrics\n**Primary KPIs:**\n{bullet_list(metrics)}"
        if self.settings.include_measurement_guidance:
            section += (
                "\n\n**Measurement Approach:**\n"
                "- Baseline: [Current state before implementation]\n"
                "- Target: [Specific, measurable goals]\n"
                "- Timeline: [When to measure success]"
            )

        return self.enhance(
            prompt.rstrip() + section,
            QualityDimension.COMPLETENESS,
            "Added measurable success criteria and KPIs",
            ImpactLevel.HIGH,
        )

    def infer_metrics(self, prompt: str) -> List[str]:
        lower_prompt = prompt.lower()
        metrics: List[str] = []
        for signals, domain_metrics in DOMAIN_METRICS:
            if any(signal in lower_prompt for signal in signals):
                metrics.extend(domain_metrics)

        if not metrics:
            metrics = list(DEFAULT_METRICS)
        return metrics[: self.settings.max_kpis]
