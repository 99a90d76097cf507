"""
Dependency Identifier - surface technical and external dependencies in PRD/planning content.
"""

import re
from typing import List, Tuple

from ..types import ImpactLevel, PatternContext, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list, has_section

DEPENDENCY_KEYWORDS = (
    "dependencies", "depends on", "prerequisite", "requires", "blocked by",
    "blocker", "external service", "third-party", "integration with",
)

DEPENDENCIES_HEADING = re.compile(r"^#+\s*dependencies\b", re.I | re.M)

TECHNICAL = "technical"
EXTERNAL = "external"

# (keywords, dependency, category); keywords match whole words.
DEPENDENCY_RULES: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
    (("api", "apis"), "API availability and documentation", TECHNICAL),
    (("database", "db"), "Database schema and migrations", TECHNICAL),
    (("authentication", "auth", "login"), "Authentication system integration", TECHNICAL),
    (("payment", "payments", "stripe", "billing"), "Payment provider integration", EXTERNAL),
    (("email", "notification", "notifications"), "Email/notification service", TECHNICAL),
    (("storage", "s3", "file", "files", "upload"), "File storage service", TECHNICAL),
    (("search", "elasticsearch"), "Search infrastructure", TECHNICAL),
    (("analytics", "tracking"), "Analytics platform", EXTERNAL),
    (("ci/cd", "deploy", "deployment"), "CI/CD pipeline", TECHNICAL),
    (("cache", "caching", "redis"), "Caching infrastructure", TECHNICAL),
    (("external", "vendor"), "Third-party service availability", EXTERNAL),
    (("team", "teams", "collaboration"), "Cross-team coordination", EXTERNAL),
    (("approval", "sign-off"), "Stakeholder approvals", EXTERNAL),
    (("legal", "compliance", "gdpr"), "Legal/compliance review", EXTERNAL),
    (("design", "ui", "ux"), "Design specifications", EXTERNAL),
)


class DependencySettings(PatternSettings):
    categorize_dependencies: bool = True


class DependencyIdentifier(BasePattern):
    info = PatternInfo(
        id="dependency-identifier",
        name="Dependency Identifier",
        description="Identifies technical and external dependencies",
        applicable_intents=frozenset({
            PromptIntent.PRD_GENERATION,
            PromptIntent.PLANNING,
            PromptIntent.MIGRATION,
        }),
        mode="deep",
        priority=5,
        phases=frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION}),
    )
    settings_model = DependencySettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if DEPENDENCIES_HEADING.search(prompt) or has_section(context.original_prompt, DEPENDENCY_KEYWORDS):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Dependencies already documented")

        dependencies = self.identify_dependencies(context.original_prompt)
        if not dependencies:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "No clear dependencies identified")

        return self.enhance(
            prompt.rstrip() + self.format_section(dependencies),
            QualityDimension.COMPLETENESS,
            f"Identified {len(dependencies)} dependencies (technical/external)",
            ImpactLevel.MEDIUM,
        )

    @staticmethod
    def identify_dependencies(prompt: str) -> List[Tuple[str, str]]:
        lower_prompt = prompt.lower()
        found = []
        for keywords, dependency, category in DEPENDENCY_RULES:
            if any(re.search(rf"(?<![\w-]){re.escape(k)}(?![\w-])", lower_prompt) for k in keywords):
                found.append((dependency, category))
        return found

    def format_section(self, dependencies: List[Tuple[str, str]]) -> str:
        lines = ["", "", "### Dependencies"]
        if self.settings.categorize_dependencies:
            for category, label in ((TECHNICAL, "Technical Dependencies"), (EXTERNAL, "External Dependencies")):
                items = [name for name, c in dependencies if c == category]
                if items:
                    lines.append(f"**{label}:**")
                    lines.append(bullet_list(items))
                    lines.append("")
        else:
            lines.append(bullet_list(name for name, _ in dependencies))
            lines.append("")
        lines.append("**Dependency Status:** [Track status of each dependency]")
        return "\n".join(lines)
