"""
PRD Structure Enforcer - check a PRD request against the sections a complete PRD needs.

A section counts as covered when at least two of its keywords appear, as
weak when only one does, and as missing otherwise. Weak sections count
half towards the coverage score.
"""

import re
from typing import List, NamedTuple, Tuple

from ..types import ImpactLevel, PatternContext, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings

PRD_CHECK_HEADING = re.compile(r"^#+\s*prd completeness check", re.I | re.M)


class PRDSection(NamedTuple):
    name: str
    keywords: Tuple[str, ...]
    question: str


PRD_SECTIONS = (
    PRDSection(
        "Problem Statement",
        ("problem", "issue", "pain point", "challenge", "need"),
        "What problem does this solve? What pain points are being addressed?",
    ),
    PRDSection(
        "Target Users",
        ("user", "audience", "persona", "customer", "stakeholder", "who"),
        "Who are the target users? What are their characteristics and needs?",
    ),
    PRDSection(
        "Goals & Success Metrics",
        ("goal", "objective", "success", "metric", "kpi", "measure", "outcome"),
        "What are the measurable goals? How will success be measured?",
    ),
    PRDSection(
        "Functional Requirements",
        ("feature", "requirement", "must", "should", "functionality", "capability"),
        "What specific functionality is required? List the features.",
    ),
    PRDSection(
        "Scope & Boundaries",
        ("scope", "boundary", "included", "excluded", "out of scope", "limitation"),
        "What is in scope and out of scope? What are the boundaries?",
    ),
    PRDSection(
        "Constraints & Dependencies",
        ("constraint", "dependency", "limitation", "assumption", "prerequisite"),
        "What technical or business constraints exist? What dependencies are there?",
    ),
    PRDSection(
        "Timeline & Milestones",
        ("timeline", "deadline", "milestone", "phase", "sprint", "release"),
        "What is the timeline? What are key milestones?",
    ),
    PRDSection(
        "Risks & Mitigations",
        ("risk", "mitigation", "concern", "blocker", "issue"),
        "What are potential risks? How will they be mitigated?",
    ),
)

BEST_PRACTICES = (
    "Be specific about user personas and their needs",
    "Include measurable success criteria",
    "Clearly define what is NOT in scope",
    "Prioritize requirements (must-have vs nice-to-have)",
    "Consider edge cases and error scenarios",
)


class PRDStructureSettings(PatternSettings):
    show_completeness_score: bool = True
    include_best_practices: bool = True


class PRDStructureEnforcer(BasePattern):
    info = PatternInfo(
        id="prd-structure-enforcer",
        name="PRD Structure Enforcer",
        description="Ensure PRD prompts include all necessary sections",
        applicable_intents=frozenset({PromptIntent.PRD_GENERATION}),
        mode="deep",
        priority=9,
        phases=frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION}),
    )
    settings_model = PRDStructureSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if PRD_CHECK_HEADING.search(prompt):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "PRD completeness already checked")

        missing, weak, coverage = self.analyze(context.original_prompt)
        if not missing:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "PRD prompt already includes key sections")

        return self.enhance(
            f"{prompt.rstrip()}\n\n{self.format_section(missing, weak, coverage)}",
            QualityDimension.COMPLETENESS,
            f"Added {len(missing)} PRD sections for consideration",
            ImpactLevel.HIGH,
        )

    @staticmethod
    def analyze(prompt: str) -> Tuple[List[PRDSection], List[PRDSection], int]:
        """Returns (missing sections, weak sections, coverage percentage)."""
        lower_prompt = prompt.lower()
        present = 0
        missing: List[PRDSection] = []
        weak: List[PRDSection] = []

        for section in PRD_SECTIONS:
            matched = sum(1 for keyword in section.keywords if keyword in lower_prompt)
            if matched >= 2:
                present += 1
            elif matched == 1:
                weak.append(section)
            else:
                missing.append(section)

        coverage = round((present + len(weak) * 0.5) / len(PRD_SECTIONS) * 100)
        return missing, weak, coverage

    def format_section(self, missing: List[PRDSection], weak: List[PRDSection], coverage: int) -> str:
        lines = ["### PRD Completeness Check", ""]
        if self.settings.show_completeness_score:
            lines.extend([f"**Current coverage:** {coverage}%", ""])

        lines.extend(["**Missing sections to consider:**", ""])
        for section in missing:
            lines.extend([f"#### {section.name}", f"_{section.question}_", ""])

        if weak:
            lines.extend(["**Sections that could be expanded:**", ""])
            lines.extend(f"- **{section.name}**: {section.question}" for section in weak)
            lines.append("")

        if self.settings.include_best_practices:
            lines.extend(["---", "", "**PRD Best Practices:**"])
            lines.extend(f"- {practice}" for practice in BEST_PRACTICES)
        return "\n".join(lines).rstrip()
