"""
Completeness Validator - ask for the critical elements a prompt leaves out.
"""

from typing import List

from ..types import PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, has_section, impact_for_count

COMPLETENESS_MARKER = "**Completeness Check**"

# element -> (indicators, question). Order is the order questions are listed in.
ELEMENTS = {
    "objective": (
        ("objective", "goal", "purpose", "need to", "want to", "trying to", "aim", "intend"),
        "- **Objective**: What is the primary goal? What problem are you solving?",
    ),
    "tech-stack": (
        (
            "javascript", "typescript", "python", "java", "rust", "golang", "php", "ruby",
            "swift", "kotlin", "c++", "c#", "react", "vue", "angular", "svelte", "next.js",
            "express", "fastapi", "django", "flask", "spring", "rails", "postgres", "mysql",
            "mongodb", "redis", "sqlite", "docker", "kubernetes", "aws", "azure", "gcp",
            "tech stack", "technology", "framework", "library", "using", "built with",
        ),
        "- **Tech Stack**: Which technologies/frameworks? (e.g., React, Node.js, PostgreSQL)",
    ),
    "success-criteria": (
        ("success", "criteria", "measure", "metric", "kpi", "should work", "expected to",
         "result in", "achieve"),
        "- **Success Criteria**: How will you know it works? What metrics matter?",
    ),
    "constraints": (
        ("constraint", "limit", "must not", "cannot", "should not", "avoid", "within",
         "budget", "deadline"),
        "- **Constraints**: Any limitations? (time, budget, performance, compatibility)",
    ),
    "output-format": (
        ("output", "format", "return", "result", "deliverable", "component", "function",
         "class", "api", "endpoint", "file", "document", "report"),
        "- **Expected Output**: What should the result look like? (component, API, file, etc.)",
    ),
}


class CompletenessValidator(BasePattern):
    info = PatternInfo(
        id="completeness-validator",
        name="Completeness Validator",
        description="Ensures all necessary requirements are present",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.PLANNING,
            PromptIntent.REFINEMENT,
        }),
        priority=6,
    )

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if COMPLETENESS_MARKER in prompt:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Completeness already checked")

        missing = self.find_missing_elements(prompt)
        if not missing:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "All required elements present")

        total = len(ELEMENTS)
        present = total - len(missing)
        score = round(present / total * 100)

        questions = "\n".join(ELEMENTS[element][1] for element in missing)
        enhanced = (
            f"{prompt.rstrip()}\n\n---\n\n"
            f"{COMPLETENESS_MARKER}: {score}% ({present}/{total} elements present)\n\n"
            f"**Missing Information** (please specify):\n\n{questions}"
        )
        return self.enhance(
            enhanced,
            QualityDimension.COMPLETENESS,
            f"Added {len(missing)} missing element prompts ({score}% complete)",
            impact_for_count(len(missing)),
        )

    def find_missing_elements(self, prompt: str) -> List[str]:
        return [
            element
            for element, (indicators, _) in ELEMENTS.items()
            if not has_section(prompt, indicators)
        ]
