"""
Structure Organizer - gather scattered requirement statements into one section.
"""

import re
from typing import List, Tuple

from pydantic import Field

from ..types import PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import CODE_FENCE, BasePattern, PatternInfo, PatternSettings, bullet_list, impact_for_count

REQUIREMENT_MARKER = re.compile(
    r"\b(must|should|needs? to|has to|have to|required|requires?|shall)\b", re.I
)
REQUIREMENTS_HEADING = re.compile(r"^#+\s*requirements\b", re.I | re.M)
SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


class StructureSettings(PatternSettings):
    min_requirements: int = Field(default=2, ge=1, le=10)


class StructureOrganizer(BasePattern):
    info = PatternInfo(
        id="structure-organizer",
        name="Structure Organizer",
        description="Reorders information into logical sections",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.PLANNING,
            PromptIntent.REFINEMENT,
            PromptIntent.DEBUGGING,
            PromptIntent.DOCUMENTATION,
        }),
        priority=8,
    )
    settings_model = StructureSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if REQUIREMENTS_HEADING.search(prompt):
            return self.skip(prompt, QualityDimension.STRUCTURE, "Requirements already organized")

        body, requirements = self.split_requirements(prompt)
        if len(requirements) < self.settings.min_requirements:
            return self.skip(
                prompt, QualityDimension.STRUCTURE, "Not enough requirement statements to organize"
            )

        enhanced = f"{body}\n\n## Requirements\n{bullet_list(requirements)}" if body else (
            f"## Requirements\n{bullet_list(requirements)}"
        )
        return self.enhance(
            enhanced,
            QualityDimension.STRUCTURE,
            f"Grouped {len(requirements)} requirement statements under a Requirements section",
            impact_for_count(len(requirements), high=4, medium=2),
        )

    def split_requirements(self, prompt: str) -> Tuple[str, List[str]]:
        """
        Pull requirement sentences out of free-text lines.

        Headings, lists, indented lines and fenced code stay exactly as written.
        """
        kept_lines: List[str] = []
        requirements: List[str] = []
        in_fence = False

        for line in prompt.splitlines():
            if CODE_FENCE.match(line):
                in_fence = not in_fence
                kept_lines.append(line)
                continue

            stripped = line.strip()
            if (
                in_fence
                or not stripped
                or line[:1] in (" ", "\t")
                or stripped.startswith(("#", "-", "*", ">", "`", "|"))
            ):
                kept_lines.append(line)
                continue

            sentences = SENTENCE_SPLIT.split(stripped)
            kept_sentences = []
            for sentence in sentences:
                if REQUIREMENT_MARKER.search(sentence):
                    requirements.append(sentence.rstrip(" ."))
                else:
                    kept_sentences.append(sentence)

            if len(kept_sentences) == len(sentences):
                kept_lines.append(line)
            elif kept_sentences:
                kept_lines.append(" ".join(kept_sentences))

        body = "\n".join(kept_lines).strip("\n")
        return body, requirements
