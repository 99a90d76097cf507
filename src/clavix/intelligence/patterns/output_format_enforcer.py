"""
Output Format Enforcer - tell the downstream agent what shape the answer should take.
"""

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list, has_section

FORMAT_INDICATORS = (
    "output format", "expected output", "return format", "response format",
    "should return", "must return", "will output", "produces", "generates",
    "in the format", "formatted as", "as json", "as markdown", "as yaml",
    "as xml", "as csv", "as html", "code block", "react component", "vue component",
)

INTENT_FORMATS = {
    PromptIntent.CODE_GENERATION: (
        "Function or class with type annotations",
        "UI component with a documented props interface",
        "Module with explicit exports",
        "API endpoint implementation",
    ),
    PromptIntent.PLANNING: (
        "Markdown task list with checkboxes",
        "Phased implementation plan",
        "Architecture decision record (ADR)",
        "Technical specification document",
    ),
    PromptIntent.DOCUMENTATION: (
        "Docstrings or inline code comments",
        "README.md section",
        "API documentation (OpenAPI/Swagger)",
        "Tutorial/guide format",
    ),
    PromptIntent.PRD_GENERATION: (
        "Full PRD document with sections",
        "Quick PRD (2-3 paragraphs)",
        "User story format",
        "Requirements matrix",
    ),
    PromptIntent.TESTING: (
        "Test module with one test per behavior",
        "Test cases with assertions",
        "Fixtures and mock implementations",
    ),
}


class OutputFormatSettings(PatternSettings):
    show_format_suggestions: bool = True


class OutputFormatEnforcer(BasePattern):
    info = PatternInfo(
        id="output-format-enforcer",
        name="Output Format Enforcer",
        description="Adds explicit output format specifications for agent clarity",
        applicable_intents=frozenset(INTENT_FORMATS),
        priority=7,
    )
    settings_model = OutputFormatSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if has_section(prompt, FORMAT_INDICATORS):
            return self.skip(prompt, QualityDimension.ACTIONABILITY, "Output format already specified")

        intent = context.intent.primary_intent
        if self.settings.show_format_suggestions:
            suggestions = INTENT_FORMATS.get(intent, INTENT_FORMATS[PromptIntent.CODE_GENERATION])
            body = f"Specify the desired output format:\n{bullet_list(suggestions)}"
        else:
            body = "Specify the desired output format (file type, structure, level of detail)."

        section = (
            "\n\n## Expected Output Format\n\n"
            f"{body}\n\n"
            "**Note**: Explicit output format helps ensure consistent, usable results."
        )
        return self.enhance(
            prompt.rstrip() + section,
            QualityDimension.ACTIONABILITY,
            f"Added output format guidance for {intent.value} intent",
            ImpactLevel.MEDIUM,
        )
