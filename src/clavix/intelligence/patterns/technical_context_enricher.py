"""
Technical Context Enricher - pin down language and framework when the prompt names them loosely.
"""

import re
from typing import List, Optional

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list

TECHNICAL_HEADING = re.compile(r"^#+\s*technical constraints", re.I | re.M)

# Checked against the user's own prompt, never against text added by other patterns.
CONTEXT_MARKERS = (
    re.compile(r"\bversion\b|\bv\d+\.\d+", re.I),
    re.compile(r"technical (context|constraints|requirements)", re.I),
    re.compile(r"language:.*framework:", re.I),
    re.compile(r"using (python|javascript|typescript|java|rust|go) \d", re.I),
)

VERSION_INFO = re.compile(r"\d+\.\d+|\bv\d+")

# Checked in order; "typescript"/"javascript" precede "java".
LANGUAGES = (
    ("python", "Python"),
    ("typescript", "TypeScript"),
    ("javascript", "JavaScript"),
    ("java", "Java"),
    ("rust", "Rust"),
    ("golang", "Go"),
    ("php", "PHP"),
    ("ruby", "Ruby"),
    ("swift", "Swift"),
    ("kotlin", "Kotlin"),
    ("c++", "C++"),
    ("c#", "C#"),
)

FRAMEWORK_LANGUAGES = (
    (("react", "vue", "angular", "svelte"), "JavaScript/TypeScript"),
    (("django", "flask", "fastapi"), "Python"),
    (("spring", "hibernate"), "Java"),
)

FRAMEWORKS = (
    ("react", "React"),
    ("vue", "Vue.js"),
    ("angular", "Angular"),
    ("svelte", "Svelte"),
    ("nextjs", "Next.js"),
    ("nuxt", "Nuxt.js"),
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
    ("express", "Express.js"),
    ("nestjs", "NestJS"),
    ("spring", "Spring Boot"),
    ("rails", "Ruby on Rails"),
    ("laravel", "Laravel"),
)


def _find_word(lower_prompt: str, key: str) -> bool:
    return re.search(rf"(?<![\w]){re.escape(key)}(?![\w+#])", lower_prompt) is not None


class TechnicalContextSettings(PatternSettings):
    detect_frameworks: bool = True
    suggest_versions: bool = True


class TechnicalContextEnricher(BasePattern):
    info = PatternInfo(
        id="technical-context-enricher",
        name="Technical Context Enricher",
        description="Adds missing technical context (language, framework, versions)",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.REFINEMENT,
            PromptIntent.DEBUGGING,
        }),
        priority=5,
        run_after=("objective-clarifier",),
        enhanced_by=("domain-context-enricher",),
    )
    settings_model = TechnicalContextSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        original = context.original_prompt
        if TECHNICAL_HEADING.search(prompt) or any(marker.search(original) for marker in CONTEXT_MARKERS):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Technical context already specified")

        lower_original = original.lower()
        enhancements: List[str] = []

        language = self.detect_language(lower_original)
        if language:
            if self.settings.suggest_versions and not VERSION_INFO.search(original):
                enhancements.append(f"Language: {language} (please specify version if critical)")
            else:
                enhancements.append(f"Language: {language}")

        if self.settings.detect_frameworks and context.intent.primary_intent == PromptIntent.CODE_GENERATION:
            framework = self.detect_framework(lower_original)
            if framework:
                enhancements.append(f"Framework: {framework}")

        if not enhancements:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "No additional technical context needed")

        return self.enhance(
            f"{prompt.rstrip()}\n\n# Technical Constraints\n{bullet_list(enhancements)}",
            QualityDimension.COMPLETENESS,
            f"Added {len(enhancements)} technical context specifications",
            ImpactLevel.MEDIUM,
        )

    @staticmethod
    def detect_language(lower_prompt: str) -> Optional[str]:
        for key, name in LANGUAGES:
            if _find_word(lower_prompt, key):
                return name
        for keys, name in FRAMEWORK_LANGUAGES:
            if any(_find_word(lower_prompt, key) for key in keys):
                return name
        return None

    @staticmethod
    def detect_framework(lower_prompt: str) -> Optional[str]:
        for key, name in FRAMEWORKS:
            if _find_word(lower_prompt, key):
                return name
        return None
