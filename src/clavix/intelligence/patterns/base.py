"""
Pattern contract: immutable metadata, validated settings and one apply() call.

A pattern is a pure text transform. It reads only the prompt text and the
PatternContext, never performs I/O, and reports applied=False (returning
the prompt untouched) when its trigger condition already holds.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, ValidationError

from ..exceptions import PatternConfigError, PatternRegistrationError
from ..types import (
    ImpactLevel,
    Improvement,
    OptimizationMode,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternResult,
    PromptIntent,
    QualityDimension,
)

MIN_PRIORITY = 1
MAX_PRIORITY = 10

ALL_INTENTS = frozenset(PromptIntent)


def _coerce_enum_set(values: Iterable[Any], enum_type, label: str, pattern_id: str) -> frozenset:
    if isinstance(values, (str, bytes)):
        raise PatternRegistrationError(
            f"Pattern '{pattern_id}': {label} must be a collection, got a string"
        )
    try:
        return frozenset(enum_type(v) for v in values)
    except (TypeError, ValueError) as e:
        raise PatternRegistrationError(f"Pattern '{pattern_id}': invalid {label}: {e}") from e


@dataclass(frozen=True)
class PatternInfo:
    """Static identity and applicability of a pattern."""

    id: str
    name: str
    description: str
    applicable_intents: FrozenSet[PromptIntent]
    mode: PatternMode = PatternMode.BOTH
    priority: int = 5  # 1-10, 10 runs first
    phases: FrozenSet[PatternPhase] = frozenset({PatternPhase.ALL})
    run_after: Tuple[str, ...] = ()
    enhanced_by: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise PatternRegistrationError("Pattern id must be a non-empty string")
        if not self.name:
            raise PatternRegistrationError(f"Pattern '{self.id}' must have a name")

        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise PatternRegistrationError(f"Pattern '{self.id}': priority must be an integer")
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            raise PatternRegistrationError(
                f"Pattern '{self.id}': priority {self.priority} outside "
                f"{MIN_PRIORITY}-{MAX_PRIORITY}"
            )

        intents = _coerce_enum_set(self.applicable_intents, PromptIntent, "applicable_intents", self.id)
        if not intents:
            raise PatternRegistrationError(f"Pattern '{self.id}' has no applicable intents")
        phases = _coerce_enum_set(self.phases, PatternPhase, "phases", self.id)
        if not phases:
            raise PatternRegistrationError(f"Pattern '{self.id}' declares no phases")
        try:
            mode = PatternMode(self.mode)
        except ValueError as e:
            raise PatternRegistrationError(f"Pattern '{self.id}': invalid mode: {e}") from e

        object.__setattr__(self, "applicable_intents", intents)
        object.__setattr__(self, "phases", phases)
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "run_after", tuple(self.run_after))
        object.__setattr__(self, "enhanced_by", tuple(self.enhanced_by))

    def supports_mode(self, mode: OptimizationMode) -> bool:
        return self.mode == PatternMode.BOTH or self.mode.value == OptimizationMode(mode).value

    def supports_phase(self, phase: PatternPhase) -> bool:
        return (
            phase == PatternPhase.ALL
            or PatternPhase.ALL in self.phases
            or phase in self.phases
        )

    def is_applicable(
        self, intent: PromptIntent, mode: OptimizationMode, phase: PatternPhase = PatternPhase.ALL
    ) -> bool:
        return (
            self.supports_mode(mode)
            and intent in self.applicable_intents
            and self.supports_phase(phase)
        )


class PatternSettings(BaseModel):
    """Base for per-pattern settings. Subclasses declare bounded fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class BasePattern(ABC):
    """
    Base class for prompt enrichment patterns.

    Subclasses set `info` (class-level, shared by all instances) and may set
    `settings_model` to a PatternSettings subclass.
    """

    info: ClassVar[PatternInfo]
    settings_model: ClassVar[Type[PatternSettings]] = PatternSettings

    def __init__(self, settings: Optional[Mapping[str, Any]] = None) -> None:
        try:
            self.settings = self.settings_model(**dict(settings or {}))
        except (ValidationError, TypeError, ValueError) as e:
            raise PatternConfigError(f"Invalid settings for pattern '{self.id}': {e}") from e

    @property
    def id(self) -> str:
        return self.info.id

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def description(self) -> str:
        return self.info.description

    @property
    def priority(self) -> int:
        return self.info.priority

    @property
    def mode(self) -> PatternMode:
        return self.info.mode

    @abstractmethod
    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        """Transform the prompt, or return it unchanged with applied=False."""

    def skip(self, prompt: str, dimension: QualityDimension, description: str) -> PatternResult:
        """Result for a pattern that decided not to act."""
        return PatternResult(
            enhanced_prompt=prompt,
            improvement=Improvement(dimension=dimension, description=description, impact=ImpactLevel.LOW),
            applied=False,
        )

    def enhance(
        self,
        enhanced: str,
        dimension: QualityDimension,
        description: str,
        impact: ImpactLevel = ImpactLevel.MEDIUM,
    ) -> PatternResult:
        return PatternResult(
            enhanced_prompt=enhanced,
            improvement=Improvement(dimension=dimension, description=description, impact=impact),
            applied=True,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, priority={self.priority})"


class FunctionPattern(BasePattern):
    """Pattern wrapper for a plain callable `func(prompt, context) -> PatternResult`."""

    def __init__(
        self,
        info: PatternInfo,
        func: Callable[[str, PatternContext], PatternResult],
        settings: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if not callable(func):
            raise PatternRegistrationError(f"Pattern '{info.id}': apply must be callable")
        self.info = info
        self.func = func
        super().__init__(settings)

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        return self.func(prompt, context)


# Text utilities shared by the catalog

CODE_FENCE = re.compile(r"^[ \t]*(```|~~~)")


def split_code_fences(text: str) -> List[Tuple[bool, str]]:
    """
    Split text into (is_code, chunk) pieces.

    Fenced blocks keep their fence lines; an unclosed fence runs to the end
    of the text. Joining the chunks gives back the original text.
    """
    chunks: List[Tuple[bool, str]] = []
    current: List[str] = []
    in_fence = False

    for line in text.splitlines(keepends=True):
        if CODE_FENCE.match(line):
            if in_fence:
                current.append(line)
                chunks.append((True, "".join(current)))
                current = []
            else:
                if current:
                    chunks.append((False, "".join(current)))
                current = [line]
            in_fence = not in_fence
        else:
            current.append(line)

    if current:
        chunks.append((in_fence, "".join(current)))
    return chunks


def _collapse_line(line: str) -> str:
    body = line.strip()
    if not body:
        return ""
    indent = line[: len(line) - len(line.lstrip(" \t"))]
    return indent + re.sub(r"[ \t]+", " ", body)


def clean_whitespace(text: str) -> str:
    """Collapse runs of spaces/tabs and excess blank lines. Indentation and fenced code are kept."""
    pieces = []
    for is_code, chunk in split_code_fences(text):
        if is_code:
            pieces.append(chunk)
            continue
        collapsed = "\n".join(_collapse_line(line) for line in chunk.split("\n"))
        pieces.append(re.sub(r"\n{3,}", "\n\n", collapsed))
    return "".join(pieces).strip("\n").rstrip()


def has_section(prompt: str, keywords: Iterable[str]) -> bool:
    lower_prompt = prompt.lower()
    return any(keyword.lower() in lower_prompt for keyword in keywords)


def mentions_any(prompt: str, words: Iterable[str]) -> bool:
    """Whole-word variant of has_section; a trailing plural "s" still matches."""
    return any(
        re.search(rf"(?<![\w-]){re.escape(word)}s?(?![\w-])", prompt, re.I) is not None
        for word in words
    )


def count_words(text: str) -> int:
    return len([word for word in text.split() if word])


def bullet_list(items: Iterable[str], checkbox: bool = False) -> str:
    prefix = "- [ ] " if checkbox else "- "
    return "\n".join(f"{prefix}{item}" for item in items)


def impact_for_count(count: int, high: int = 3, medium: int = 2) -> ImpactLevel:
    if count >= high:
        return ImpactLevel.HIGH
    if count >= medium:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


__all__ = [
    "ALL_INTENTS",
    "BasePattern",
    "FunctionPattern",
    "PatternInfo",
    "PatternSettings",
    "bullet_list",
    "CODE_FENCE",
    "clean_whitespace",
    "count_words",
    "has_section",
    "impact_for_count",
    "mentions_any",
    "split_code_fences",
]
