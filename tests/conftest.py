"""
Pytest configuration and fixtures for all tests.
"""

from pathlib import Path

import pytest

from clavix.intelligence import (
    IntentAnalysis,
    IntentCharacteristics,
    OptimizationMode,
    PatternContext,
    PromptIntent,
    QualityMetrics,
)


def make_intent(
    intent: PromptIntent = PromptIntent.CODE_GENERATION,
    confidence: int = 90,
    **characteristics,
) -> IntentAnalysis:
    """Build an IntentAnalysis without running the detector."""
    return IntentAnalysis(
        primary_intent=PromptIntent(intent),
        confidence=confidence,
        characteristics=IntentCharacteristics(**characteristics),
    )


def make_context(
    prompt: str,
    intent: PromptIntent = PromptIntent.CODE_GENERATION,
    mode: OptimizationMode = OptimizationMode.DEEP,
) -> PatternContext:
    return PatternContext(intent=make_intent(intent), mode=OptimizationMode(mode), original_prompt=prompt)


def make_quality(overall: float = 90, **dimensions) -> QualityMetrics:
    """QualityMetrics with every dimension at 90 unless overridden."""
    values = {
        "clarity": 90,
        "efficiency": 90,
        "structure": 90,
        "completeness": 90,
        "actionability": 90,
        "specificity": 90,
    }
    values.update(dimensions)
    return QualityMetrics(overall=overall, **values)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Point Path.home() at a temporary directory.

    Keeps a developer's ~/.clavix/config.yaml out of every test.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    return home
