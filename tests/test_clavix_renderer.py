"""
Tests for the output renderer.
"""

from io import StringIO

import pytest
from rich.console import Console

from clavix.intelligence import UniversalOptimizer, build_default_registry
from clavix.output.renderer import OutputRenderer


@pytest.fixture
def test_console() -> Console:
    """Create a test console that writes to a StringIO."""
    return Console(file=StringIO(), width=100, legacy_windows=False)


@pytest.fixture
def renderer(test_console: Console) -> OutputRenderer:
    """Create a renderer with test console."""
    return OutputRenderer(console_instance=test_console)


def output_of(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[union-attr]


def test_renderer_init() -> None:
    """Test renderer initialization."""
    r = OutputRenderer()
    assert r.console is not None


def test_renderer_error(renderer: OutputRenderer, test_console: Console) -> None:
    """Test error message rendering."""
    renderer.error("Something went wrong")
    output = output_of(test_console)
    assert "Error:" in output
    assert "Something went wrong" in output


def test_renderer_error_keeps_brackets(renderer: OutputRenderer, test_console: Console) -> None:
    renderer.error("bad value [type=int]", title="Configuration error")
    output = output_of(test_console)
    assert "Configuration error:" in output
    assert "[type=int]" in output


def test_renderer_info(renderer: OutputRenderer, test_console: Console) -> None:
    renderer.info("Ready", title="Status")
    renderer.info("Plain")
    output = output_of(test_console)
    assert "Status: Ready" in output
    assert "Plain" in output


def test_optimization_report(renderer: OutputRenderer, test_console: Console) -> None:
    result = UniversalOptimizer().optimize("Create a login page")
    renderer.optimization_result(result, "Try deep mode")
    output = output_of(test_console)

    assert "Intent: code-generation (100% confidence)" in output
    assert "Quality" in output
    assert "Clarity" in output
    assert "Applied patterns:" in output
    assert "Output Format Enforcer" in output
    assert "Enhanced Prompt" in output
    assert "Escalation: 50/100 -> deep" in output
    assert "Recommendation: Try deep mode" in output
    assert output.index("Applied patterns:") < output.index("Enhanced Prompt") < output.index("Escalation:")


def test_empty_prompt_report(renderer: OutputRenderer, test_console: Console) -> None:
    result = UniversalOptimizer().optimize("")
    renderer.optimization_result(result)
    output = output_of(test_console)
    assert "(empty prompt)" in output
    assert "Applied patterns:" not in output
    assert "Empty prompt" in output


def test_pattern_table(renderer: OutputRenderer, test_console: Console) -> None:
    renderer.pattern_table(build_default_registry())
    output = output_of(test_console)
    assert "Registered Patterns" in output
    assert "Priority" in output
