"""
Tests for the CLI entry point.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from clavix.main import cli


def write_config(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


def test_cli_version_flag() -> None:
    """Test that --version flag works."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "clavix version 0.1.0" in result.output


def test_cli_help() -> None:
    """Test that --help works."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Commands:" in result.output
    for command in ("analyze", "fast", "deep", "improve", "patterns"):
        assert command in result.output


def test_cli_without_command_shows_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_analyze_command() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["analyze", "Create a login page"])
    assert result.exit_code == 0

    data = json.loads(result.output)
    assert data["intent"] == "code-generation"
    assert data["confidence"] == 100
    assert data["quality"]["clarity"] == 40
    assert data["escalation"]["score"] == 50
    assert data["escalation"]["recommend"] == "deep"
    assert data["characteristics"]["needsStructure"] is True


def test_analyze_pretty() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["analyze", "--pretty", "Create a login page"])
    assert result.exit_code == 0
    assert '\n  "intent": "code-generation"' in result.output


def test_analyze_empty_prompt() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["analyze", "  "])
    assert result.exit_code == 1
    assert json.loads(result.output) == {"error": "Prompt is empty"}


def test_fast_json() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["fast", "--json", "Create a login page"])
    assert result.exit_code == 0

    data = json.loads(result.output)
    assert data["mode"] == "fast"
    assert [p["id"] for p in data["appliedPatterns"]][0] == "output-format-enforcer"
    assert data["enhanced"].startswith("Create a login page\n\n## Expected Output Format")


def test_deep_report() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["deep", "Build an upload form for images"])
    assert result.exit_code == 0
    assert "Intent:" in result.output
    assert "Applied patterns:" in result.output
    assert "Enhanced Prompt" in result.output
    assert "Escalation:" in result.output


def test_improve_uses_project_default_mode() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_config(Path(".clavix/config.yaml"), "intelligence:\n  default_mode: deep\n")
        result = runner.invoke(cli, ["improve", "--json", "Build an upload form for images"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["mode"] == "deep"
    assert "edge-case-identifier" in [p["id"] for p in data["appliedPatterns"]]


def test_patterns_command() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["patterns"])
    assert result.exit_code == 0
    assert "Registered Patterns" in result.output
    assert "18 patterns (10 fast, 18 deep)" in result.output


def test_patterns_respects_disabled_patterns(tmp_path: Path) -> None:
    config = write_config(
        tmp_path / "clavix.yaml",
        "intelligence:\n  disabled_patterns:\n    - ambiguity-detector\n",
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config), "patterns", "--mode", "deep"])
    assert result.exit_code == 0
    assert "17 patterns (10 fast, 17 deep)" in result.output


def test_unknown_pattern_in_config(tmp_path: Path) -> None:
    config = write_config(
        tmp_path / "clavix.yaml",
        "intelligence:\n  disabled_patterns:\n    - no-such-pattern\n",
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config), "fast", "Build it"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_invalid_pattern_settings(tmp_path: Path) -> None:
    config = write_config(
        tmp_path / "clavix.yaml",
        "intelligence:\n  pattern_settings:\n    edge-case-identifier:\n      max_edge_cases: 99\n",
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config), "deep", "Build it"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_unreadable_explicit_config(tmp_path: Path) -> None:
    config = write_config(tmp_path / "clavix.yaml", "intelligence: [unclosed\n")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config), "fast", "Build it"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_missing_explicit_config(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_path / "missing.yaml"), "fast", "Build it"])
    assert result.exit_code == 2
