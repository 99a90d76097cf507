"""
Main CLI entry point for clavix.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from clavix import __version__
from clavix.config import IntelligenceConfig, load_config
from clavix.intelligence import (
    ClavixError,
    IntentDetector,
    OptimizationMode,
    QualityAssessor,
    UniversalOptimizer,
    build_default_registry,
    score_escalation,
)
from clavix.output import OutputRenderer

console = Console()


def _configure_logging(debug: bool, info: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    logging.info("Logging initialized at %s", logging.getLevelName(level))


def _build_optimizer(ctx: click.Context) -> UniversalOptimizer:
    config: IntelligenceConfig = ctx.obj["config"]
    try:
        library = build_default_registry(config)
    except ClavixError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    return UniversalOptimizer(library=library, verbose=config.verbose_pattern_logs)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.option("--info", "-i", is_flag=True, help="Enable info logging")
@click.pass_context
def cli(ctx: click.Context, version: bool, config: Path | None, debug: bool, info: bool) -> None:
    """
    Clavix - analyze and enrich prompts before handing them to an AI agent.
    """
    ctx.ensure_object(dict)

    if debug or info:
        _configure_logging(debug, info)

    if version:
        console.print(f"[bold cyan]clavix[/bold cyan] version [green]{__version__}[/green]")
        ctx.exit()

    try:
        ctx.obj["config"] = load_config(working_dir=Path.cwd(), config_path=config)
    except ClavixError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("prompt")
@click.option("--pretty", is_flag=True, help="Indent the JSON output")
def analyze(prompt: str, pretty: bool) -> None:
    """Analyze a prompt and print intent, quality and escalation as JSON."""
    indent = 2 if pretty else None

    if not prompt.strip():
        click.echo(json.dumps({"error": "Prompt is empty"}, indent=indent))
        sys.exit(1)

    intent = IntentDetector().analyze(prompt)
    quality = QualityAssessor().score(prompt, intent)
    escalation = score_escalation(intent, quality)

    output = {
        "intent": intent.primary_intent.value,
        "confidence": intent.confidence,
        "quality": {
            "overall": round(quality.overall),
            "clarity": round(quality.clarity),
            "efficiency": round(quality.efficiency),
            "structure": round(quality.structure),
            "completeness": round(quality.completeness),
            "actionability": round(quality.actionability),
            "specificity": round(quality.specificity),
        },
        "escalation": escalation.to_dict(),
        "characteristics": intent.characteristics.to_dict(),
    }
    click.echo(json.dumps(output, indent=indent))


def _run_optimization(ctx: click.Context, prompt: str, mode: OptimizationMode, as_json: bool) -> None:
    optimizer = _build_optimizer(ctx)
    result = optimizer.optimize(prompt, mode)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    OutputRenderer(console).optimization_result(result, optimizer.recommendation_message(result))


@cli.command()
@click.argument("prompt")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_context
def fast(ctx: click.Context, prompt: str, as_json: bool) -> None:
    """Quick enrichment with the core patterns."""
    _run_optimization(ctx, prompt, OptimizationMode.FAST, as_json)


@cli.command()
@click.argument("prompt")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_context
def deep(ctx: click.Context, prompt: str, as_json: bool) -> None:
    """Comprehensive enrichment including deep-only patterns."""
    _run_optimization(ctx, prompt, OptimizationMode.DEEP, as_json)


@cli.command()
@click.argument("prompt")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_context
def improve(ctx: click.Context, prompt: str, as_json: bool) -> None:
    """Enrich a prompt using the configured default mode."""
    _run_optimization(ctx, prompt, ctx.obj["config"].default_mode, as_json)


@cli.command()
@click.option("--mode", "-m", type=click.Choice(["fast", "deep"]), help="Only patterns eligible in this mode")
@click.pass_context
def patterns(ctx: click.Context, mode: str | None) -> None:
    """List registered patterns."""
    optimizer = _build_optimizer(ctx)
    selected = optimizer.library.by_mode(OptimizationMode(mode)) if mode else list(optimizer.library)
    OutputRenderer(console).pattern_table(selected)

    stats = optimizer.statistics()
    console.print(
        f"[dim]{stats['total_patterns']} patterns "
        f"({stats['fast_mode_patterns']} fast, {stats['deep_mode_patterns']} deep)[/dim]"
    )


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
