"""
Output renderer for the CLI.

Formats optimization results and pattern listings with Rich.
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..intelligence.patterns.base import BasePattern
from ..intelligence.types import OptimizationResult, QualityMetrics, Recommendation

# Global console instance
console = Console()

QUALITY_ROWS = ("clarity", "efficiency", "structure", "completeness", "actionability", "specificity", "overall")

RECOMMENDATION_STYLES = {
    Recommendation.FAST: "green",
    Recommendation.DEEP: "yellow",
    Recommendation.PRD: "magenta",
}


def _score_style(score: float) -> str:
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


class OutputRenderer:
    """
    Renders pipeline output with consistent formatting using Rich.
    """

    def __init__(self, console_instance: Optional[Console] = None) -> None:
        """
        Initialize the renderer.

        Args:
            console_instance: Optional Rich Console instance to use
        """
        self.console = console_instance or console

    def error(self, message: str, title: Optional[str] = None) -> None:
        self.console.print(f"[bold red]{title or 'Error'}:[/bold red] {escape(message)}")

    def info(self, message: str, title: Optional[str] = None) -> None:
        if title:
            self.console.print(f"[bold cyan]{title}:[/bold cyan] {message}")
        else:
            self.console.print(f"[cyan]{message}[/cyan]")

    def quality_table(self, before: QualityMetrics, after: QualityMetrics) -> None:
        table = Table(title="Quality", box=None)
        table.add_column("Dimension")
        table.add_column("Before", justify="right")
        table.add_column("After", justify="right")

        for name in QUALITY_ROWS:
            old, new = getattr(before, name), getattr(after, name)
            table.add_row(
                name.capitalize(),
                f"[{_score_style(old)}]{old:.0f}[/{_score_style(old)}]",
                f"[{_score_style(new)}]{new:.0f}[/{_score_style(new)}]",
            )
        self.console.print(table)

    def optimization_result(self, result: OptimizationResult, recommendation: Optional[str] = None) -> None:
        """
        Render a full optimization report.

        Args:
            result: Pipeline result
            recommendation: Optional hint shown at the end
        """
        intent = result.intent
        self.console.print(
            f"[bold cyan]Intent:[/bold cyan] {intent.primary_intent.value} "
            f"([dim]{intent.confidence}% confidence[/dim])"
        )
        self.quality_table(result.quality_before, result.quality)

        if result.applied_patterns:
            self.console.print("\n[bold]Applied patterns:[/bold]")
            for summary in result.applied_patterns:
                self.console.print(
                    f"  [green]+[/green] {summary.name} [dim]({summary.impact.value})[/dim]: "
                    f"{escape(summary.description)}"
                )
        for skipped in result.skipped_patterns:
            self.console.print(f"  [yellow]![/yellow] {skipped.id}: {escape(skipped.note)}")

        if result.quality.remaining_issues:
            self.console.print("\n[bold]Remaining issues:[/bold]")
            for issue in result.quality.remaining_issues:
                self.console.print(f"  - {escape(issue)}")

        self.console.print(Panel(Markdown(result.enhanced or "_(empty prompt)_"),
                                 title="Enhanced Prompt", border_style="blue"))

        escalation = result.escalation
        style = RECOMMENDATION_STYLES[escalation.recommend]
        self.console.print(
            f"[bold]Escalation:[/bold] {escalation.score}/100 -> "
            f"[{style}]{escalation.recommend.value}[/{style}]"
        )
        for factor in escalation.factors:
            self.console.print(f"  [dim]- {factor}[/dim]")

        if recommendation:
            self.info(recommendation, title="Recommendation")

    def pattern_table(self, patterns: Iterable[BasePattern]) -> None:
        table = Table(title="Registered Patterns")
        table.add_column("ID")
        table.add_column("Priority", justify="right")
        table.add_column("Mode")
        table.add_column("Intents")

        for pattern in patterns:
            intents = ", ".join(sorted(i.value for i in pattern.info.applicable_intents))
            table.add_row(pattern.id, str(pattern.priority), pattern.mode.value, intents)
        self.console.print(table)
