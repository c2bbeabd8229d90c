"""Report formatting utilities."""
from __future__ import annotations

from typing import Literal

from rich.markup import escape

from src.models.analysis import WebsiteAnalysis
from src.models.content import CrawledRobots
from src.scoring.base import status_for

OutputFormat = Literal["cli", "json"]

MAX_CLI_IMPROVEMENTS = 5

_STATUS_COLORS = {
    "excellent": "green",
    "good": "blue",
    "needs-improvement": "yellow",
    "poor": "red",
    "critical": "red bold",
}
_PRIORITY_COLORS = {"high": "red", "medium": "yellow", "low": "blue"}
_CATEGORY_LABELS = {
    "technical_seo": "Technical SEO",
    "content_quality": "Content Quality",
    "ai_optimization": "AI Optimization",
    "eeat_signals": "E-E-A-T Signals",
    "technical_crawlability": "Crawlability",
    "mobile_optimization": "Mobile",
    "schema_analysis": "Schema",
}


def format_report(analysis: WebsiteAnalysis, output: OutputFormat = "cli") -> str:
    """Format an analysis for output.

    Args:
        analysis: Completed WebsiteAnalysis
        output: Output format - 'cli' or 'json'

    Returns:
        Formatted string representation of the analysis
    """
    if output == "json":
        return analysis.to_json()
    return _format_cli(analysis)


def _bar(score: int, width: int = 20) -> str:
    filled = int(width * score / 100)
    return "█" * filled + "░" * (width - filled)


def _format_cli(analysis: WebsiteAnalysis) -> str:
    """Format results for terminal display with Rich-compatible markup."""
    lines = []
    content = analysis.extracted_content

    # Header
    title = analysis.title or "Untitled page"
    if len(title) > 60:
        title = title[:57] + "..."
    lines.append("[bold cyan]AI Readiness Report[/bold cyan]")
    lines.append(f"[dim]Page:[/dim] {escape(title)}")
    lines.append("")

    overall = analysis.overall_score
    overall_status = status_for(overall)
    color = _STATUS_COLORS[overall_status]
    lines.append(f"[bold]Overall Score:[/bold] [{color}]{overall}/100 ({overall_status})[/{color}]")
    lines.append("")

    # Category breakdown
    lines.append("[bold]Category Scores:[/bold]")
    for category, score in analysis.category_scores().items():
        color = _STATUS_COLORS[score.status]
        label = _CATEGORY_LABELS[category]
        lines.append(
            f"  {label:16} [{color}]{_bar(score.score)}[/{color}] {score.score:3}/100  {score.status}"
        )
    lines.append("")

    # AI crawler access
    policy = content.robots_policy
    lines.append("[bold]AI Crawler Access:[/bold]")
    if isinstance(policy, CrawledRobots) and policy.has_robots_txt:
        for bot, directive in policy.ai_bot_directives.items():
            if directive == "allowed":
                status_display = "[green]✓ allowed[/green]"
            elif directive == "disallowed":
                status_display = "[red]✗ blocked[/red]"
            else:
                status_display = "[yellow]? unspecified[/yellow]"
            lines.append(f"  {bot:18} {status_display}")
    elif isinstance(policy, CrawledRobots):
        lines.append("  [yellow]No robots.txt found[/yellow]")
    else:
        lines.append("  [dim]Not checked (manual input)[/dim]")
    lines.append("")

    # Top improvements
    improvements = analysis.content_improvements[:MAX_CLI_IMPROVEMENTS]
    if improvements:
        lines.append("[bold]Top Improvements:[/bold]")
        for i, improvement in enumerate(improvements, 1):
            color = _PRIORITY_COLORS[improvement.priority]
            lines.append(
                f"  {i}. [{color}]\\[{improvement.priority}][/{color}] "
                f"[bold]{escape(improvement.section)}:[/bold] {escape(improvement.improved)}"
            )
        remaining = len(analysis.content_improvements) - len(improvements)
        if remaining > 0:
            lines.append(f"  [dim]... and {remaining} more (use --output json for all)[/dim]")
    else:
        lines.append("[green]No improvements needed.[/green]")

    return "\n".join(lines)
