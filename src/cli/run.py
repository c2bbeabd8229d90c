"""CLI commands."""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from src.config.settings import settings
from src.fetcher.html_fetcher import FetchError
from src.logging_config import configure
from src.models.analysis import WebsiteAnalysis
from src.pipeline import analyze_text, analyze_url
from src.report.formatter import OutputFormat, format_report

app = typer.Typer(
    add_completion=False,
    help="AI Readiness Grader - Grade web pages for AI search and SEO readiness",
)
console = Console()

FAILING_SCORE = 50


def _setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    configure(
        json_output=settings.logging.json_output if json_output is None else json_output,
        level=level or settings.logging.level,
    )


def _analyze(target: str, text: bool) -> WebsiteAnalysis:
    """Analyze a URL, or with text=True the contents of a local file."""
    if text:
        path = Path(target)
        if not path.is_file():
            raise ValueError(f"File not found: {target}")
        return analyze_text(path.read_text(encoding="utf-8"))
    return analyze_url(target)


@app.command()
def run(
    target: str = typer.Argument(..., help="URL to analyze (or a file path with --text)"),
    output: str = typer.Option(
        "cli",
        "--output",
        "-o",
        help="Output format: cli, json",
    ),
    save: str | None = typer.Option(
        None,
        "--save",
        "-s",
        help="Save report to file",
    ),
    text: bool = typer.Option(
        False,
        "--text",
        "-t",
        help="Treat TARGET as a file of pasted HTML or plain text",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed analysis information",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
    log_json: bool = typer.Option(
        False,
        "--log-json",
        help="Emit logs as JSON lines on stderr",
    ),
) -> None:
    """Grade a page for AI search readiness.

    Examples:
        ai-grader run https://example.com
        ai-grader run example.com -o json -s report.json
        ai-grader run page.html --text
    """
    # Validate output format
    if output not in ("cli", "json"):
        console.print(f"[red]Error:[/red] Invalid output format '{output}'. Use cli or json.")
        raise typer.Exit(1)

    output_format: OutputFormat = output  # type: ignore
    _setup_logging(log_level, log_json or None)

    if output_format == "cli":
        console.print(Panel.fit(
            f"[bold cyan]AI Readiness Grader[/bold cyan]\n[dim]Analyzing:[/dim] {target}",
            border_style="cyan",
        ))

    try:
        with console.status("[bold blue]Analyzing page...", spinner="dots"):
            analysis = _analyze(target, text)

        if verbose:
            debug = analysis.debug_info
            console.print(
                f"[dim]{debug.html_size:,} bytes, {debug.heading_count} headings, "
                f"{debug.paragraph_count} paragraphs, {debug.link_count} links, "
                f"entities via {debug.entity_backend}, performance {debug.performance_source}[/dim]"
            )

        report = format_report(analysis, output_format)

        # Display or save
        if save:
            save_path = Path(save)
            save_path.write_text(report, encoding="utf-8")
            console.print(f"\n[green]Report saved to:[/green] {save_path}")
        elif output_format == "cli":
            console.print("")
            console.print(report)
        else:
            console.print(report, markup=False, highlight=False, soft_wrap=True)

    except (FetchError, ValueError) as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"\n[red]Unexpected error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)

    # Exit with a failing code for poor pages
    if analysis.overall_score < FAILING_SCORE:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print("[bold]AI Readiness Grader[/bold] v1.0.0")
    console.print("[dim]AI search and SEO readiness grader[/dim]")


@app.command()
def check(
    target: str = typer.Argument(..., help="URL to quick-check"),
    text: bool = typer.Option(False, "--text", "-t", help="Treat TARGET as a local file"),
) -> None:
    """Quick check - prints only the overall score and status.

    Example:
        ai-grader check https://example.com
    """
    _setup_logging()
    try:
        with console.status("[bold blue]Analyzing...", spinner="dots"):
            analysis = _analyze(target, text)
    except (FetchError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    from src.scoring.base import status_for

    score = analysis.overall_score
    status = status_for(score)
    color = {"excellent": "green", "good": "blue", "needs-improvement": "yellow"}.get(status, "red")
    label = analysis.url or target
    console.print(f"[{color}]{score}/100 {status}[/{color}] - {label}")

    if score < FAILING_SCORE:
        raise typer.Exit(1)


@app.command()
def markdown(
    target: str = typer.Argument(..., help="URL to render"),
    text: bool = typer.Option(False, "--text", "-t", help="Treat TARGET as a local file"),
) -> None:
    """Print the page as a crawler would read it (bot-simulated markdown).

    Example:
        ai-grader markdown https://example.com
    """
    _setup_logging()
    try:
        with console.status("[bold blue]Analyzing...", spinner="dots"):
            analysis = _analyze(target, text)
    except (FetchError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(
        analysis.extracted_content.markdown_representation,
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


if __name__ == "__main__":
    app()
