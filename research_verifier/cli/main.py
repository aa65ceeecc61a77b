"""Command-line interface for research_verifier using Typer and Rich."""

import asyncio
import sys
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from research_verifier import __version__
from research_verifier.config.logging import get_logger
from research_verifier.config.settings import settings
from research_verifier.pipeline import CrossVerifyPipeline

app = typer.Typer(
    help="Research Verifier CLI - multi-round claim cross-verification",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")

_STATUS_STYLES = {
    "verified": "green",
    "disputed": "yellow",
    "false": "red",
    "pending": "dim",
}


@app.command()
def status() -> None:
    """
    Display configuration.

    Shows Python version, oracle configuration and logging settings.
    """
    logger.info("Displaying system status")

    table = Table(title="Research Verifier Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=20)
    table.add_column("Status", style="green", width=15)
    table.add_column("Details", style="yellow")

    python_version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    table.add_row("Environment", "✓ Ready", python_version)

    if not settings.oracle_enabled:
        oracle_status = "✗ Disabled"
        oracle_details = "Algorithmic expert and consensus rounds"
    elif settings.gemini_api_key:
        oracle_status = "✓ Gemini"
        oracle_details = f"{settings.gemini_model} (temperature {settings.oracle_temperature})"
    else:
        oracle_status = "⚠ No API key"
        oracle_details = "Falls back to algorithmic scoring"
    table.add_row("Oracle", oracle_status, oracle_details)

    log_details = f"Level: {settings.log_level}, Format: {settings.log_format}"
    table.add_row("Logging", "✓ Active", log_details)

    console.print(table)


@app.command()
def verify(
    claim: List[str] = typer.Option(..., "--claim", "-c", help="Claim to verify (repeatable)"),
    topic: str = typer.Option(..., "--topic", "-t", help="Topic context"),
    source: Optional[List[str]] = typer.Option(None, "--source", "-s", help="Source URL (repeatable)"),
) -> None:
    """
    Cross-verify claims against optional source URLs.

    Runs all verification rounds and prints per-claim results, conflicts
    and the credibility breakdown.
    """
    logger.info(f"Verify command invoked: {len(claim)} claims", topic=topic)

    report = asyncio.run(CrossVerifyPipeline().run(list(claim), topic, source_urls=list(source or [])))

    if not report.success:
        console.print(f"\n[red]✗[/red] {report.message}: {report.error}")
        raise typer.Exit(1)

    table = Table(title=f"Claims: {report.topic}", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=3)
    table.add_column("Claim", style="cyan")
    table.add_column("Status", width=10)
    table.add_column("Confidence", justify="right", width=10)
    table.add_column("Supporting", justify="right", width=10)

    for index, result in enumerate(report.verified_claims, start=1):
        style = _STATUS_STYLES.get(result.status.value, "white")
        table.add_row(
            str(index),
            result.text,
            f"[{style}]{result.status.value}[/{style}]",
            f"{result.final_confidence:.2f}",
            str(result.supporting_sources),
        )
    console.print(table)

    if report.conflicts:
        conflicts = Table(title="Conflicts", show_header=True, header_style="bold magenta")
        conflicts.add_column("Type", style="cyan")
        conflicts.add_column("Resolved", width=8)
        conflicts.add_column("Resolution", style="yellow")
        for conflict in report.conflicts:
            conflicts.add_row(
                conflict.type,
                "✓" if conflict.resolved else "✗",
                conflict.resolution or "",
            )
        console.print(conflicts)

    console.print(Panel(
        report.credibility_breakdown,
        title=f"Credibility {report.credibility_score:.2f}",
        border_style="green",
    ))
    console.print(
        f"\n[green]✓[/green] {report.total_rounds} rounds, "
        f"final confidence {report.final_confidence:.2f} "
        f"(session {report.session_id})"
    )


@app.command()
def version() -> None:
    """Display version information."""
    console.print("[bold]Research Verifier[/bold]")
    console.print(f"Version: {__version__}")


if __name__ == "__main__":
    app()
