"""Developer CLI for the Corroboration Engine using Typer and Rich."""

import asyncio
import json
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from corroboration_engine import __version__
from corroboration_engine.config.logging import configure_logging, get_logger
from corroboration_engine.config.settings import settings
from corroboration_engine.pipeline.corroboration_pipeline import CorroborationPipeline
from corroboration_engine.schemas.result_schema import EngineResult
from corroboration_engine.sources.link_verifier import LiveLinkVerifier
from corroboration_engine.utils.logging import configure_structured_logging

app = typer.Typer(
    help="Corroboration Engine CLI - evidence ranking and confidence scoring",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    """Evidence corroboration and confidence scoring."""
    if verbose:
        configure_logging(level="DEBUG")
        configure_structured_logging(level="DEBUG")


_STATUS_STYLES = {
    "confirmed": "green",
    "contradicted": "red",
    "uncertain": "yellow",
    "limited": "dim",
}


@app.command()
def status() -> None:
    """
    Display engine configuration.

    Shows link-check limits, pool sizes and scoring parameters.
    """
    logger.info("Displaying engine status")

    table = Table(title="Corroboration Engine Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=22)
    table.add_column("Details", style="yellow")

    python_version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    table.add_row("Environment", python_version)
    table.add_row(
        "Live link checks",
        f"timeout {settings.link_check_timeout}s, budget {settings.link_check_budget}, "
        f"concurrency {settings.link_check_concurrency}",
    )
    table.add_row(
        "Source lists",
        f"best {settings.best_links_limit}, pool {settings.source_pool_limit}, "
        f"min rationale {settings.min_rationale_length} chars",
    )
    table.add_row(
        "Contradictions",
        f"neutral weight {settings.neutral_support_weight}, "
        f"hard threshold {settings.hard_contradiction_threshold}",
    )
    table.add_row("Oracle retries", f"{settings.oracle_max_attempts} attempts")
    table.add_row("Logging", f"Level: {settings.log_level}, Format: {settings.log_format}")

    console.print(table)


async def _evaluate(claim: str, payload, today: date, live_check: bool) -> EngineResult:
    if not live_check:
        pipeline = CorroborationPipeline()
        return await pipeline.evaluate(pipeline.prepare_request(claim, today), payload)

    async with LiveLinkVerifier() as verifier:
        pipeline = CorroborationPipeline(link_verifier=verifier)
        return await pipeline.evaluate(pipeline.prepare_request(claim, today), payload)


def _render(result: EngineResult) -> None:
    style = _STATUS_STYLES.get(result.status.value, "white")
    console.print(Panel(
        f"[bold]{result.claim}[/bold]\n\n"
        f"Verdict: [{style}]{result.verdict.value}[/{style}]  "
        f"Score: {result.score}/100  Status: [{style}]{result.status.value}[/{style}]\n"
        f"Confidence: {result.confidence.confidence:.2f} ({result.confidence.level.value})",
        title="Evaluation",
        border_style=style,
    ))

    if result.conflict.note:
        console.print(f"[bold]Conflict:[/bold] {result.conflict.note}")
    for note in result.critical_facts.stale_claim_notes:
        console.print(f"[yellow]⚠[/yellow] {note}")

    adjustments = Table(title="Confidence adjustments", header_style="bold cyan")
    adjustments.add_column("Delta", justify="right")
    adjustments.add_column("Reason")
    for adjustment in result.confidence.adjustments:
        adjustments.add_row(f"{adjustment.delta:+.2f}", adjustment.reason)
    console.print(adjustments)

    links = Table(title="Best sources", header_style="bold cyan")
    links.add_column("Tier", width=7)
    links.add_column("Stance", width=14)
    links.add_column("Link", width=11)
    links.add_column("Source")
    for source in result.best_links:
        links.add_row(
            source.trust_tier.value,
            source.effective_stance.value,
            source.link_status.value if source.link_status else "-",
            f"{source.title}\n[dim]{source.url}[/dim]",
        )
    console.print(links)

    if result.degraded_reason:
        console.print(f"[red]Degraded:[/red] {result.degraded_reason}")


@app.command()
def evaluate(
    claim: str = typer.Argument(..., help="Claim text to evaluate"),
    payload: Path = typer.Option(..., "--payload", "-p", help="Saved oracle payload (JSON)"),
    today: Optional[str] = typer.Option(None, "--today", help="Reference date, YYYY-MM-DD"),
    live_check: bool = typer.Option(True, "--live-check/--no-live-check", help="Check best links over HTTP"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """
    Evaluate a claim against a saved oracle payload.

    Args:
        claim: Claim text
        payload: Path to the oracle's JSON response
        today: Reference date (defaults to the system date)
        live_check: Whether to verify best links over HTTP
    """
    if not claim.strip():
        console.print("[red]✗[/red] Claim text is empty")
        raise typer.Exit(2)

    try:
        reference_date = date.fromisoformat(today) if today else date.today()
    except ValueError:
        console.print(f"[red]✗[/red] Invalid date: {today}")
        raise typer.Exit(2)

    try:
        raw_payload = json.loads(payload.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗[/red] Cannot read payload: {e}")
        logger.error(f"Payload load failed: {e}")
        raise typer.Exit(1)

    logger.info(f"Evaluating claim against {payload} (live_check={live_check})")
    result = asyncio.run(_evaluate(claim, raw_payload, reference_date, live_check))

    if as_json:
        console.print_json(result.model_dump_json())
    else:
        _render(result)


@app.command()
def version() -> None:
    """Display version information."""
    console.print("[bold]Corroboration Engine[/bold]")
    console.print(f"Version: {__version__}")


if __name__ == "__main__":
    app()
