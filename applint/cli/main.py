"""Main CLI application for applint."""

import asyncio
import uuid
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.checker import UmbrelCliChecker
from ..adapters.github import GitHubClient
from ..config import Settings, get_settings
from ..logging import get_logger, setup_logging
from ..models.runs import Run
from ..orchestrator.aggregator import aggregate
from ..orchestrator.decider import decide
from ..orchestrator.pipeline import LintPipeline, PipelineResult
from ..reporting.annotations import build_annotations
from ..reporting.comment import render_comment
from ..reporting.export import load_findings
from ..reporting.sinks import ActionsSink, CheckRunSink, CommentSink, ConsoleSink, ReportSink, findings_table
from ..reporting.summary import render_summary
from ..triggers import TriggerContext

app = typer.Typer(
    name="applint",
    help="Lint the app files changed in a pull request or revision range",
    add_completion=False
)

# stdout is reserved for workflow commands and rendered reports
console = Console(stderr=True)
logger = get_logger(__name__)


class RenderFormat(str, Enum):
    summary = "summary"
    comment = "comment"
    annotations = "annotations"
    table = "table"


@app.command()
def run(
    base: Optional[str] = typer.Option(
        None, "--base", help="Base revision (defaults to the pull request base)"
    ),
    head_sha: Optional[str] = typer.Option(
        None, "--head-sha", help="Head revision (defaults to the pull request head)"
    ),
    repository: Optional[str] = typer.Option(
        None, "--repository", "-R", help="owner/repo (defaults to GITHUB_REPOSITORY)"
    ),
    event_path: Optional[Path] = typer.Option(
        None, "--event-path", help="Event payload file (defaults to GITHUB_EVENT_PATH)"
    ),
    comment: Optional[bool] = typer.Option(
        None, "--comment/--no-comment", help="Comment on the pull request"
    ),
    check_run: Optional[bool] = typer.Option(
        None, "--check-run/--no-check-run", help="Publish a check run with annotations"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging"
    ),
) -> None:
    """Lint a revision range the way the GitHub Action does."""
    settings = get_settings()

    # Override settings with CLI arguments
    if base:
        settings.base = base
    if head_sha:
        settings.head_sha = head_sha
    if repository:
        settings.github_repository = repository
    if event_path:
        settings.github_event_path = event_path
    if comment is not None:
        settings.post_comment = comment
    if check_run is not None:
        settings.create_check_run = check_run
    _apply_verbosity(settings, verbose)

    console.print(f"[bold blue]applint[/bold blue] - {settings.github_repository or 'unknown repository'}")

    result = asyncio.run(_run_pipeline(settings))
    if result.failed:
        raise typer.Exit(1)


@app.command()
def pr(
    repository: str = typer.Argument(..., help="owner/repo"),
    number: int = typer.Argument(..., help="Pull request number"),
    comment: bool = typer.Option(
        True, "--comment/--no-comment", help="Comment on the pull request"
    ),
    check_run: bool = typer.Option(
        False, "--check-run/--no-check-run", help="Publish a check run with annotations"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging"
    ),
) -> None:
    """Lint a pull request looked up through the API, as the bot does."""
    settings = get_settings()
    settings.github_repository = repository
    settings.post_comment = comment
    settings.create_check_run = check_run
    _apply_verbosity(settings, verbose)

    console.print(f"[bold blue]applint[/bold blue] - {repository}#{number}")

    result = asyncio.run(_run_pipeline(settings, pull_number=number))
    if result.failed:
        raise typer.Exit(1)


@app.command()
def render(
    export_file: Path = typer.Argument(..., help="File holding a 'results' export"),
    format: RenderFormat = typer.Option(
        RenderFormat.table, "--format", "-f", help="What to render"
    ),
) -> None:
    """Re-render a saved results export."""
    try:
        findings = load_findings(export_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read export: {e}[/red]")
        raise typer.Exit(1)

    report = aggregate([findings])
    outcome = decide(report)

    if format is RenderFormat.summary:
        typer.echo(render_summary(report, outcome.title))
    elif format is RenderFormat.comment:
        typer.echo(render_comment(report, outcome.title))
    elif format is RenderFormat.annotations:
        for annotation in build_annotations(report):
            typer.echo(annotation.to_workflow_command())
    else:
        Console().print(findings_table(report, title=outcome.title))


@app.command()
def health() -> None:
    """Check that the checker library can be loaded."""
    settings = get_settings()

    table = Table(title="applint configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Repository", settings.github_repository or "-")
    table.add_row("API", settings.github_api_url)
    table.add_row("Token", "set" if settings.github_token else "missing")
    table.add_row("Node", settings.node_path)
    table.add_row("Checker module", settings.checker_module)
    console.print(table)

    if asyncio.run(UmbrelCliChecker().health_check()):
        console.print("✅ Checker: [green]OK[/green]")
    else:
        console.print("❌ Checker: [red]FAILED[/red]")
        raise typer.Exit(1)


def _apply_verbosity(settings: Settings, verbose: bool) -> None:
    if verbose:
        settings.log_level = "DEBUG"
        setup_logging()


def _build_sinks(settings: Settings, github: GitHubClient, *, actions: bool) -> List[ReportSink]:
    sinks: List[ReportSink] = []
    if actions:
        sinks.append(ActionsSink(settings.github_output, settings.github_step_summary))
    if settings.post_comment:
        sinks.append(CommentSink(github))
    if settings.create_check_run:
        sinks.append(CheckRunSink(github, settings.check_name))
    if not actions or settings.github_step_summary is None:
        sinks.append(ConsoleSink(console))
    return sinks


async def _run_pipeline(settings: Settings, pull_number: Optional[int] = None) -> PipelineResult:
    """Build the trigger and sinks, then run the pipeline once."""
    try:
        owner, repo = settings.repo_slug()

        async with GitHubClient(owner, repo, settings.github_token) as github:
            if pull_number is None:
                trigger = TriggerContext.from_event_file(settings.github_event_path, owner, repo)
            else:
                trigger = await TriggerContext.from_pull_request(github, pull_number, owner, repo)

            sinks = _build_sinks(settings, github, actions=pull_number is None)
            pipeline = LintPipeline(github, UmbrelCliChecker(), sinks, settings)

            run = Run(id=f"run_{uuid.uuid4().hex[:8]}")
            console.print(f"[green]Starting lint run: {run.id}[/green]")

            return await pipeline.execute(
                run, trigger, base=settings.base, head=settings.head_sha
            )

    except Exception as e:
        console.print(f"[red]Linting failed: {e}[/red]")
        logger.error("Lint run failed", error=str(e))
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
