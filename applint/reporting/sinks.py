"""Report sinks: where a finished report is published.

The pipeline calls ``start`` once the revision range is known, ``publish`` with
the final report, or ``abort`` when the run fails.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.github import Platform
from ..logging import get_logger
from ..models.changes import RevisionRange
from ..models.findings import Severity
from ..models.reports import LintReport, RunOutcome
from ..models.runs import Run
from ..triggers import TriggerContext
from .annotations import build_annotations, escape_command_data
from .comment import render_comment
from .export import dump_findings
from .markdown import LEGEND, severity_label
from .summary import render_summary

logger = get_logger(__name__)

# The checks API accepts at most this many annotations per request.
CHECK_RUN_ANNOTATION_BATCH = 50


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


class ReportSink:
    """Base sink; every hook is a no-op by default."""

    async def start(self, run: Run, revisions: RevisionRange, trigger: TriggerContext) -> None:
        return None

    async def publish(
        self, report: LintReport, outcome: RunOutcome, run: Run, trigger: TriggerContext
    ) -> None:
        return None

    async def abort(self, run: Run, error: BaseException) -> None:
        return None


class ActionsSink(ReportSink):
    """Step outputs, workflow-command annotations and the job summary."""

    def __init__(
        self,
        output_path: Optional[Path] = None,
        summary_path: Optional[Path] = None,
        stream: Optional[TextIO] = None,
    ):
        self.output_path = output_path
        self.summary_path = summary_path
        self.stream = stream or sys.stdout

    def _write_outputs(self, outputs: Dict[str, Any]) -> None:
        if self.output_path is None:
            logger.debug("No output file configured; skipping step outputs")
            return
        with open(self.output_path, "a", encoding="utf-8") as f:
            for name, value in outputs.items():
                f.write(f"{name}={value}\n")

    def _write_summary(self, text: str) -> None:
        if self.summary_path is None:
            logger.debug("No summary file configured; skipping job summary")
            return
        with open(self.summary_path, "a", encoding="utf-8") as f:
            f.write(text)

    def _command(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    async def publish(
        self, report: LintReport, outcome: RunOutcome, run: Run, trigger: TriggerContext
    ) -> None:
        # The export is a single JSON line, so plain name=value outputs are safe.
        self._write_outputs({
            "results": dump_findings(report),
            "errors": outcome.error_count,
            "warnings": outcome.warning_count,
            "infos": outcome.info_count,
        })

        for annotation in build_annotations(report):
            self._command(annotation.to_workflow_command())

        self._write_summary(render_summary(report, outcome.title))

        if outcome.failed:
            self._command(f"::error::{escape_command_data(outcome.title)}")

    async def abort(self, run: Run, error: BaseException) -> None:
        self._command(f"::error::{escape_command_data(f'Action failed with error {error}')}")


class CommentSink(ReportSink):
    """Posts the conversational comment on the run's pull request."""

    def __init__(self, platform: Platform):
        self.platform = platform

    async def publish(
        self, report: LintReport, outcome: RunOutcome, run: Run, trigger: TriggerContext
    ) -> None:
        if trigger.change_request is None:
            logger.info("No pull request for this run; not commenting", run_id=run.id)
            return
        await self.platform.create_comment(
            trigger.change_request.number, render_comment(report, outcome.title)
        )
        logger.info(
            "Posted lint comment",
            run_id=run.id,
            pull_request=trigger.change_request.number,
        )


class CheckRunSink(ReportSink):
    """Mirrors the run as a check run with annotations."""

    def __init__(self, platform: Platform, name: str = "app-linter"):
        self.platform = platform
        self.name = name
        self.check_run_id: Optional[int] = None

    async def start(self, run: Run, revisions: RevisionRange, trigger: TriggerContext) -> None:
        self.check_run_id = await self.platform.create_check_run(
            self.name,
            revisions.head,
            status="in_progress",
            started_at=_now_iso(),
            output={"title": "App Linter", "summary": "Linting files..."},
        )
        logger.info("Created check run", run_id=run.id, check_run_id=self.check_run_id)

    async def publish(
        self, report: LintReport, outcome: RunOutcome, run: Run, trigger: TriggerContext
    ) -> None:
        if self.check_run_id is None:
            return

        annotations = [a.to_check_run() for a in build_annotations(report)]
        batches: List[List[Dict[str, Any]]] = [
            annotations[i:i + CHECK_RUN_ANNOTATION_BATCH]
            for i in range(0, len(annotations), CHECK_RUN_ANNOTATION_BATCH)
        ] or [[]]
        output = {
            "title": outcome.title,
            "summary": f"### Legend\n\n{LEGEND}",
            "text": render_summary(report, outcome.title),
        }

        for batch in batches[:-1]:
            await self.platform.update_check_run(
                self.check_run_id, output={**output, "annotations": batch}
            )
        await self.platform.update_check_run(
            self.check_run_id,
            status="completed",
            conclusion=outcome.conclusion,
            completed_at=_now_iso(),
            output={**output, "annotations": batches[-1]},
        )

    async def abort(self, run: Run, error: BaseException) -> None:
        if self.check_run_id is None:
            return
        await self.platform.update_check_run(
            self.check_run_id,
            status="completed",
            conclusion="failure",
            completed_at=_now_iso(),
            output={"title": "Linting aborted", "summary": str(error)},
        )


_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def findings_table(report: LintReport, title: Optional[str] = None) -> Table:
    """Rich table of a report's findings."""
    table = Table(title=title)
    table.add_column("Severity")
    table.add_column("ID", style="cyan")
    table.add_column("File", style="magenta")
    table.add_column("Line", justify="right")
    table.add_column("Message", style="white")

    for finding in report:
        style = _SEVERITY_STYLES[finding.severity]
        line = str(finding.location.line.start) if finding.location else ""
        table.add_row(
            f"[{style}]{severity_label(finding.severity)}[/{style}]",
            escape(finding.id),
            escape(finding.source_path),
            line,
            f"[bold]{escape(finding.title)}[/bold]: {escape(finding.message)}",
        )
    return table


class ConsoleSink(ReportSink):
    """Prints the report for local runs."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    async def publish(
        self, report: LintReport, outcome: RunOutcome, run: Run, trigger: TriggerContext
    ) -> None:
        self.console.print()
        self.console.print(f"[bold]{outcome.title}[/bold]")
        if not report.is_empty:
            self.console.print(findings_table(report, title="Findings"))
        self.console.print(
            f"Errors: {outcome.error_count}  Warnings: {outcome.warning_count}  "
            f"Infos: {outcome.info_count}"
        )
