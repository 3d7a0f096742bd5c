"""Main pipeline orchestrator for applint."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..adapters.checker import Checker
from ..adapters.github import Platform
from ..config import Settings, get_settings
from ..logging import get_logger, log_pipeline_event
from ..models.changes import ChangedFile, RevisionRange
from ..models.reports import LintReport, RunOutcome
from ..models.runs import Run
from ..reporting.sinks import ReportSink
from ..triggers import TriggerContext
from .aggregator import aggregate
from .decider import decide
from .discovery import ChangeDiscovery, resolve_range
from .dispatcher import Dispatcher

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything a finished run produced."""

    run: Run
    revisions: RevisionRange
    changed_files: List[ChangedFile]
    report: LintReport
    outcome: RunOutcome

    @property
    def failed(self) -> bool:
        return self.outcome.failed


class LintPipeline:
    """Discovery -> dispatch -> aggregation -> reporting/decision.

    The trigger (action event, webhook, API lookup) and the report sinks are
    injected, so every entrypoint runs this same pipeline.
    """

    def __init__(
        self,
        platform: Platform,
        checker: Checker,
        sinks: Sequence[ReportSink] = (),
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.platform = platform
        self.checker = checker
        self.sinks = list(sinks)
        self.discovery = ChangeDiscovery(platform)
        self.dispatcher = Dispatcher(
            platform,
            checker,
            max_concurrency=self.settings.max_concurrent_fetches,
            check_image_architectures=self.settings.check_image_architectures,
        )

    async def execute(
        self,
        run: Run,
        trigger: TriggerContext,
        *,
        base: Optional[str] = None,
        head: Optional[str] = None,
    ) -> PipelineResult:
        """Execute the complete lint pipeline for one revision range."""
        try:
            # Configuration problems surface before any I/O
            revisions = resolve_range(base, head, trigger.change_request)
            run.repository = trigger.repository
            run.base, run.head = revisions.base, revisions.head

            log_pipeline_event(
                logger,
                run_id=run.id,
                phase="started",
                base=run.base,
                head=run.head,
                repository=run.repository,
            )

            for sink in self.sinks:
                await sink.start(run, revisions, trigger)

            # Phase 1: Discovery
            log_pipeline_event(logger, run_id=run.id, phase="discovery")
            changed_files, tree = await self.discovery.discover(revisions)

            # Phase 2: Dispatch
            log_pipeline_event(logger, run_id=run.id, phase="dispatch", changed=len(changed_files))
            streams = await self.dispatcher.dispatch(
                revisions, changed_files, tree, trigger.change_request
            )

            # Phase 3: Aggregation and decision
            report = aggregate(streams)
            outcome = decide(report)
            log_pipeline_event(
                logger,
                run_id=run.id,
                phase="aggregation",
                **report.counts(),
            )

            # Phase 4: Reporting
            log_pipeline_event(logger, run_id=run.id, phase="reporting", sinks=len(self.sinks))
            for sink in self.sinks:
                await sink.publish(report, outcome, run, trigger)

            run.complete('failed' if outcome.failed else 'passed', outcome.title)

            log_pipeline_event(
                logger,
                run_id=run.id,
                phase="completed",
                failed=outcome.failed,
                duration_ms=int(run.duration_seconds * 1000),
            )

            return PipelineResult(
                run=run,
                revisions=revisions,
                changed_files=changed_files,
                report=report,
                outcome=outcome,
            )

        except Exception as e:
            run.fail(str(e))

            log_pipeline_event(
                logger,
                run_id=run.id,
                phase="failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            await self._abort_sinks(run, e)
            raise

    async def _abort_sinks(self, run: Run, error: Exception) -> None:
        for sink in self.sinks:
            try:
                await sink.abort(run, error)
            except Exception as e:
                # Keep the original failure as the one that propagates
                logger.warning(
                    "Sink failed while aborting",
                    sink=type(sink).__name__,
                    error=str(e),
                )
