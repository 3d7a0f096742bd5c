"""Pass/fail decision for a run."""

from ..models.reports import LintReport, RunOutcome
from ..reporting.markdown import outcome_title


def decide(report: LintReport) -> RunOutcome:
    """The run fails exactly when there is at least one error."""
    return RunOutcome(
        title=outcome_title(report.error_count, report.warning_count),
        error_count=report.error_count,
        warning_count=report.warning_count,
        info_count=report.info_count,
        failed=report.error_count > 0,
    )
