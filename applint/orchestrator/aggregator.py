"""Merge finding streams into one report."""

from typing import Iterable, List, Sequence

from ..models.findings import Finding, Severity
from ..models.reports import LintReport


def aggregate(streams: Iterable[Sequence[Finding]]) -> LintReport:
    """Concatenate streams in dispatch order and count severities.

    Findings are neither deduplicated nor reordered.
    """
    findings: List[Finding] = []
    counts = {severity: 0 for severity in Severity}

    for stream in streams:
        for finding in stream:
            if not finding.is_attributed:
                raise ValueError(f"Finding {finding.id} is not attributed to a path")
            counts[finding.severity] += 1
            findings.append(finding)

    return LintReport(
        findings=tuple(findings),
        error_count=counts[Severity.ERROR],
        warning_count=counts[Severity.WARNING],
        info_count=counts[Severity.INFO],
    )
