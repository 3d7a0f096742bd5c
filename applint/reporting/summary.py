"""Run summary document (the job summary)."""

import html
from typing import List

from ..models.reports import LintReport
from .markdown import LEGEND, TABLE_HEADERS, THANK_YOU, line_breaks, severity_label


def _cell(text: str) -> str:
    return line_breaks(html.escape(text))


def _findings_table(report: LintReport) -> str:
    rows: List[str] = [
        "<tr>" + "".join(f"<th>{header}</th>" for header in TABLE_HEADERS) + "</tr>"
    ]
    for finding in report:
        rows.append(
            "<tr>"
            f"<td>{severity_label(finding.severity)}</td>"
            f"<td><pre><code>{_cell(finding.id)}</code></pre></td>"
            f"<td><code>{_cell(finding.source_path)}</code></td>"
            f"<td><b>{_cell(finding.title)}</b>: {_cell(finding.message)}</td>"
            "</tr>"
        )
    return "<table>" + "".join(rows) + "</table>"


def render_summary(report: LintReport, title: str) -> str:
    """Markdown/HTML job summary for a report.

    An empty report renders only the title and a thank-you note.
    """
    if report.is_empty:
        return f"# {title}\n\n{THANK_YOU}\n"

    return (
        f"# {title}\n\n"
        f"## Legend\n\n{LEGEND}\n\n"
        f"{_findings_table(report)}\n"
    )
