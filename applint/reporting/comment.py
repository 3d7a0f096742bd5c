"""Conversational pull request comment."""

from typing import List

from ..models.findings import Finding
from ..models.reports import LintReport
from .markdown import (
    LEGEND,
    REVIEW_REQUEST,
    TABLE_HEADERS,
    THANK_YOU,
    escape_markdown,
    inline_code,
    severity_label,
)


def _row(finding: Finding) -> str:
    cells = [
        severity_label(finding.severity),
        inline_code(finding.id),
        inline_code(finding.source_path),
        f"**{escape_markdown(finding.title)}**: {escape_markdown(finding.message)}",
    ]
    return "| " + " | ".join(cells) + " |"


def render_comment(report: LintReport, title: str) -> str:
    """Comment body: title, preamble and, for a non-empty report, the findings table."""
    parts: List[str] = [f"## {title}", THANK_YOU]
    if report.is_empty:
        return "\n".join(parts) + "\n"

    lines = [
        "| " + " | ".join(TABLE_HEADERS) + " |",
        "| " + " | ".join("---" for _ in TABLE_HEADERS) + " |",
    ]
    lines.extend(_row(f) for f in report)

    parts.append(REVIEW_REQUEST)
    parts.append("")
    parts.append("\n".join(lines))
    parts.append("")
    parts.append(f"### Legend\n\n{LEGEND}")
    return "\n".join(parts) + "\n"
