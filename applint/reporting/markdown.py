"""Shared text pieces for the human-readable reports."""

from typing import Dict, Tuple

from ..models.findings import Severity

THANK_YOU = (
    "Thank you for your submission! This is an automated linter that checks for "
    "common issues in pull requests to the Umbrel App Store."
)
REVIEW_REQUEST = (
    "Please review any comments below and make any necessary changes to your submission."
)

LEGEND = (
    "❌ **Error**  \n"
    "This must be resolved before this PR can be merged.\n\n\n"
    "⚠️ **Warning**  \n"
    "This is highly encouraged to be resolved, but is not strictly mandatory.\n\n\n"
    "ℹ️ **Info**  \n"
    "This is just for your information."
)

TABLE_HEADERS = ("🚨 Severity", "🪪 ID", "📄 File", "💬 Message")

_SEVERITY_LABELS: Dict[Severity, Tuple[str, str]] = {
    Severity.ERROR: ("❌", "Error"),
    Severity.WARNING: ("⚠️", "Warning"),
    Severity.INFO: ("ℹ️", "Info"),
}

# Order matters: the backslash must be escaped before anything adds one.
_MARKDOWN_SPECIALS = "\\`*_{}[]<>()#+-.!|"


def line_breaks(text: str) -> str:
    """Turn every newline form (``\\r\\n``, ``\\r``, ``\\n``) into ``<br>``."""
    return text.replace("\r\n", "\n").replace("\r", "\n").replace("\n", "<br>")


def severity_label(severity: Severity) -> str:
    """Glyph and name, e.g. ``❌ Error``."""
    glyph, name = _SEVERITY_LABELS[severity]
    return f"{glyph} {name}"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def outcome_title(error_count: int, warning_count: int) -> str:
    """One-line outcome title; info findings never change it."""
    if error_count == 0 and warning_count == 0:
        return "🎉 Linting finished with no errors or warnings 🎉"
    if error_count > 0 and warning_count > 0:
        return (
            f"❌ Linting failed with {_plural(error_count, 'error')} "
            f"and {_plural(warning_count, 'warning')} ❌"
        )
    if error_count > 0:
        return f"❌ Linting failed with {_plural(error_count, 'error')} ❌"
    return f"⚠️ Linting finished with {_plural(warning_count, 'warning')} ⚠️"


def escape_markdown(text: str) -> str:
    """Escape markdown syntax so text is safe inside a single table cell."""
    escaped = "".join(f"\\{char}" if char in _MARKDOWN_SPECIALS else char for char in text)
    return line_breaks(escaped)


def inline_code(text: str) -> str:
    """Render ``text`` as a code span when that cannot break a table row."""
    if any(char in text for char in "`|\r\n"):
        return escape_markdown(text)
    return f"`{text}`"
