"""Structured JSON export of findings."""

import json
from typing import Any, Dict, Iterable, List

from ..models.findings import Finding


def finding_to_record(finding: Finding) -> Dict[str, Any]:
    """JSON-ready dict with every field of the finding."""
    return finding.to_dict(encode_json=True)


def dump_findings(findings: Iterable[Finding], *, indent=None) -> str:
    """Serialize findings, in order, to a JSON array."""
    return json.dumps(
        [finding_to_record(f) for f in findings],
        indent=indent,
        ensure_ascii=False,
    )


def load_findings(text: str) -> List[Finding]:
    """Inverse of :func:`dump_findings`."""
    records = json.loads(text)
    if not isinstance(records, list):
        raise ValueError("Export must be a JSON array of findings")
    return [Finding.from_dict(record) for record in records]
