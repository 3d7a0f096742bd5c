"""Exception hierarchy for applint."""

from typing import Optional


class ApplintError(Exception):
    """Base class for all applint failures."""


class ConfigurationError(ApplintError):
    """Missing or malformed configuration, raised before any I/O."""


class RangeResolutionError(ConfigurationError):
    """No usable base/head revision pair could be determined."""


class UpstreamAPIError(ApplintError):
    """The platform API answered with a non-success status."""

    def __init__(self, operation: str, status: int, message: Optional[str] = None):
        self.operation = operation
        self.status = status
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"Failed to {operation}: HTTP {status}{detail}")


class CheckerError(ApplintError):
    """The external checker failed or broke its output contract."""

    def __init__(self, kind: str, detail: str):
        self.kind = kind
        self.detail = detail
        super().__init__(f"Checker failed for {kind}: {detail}")
