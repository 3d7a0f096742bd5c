"""
applint: change-set linter for app store pull requests

applint runs in CI or behind a bot and:
- Discovers which app files changed between two revisions
- Routes each to the umbrel-cli checker, plus per-app structure checks
- Aggregates the findings into one ordered report
- Publishes step outputs, annotations, a job summary and a PR comment
- Fails the run when any error was found

Usage:
    from applint import LintPipeline

    # Or use CLI:
    $ applint run --base <sha> --head-sha <sha>
"""

__version__ = "0.4.0"

# Core functionality
from .config import get_settings
from .logging import get_logger

# Main pipeline class for programmatic use
from .orchestrator.pipeline import LintPipeline

__all__ = ["LintPipeline", "get_settings", "get_logger", "__version__"]
