"""Adapters for external systems integration."""

from .checker import Checker, CheckContext, FileKind, UmbrelCliChecker
from .github import GitHubClient, Platform

__all__ = [
    "Checker",
    "CheckContext",
    "FileKind",
    "GitHubClient",
    "Platform",
    "UmbrelCliChecker",
]
