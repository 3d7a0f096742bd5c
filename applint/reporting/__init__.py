"""Renderers and sinks for lint reports."""

from .annotations import Annotation, AnnotationLevel, build_annotations
from .comment import render_comment
from .export import dump_findings, load_findings
from .markdown import escape_markdown, outcome_title
from .sinks import ActionsSink, CheckRunSink, CommentSink, ConsoleSink, ReportSink
from .summary import render_summary

__all__ = [
    "ActionsSink",
    "Annotation",
    "AnnotationLevel",
    "CheckRunSink",
    "CommentSink",
    "ConsoleSink",
    "ReportSink",
    "build_annotations",
    "dump_findings",
    "escape_markdown",
    "load_findings",
    "outcome_title",
    "render_comment",
    "render_summary",
]
