"""Spec document editing and Markdown export."""

from .editor import DocumentEditor, resolve_field
from .generator import MarkdownReportGenerator, export_filename, render_markdown

__all__ = [
    "DocumentEditor",
    "MarkdownReportGenerator",
    "export_filename",
    "render_markdown",
    "resolve_field",
]
