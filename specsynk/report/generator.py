"""Render spec documents into the exported Markdown template."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from ..schemas import SpecDocument

_WHITESPACE = re.compile(r"\s+")


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def render_markdown(document: SpecDocument) -> str:
    """Fixed section order; empty list fields leave an empty block."""
    sections = [
        f"# {document.title}",
        "",
        "## Summary",
        document.summary,
        "",
        "## Problem Statement",
        document.problem_statement,
        "",
        "## Target Users",
        _bullets(document.target_users),
        "",
        "## Value Proposition",
        document.value_proposition,
        "",
        "## Key Features",
        _bullets(document.key_features),
        "",
        "## User Stories",
        _bullets(document.user_stories),
        "",
        "## Constraints & Notes",
        _bullets(document.constraints_and_notes),
    ]
    return "\n".join(sections).strip()


def export_filename(title: str) -> str:
    return f"{_WHITESPACE.sub('_', title).lower()}_spec.md"


class MarkdownReportGenerator:
    """Write spec documents to disk as UTF-8 Markdown files."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def generate(self, document: SpecDocument) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / export_filename(document.title)
        output_path.write_text(render_markdown(document), encoding="utf-8")
        return output_path
