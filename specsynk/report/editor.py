"""Local, editable copy of a generated spec document."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Union

from ..schemas import SpecDocument
from .generator import MarkdownReportGenerator, export_filename, render_markdown

LIST_FIELDS = frozenset({"target_users", "key_features", "user_stories", "constraints_and_notes"})


def _field_names() -> Dict[str, str]:
    names: Dict[str, str] = {}
    for name, info in SpecDocument.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


_FIELD_NAMES = _field_names()


def resolve_field(field: str) -> str:
    """Map a camelCase or snake_case field name onto the model attribute."""
    try:
        return _FIELD_NAMES[field]
    except KeyError:
        raise KeyError(f"Unknown document field '{field}'") from None


class DocumentEditor:
    """Edits touch only this copy; the session's generated document is left as is."""

    def __init__(self, document: SpecDocument) -> None:
        self._document = document.model_copy(deep=True)

    @property
    def document(self) -> SpecDocument:
        return self._document.model_copy(deep=True)

    def update(self, field: str, value: Union[str, List[str]]) -> SpecDocument:
        name = resolve_field(field)
        if name in LIST_FIELDS:
            if isinstance(value, str) or not all(isinstance(item, str) for item in value):
                raise ValueError(f"Field '{field}' expects a list of strings")
            value = list(value)
        elif not isinstance(value, str):
            raise ValueError(f"Field '{field}' expects a string")
        self._document = self._document.model_copy(update={name: value})
        return self.document

    def to_markdown(self) -> str:
        return render_markdown(self._document)

    @property
    def filename(self) -> str:
        return export_filename(self._document.title)

    def export(self, output_dir: Path) -> Path:
        return MarkdownReportGenerator(output_dir).generate(self._document)
