"""Response schema requested from the model when drafting the spec document."""
from __future__ import annotations

from typing import Any, Dict

SPEC_FIELDS = (
    "title",
    "summary",
    "problemStatement",
    "targetUsers",
    "valueProposition",
    "keyFeatures",
    "userStories",
    "constraintsAndNotes",
)


def _string(description: str) -> Dict[str, Any]:
    return {"type": "STRING", "description": description}


def _string_list(description: str) -> Dict[str, Any]:
    return {"type": "ARRAY", "items": {"type": "STRING"}, "description": description}


SPEC_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": _string("A catchy product name"),
        "summary": _string("2-3 sentence executive summary"),
        "problemStatement": _string("Clear definition of the problem being solved"),
        "targetUsers": _string_list("List of user personas"),
        "valueProposition": _string("The main value add for the user"),
        "keyFeatures": _string_list("List of 3-7 core features"),
        "userStories": _string_list(
            "User stories in 'As a... I want to... So that...' format"
        ),
        "constraintsAndNotes": _string_list(
            "Technical constraints, edge cases, or open questions"
        ),
    },
    "required": list(SPEC_FIELDS[:7]),
}
