"""Interview phases and the turn-count heuristic that advances them."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Phase(str, Enum):
    idea = "idea"
    users = "users"
    features = "features"
    flows = "flows"
    complete = "complete"


class ExperienceLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    expert = "expert"


@dataclass(frozen=True)
class PhaseInfo:
    id: Phase
    label: str
    duration_hint: str


PHASES: Tuple[PhaseInfo, ...] = (
    PhaseInfo(Phase.idea, "Idea & Goals", "~45s"),
    PhaseInfo(Phase.users, "Users & Value", "~45s"),
    PhaseInfo(Phase.features, "Core Features", "~45s"),
    PhaseInfo(Phase.flows, "Happy Path", "~45s"),
)

# phase -> (turn count that must be exceeded, phase to move to)
_ADVANCE_RULES: Dict[Phase, Tuple[int, Phase]] = {
    Phase.idea: (2, Phase.users),
    Phase.users: (5, Phase.features),
    Phase.features: (8, Phase.flows),
}


def phase_label(phase: Phase) -> str:
    for info in PHASES:
        if info.id == phase:
            return info.label
    return "Unknown"


def phase_index(phase: Phase) -> int:
    """Position of *phase* in the interview order; ``complete`` sorts last."""
    for idx, info in enumerate(PHASES):
        if info.id == phase:
            return idx
    return len(PHASES)


def turn_count(message_count: int) -> int:
    return message_count // 2


def next_phase(phase: Phase, turns: int) -> Phase:
    """Advance at most one step once *turns* passes the current threshold."""
    rule = _ADVANCE_RULES.get(phase)
    if rule is None:
        return phase
    threshold, target = rule
    if turns > threshold:
        return target
    return phase
