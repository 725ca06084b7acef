"""Countdown nudging the user to wrap up the interview."""
from __future__ import annotations

import time
from typing import Callable, Optional

from ..phases import Phase

INTERVIEW_SECONDS = 180


class InterviewTimer:
    """Fixed countdown measured against a monotonic clock.

    It never pauses and never ends the session; reaching zero only reveals the
    finish affordance.
    """

    def __init__(
        self,
        total_seconds: int = INTERVIEW_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.total_seconds = total_seconds
        self._clock = clock
        self._started_at: Optional[float] = None

    def start(self) -> None:
        self._started_at = self._clock()

    @property
    def seconds_left(self) -> int:
        if self._started_at is None:
            return self.total_seconds
        elapsed = int(self._clock() - self._started_at)
        return max(0, self.total_seconds - elapsed)


def format_countdown(seconds: int) -> str:
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes}:{secs:02d}"


def show_finish(phase: Phase, seconds_left: int) -> bool:
    """Either the last phase or an expired timer reveals the finish action."""
    return phase == Phase.flows or seconds_left <= 0
