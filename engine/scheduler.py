"""
scheduler.py — Step Scheduler
===============================
Cooperative pacing for one panel.  The host calls tick(now, …) once per
display frame; the scheduler applies at most one step per call, and only
once `step_delay(speed)` has passed since the last step it applied.

    delay(speed) = 510 − 50·speed  ms     (speed clamped to 1..10)

          speed  1 → 460 ms
          speed  5 → 260 ms
          speed 10 →  10 ms

Each schedule() issues a new ScheduleHandle.  Pausing, resetting or
replacing the array cancels it, so a tick that arrives afterwards can
never advance a superseded run.  The first tick on a fresh handle always
advances.  The handle drops itself as soon as its controller stops
RUNNING (paused, idle, complete or faulted).
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Optional

from engine.controller import RunController, RunSettings
from errors import SortEngineError
from settings import EngineConfig

logger = logging.getLogger(__name__)

# float noise when the host clock lands exactly on a deadline
_EPSILON_MS = 1e-6


def step_delay(speed) -> int:
    """Milliseconds between two steps at `speed`."""
    speed = max(EngineConfig.MIN_SPEED, min(EngineConfig.MAX_SPEED, int(speed)))
    return 510 - 50 * speed


@dataclass
class ScheduleHandle:
    generation:   int
    last_step_at: Optional[float] = None      # host time of the last applied step
    cancelled:    bool            = False


class StepScheduler:
    """
    Attributes:
        handle : The live ScheduleHandle, or None when nothing is scheduled.
    """

    _generations = itertools.count(1)

    def __init__(self):
        self.handle: Optional[ScheduleHandle] = None

    @property
    def is_scheduled(self) -> bool:
        return self.handle is not None

    def schedule(self) -> ScheduleHandle:
        """Start a fresh pacing loop, voiding any previous one."""
        self.cancel()
        self.handle = ScheduleHandle(generation=next(self._generations))
        return self.handle

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancelled = True
            self.handle = None

    def tick(self, now: float, controller: RunController, settings: RunSettings) -> bool:
        """
        One host frame.  Returns True iff a step was applied.  Controller
        faults propagate after the loop has stopped itself.
        """
        handle = self.handle
        if handle is None:
            return False
        if not controller.is_running:
            self.cancel()
            return False

        if handle.last_step_at is not None:
            elapsed_ms = (now - handle.last_step_at) * 1000.0
            if elapsed_ms + _EPSILON_MS < step_delay(settings.speed):
                return False

        handle.last_step_at = now
        try:
            applied = controller.advance(settings)
        except SortEngineError:
            self.cancel()
            raise

        if not controller.is_running:
            logger.debug("%r stopped scheduling (state=%s)", controller, controller.state.value)
            self.cancel()
        return applied
