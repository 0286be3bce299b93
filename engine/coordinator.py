"""
coordinator.py — Completion Coordinator
=========================================
Watches both panels.  The tick on which both are complete arms a timer;
AUTO_RESET_DELAY seconds later it calls `on_expire` once (the session
resets both panels and the global run flags).

The timer is dropped, without firing, when either panel stops being
complete or the session's run id moves on (a new start, a reset or a new
array), so a stale timer can never reset a newer run.
"""

import logging
from typing import Callable, Optional

from engine.controller import RunController
from settings import EngineConfig

logger = logging.getLogger(__name__)


class CompletionCoordinator:

    def __init__(self, on_expire: Callable[[], None], delay: float = EngineConfig.AUTO_RESET_DELAY):
        self.on_expire = on_expire
        self.delay     = delay
        self._deadline: Optional[float] = None
        self._run_id:   Optional[int]   = None
        self._fired_for: Optional[int]  = None

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def cancel(self) -> None:
        self._deadline = None
        self._run_id   = None

    def tick(self, now: float, left: RunController, right: RunController, run_id: int) -> bool:
        """Returns True on the tick the reset callback fires."""
        both_complete = left.is_complete and right.is_complete

        if self.armed:
            if not both_complete or run_id != self._run_id:
                logger.debug("auto-reset for run %s superseded", self._run_id)
                self.cancel()
            elif now >= self._deadline:
                self.cancel()
                self._fired_for = run_id
                logger.debug("auto-reset for run %s", run_id)
                self.on_expire()
                return True
            else:
                return False

        if both_complete and run_id != self._fired_for:
            self._deadline = now + self.delay
            self._run_id   = run_id
            logger.debug("both panels complete, auto-reset at %.3f", self._deadline)
        return False
