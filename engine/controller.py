"""
controller.py — Run Controller
================================
One RunController per comparison panel.  It owns the live step producer,
the panel's AlgorithmRunState and the elapsed-time clock.  Schedulers,
the session and the web layer only talk to a producer through it.

State machine:
    IDLE     →  start()   →  RUNNING
    RUNNING  →  pause()   →  PAUSED
    PAUSED   →  start()   →  RUNNING   (resumes the same producer)
    RUNNING  →  (final step applied / sequence exhausted)  →  COMPLETE
    any      →  reset()   →  IDLE
    RUNNING  →  (producer fault)  →  IDLE  with `error` set

Advancing applies exactly one Step.  The controller never batches: a
scheduler calls advance() once per satisfied tick.

Arrays longer than LARGE_ARRAY_THRESHOLD defer producer creation from
start() to the first advance(); until then the panel reports
`is_loading`.

Not thread-safe.  Both panels are driven from the one request thread
that handles a tick.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Sequence, Tuple

from algorithms import AlgoInfo, AlgoKey, StepProducer, get_algorithm
from algorithms.step import Step
from arrays import is_sorted
from audio import AudioSink
from engine.recorder import RunMetrics
from errors import ProducerInitError, StepAdvanceError
from settings import EngineConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class ControllerState(Enum):
    IDLE     = "idle"
    RUNNING  = "running"
    PAUSED   = "paused"
    COMPLETE = "complete"


@dataclass(frozen=True)
class RunSettings:
    """Global flags as they stood when one tick began."""
    speed:         int  = EngineConfig.DEFAULT_SPEED
    sound_enabled: bool = EngineConfig.DEFAULT_SOUND_ENABLED


# ---------------------------------------------------------------------------
# Per-panel state — what the renderer reads
# ---------------------------------------------------------------------------
@dataclass
class AlgorithmRunState:
    algorithm_key:     str
    algorithm_name:    str
    array:             Tuple[float, ...]
    comparing_indices: Tuple[int, ...] = ()
    swapped_indices:   Tuple[int, ...] = ()
    sorted_indices:    Tuple[int, ...] = ()
    comparisons:       int             = 0
    swaps:             int             = 0
    time_elapsed:      float           = 0.0        # seconds since start()
    is_complete:       bool            = False
    is_loading:        bool            = False
    error:             Optional[str]   = None

    @classmethod
    def initial(cls, info: AlgoInfo, array: Sequence[float], error: Optional[str] = None) -> "AlgorithmRunState":
        return cls(
            algorithm_key=info.key.value,
            algorithm_name=info.label,
            array=tuple(array),
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm_key":     self.algorithm_key,
            "algorithm_name":    self.algorithm_name,
            "array":             list(self.array),
            "comparing_indices": list(self.comparing_indices),
            "swapped_indices":   list(self.swapped_indices),
            "sorted_indices":    list(self.sorted_indices),
            "comparisons":       self.comparisons,
            "swaps":             self.swaps,
            "time_elapsed":      round(self.time_elapsed, 3),
            "is_complete":       self.is_complete,
            "is_loading":        self.is_loading,
            "error":             self.error,
        }


# ---------------------------------------------------------------------------
# RunController
# ---------------------------------------------------------------------------
class RunController:
    """
    Attributes:
        info          : AlgoInfo of the algorithm this panel runs.
        source        : The array snapshot every run starts from (read-only).
        state         : Current ControllerState.
        run_state     : AlgorithmRunState for the renderer.
        steps_applied : Steps applied since the last start from IDLE.
        audio         : Optional AudioSink receiving comparison/swap/completion cues.
        on_step       : Optional callback(AlgorithmRunState) after every applied step.
        on_complete   : Optional callback(RunController) once, on completion.
    """

    def __init__(
        self,
        algorithm,
        array: Sequence[float],
        audio: Optional[AudioSink] = None,
        on_step: Optional[Callable[[AlgorithmRunState], None]] = None,
        on_complete: Optional[Callable[["RunController"], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        large_array_threshold: int = EngineConfig.LARGE_ARRAY_THRESHOLD,
    ):
        self.info:        AlgoInfo          = get_algorithm(algorithm)
        self.source:      Tuple[float, ...] = tuple(array)
        self.audio:       Optional[AudioSink] = audio
        self.on_step      = on_step
        self.on_complete  = on_complete
        self.large_array_threshold = large_array_threshold
        self._clock       = clock

        self.state:         ControllerState   = ControllerState.IDLE
        self.run_state:     AlgorithmRunState = AlgorithmRunState.initial(self.info, self.source)
        self.steps_applied: int               = 0

        self._producer:     Optional[StepProducer] = None
        self._pending_init: bool                   = False
        self._started_at:   Optional[float]        = None
        self._last_cues:    FrozenSet[Tuple[str, Tuple[int, ...]]] = frozenset()

    def __repr__(self) -> str:
        return f"RunController({self.info.key.value!r}, n={len(self.source)}, state={self.state.value})"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, now: Optional[float] = None) -> None:
        """
        IDLE → RUNNING with a fresh producer; PAUSED → RUNNING as-is.
        No-op while RUNNING or COMPLETE.  Raises ProducerInitError if the
        producer cannot be built (the controller is then IDLE).
        """
        if self.state == ControllerState.PAUSED:
            self.state = ControllerState.RUNNING
            logger.debug("%r resumed", self)
            return
        if self.state != ControllerState.IDLE:
            return

        self._clear()
        self.state       = ControllerState.RUNNING
        self._started_at = self._clock() if now is None else now
        if len(self.source) > self.large_array_threshold:
            self._pending_init        = True
            self.run_state.is_loading = True
        else:
            self._create_producer()
        logger.debug("%r started", self)

    def pause(self) -> None:
        if self.state == ControllerState.RUNNING:
            self.state = ControllerState.PAUSED
            logger.debug("%r paused", self)

    def reset(self) -> None:
        """Back to IDLE over the original snapshot.  Idempotent."""
        self._clear()
        self.state = ControllerState.IDLE

    def load(self, array: Sequence[float]) -> None:
        """Swap in a new source array.  Discards the current run."""
        self.source = tuple(array)
        self.reset()

    # ------------------------------------------------------------------
    # Advance  (called by the StepScheduler)
    # ------------------------------------------------------------------
    def advance(self, settings: Optional[RunSettings] = None) -> bool:
        """
        Apply exactly one Step.  Returns True if the run state changed,
        False when not RUNNING.  Raises ProducerInitError /
        StepAdvanceError on a producer fault.
        """
        if self.state != ControllerState.RUNNING:
            return False
        settings = settings or RunSettings()

        if self._pending_init:
            self._create_producer()

        try:
            step = next(self._producer)
        except StopIteration:
            self._complete(settings)
            return True
        except Exception as exc:
            self._fail(StepAdvanceError, exc)

        self._apply(step, settings)
        if step.is_final:
            self._complete(settings)
        return True

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def key(self) -> AlgoKey:
        return self.info.key

    @property
    def error(self) -> Optional[str]:
        return self.run_state.error

    @property
    def is_running(self) -> bool:
        return self.state == ControllerState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.state == ControllerState.PAUSED

    @property
    def is_complete(self) -> bool:
        return self.state == ControllerState.COMPLETE

    @property
    def is_idle(self) -> bool:
        return self.state == ControllerState.IDLE

    def snapshot(self) -> Dict[str, Any]:
        data = self.run_state.to_dict()
        data["state"]         = self.state.value
        data["steps_applied"] = self.steps_applied
        return data

    def metrics(self) -> RunMetrics:
        rs = self.run_state
        return RunMetrics(
            algo_key=self.info.key.value,
            algo_label=self.info.label,
            element_count=len(self.source),
            comparisons=rs.comparisons,
            swaps=rs.swaps,
            total_steps=self.steps_applied,
            wall_time_ms=round(rs.time_elapsed * 1000, 2),
            sorted_ok=rs.is_complete and is_sorted(rs.array),
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _clear(self, error: Optional[str] = None) -> None:
        self._producer      = None
        self._pending_init  = False
        self._started_at    = None
        self._last_cues     = frozenset()
        self.steps_applied  = 0
        self.run_state      = AlgorithmRunState.initial(self.info, self.source, error=error)

    def _create_producer(self) -> None:
        self._pending_init = False
        try:
            self._producer = self.info.create(self.source)
        except Exception as exc:
            self._fail(ProducerInitError, exc)
        self.run_state.is_loading = False

    def _fail(self, kind, exc: Exception) -> None:
        message = f"{self.info.label} failed: {exc}"
        logger.exception("%r: %s", self, message)
        self._clear(error=message)
        self.state = ControllerState.IDLE
        raise kind(message, algorithm=self.info.key.value) from exc

    def _elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at

    def _apply(self, step: Step, settings: RunSettings) -> None:
        rs = self.run_state
        rs.array             = step.array
        rs.comparing_indices = step.comparing_indices
        rs.swapped_indices   = step.swapped_indices
        rs.sorted_indices    = step.sorted_indices
        rs.comparisons       = step.comparisons
        rs.swaps             = step.swaps
        rs.time_elapsed      = self._elapsed()
        self.steps_applied  += 1

        self._cue(step, settings)
        if self.on_step:
            self.on_step(rs)

    def _cue(self, step: Step, settings: RunSettings) -> None:
        # one cue per kind per step, skipped when the previous step cued
        # the same kind on the same indices
        cues = frozenset(
            (kind, indices)
            for kind, indices in (("comparison", step.comparing_indices), ("swap", step.swapped_indices))
            if indices
        )
        fresh, self._last_cues = cues - self._last_cues, cues
        if not (settings.sound_enabled and self.audio is not None and fresh):
            return
        max_value = max(step.array) if step.array else 0
        for kind, indices in sorted(fresh):
            if kind == "comparison":
                self.audio.on_comparison(step.array, indices, max_value)
            else:
                self.audio.on_swap(step.array, indices, max_value)

    def _complete(self, settings: RunSettings) -> None:
        rs = self.run_state
        rs.comparing_indices = ()
        rs.swapped_indices   = ()
        rs.sorted_indices    = tuple(range(len(rs.array)))
        rs.time_elapsed      = self._elapsed()
        rs.is_complete       = True
        rs.is_loading        = False
        self.state           = ControllerState.COMPLETE
        logger.debug("%r complete: %d comparisons, %d swaps", self, rs.comparisons, rs.swaps)

        if settings.sound_enabled and self.audio is not None:
            self.audio.on_completion()
        if self.on_complete:
            self.on_complete(self)
