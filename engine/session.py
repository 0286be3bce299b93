"""
session.py — Comparison Session
=================================
The orchestration layer: one shared source array, two panels, one set of
global transport flags.  Every external command (a button, a slider, an
HTTP request) lands here; the session is the only writer of the global
flags.

    session = ComparisonSession(rng=random.Random(7))
    session.start()
    while True:
        state = session.tick()       # once per display frame
        …

A panel is a (RunController, StepScheduler, ToneQueue) triple.  Each
tick builds one RunSettings from the global flags and hands the same
snapshot to both panels, so the two panels never see torn settings.

Array changes (count, distribution, regenerate, custom load) reset both
panels, clear the run flags and bump `run_id`.  Switching one panel's
algorithm resets only that panel.
"""

import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from algorithms import get_algorithm
from algorithms.base import validate_values
from arrays import Distribution, generate_array, parse_distribution
from audio import ToneQueue
from engine.controller import RunController, RunSettings
from engine.coordinator import CompletionCoordinator
from engine.recorder import ComparisonResult, compare, record
from engine.scheduler import StepScheduler
from errors import ConfigOutOfRange, ProducerInitError, StepAdvanceError
from settings import EngineConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Clamp helpers — numeric config is clamped, never rejected
# ---------------------------------------------------------------------------
def clamp(value, low: int, high: int) -> int:
    """
    Coerce `value` to int within [low, high].  Infinities clamp to the
    nearest bound; non-numbers and NaN raise ConfigOutOfRange.
    """
    try:
        real = float(value)
    except (TypeError, ValueError):
        raise ConfigOutOfRange(f"Not a number: {value!r}") from None
    if math.isnan(real):
        raise ConfigOutOfRange(f"Not a number: {value!r}")
    if math.isinf(real):
        number = high if real > 0 else low
    else:
        number = int(real)
    clamped = max(low, min(high, number))
    if clamped != number:
        logger.debug("clamped %s to %s", number, clamped)
    return clamped


def clamp_element_count(value, config: Optional[Mapping[str, Any]] = None) -> int:
    cfg = config or {}
    return clamp(value, cfg.get("MIN_ELEMENTS", EngineConfig.MIN_ELEMENTS),
                 cfg.get("MAX_ELEMENTS", EngineConfig.MAX_ELEMENTS))


def clamp_speed(value, config: Optional[Mapping[str, Any]] = None) -> int:
    cfg = config or {}
    return clamp(value, cfg.get("MIN_SPEED", EngineConfig.MIN_SPEED),
                 cfg.get("MAX_SPEED", EngineConfig.MAX_SPEED))


def default_config() -> Dict[str, Any]:
    return {k: getattr(EngineConfig, k) for k in dir(EngineConfig) if k.isupper()}


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------
@dataclass
class GlobalRunState:
    initial_array: Tuple[float, ...]
    element_count: int
    distribution:  Distribution
    speed:         int
    is_running:    bool = False
    is_paused:     bool = False
    sound_enabled: bool = True

    def settings(self) -> RunSettings:
        return RunSettings(speed=self.speed, sound_enabled=self.sound_enabled)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_array": list(self.initial_array),
            "element_count": self.element_count,
            "distribution":  self.distribution.value,
            "speed":         self.speed,
            "is_running":    self.is_running,
            "is_paused":     self.is_paused,
            "sound_enabled": self.sound_enabled,
        }


@dataclass
class Panel:
    controller: RunController
    scheduler:  StepScheduler
    tones:      ToneQueue


# ---------------------------------------------------------------------------
# ComparisonSession
# ---------------------------------------------------------------------------
class ComparisonSession:
    """
    Attributes:
        config      : Effective settings (EngineConfig defaults + overrides).
        state       : GlobalRunState.
        panels      : {"left": Panel, "right": Panel}.
        coordinator : CompletionCoordinator driving the auto-reset.
        run_id      : Bumped on every fresh start, reset and array change.
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = default_config()
        if config:
            self.config.update({k: v for k, v in config.items() if k in self.config})
        self.rng    = rng or random.Random()
        self._clock = clock
        self.run_id = 0

        count = clamp_element_count(self.config["DEFAULT_ELEMENTS"], self.config)
        dist  = parse_distribution(self.config["DEFAULT_DISTRIBUTION"])
        self.state = GlobalRunState(
            initial_array=tuple(generate_array(count, dist, rng=self.rng)),
            element_count=count,
            distribution=dist,
            speed=clamp_speed(self.config["DEFAULT_SPEED"], self.config),
            sound_enabled=bool(self.config["DEFAULT_SOUND_ENABLED"]),
        )
        self.panels: Dict[str, Panel] = {
            "left":  self._make_panel("left", self.config["DEFAULT_LEFT_ALGORITHM"]),
            "right": self._make_panel("right", self.config["DEFAULT_RIGHT_ALGORITHM"]),
        }
        self.coordinator = CompletionCoordinator(self._auto_reset, delay=float(self.config["AUTO_RESET_DELAY"]))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def left(self) -> RunController:
        return self.panels["left"].controller

    @property
    def right(self) -> RunController:
        return self.panels["right"].controller

    def panel(self, name: str) -> Panel:
        try:
            return self.panels[str(name).strip().lower()]
        except KeyError:
            raise ConfigOutOfRange(f"Unknown panel: {name!r}") from None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def start(self, now: Optional[float] = None) -> None:
        """
        Start (or resume) both panels.  Panels that are IDLE, because of a
        fault or an algorithm switch, are started fresh; complete panels
        are left alone.  A producer fault in one panel leaves the other
        running.
        """
        if self.state.is_running and not self.state.is_paused and all(
            not p.controller.is_idle for p in self.panels.values()
        ):
            return
        if not self.state.is_running:
            self.run_id += 1
            self.coordinator.cancel()

        self.state.is_running = True
        self.state.is_paused  = False
        for name, p in self.panels.items():
            if p.controller.is_complete or p.controller.is_running:
                continue
            try:
                p.controller.start(now)
            except ProducerInitError as exc:
                logger.warning("%s panel could not start: %s", name, exc.message)
                continue
            p.scheduler.schedule()
        logger.debug("run %d started", self.run_id)

    def pause(self) -> None:
        if not self.state.is_running or self.state.is_paused:
            return
        for p in self.panels.values():
            p.controller.pause()
            p.scheduler.cancel()
        self.state.is_paused = True

    def reset(self) -> None:
        for p in self.panels.values():
            p.scheduler.cancel()
            p.controller.reset()
            p.tones.clear()
        self.state.is_running = False
        self.state.is_paused  = False
        self.run_id += 1
        self.coordinator.cancel()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_algorithm(self, panel: str, name: str) -> None:
        info = get_algorithm(name)
        p    = self.panel(panel)
        p.scheduler.cancel()
        p.tones.clear()
        p.controller = self._controller(info.key, p.tones)
        self.coordinator.cancel()
        logger.debug("%s panel switched to %s", panel, info.label)

    def set_element_count(self, count) -> int:
        self.state.element_count = clamp_element_count(count, self.config)
        self.regenerate_array()
        return self.state.element_count

    def set_distribution(self, name) -> Distribution:
        self.state.distribution = parse_distribution(name)
        self.regenerate_array()
        return self.state.distribution

    def set_speed(self, speed) -> int:
        self.state.speed = clamp_speed(speed, self.config)
        return self.state.speed

    def toggle_sound(self) -> bool:
        self.state.sound_enabled = not self.state.sound_enabled
        if not self.state.sound_enabled:
            for p in self.panels.values():
                p.tones.clear()
        return self.state.sound_enabled

    def regenerate_array(self) -> List[int]:
        values = generate_array(self.state.element_count, self.state.distribution, rng=self.rng)
        self._replace_array(values)
        return values

    def load_array(self, values: Sequence[float]) -> None:
        """Use caller-supplied values as the source array."""
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise ConfigOutOfRange("Array must be a list of numbers")
        try:
            values = validate_values(values)
        except (TypeError, ValueError) as exc:
            raise ConfigOutOfRange(str(exc)) from None
        low, high = self.config["MIN_ELEMENTS"], self.config["MAX_ELEMENTS"]
        if not low <= len(values) <= high:
            raise ConfigOutOfRange(f"Array length must be between {low} and {high}, got {len(values)}")
        self.state.element_count = len(values)
        self._replace_array(values)

    # ------------------------------------------------------------------
    # Tick  (one host display frame)
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> Dict[str, Any]:
        now      = self._clock() if now is None else now
        settings = self.state.settings()
        for name, p in self.panels.items():
            try:
                p.scheduler.tick(now, p.controller, settings)
            except (ProducerInitError, StepAdvanceError) as exc:
                logger.warning("%s panel halted: %s", name, exc.message)
        self.coordinator.tick(now, self.left, self.right, self.run_id)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "global": self.state.to_dict(),
            "left":   self.left.snapshot(),
            "right":  self.right.snapshot(),
            "auto_reset": {
                "armed":    self.coordinator.armed,
                "deadline": self.coordinator.deadline,
            },
        }

    def drain_tones(self) -> Dict[str, List[Dict[str, Any]]]:
        return {name: [t.to_dict() for t in p.tones.drain()] for name, p in self.panels.items()}

    def comparison(self) -> ComparisonResult:
        """Live comparison of the two panels as they stand."""
        return compare(self.left.metrics(), self.right.metrics())

    def forecast(self) -> ComparisonResult:
        """Run both algorithms headlessly over the current array."""
        values = self.state.initial_array
        return compare(record(self.left.key, values), record(self.right.key, values))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _controller(self, algorithm, tones: ToneQueue) -> RunController:
        return RunController(
            algorithm,
            self.state.initial_array,
            audio=tones,
            clock=self._clock,
            large_array_threshold=self.config["LARGE_ARRAY_THRESHOLD"],
        )

    def _make_panel(self, name: str, algorithm) -> Panel:
        tones = ToneQueue(name)
        return Panel(controller=self._controller(algorithm, tones), scheduler=StepScheduler(), tones=tones)

    def _replace_array(self, values: Sequence[float]) -> None:
        self.state.initial_array = tuple(values)
        for p in self.panels.values():
            p.scheduler.cancel()
            p.tones.clear()
            p.controller.load(self.state.initial_array)
        self.state.is_running = False
        self.state.is_paused  = False
        self.run_id += 1
        self.coordinator.cancel()
        logger.debug("new %d-element array, run %d", len(values), self.run_id)

    def _auto_reset(self) -> None:
        logger.info("both panels complete, auto-reset")
        self.reset()
