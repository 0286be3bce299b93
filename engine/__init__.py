"""
engine/
-------
Simulation layer: run controllers, pacing, completion, analytics.

    from engine import ComparisonSession, RunController, StepScheduler
"""

from errors import (
    SortEngineError,
    ProducerInitError,
    StepAdvanceError,
    ConfigOutOfRange,
)
from engine.recorder    import Recorder, RunMetrics, ComparisonResult, compare, record
from engine.controller  import RunController, ControllerState, AlgorithmRunState, RunSettings
from engine.scheduler   import StepScheduler, ScheduleHandle, step_delay
from engine.coordinator import CompletionCoordinator
from engine.session     import (
    ComparisonSession,
    GlobalRunState,
    Panel,
    clamp,
    clamp_element_count,
    clamp_speed,
)

__all__ = [
    "SortEngineError",
    "ProducerInitError",
    "StepAdvanceError",
    "ConfigOutOfRange",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "record",
    "RunController",
    "ControllerState",
    "AlgorithmRunState",
    "RunSettings",
    "StepScheduler",
    "ScheduleHandle",
    "step_delay",
    "CompletionCoordinator",
    "ComparisonSession",
    "GlobalRunState",
    "Panel",
    "clamp",
    "clamp_element_count",
    "clamp_speed",
]
