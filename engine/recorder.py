"""
recorder.py — Run Recorder & Analytics
========================================
Runs one algorithm headlessly to completion over a given array, keeps
every Step, and computes the metrics the Comparison panel shows.

Usage:
    rec = Recorder()
    rec.start(algo_key="merge", values=[5, 2, 4, 1])
    rec.run_to_completion()          # exhausts the producer
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # JSON-friendly dump of the whole run

Comparison:
    The session holds two panels over the SAME array.  compare() takes
    two RunMetrics (live, from the controllers, or pre-computed, from two
    Recorders) and names a winner per metric.  Lower is better; equal
    values are a "tie".
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from algorithms import AlgoInfo, StepProducer, get_algorithm
from algorithms.step import Step
from arrays import is_sorted


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Comparison panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:       str   = ""
    algo_label:     str   = ""
    element_count:  int   = 0
    comparisons:    int   = 0
    swaps:          int   = 0
    total_steps:    int   = 0          # number of Steps applied / yielded
    wall_time_ms:   float = 0.0
    sorted_ok:      bool  = False      # final array ascending and run complete

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_comparisons: str = ""
    winner_swaps:       str = ""
    winner_steps:       str = ""
    winner_time:        str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps    : Full list of Steps from the run.
        metrics  : Computed RunMetrics (available after run_to_completion).
        producer : The underlying StepProducer.
    """

    def __init__(self):
        self.steps:    List[Step]             = []
        self.metrics:  Optional[RunMetrics]   = None
        self.producer: Optional[StepProducer] = None

        self._algo_info: Optional[AlgoInfo] = None
        self._values:    List[float]        = []

    def start(self, algo_key: str, values: Sequence[float]) -> None:
        """Create a fresh producer over `values`.  Unknown keys raise ConfigOutOfRange."""
        info = get_algorithm(algo_key)
        self._algo_info = info
        self._values    = list(values)
        self.steps      = []
        self.metrics    = None
        self.producer   = info.create(self._values)

    def run_to_completion(self, keep_steps: bool = True) -> RunMetrics:
        """
        Exhaust the producer and compute metrics.  With keep_steps=False
        only the last step and a count are held, which is all the metrics
        need; `steps` then stays empty.
        """
        if self.producer is None:
            raise RuntimeError("Call start() first.")

        last: Optional[Step] = None
        count = 0
        started = time.monotonic()
        for step in self.producer:
            if keep_steps:
                self.steps.append(step)
            last = step
            count += 1
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(last, count, wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key.value if self._algo_info else "",
            "values":   list(self._values),
            "metrics":  self.metrics.to_dict() if self.metrics else {},
            "steps":    [asdict(s) for s in self.steps],
        }

    def _compute_metrics(self, last: Optional[Step], count: int, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        n    = len(self._values)

        return RunMetrics(
            algo_key=info.key.value if info else "",
            algo_label=info.label if info else "",
            element_count=n,
            comparisons=last.comparisons if last else 0,
            swaps=last.swaps if last else 0,
            total_steps=count,
            wall_time_ms=round(wall_ms, 2),
            sorted_ok=bool(last)
                      and is_sorted(last.array)
                      and last.sorted_indices == tuple(range(n)),
        )


def record(algo_key: str, values: Sequence[float]) -> RunMetrics:
    """Metrics of one headless run.  Individual steps are not kept."""
    rec = Recorder()
    rec.start(algo_key, values)
    return rec.run_to_completion(keep_steps=False)


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(
    left: Union[RunMetrics, Recorder],
    right: Union[RunMetrics, Recorder],
) -> ComparisonResult:
    """Given two RunMetrics (or completed Recorders), produce a ComparisonResult."""
    l = (left.metrics if isinstance(left, Recorder) else left) or RunMetrics()
    r = (right.metrics if isinstance(right, Recorder) else right) or RunMetrics()

    def winner(l_val, r_val):
        if l_val == r_val:
            return "tie"
        return l.algo_label if l_val < r_val else r.algo_label

    return ComparisonResult(
        left=l,
        right=r,
        winner_comparisons=winner(l.comparisons, r.comparisons),
        winner_swaps      =winner(l.swaps, r.swaps),
        winner_steps      =winner(l.total_steps, r.total_steps),
        winner_time       =winner(l.wall_time_ms, r.wall_time_ms),
    )
