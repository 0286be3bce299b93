"""
step.py — Sorting Step Snapshot
================================
Every sorting producer yields Step objects.
A Step is a frozen-in-time picture of everything a panel needs to
render one frame and cue one sound:

    • The whole array, as it looks right after this micro-action
    • Which positions are being compared (or were just written)
    • Which positions are proven to hold their final value
    • Running comparison / swap counters
    • A plain-English explanation of what just happened

Design decisions:
  - Step is a plain frozen dataclass.  It is a SNAPSHOT: the producer is
    the only writer, the controller / renderer / audio layer are readers.
  - Index collections are tuples so a Step can be shared between the two
    panels' observers without defensive copies.
  - `sorted_indices` is kept in ascending order so renderers can do a
    single pass over it.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number       : 0-based index of this step in the run.
        array             : Array contents after this micro-action.
        comparing_indices : Positions being compared (empty on write steps).
        swapped_indices   : Positions just mutated (empty on compare steps).
        sorted_indices    : Positions holding their final value, ascending.
        comparisons       : Comparisons performed so far.
        swaps             : Swaps / writes performed so far.
        explanation       : Human-readable "what happened" text.
        is_final          : True on the terminal step only.
    """

    step_number:        int              = 0
    array:              Tuple[float, ...] = ()
    comparing_indices:  Tuple[int, ...]  = ()
    swapped_indices:    Tuple[int, ...]  = ()
    sorted_indices:     Tuple[int, ...]  = ()
    comparisons:        int              = 0
    swaps:              int              = 0
    explanation:        str              = ""
    is_final:           bool             = False

    @property
    def is_comparison(self) -> bool:
        return bool(self.comparing_indices)

    @property
    def is_swap(self) -> bool:
        return bool(self.swapped_indices)


# ---------------------------------------------------------------------------
# Builder shared by every producer so they don't spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Mutable scratch-pad that owns the working array and the counters of
    one run.  Producers mutate `array` in place and call `compare()` /
    `swap()` / `write()` / `final()` to snapshot it.

    Usage inside a producer:
        sb = StepBuilder(values)
        step = sb.compare(0, 1, "Compare positions 0 and 1.")
        sb.array[0], sb.array[1] = sb.array[1], sb.array[0]
        step = sb.swap(0, 1, "Swap them.")
    """

    def __init__(self, values: Sequence[float]):
        self.array:       List[float] = list(values)
        self.comparisons: int         = 0
        self.swaps:       int         = 0
        self.step_no:     int         = 0
        self._sorted:     set         = set()

    def __len__(self) -> int:
        return len(self.array)

    # -- sorted-set helpers --
    def mark_sorted(self, *indices: int) -> None:
        self._sorted.update(indices)

    def mark_range_sorted(self, start: int, end: int) -> None:
        """Mark the inclusive range [start, end]."""
        self._sorted.update(range(start, end + 1))

    # -- snapshots --
    def compare(self, a: int, b: int, explanation: str = "") -> Step:
        self.comparisons += 1
        return self._build(comparing=(a, b), explanation=explanation)

    def swap(self, a: int, b: int, explanation: str = "") -> Step:
        """Swap positions a and b in the working array and snapshot it."""
        self.array[a], self.array[b] = self.array[b], self.array[a]
        self.swaps += 1
        return self._build(swapped=(a, b), explanation=explanation)

    def write(self, indices: Tuple[int, ...], explanation: str = "") -> Step:
        """Snapshot a move the producer already applied to `array`."""
        self.swaps += 1
        return self._build(swapped=indices, explanation=explanation)

    def final(self, explanation: str = "Sorted.") -> Step:
        self.mark_range_sorted(0, len(self.array) - 1)
        return self._build(explanation=explanation, is_final=True)

    def _build(
        self,
        comparing: Tuple[int, ...] = (),
        swapped: Tuple[int, ...] = (),
        explanation: str = "",
        is_final: bool = False,
    ) -> Step:
        step = Step(
            step_number=self.step_no,
            array=tuple(self.array),
            comparing_indices=tuple(comparing),
            swapped_indices=tuple(swapped),
            sorted_indices=tuple(sorted(self._sorted)),
            comparisons=self.comparisons,
            swaps=self.swaps,
            explanation=explanation,
            is_final=is_final,
        )
        self.step_no += 1
        return step
