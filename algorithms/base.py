"""
base.py — Resumable Step Producers
====================================
A producer is an iterator over Step snapshots that can be suspended
between any two micro-actions and resumed later without redoing work.

Two flavours:

  • StepProducer   – iterative sorts keep a saved program counter
                     (`_phase`) plus their loop indices.
  • FrameProducer  – recursive sorts keep an explicit stack of frames;
                     each frame is one pending "call" with its own locals.
                     Advancing pushes/pops frames instead of relying on
                     language-level recursion.

Contract (shared by every variant):
  - The sequence is finite and ends with exactly one Step whose
    `is_final` is True, whose index sets are empty and whose
    `sorted_indices` cover 0..n-1.
  - For n <= 1 the terminal Step is the first and only item.
  - After the terminal Step, `next()` raises StopIteration forever.
  - The producer is not restartable: iterating twice continues the same
    sequence.
"""

import math
from numbers import Real
from typing import Iterator, List, Optional, Sequence

from algorithms.step import Step, StepBuilder


def validate_values(values: Sequence[float]) -> List[float]:
    """Copy `values`, rejecting anything that is not a finite real number."""
    result = list(values)
    for pos, v in enumerate(result):
        if isinstance(v, bool) or not isinstance(v, Real):
            raise TypeError(f"value at position {pos} is not a number: {v!r}")
        if not math.isfinite(v):
            raise ValueError(f"value at position {pos} is not finite: {v!r}")
    return result


class StepProducer(Iterator[Step]):
    """Base iterator.  Subclasses implement `_advance()`."""

    key: str = ""

    def __init__(self, values: Sequence[float]):
        self.sb = StepBuilder(validate_values(values))
        self.n = len(self.sb)
        self._exhausted = False

    def __iter__(self) -> "StepProducer":
        return self

    def __next__(self) -> Step:
        if self._exhausted:
            raise StopIteration
        step = self._advance() if self.n > 1 else None
        if step is None:
            step = self.sb.final(self._final_text())
        if step.is_final:
            self._exhausted = True
        return step

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def array(self) -> List[float]:
        return self.sb.array

    def _advance(self) -> Optional[Step]:
        """Run until the next micro-action; None once the sort is done."""
        raise NotImplementedError

    def _final_text(self) -> str:
        return f"Done: {self.n} element(s) sorted with {self.sb.comparisons} comparisons and {self.sb.swaps} swaps."


class FrameProducer(StepProducer):
    """
    Producer driven by an explicit call stack.

    `_resume(frame)` runs the top frame until it either emits a Step
    (returned) or changes the stack (returns None).  A frame that has
    finished pops itself.
    """

    def __init__(self, values: Sequence[float]):
        super().__init__(values)
        self.stack: List[object] = []
        if self.n > 1:
            self.stack.append(self._root_frame())

    def _root_frame(self) -> object:
        raise NotImplementedError

    def _resume(self, frame) -> Optional[Step]:
        raise NotImplementedError

    def _advance(self) -> Optional[Step]:
        while self.stack:
            step = self._resume(self.stack[-1])
            if step is not None:
                return step
        return None
