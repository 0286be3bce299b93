"""
selection.py — Selection Sort
==============================
Resumable selection sort.  For every outer index i:
  1. Scan the unsorted suffix, comparing each element against the
     running minimum candidate
  2. Swap the candidate into position i, only if it moved
  3. Position i is final either way

Time O(n²), space O(1).  Not stable.
"""

from typing import Optional

from algorithms.base import StepProducer
from algorithms.step import Step


class SelectionSort(StepProducer):
    key = "selection"

    def __init__(self, values):
        super().__init__(values)
        self.i = 0
        self.j = 0
        self.min_idx = 0
        self._phase = "outer"

    def _advance(self) -> Optional[Step]:
        a, n, sb = self.array, self.n, self.sb
        while True:
            if self._phase == "outer":
                if self.i >= n - 1:
                    return None
                self.min_idx = self.i
                self.j = self.i + 1
                self._phase = "scan"

            if self._phase == "scan":
                if self.j < n:
                    self._phase = "pick"
                    m, j = self.min_idx, self.j
                    return sb.compare(m, j, f"Compare candidate minimum {a[m]} (position {m}) with {a[j]} (position {j}).")
                self._phase = "place"

            if self._phase == "pick":
                if a[self.j] < a[self.min_idx]:
                    self.min_idx = self.j
                self.j += 1
                self._phase = "scan"
                continue

            if self._phase == "place":
                self._phase = "commit"
                i, m = self.i, self.min_idx
                if m != i:
                    return sb.swap(i, m, f"Move minimum {a[m]} from position {m} into position {i}.")

            # commit
            sb.mark_sorted(self.i)
            self.i += 1
            self._phase = "outer"
