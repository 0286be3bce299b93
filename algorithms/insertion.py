"""
insertion.py — Insertion Sort
==============================
Resumable insertion sort.  Position 0 starts out sorted; for every
outer index i the new key is walked leftwards:
  1. Compare the key with its left neighbour
  2. If the neighbour is larger, exchange the adjacent pair (one shift)
  3. Stop at the first neighbour that is not larger, then add i to the
     sorted set

Shifts are real adjacent exchanges, so every snapshot is a permutation
of the input.  Time O(n²) worst / O(n) best, space O(1), stable.
"""

from typing import Optional

from algorithms.base import StepProducer
from algorithms.step import Step


class InsertionSort(StepProducer):
    key = "insertion"

    def __init__(self, values):
        super().__init__(values)
        self.i = 1
        self.j = 0
        self._phase = "outer"
        if self.n > 1:
            self.sb.mark_sorted(0)

    def _advance(self) -> Optional[Step]:
        a, n, sb = self.array, self.n, self.sb
        while True:
            if self._phase == "outer":
                if self.i >= n:
                    return None
                self.j = self.i - 1
                self._phase = "compare"

            if self._phase == "compare":
                j = self.j
                if j >= 0:
                    self._phase = "shift"
                    return sb.compare(j, j + 1, f"Compare key {a[j + 1]} with its left neighbour {a[j]}.")
                self._phase = "place"

            if self._phase == "shift":
                j = self.j
                if a[j] > a[j + 1]:
                    self.j -= 1
                    self._phase = "compare"
                    return sb.swap(j, j + 1, f"{a[j]} > {a[j + 1]}: shift {a[j]} one slot right.")
                self._phase = "place"

            # place
            sb.mark_sorted(self.i)
            self.i += 1
            self._phase = "outer"
