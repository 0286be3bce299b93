"""
bubble.py — Bubble Sort
========================
Resumable bubble sort.  Emits a Step at every micro-action:
  1. Compare the adjacent pair (j, j+1)
  2. Swap them if they are out of order
  3. After each full pass the rightmost unsorted slot is final
  4. A pass with zero swaps proves the whole prefix sorted: stop early

Time O(n²) worst / O(n) best, space O(1).
"""

from typing import Optional

from algorithms.base import StepProducer
from algorithms.step import Step


class BubbleSort(StepProducer):
    key = "bubble"

    def __init__(self, values):
        super().__init__(values)
        self.i = 0
        self.j = 0
        self.swapped = False
        self._phase = "pass"

    def _advance(self) -> Optional[Step]:
        a, n, sb = self.array, self.n, self.sb
        while True:
            if self._phase == "pass":
                if self.i >= n - 1:
                    return None
                self.j = 0
                self.swapped = False
                self._phase = "compare"

            if self._phase == "compare":
                j = self.j
                if j < n - self.i - 1:
                    self._phase = "decide"
                    return sb.compare(j, j + 1, f"Compare positions {j} and {j + 1}: {a[j]} vs {a[j + 1]}.")

                # pass finished: the largest remaining value has bubbled to the end
                last = n - self.i - 1
                sb.mark_sorted(last)
                if not self.swapped:
                    sb.mark_range_sorted(0, last - 1)
                    return None
                self.i += 1
                self._phase = "pass"
                continue

            # decide
            j = self.j
            self.j += 1
            self._phase = "compare"
            if a[j] > a[j + 1]:
                self.swapped = True
                return sb.swap(j, j + 1, f"{a[j]} > {a[j + 1]}: swap positions {j} and {j + 1}.")

    def _final_text(self) -> str:
        if not self.swapped and self.n > 1:
            return f"A pass made no swaps, so the array is sorted. {super()._final_text()}"
        return super()._final_text()
