"""
quick.py — Quick Sort (Lomuto partition)
=========================================
Quick sort on an explicit frame stack.

    QuickFrame(lo, hi)      – a pending sort of [lo, hi]
    PartitionFrame(lo, hi)  – last element is the pivot; every element of
                              [lo, hi-1] is compared against it and moved
                              forward when it is <= pivot; finally the
                              pivot is swapped into place and marked sorted

When a partition finishes, its QuickFrame is replaced by the two child
ranges, with the left one on top, so the left side is sorted first.
A single-element range is marked sorted without any comparison.  A
scanning swap that would exchange a slot with itself is not emitted.
The pivot-placement swap always is.

Time O(n log n) average / O(n²) worst, space O(log n) frames average.
"""

from dataclasses import dataclass
from typing import Optional

from algorithms.base import FrameProducer
from algorithms.step import Step


@dataclass
class QuickFrame:
    lo: int
    hi: int


@dataclass
class PartitionFrame:
    lo:    int
    hi:    int
    i:     int              # last slot of the "<= pivot" prefix
    j:     int              # scanning index
    phase: str = "scan"


class QuickSort(FrameProducer):
    key = "quick"

    def _root_frame(self):
        return QuickFrame(0, self.n - 1)

    def _resume(self, frame) -> Optional[Step]:
        if isinstance(frame, PartitionFrame):
            return self._partition(frame)

        if frame.lo < frame.hi:
            self.stack[-1] = PartitionFrame(lo=frame.lo, hi=frame.hi, i=frame.lo - 1, j=frame.lo)
        else:
            if frame.lo == frame.hi:
                self.sb.mark_sorted(frame.lo)
            self.stack.pop()
        return None

    def _partition(self, f: PartitionFrame) -> Optional[Step]:
        a, sb = self.array, self.sb
        while True:
            if f.phase == "scan":
                if f.j < f.hi:
                    f.phase = "decide"
                    return sb.compare(f.j, f.hi, f"Compare {a[f.j]} (position {f.j}) with pivot {a[f.hi]}.")
                f.phase = "place"

            if f.phase == "decide":
                j = f.j
                f.j += 1
                f.phase = "scan"
                if a[j] <= a[f.hi]:
                    f.i += 1
                    if f.i != j:
                        return sb.swap(f.i, j, f"{a[j]} <= pivot {a[f.hi]}: swap positions {f.i} and {j}.")
                continue

            if f.phase == "place":
                f.phase = "commit"
                p = f.i + 1
                return sb.swap(p, f.hi, f"Place pivot {a[f.hi]} at position {p}.")

            # commit: pivot slot is final, children replace this range
            p = f.i + 1
            sb.mark_sorted(p)
            self.stack.pop()
            self.stack.append(QuickFrame(p + 1, f.hi))
            self.stack.append(QuickFrame(f.lo, p - 1))
            return None
