"""
merge.py — Merge Sort
======================
Top-down merge sort on an explicit frame stack.

    SortFrame(lo, hi)   – split at floor((lo+hi)/2), sort left, sort
                          right, then hand over to a MergeFrame
    MergeFrame(lo, hi)
                        – merges the two sorted runs in place

The merge is stable (`left <= right` keeps the left element) and works
in place.  When the right head wins, it is rotated into the output slot
and the rest of the left run moves one slot right.  So every snapshot is
a permutation of the input.  Each output position that gets filled
counts as one swap step, and each pairwise comparison counts as one
comparison step.  A fully merged range is marked sorted, single-element
halves included, so the whole array only reads as sorted on the final
step.  An input of one element yields just that final step.

Time O(n log n) comparisons, space O(log n) frames.
"""

from dataclasses import dataclass
from typing import Optional

from algorithms.base import FrameProducer
from algorithms.step import Step


@dataclass
class SortFrame:
    lo: int
    hi: int
    pc: int = 0


@dataclass
class MergeFrame:
    lo:       int
    hi:       int
    k:        int       # next output position
    left_end: int       # last index of what is left of the left run
    r:        int       # head of the right run
    phase:    str = "compare"


class MergeSort(FrameProducer):
    key = "merge"

    def _root_frame(self):
        return SortFrame(0, self.n - 1)

    def _resume(self, frame) -> Optional[Step]:
        if isinstance(frame, MergeFrame):
            return self._merge(frame)

        lo, hi = frame.lo, frame.hi
        if lo >= hi:
            # a lone element shows as sorted once its parent merge is done
            self.stack.pop()
            return None

        mid = (lo + hi) // 2
        if frame.pc == 0:
            frame.pc = 1
            self.stack.append(SortFrame(lo, mid))
        elif frame.pc == 1:
            frame.pc = 2
            self.stack.append(SortFrame(mid + 1, hi))
        else:
            self.stack[-1] = MergeFrame(lo=lo, hi=hi, k=lo, left_end=mid, r=mid + 1)
        return None

    def _merge(self, f: MergeFrame) -> Optional[Step]:
        a, sb = self.array, self.sb

        if f.phase == "compare":
            if f.k <= f.left_end and f.r <= f.hi:
                f.phase = "take"
                return sb.compare(f.k, f.r, f"Merge [{f.lo}..{f.hi}]: compare {a[f.k]} (left) with {a[f.r]} (right).")
            f.phase = "drain"

        if f.phase == "take":
            f.phase = "compare"
            k = f.k
            f.k += 1
            if a[k] <= a[f.r]:
                return sb.write((k,), f"{a[k]} <= {a[f.r]}: left value stays at position {k}.")
            value = a.pop(f.r)
            a.insert(k, value)
            f.left_end += 1
            f.r += 1
            return sb.write((k,), f"Right value {value} is smaller: move it into position {k}.")

        # drain: whatever is left is already in place, one write per slot
        if f.k <= f.hi:
            k = f.k
            f.k += 1
            return sb.write((k,), f"Copy remaining value {a[k]} into position {k}.")

        sb.mark_range_sorted(f.lo, f.hi)
        self.stack.pop()
        return None
