"""
heap.py — Heap Sort
====================
Heap sort on an explicit frame stack.

    HeapSortFrame  – the driver: bottom-up max-heap build, then
                     repeated root extraction
    SiftFrame      – one `heapify(size, i)` call: compare the node with
                     its left child, then its right child (each skipped
                     when out of range), and swap down into the larger
                     child; the recursive call on the affected subtree
                     replaces this frame

Extraction swaps the root with the last unheapified slot.  That slot
becomes final and is marked sorted.  Then a sift-down runs on the
smaller heap.  Position 0 is marked sorted last.

Time O(n log n), space O(log n) frames.  Not stable.
"""

from dataclasses import dataclass
from typing import Optional

from algorithms.base import FrameProducer
from algorithms.step import Step


@dataclass
class HeapSortFrame:
    build_i:   int
    extract_i: int
    phase:     str = "build"


@dataclass
class SiftFrame:
    size:    int
    i:       int
    largest: int
    phase:   str = "left"


class HeapSort(FrameProducer):
    key = "heap"

    def _root_frame(self):
        return HeapSortFrame(build_i=self.n // 2 - 1, extract_i=self.n - 1)

    def _resume(self, frame) -> Optional[Step]:
        if isinstance(frame, SiftFrame):
            return self._sift(frame)

        sb = self.sb
        if frame.phase == "build":
            if frame.build_i >= 0:
                i = frame.build_i
                frame.build_i -= 1
                self.stack.append(SiftFrame(size=self.n, i=i, largest=i))
                return None
            frame.phase = "extract"

        if frame.phase == "extract":
            e = frame.extract_i
            if e > 0:
                frame.phase = "shrink"
                return sb.swap(0, e, f"Move heap maximum {self.array[0]} to position {e}.")
            sb.mark_sorted(0)
            self.stack.pop()
            return None

        # shrink: slot e is final, restore the heap over [0, e)
        e = frame.extract_i
        sb.mark_sorted(e)
        frame.extract_i -= 1
        frame.phase = "extract"
        self.stack.append(SiftFrame(size=e, i=0, largest=0))
        return None

    def _sift(self, f: SiftFrame) -> Optional[Step]:
        a, sb = self.array, self.sb
        left, right = 2 * f.i + 1, 2 * f.i + 2

        if f.phase == "left":
            f.phase = "right"
            if left < f.size:
                f.phase = "left_pick"
                return sb.compare(f.largest, left, f"Heapify at {f.i}: compare {a[f.largest]} with left child {a[left]}.")

        if f.phase == "left_pick":
            if a[left] > a[f.largest]:
                f.largest = left
            f.phase = "right"

        if f.phase == "right":
            f.phase = "swap"
            if right < f.size:
                f.phase = "right_pick"
                return sb.compare(f.largest, right, f"Heapify at {f.i}: compare {a[f.largest]} with right child {a[right]}.")

        if f.phase == "right_pick":
            if a[right] > a[f.largest]:
                f.largest = right
            f.phase = "swap"

        if f.phase == "swap":
            if f.largest != f.i:
                f.phase = "recurse"
                return sb.swap(f.i, f.largest, f"Child {a[f.largest]} is larger: swap positions {f.i} and {f.largest}.")
            self.stack.pop()
            return None

        # recurse into the subtree the swapped value moved into
        self.stack[-1] = SiftFrame(size=f.size, i=f.largest, largest=f.largest)
        return None
