"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every sorting algorithm the visualizer knows
about.

    from algorithms import REGISTRY, get_algorithm, create_producer

REGISTRY is a dict keyed by the closed AlgoKey enum:
    {
        AlgoKey.BUBBLE: AlgoInfo(key, label, producer, tags, …),
        …
    }

Lookups accept either the key ("quick") or the display label
("Quick Sort"), case-insensitively.  Anything else raises
ConfigOutOfRange; there is no silent fallback to a default algorithm.
Adding an algorithm is: write the producer class, add one AlgoKey member
and one REGISTRY entry.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Type, Union

from errors import ConfigOutOfRange
from algorithms.base      import StepProducer
from algorithms.step      import Step, StepBuilder
from algorithms.bubble    import BubbleSort
from algorithms.selection import SelectionSort
from algorithms.insertion import InsertionSort
from algorithms.merge     import MergeSort
from algorithms.quick     import QuickSort
from algorithms.heap      import HeapSort


class AlgoKey(str, Enum):
    BUBBLE    = "bubble"
    SELECTION = "selection"
    INSERTION = "insertion"
    MERGE     = "merge"
    QUICK     = "quick"
    HEAP      = "heap"


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              AlgoKey                   # registry key
    label:            str                       # human label, e.g. "Bubble Sort"
    producer:         Type[StepProducer]        # the resumable producer class
    tags:             List[str] = field(default_factory=list)   # family + properties
    stable:           bool      = False
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""            # one-liner for the UI card

    def create(self, values: Sequence[float]) -> StepProducer:
        return self.producer(values)


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[AlgoKey, AlgoInfo] = {

    AlgoKey.BUBBLE: AlgoInfo(
        key=AlgoKey.BUBBLE, label="Bubble Sort", producer=BubbleSort,
        tags=["exchange", "in-place"], stable=True,
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Swaps adjacent pairs; stops early after a pass with no swaps.",
    ),

    AlgoKey.SELECTION: AlgoInfo(
        key=AlgoKey.SELECTION, label="Selection Sort", producer=SelectionSort,
        tags=["exchange", "in-place"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Finds the minimum of the unsorted suffix; at most one swap per pass.",
    ),

    AlgoKey.INSERTION: AlgoInfo(
        key=AlgoKey.INSERTION, label="Insertion Sort", producer=InsertionSort,
        tags=["exchange", "in-place"], stable=True,
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Walks each new key left past larger neighbours. Fast on nearly-sorted input.",
    ),

    AlgoKey.MERGE: AlgoInfo(
        key=AlgoKey.MERGE, label="Merge Sort", producer=MergeSort,
        tags=["divide-and-conquer"], stable=True,
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Splits at the midpoint, sorts both halves, merges them stably.",
    ),

    AlgoKey.QUICK: AlgoInfo(
        key=AlgoKey.QUICK, label="Quick Sort", producer=QuickSort,
        tags=["divide-and-conquer", "in-place"],
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Partitions around the last element. Degrades on sorted input.",
    ),

    AlgoKey.HEAP: AlgoInfo(
        key=AlgoKey.HEAP, label="Heap Sort", producer=HeapSort,
        tags=["heap", "in-place"],
        complexity_time="O(n log n)", complexity_space="O(1)",
        description="Builds a max-heap, then repeatedly moves the root behind the heap.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(name: Union[str, AlgoKey]) -> AlgoInfo:
    """Return AlgoInfo by key or label.  Raises ConfigOutOfRange if unknown."""
    if isinstance(name, AlgoKey):
        return REGISTRY[name]
    wanted = str(name).strip().lower()
    for info in REGISTRY.values():
        if wanted in (info.key.value, info.label.lower()):
            return info
    raise ConfigOutOfRange(f"Unknown algorithm: {name!r}")


def create_producer(name: Union[str, AlgoKey], values: Sequence[float]) -> StepProducer:
    """Instantiate a fresh producer for `name` over a copy of `values`."""
    return get_algorithm(name).create(values)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


__all__ = [
    "AlgoKey",
    "AlgoInfo",
    "REGISTRY",
    "Step",
    "StepBuilder",
    "StepProducer",
    "get_algorithm",
    "create_producer",
    "list_algorithms",
    "algorithms_by_tag",
]
