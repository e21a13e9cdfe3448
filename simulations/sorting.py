"""
sorting.py — Bubble, Insertion & Merge Sort
============================================
Pre-computes the entire sort.  Each step records the array, which bars
are highlighted (comparing / swapping / sorted), running comparison and
swap counters and, on swap steps, the pair of indices that just
traded places so the painter can show the move.

Randomness boundary: generate_array() draws only through fisher_yates,
which shuffles the array for order "random" and the neighbour-swap
positions for order "nearly".
The sort generators themselves are pure.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engine.utils import fisher_yates
from simulations.inputs import choose, clamp, parse_int
from simulations.step import Snapshot, freeze_states, number_steps

ALGORITHMS = ("bubble", "insertion", "merge")
ORDERS     = ("random", "reversed", "nearly", "sorted")
MIN_SIZE, MAX_SIZE = 0, 50

DEFAULT_PARAMS: Dict[str, Any] = {"algorithm": "bubble", "size": 12, "order": "random"}

COMPARING = "comparing"
SWAPPING  = "swapping"
SORTED    = "sorted"


@dataclass(frozen=True)
class SortStep(Snapshot):
    values:      Tuple[int, ...]            = ()
    highlights:  Tuple[Optional[str], ...]  = ()
    comparisons: int                        = 0
    swaps:       int                        = 0
    swap_pair:   Optional[Tuple[int, int]]  = None


# ---------------------------------------------------------------------------
# Parameters / input array
# ---------------------------------------------------------------------------
def sanitize_params(params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "algorithm": choose(params.get("algorithm"), ALGORITHMS, DEFAULT_PARAMS["algorithm"]),
        "size":      clamp(parse_int(params.get("size"), DEFAULT_PARAMS["size"]), MIN_SIZE, MAX_SIZE),
        "order":     choose(params.get("order"), ORDERS, DEFAULT_PARAMS["order"]),
    }


def generate_array(size: int, order: str, rng: Any = random) -> List[int]:
    arr = list(range(1, size + 1))
    if order == "random":
        fisher_yates(arr, rng)
    elif order == "reversed":
        arr.reverse()
    elif order == "nearly" and size > 1:
        # swap a few neighbouring pairs, positions picked by shuffling
        positions = fisher_yates(list(range(size - 1)), rng)
        for i in positions[:max(1, size // 10)]:
            arr[i], arr[i + 1] = arr[i + 1], arr[i]
    return arr


def generate(params: Dict[str, Any], rng: Any = random) -> Tuple[SortStep, ...]:
    p = sanitize_params(params)
    arr = generate_array(p["size"], p["order"], rng)
    return SORTERS[p["algorithm"]](arr)


# ---------------------------------------------------------------------------
# Recording helper
# ---------------------------------------------------------------------------
class _Tape:
    """Collects snapshots of a list that the sort mutates in place."""

    def __init__(self, arr: Sequence[int]):
        self.arr   = list(arr)
        self.steps: List[SortStep] = []
        self.comps = 0
        self.swaps = 0

    def snap(self, highlights: Dict[int, str], explanation: str = "", swap_pair=None) -> None:
        self.steps.append(SortStep(
            values=tuple(self.arr),
            highlights=freeze_states(highlights, len(self.arr)),
            comparisons=self.comps,
            swaps=self.swaps,
            swap_pair=swap_pair,
            explanation=explanation,
        ))

    def finish(self, name: str) -> Tuple[SortStep, ...]:
        n = len(self.arr)
        summary = f"Sorted with {self.comps} comparison(s) and {self.swaps} swap(s)."
        self.steps.append(SortStep(
            values=tuple(self.arr),
            highlights=(SORTED,) * n,
            comparisons=self.comps,
            swaps=self.swaps,
            result=summary,
            explanation=f"{name} complete. {summary}",
        ))
        return number_steps(self.steps)


def _empty() -> Tuple[SortStep, ...]:
    return number_steps([SortStep(result="Nothing to sort", explanation="The list is empty.")])


# ---------------------------------------------------------------------------
# Bubble sort
# ---------------------------------------------------------------------------
def bubble_sort(values: Sequence[int]) -> Tuple[SortStep, ...]:
    if not values:
        return _empty()
    tape = _Tape(values)
    a, n = tape.arr, len(tape.arr)
    tape.snap({}, "Bubble sort: compare neighbours, swap if out of order.")

    for i in range(n - 1):
        swapped = False
        tail = {s: SORTED for s in range(n - i, n)}
        for j in range(n - 1 - i):
            tape.comps += 1
            tape.snap({**tail, j: COMPARING, j + 1: COMPARING}, f"Compare {a[j]} and {a[j + 1]}.")
            if a[j] > a[j + 1]:
                a[j], a[j + 1] = a[j + 1], a[j]
                tape.swaps += 1
                swapped = True
                tape.snap({**tail, j: SWAPPING, j + 1: SWAPPING},
                          f"{a[j + 1]} > {a[j]}: swap them.", swap_pair=(j, j + 1))
        if not swapped:
            break
    return tape.finish("Bubble sort")


# ---------------------------------------------------------------------------
# Insertion sort
# ---------------------------------------------------------------------------
def insertion_sort(values: Sequence[int]) -> Tuple[SortStep, ...]:
    if not values:
        return _empty()
    tape = _Tape(values)
    a, n = tape.arr, len(tape.arr)
    tape.snap({}, "Insertion sort: grow a sorted prefix one item at a time.")

    for i in range(1, n):
        key = a[i]
        j = i - 1
        tape.snap({i: COMPARING}, f"Insert {key} into the sorted prefix.")
        while j >= 0 and a[j] > key:
            tape.comps += 1
            a[j + 1] = a[j]
            tape.swaps += 1
            tape.snap({j: SWAPPING, j + 1: SWAPPING}, f"{a[j]} > {key}: shift it right.",
                      swap_pair=(j, j + 1))
            j -= 1
        if j >= 0:
            tape.comps += 1
        a[j + 1] = key
        tape.snap({j + 1: SORTED}, f"{key} placed at index {j + 1}.")
    return tape.finish("Insertion sort")


# ---------------------------------------------------------------------------
# Merge sort
# ---------------------------------------------------------------------------
def merge_sort(values: Sequence[int]) -> Tuple[SortStep, ...]:
    if not values:
        return _empty()
    tape = _Tape(values)
    tape.snap({}, "Merge sort: split in halves, then merge sorted halves.")
    _merge_sort(tape, 0, len(tape.arr) - 1)
    return tape.finish("Merge sort")


def _merge_sort(tape: _Tape, lo: int, hi: int) -> None:
    if lo >= hi:
        return
    mid = (lo + hi) // 2
    _merge_sort(tape, lo, mid)
    _merge_sort(tape, mid + 1, hi)
    _merge(tape, lo, mid, hi)


def _merge(tape: _Tape, lo: int, mid: int, hi: int) -> None:
    a = tape.arr
    left, right = a[lo:mid + 1], a[mid + 1:hi + 1]
    i = j = 0
    k = lo
    while i < len(left) and j < len(right):
        tape.comps += 1
        tape.snap({lo + i: COMPARING, mid + 1 + j: COMPARING},
                  f"Compare {left[i]} and {right[j]}.")
        if left[i] <= right[j]:
            a[k] = left[i]
            i += 1
        else:
            a[k] = right[j]
            j += 1
        tape.swaps += 1
        tape.snap({k: SWAPPING}, f"Write {a[k]} to index {k}.")
        k += 1
    for rest in (left[i:], right[j:]):
        for v in rest:
            a[k] = v
            tape.swaps += 1
            tape.snap({}, f"Copy remaining {v} to index {k}.")
            k += 1


SORTERS = {
    "bubble":    bubble_sort,
    "insertion": insertion_sort,
    "merge":     merge_sort,
}
