"""
searching.py — Linear & Binary Search
======================================
Pre-computes every state of a search over a list of integers.

Per-index marks (SearchStep.states):
    "checking"    – the element being compared right now
    "eliminated"  – ruled out
    "in-range"    – still a candidate (binary search)
    "midpoint"    – the element binary search is about to compare
    "found"       – the match

Randomness boundary: only build_search_list() shuffles (via
fisher_yates).  linear_search / binary_search are pure.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engine.utils import fisher_yates
from simulations.inputs import choose, clamp, parse_bool, parse_int
from simulations.step import Snapshot, freeze_states, number_steps

ALGORITHMS = ("linear", "binary")
LIST_SIZES = (8, 12, 16, 20)

DEFAULT_PARAMS: Dict[str, Any] = {
    "algorithm": "linear",
    "target":    7,
    "size":      12,
    "sorted":    False,
}


@dataclass(frozen=True)
class SearchStep(Snapshot):
    """
    Attributes:
        values      : The list being searched.
        states      : Per-index mark (None = untouched).
        comparisons : Comparisons made so far.
        lo / hi     : Binary-search bounds (None for linear search).
        action      : "start" | "checking" | "partition" | "bounds" | "done".
    """

    values:      Tuple[int, ...]           = ()
    states:      Tuple[Optional[str], ...] = ()
    comparisons: int                       = 0
    lo:          Optional[int]             = None
    hi:          Optional[int]             = None
    action:      str                       = "start"


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------
def sanitize_params(params: Dict[str, Any]) -> Dict[str, Any]:
    algorithm = choose(params.get("algorithm"), ALGORITHMS, DEFAULT_PARAMS["algorithm"])
    size      = parse_int(params.get("size"), DEFAULT_PARAMS["size"])
    return {
        "algorithm": algorithm,
        "target":    parse_int(params.get("target"), 0),
        "size":      clamp(size, 0, max(LIST_SIZES)),
        # binary search needs a sorted list
        "sorted":    algorithm == "binary" or parse_bool(params.get("sorted")),
    }


def build_search_list(size: int, sort: bool, rng: Any = random) -> List[int]:
    """`size` distinct values drawn from 1..2*size (shuffle boundary)."""
    pool = list(range(1, size * 2 + 1))
    fisher_yates(pool, rng)
    picked = pool[:size]
    return sorted(picked) if sort else picked


def generate(params: Dict[str, Any], rng: Any = random) -> Tuple[SearchStep, ...]:
    p = sanitize_params(params)
    values = build_search_list(p["size"], p["sorted"], rng)
    if p["algorithm"] == "binary":
        return binary_search(values, p["target"])
    return linear_search(values, p["target"])


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------
def linear_search(values: Sequence[int], target: int) -> Tuple[SearchStep, ...]:
    values = tuple(values)
    n = len(values)
    if not n:
        return _empty()

    steps = [_snap(values, {}, 0, explanation=f"Search the list for {target}, one item at a time.")]
    comps = 0
    states: Dict[int, str] = {}
    for i, value in enumerate(values):
        comps += 1
        states[i] = "checking"
        steps.append(_snap(
            values, states, comps, action="checking",
            explanation=f"Compare item {i} ({value}) with {target}.",
        ))
        if value == target:
            states[i] = "found"
            steps.append(_snap(
                values, states, comps, action="done", result=f"Found at index {i}",
                explanation=f"{value} matches, so stop after {comps} comparison(s).",
            ))
            return number_steps(steps)
        states[i] = "eliminated"

    steps.append(_snap(
        values, states, comps, action="done", result="Not found",
        explanation=f"Every item checked; {target} is not in the list.",
    ))
    return number_steps(steps)


def binary_search(values: Sequence[int], target: int) -> Tuple[SearchStep, ...]:
    """`values` must be sorted ascending."""
    values = tuple(values)
    n = len(values)
    if not n:
        return _empty()

    lo, hi = 0, n - 1
    comps = 0
    steps = [_snap(values, {}, 0, lo=lo, hi=hi,
                   explanation=f"Search the sorted list for {target} by halving the range.")]
    states: Dict[int, str] = {}

    while lo <= hi:
        mid = (lo + hi) // 2
        comps += 1
        states = {}
        for i in range(n):
            if i < lo or i > hi:
                states[i] = "eliminated"
            elif i == mid:
                states[i] = "midpoint"
            else:
                states[i] = "in-range"
        steps.append(_snap(
            values, states, comps, lo=lo, hi=hi, action="partition",
            explanation=f"Midpoint of {lo}..{hi} is index {mid} ({values[mid]}).",
        ))

        if values[mid] == target:
            states[mid] = "found"
            steps.append(_snap(
                values, states, comps, lo=lo, hi=hi, action="done",
                result=f"Found at index {mid}",
                explanation=f"{values[mid]} matches: found after {comps} comparison(s).",
            ))
            return number_steps(steps)

        if target < values[mid]:
            hi = mid - 1
            why = f"{target} < {values[mid]}: discard the upper half."
        else:
            lo = mid + 1
            why = f"{target} > {values[mid]}: discard the lower half."
        states[mid] = "checking"
        steps.append(_snap(values, states, comps, lo=lo, hi=hi, action="bounds", explanation=why))
        states[mid] = "eliminated"

    steps.append(_snap(
        values, states, comps, lo=lo, hi=hi, action="done", result="Not found",
        explanation=f"The range is empty; {target} is not in the list.",
    ))
    return number_steps(steps)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _snap(values, states, comps, lo=None, hi=None, action="start", result=None, explanation=""):
    return SearchStep(
        values=values,
        states=freeze_states(states, len(values)),
        comparisons=comps,
        lo=lo,
        hi=hi,
        action=action,
        result=result,
        explanation=explanation,
    )


def _empty() -> Tuple[SearchStep, ...]:
    return number_steps([SearchStep(
        action="done",
        result="Nothing to search",
        explanation="The list is empty, so there is nothing to compare.",
    )])
