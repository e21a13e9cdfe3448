"""
step.py — Simulation Step Snapshot
===================================
Every simulation is a pure function that returns a tuple of Snapshots.
A Snapshot is a frozen-in-time picture of everything a painter needs
to draw one frame:

    • The data being worked on (array, bits, packets, groups, …)
    • Which positions are highlighted and why
    • Running counters (comparisons, swaps, …)
    • A plain-English explanation of *why* this step happened
    • The result text once the run is decided

Design decisions:
  - Snapshots are frozen dataclasses whose containers are tuples, so
    nothing the generator mutates afterwards can leak into a step the
    engine has already stored.  Any step may be re-rendered by index
    at any time.
  - Each simulation subclasses Snapshot with its own fields; the base
    only carries what the engine and the generic panels read.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Tuple


@dataclass(frozen=True)
class Snapshot:
    """
    Attributes:
        step_number : 0-based index of this step in the run.
        explanation : Human-readable "what just happened" text.
        result      : Outcome text once decided (e.g. "Found at index 3").
        is_final    : True on the very last step.
    """

    step_number: int           = 0
    explanation: str           = ""
    result:      Optional[str] = None
    is_final:    bool          = False


def freeze_states(states: Dict[int, str], length: int) -> Tuple[Optional[str], ...]:
    """Turn an index → state dict into a dense, immutable tuple."""
    return tuple(states.get(i) for i in range(length))


def number_steps(steps: Iterable[Any]) -> Tuple[Any, ...]:
    """
    Stamp step_number / is_final onto a list of snapshots built without
    them.  Generators collect first and number once, since the final
    index is only known at the end.
    """
    steps = list(steps)
    last = len(steps) - 1
    return tuple(
        replace(s, step_number=i, is_final=(i == last))
        for i, s in enumerate(steps)
    )

