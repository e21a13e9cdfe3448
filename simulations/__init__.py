"""
simulations/__init__.py — Simulation Registry
==============================================
Single source of truth for every visualizer the app knows about.

    from simulations import REGISTRY, get_simulation

REGISTRY is a dict:
    {
        "searching-algorithms": SimulationInfo(key, label, generate, …),
        …
    }

SimulationInfo is a lightweight dataclass.  The engine wiring and the UI
both consume it, so adding a visualizer is: write the step generator,
write its painter in ui/canvas.py, add one entry here.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from engine.playback import ControlOptions
from simulations import binary_arithmetic, compression, packet_switching, searching, sorting


# ---------------------------------------------------------------------------
# Form fields — what the parameter panel renders
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Field:
    name:    str
    label:   str
    kind:    str = "text"                       # text | number | select | checkbox
    options: Tuple[Any, ...] = ()


# ---------------------------------------------------------------------------
# SimulationInfo — metadata card for each visualizer
# ---------------------------------------------------------------------------
@dataclass
class SimulationInfo:
    key:             str                        # registry key = URL slug
    label:           str                        # human label
    generate:        Callable                   # params -> tuple of snapshots
    sanitize:        Callable                   # params -> clean params
    defaults:        Dict[str, Any]
    fields:          List[Field]        = field(default_factory=list)
    controls:        ControlOptions     = field(default_factory=ControlOptions)
    topic_ref:       str                = ""    # syllabus reference, e.g. "2.1.3"
    topic:           str                = ""
    tags:            List[str]          = field(default_factory=list)
    description:     str                = ""
    randomized:      bool               = False  # calls fisher_yates on reset


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, SimulationInfo] = {

    "binary-arithmetic": SimulationInfo(
        key="binary-arithmetic", label="Binary Arithmetic",
        generate=binary_arithmetic.generate, sanitize=binary_arithmetic.sanitize_params,
        defaults=binary_arithmetic.DEFAULT_PARAMS,
        fields=[
            Field("mode", "Mode", "select", binary_arithmetic.MODES),
            Field("a", "A (binary)"),
            Field("b", "B (binary)"),
            Field("value", "Shift value (binary)"),
            Field("direction", "Direction", "select", binary_arithmetic.DIRECTIONS),
            Field("places", "Places", "select", binary_arithmetic.PLACES),
        ],
        topic_ref="1.2.4", topic="Data Storage",
        tags=["binary", "addition", "overflow", "shift"],
        description="8-bit addition with carries, overflow detection and logical shifts.",
    ),

    "searching-algorithms": SimulationInfo(
        key="searching-algorithms", label="Searching Algorithms",
        generate=searching.generate, sanitize=searching.sanitize_params,
        defaults=searching.DEFAULT_PARAMS,
        fields=[
            Field("algorithm", "Algorithm", "select", searching.ALGORITHMS),
            Field("target", "Target", "number"),
            Field("size", "List size", "select", searching.LIST_SIZES),
            Field("sorted", "Sorted", "checkbox"),
        ],
        topic_ref="2.1.3", topic="Searching and Sorting Algorithms",
        tags=["search", "linear", "binary"],
        description="Linear search checks every item; binary search halves a sorted list.",
        randomized=True,
    ),

    "sorting-algorithms": SimulationInfo(
        key="sorting-algorithms", label="Sorting Algorithms",
        generate=sorting.generate, sanitize=sorting.sanitize_params,
        defaults=sorting.DEFAULT_PARAMS,
        fields=[
            Field("algorithm", "Algorithm", "select", sorting.ALGORITHMS),
            Field("size", "Array size", "select", (8, 12, 20, 30)),
            Field("order", "Initial order", "select", sorting.ORDERS),
        ],
        topic_ref="2.1.3", topic="Searching and Sorting Algorithms",
        tags=["sort", "bubble", "insertion", "merge"],
        description="Watch bubble, insertion and merge sort compare and swap.",
        randomized=True,
    ),

    "compression": SimulationInfo(
        key="compression", label="Compression (Run-Length Encoding)",
        generate=compression.generate, sanitize=compression.sanitize_params,
        defaults=compression.DEFAULT_PARAMS,
        fields=[Field("text", "Text")],
        topic_ref="1.2.5", topic="Compression",
        tags=["compression", "lossless", "rle"],
        description="Group runs of identical symbols and see how much space is saved.",
    ),

    "packet-switching": SimulationInfo(
        key="packet-switching", label="Packet Switching",
        generate=packet_switching.generate, sanitize=packet_switching.sanitize_params,
        defaults=packet_switching.DEFAULT_PARAMS,
        fields=[
            Field("message", "Message"),
            Field("packet_size", "Packet size", "select", packet_switching.PACKET_SIZES),
        ],
        topic_ref="1.3.1", topic="Networks and Topologies",
        tags=["network", "packets", "routing"],
        description="Packets take different routes and are reassembled in order.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_simulation(key: str) -> Optional[SimulationInfo]:
    """Return SimulationInfo by key, or None."""
    return REGISTRY.get(key)


def list_simulations() -> List[SimulationInfo]:
    """Return all registered simulations in insertion order."""
    return list(REGISTRY.values())


def search_simulations(query: str = "") -> List[SimulationInfo]:
    """Case-insensitive match on label, topic, reference and tags."""
    q = (query or "").strip().lower()
    if not q:
        return list_simulations()
    out = []
    for info in REGISTRY.values():
        haystack = " ".join([info.label, info.topic, info.topic_ref, info.description] + info.tags)
        if q in haystack.lower():
            out.append(info)
    return out


__all__ = [
    "Field",
    "SimulationInfo",
    "REGISTRY",
    "get_simulation",
    "list_simulations",
    "search_simulations",
]
