"""
packet_switching.py — Packet Switching
=======================================
Splits a message into packets, sends them across a small fixed network
(possibly on different routes) and reassembles them at the destination.

Rules:
  1. Packet i (sequence number i + 1) gets route ROUTES[i % len(ROUTES)].
  2. Packets are staggered: packet i starts moving at tick i.
  3. Every tick, each packet that has not arrived moves exactly one hop.
  4. A snapshot is taken after every tick; the run ends after a tick in
     which nothing moved.

The destination can only rebuild the message once every packet has
arrived, and it orders them by sequence number, not by arrival.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from simulations.inputs import clamp, parse_int
from simulations.step import Snapshot, number_steps


# ---------------------------------------------------------------------------
# Fixed network (positions in 0..1 space, scaled at draw time)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NetNode:
    id:    str
    label: str
    rx:    float
    ry:    float


NET_NODES: Tuple[NetNode, ...] = (
    NetNode("src", "Source",   0.08, 0.5),
    NetNode("r1",  "Router A", 0.3,  0.25),
    NetNode("r2",  "Router B", 0.3,  0.75),
    NetNode("r3",  "Router C", 0.55, 0.2),
    NetNode("r4",  "Router D", 0.55, 0.8),
    NetNode("r5",  "Router E", 0.75, 0.5),
    NetNode("dst", "Dest",     0.92, 0.5),
)

NET_EDGES: Tuple[Tuple[str, str], ...] = (
    ("src", "r1"), ("src", "r2"),
    ("r1", "r3"), ("r1", "r5"),
    ("r2", "r4"), ("r2", "r5"),
    ("r3", "r5"), ("r4", "r5"),
    ("r5", "dst"),
)

ROUTES: Tuple[Tuple[str, ...], ...] = (
    ("src", "r1", "r3", "r5", "dst"),
    ("src", "r1", "r5", "dst"),
    ("src", "r2", "r5", "dst"),
    ("src", "r2", "r4", "r5", "dst"),
)

PKT_COLOURS = (
    "#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6",
    "#ec4899", "#06b6d4", "#84cc16", "#f97316", "#6366f1",
)

PACKET_SIZES = (1, 2, 3, 4, 5)
MAX_MESSAGE  = 60

DEFAULT_PARAMS: Dict[str, Any] = {"message": "Hello", "packet_size": 2}


# ---------------------------------------------------------------------------
# Snapshot types
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Packet:
    """
    Attributes:
        seq     : 1-based sequence number.
        data    : Payload chunk.
        route   : Hop ids from source to destination.
        colour  : Chip colour.
        hop     : Index into route; -1 = not sent yet.
        arrived : True once hop is the last index of route.
    """

    seq:     int
    data:    str
    route:   Tuple[str, ...]
    colour:  str
    hop:     int  = -1
    arrived: bool = False

    @property
    def location(self) -> Optional[str]:
        return self.route[self.hop] if self.hop >= 0 else None

    @property
    def status(self) -> str:
        if self.hop < 0:
            return "Waiting"
        if self.arrived:
            return "Arrived"
        return f"In transit ({self.location})"


@dataclass(frozen=True)
class PacketStep(Snapshot):
    message: str                 = ""
    tick:    int                 = 0
    packets: Tuple[Packet, ...]  = ()


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------
def sanitize_params(params: Dict[str, Any]) -> Dict[str, Any]:
    message = params.get("message")
    message = "" if message is None else str(message)
    size = parse_int(params.get("packet_size"), DEFAULT_PARAMS["packet_size"])
    return {
        "message":     message[:MAX_MESSAGE],
        "packet_size": clamp(size, PACKET_SIZES[0], PACKET_SIZES[-1]),
    }


def generate(params: Dict[str, Any]) -> Tuple[PacketStep, ...]:
    p = sanitize_params(params)
    return packet_steps(p["message"], p["packet_size"])


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def split_packets(message: str, size: int) -> List[Packet]:
    packets = []
    for i in range(0, len(message), size):
        k = len(packets)
        packets.append(Packet(
            seq=k + 1,
            data=message[i:i + size],
            route=ROUTES[k % len(ROUTES)],
            colour=PKT_COLOURS[k % len(PKT_COLOURS)],
        ))
    return packets


def packet_steps(message: str, size: int) -> Tuple[PacketStep, ...]:
    size = max(1, size)
    if not message:
        return number_steps([PacketStep(
            result="Nothing to send",
            explanation="Type a message to split it into packets.",
        )])

    packets = split_packets(message, size)
    # working state: per-packet hop index
    hops = [-1] * len(packets)

    def snap(tick: int, explanation: str) -> PacketStep:
        current = tuple(
            Packet(p.seq, p.data, p.route, p.colour, hops[k], hops[k] == len(p.route) - 1)
            for k, p in enumerate(packets)
        )
        done = all(p.arrived for p in current)
        return PacketStep(
            message=message,
            tick=tick,
            packets=current,
            result=f'Reassembled "{reassemble(current)}"' if done else None,
            explanation=explanation,
        )

    steps = [snap(0, f"Split {len(message)} character(s) into {len(packets)} packet(s) of up to {size}.")]

    max_hops = max(len(p.route) for p in packets)
    for t in range(max_hops + len(packets)):
        moved = []
        for k, p in enumerate(packets):
            if hops[k] == len(p.route) - 1 or t < k:
                continue
            hops[k] += 1
            moved.append(p.seq)
        if moved:
            why = f"Tick {t + 1}: packet(s) {', '.join(map(str, moved))} move one hop."
        else:
            why = f"Tick {t + 1}: every packet has arrived."
        steps.append(snap(t + 1, why))
        if not moved:
            break
    return number_steps(steps)


# ---------------------------------------------------------------------------
# Reassembly
# ---------------------------------------------------------------------------
def reassemble(packets: Tuple[Packet, ...]) -> Optional[str]:
    """The original message once every packet has arrived, else None."""
    if not packets or not all(p.arrived for p in packets):
        return None
    return "".join(p.data for p in sorted(packets, key=lambda p: p.seq))


def partial_reassembly(packets: Tuple[Packet, ...]) -> str:
    """What the destination holds so far, with ░ for missing packets."""
    done = reassemble(packets)
    if done is not None:
        return f'"{done}"'
    width = len(packets[0].data) if packets else 0
    arrived = {p.seq: p.data for p in packets if p.arrived}
    return " | ".join(arrived.get(i + 1, "░" * width) for i in range(len(packets)))
