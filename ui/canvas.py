"""
canvas.py — Snapshot Painters
==============================
Pure rendering functions: Snapshot + Palette + Surface → HTML/SVG string.

Every painter consumes:
  • step     – the snapshot at the engine's current position
  • frame    – FrameInfo (position, length) for the "step n / m" label
  • palette  – theme colours, looked up fresh for every render
  • surface  – the drawing target size reported by the browser

Design decisions:
  - NO mutation and NO algorithm logic.  A painter only reads the
    snapshot; anything it shows was decided by the generator.
  - State-based colouring is a dict lookup: state string → colour.
  - User-supplied text is escaped before it is put into markup.
"""

import html
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from engine.utils import Palette, Surface, resize_surface
from simulations import packet_switching
from simulations.binary_arithmetic import BITS, AdditionStep, ShiftStep, bit_string, to_int
from simulations.compression import RLEStep
from simulations.packet_switching import PacketStep, partial_reassembly
from simulations.searching import SearchStep
from simulations.sorting import COMPARING, SORTED, SWAPPING, SortStep

GROUP_COLOURS = packet_switching.PKT_COLOURS

# sorting bars: state → colour (None = palette.muted)
BAR_COLOURS: Dict[str, str] = {
    COMPARING: "#f59e0b",   # amber
    SWAPPING:  "#ef4444",   # red
    SORTED:    "#10b981",   # green
}


@dataclass(frozen=True)
class FrameInfo:
    position: int
    length:   int

    @property
    def label(self) -> str:
        return f"{self.position} / {max(0, self.length - 1)}"


def _esc(value) -> str:
    return html.escape(str(value), quote=True)


def _stats(palette: Palette, **items) -> str:
    cells = "".join(
        f'<div class="stat"><span class="stat-label">{_esc(k.replace("_", " "))}</span>'
        f'<span class="stat-value" style="color:{palette.text}">{_esc(v)}</span></div>'
        for k, v in items.items()
    )
    return f'<div class="stats" style="border-color:{palette.border}">{cells}</div>'


def _explanation(step, palette: Palette) -> str:
    if not step.explanation:
        return ""
    return f'<p class="explanation" style="color:{palette.muted}">{_esc(step.explanation)}</p>'


# ---------------------------------------------------------------------------
# Searching
# ---------------------------------------------------------------------------
def paint_search(step: SearchStep, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    items = []
    for i, value in enumerate(step.values):
        state = step.states[i] if i < len(step.states) else None
        cls = f"search-item {state}" if state else "search-item"
        items.append(
            f'<div class="{cls}" style="border-color:{palette.border}">'
            f'<span class="idx">{i}</span>{value}</div>'
        )
    return (
        f'<div class="search-list" style="background:{palette.bg};color:{palette.text}">'
        f'{"".join(items)}</div>'
        + _stats(palette, comparisons=step.comparisons, result=step.result or "—", step=frame.label)
        + _explanation(step, palette)
    )


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
def paint_sort(step: SortStep, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    w, h = resize_surface(surface, 280, 0.5, 400)
    n = len(step.values)
    parts = [
        f'<svg class="sort-canvas" width="{w:.0f}" height="{h:.0f}" viewBox="0 0 {w:.0f} {h:.0f}" '
        f'xmlns="http://www.w3.org/2000/svg">',
        f'<rect width="{w:.0f}" height="{h:.0f}" fill="{palette.bg}"/>',
    ]
    if n:
        pad = 4
        bar_w = (w - pad * 2) / n
        gap = max(1.0, bar_w * 0.1)
        for i, value in enumerate(step.values):
            bar_h = (value / n) * (h - pad * 2 - 20)
            x = pad + i * bar_w + gap / 2
            y = h - pad - bar_h
            colour = BAR_COLOURS.get(step.highlights[i], palette.muted)
            parts.append(
                f'<rect x="{x:.1f}" y="{y:.1f}" width="{bar_w - gap:.1f}" '
                f'height="{bar_h:.1f}" fill="{colour}"/>'
            )
    parts.append("</svg>")
    return (
        "".join(parts)
        + _stats(palette, comparisons=step.comparisons, swaps=step.swaps, step=frame.label)
        + _explanation(step, palette)
    )


# ---------------------------------------------------------------------------
# Compression
# ---------------------------------------------------------------------------
def paint_rle(step: RLEStep, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    groups = []
    for k, g in enumerate(step.groups):
        colour = GROUP_COLOURS[k % len(GROUP_COLOURS)]
        run = g.symbol * min(g.count, 20) + ("…" if g.count > 20 else "")
        groups.append(
            f'<span class="rle-group" style="background:{colour}1a;border:1px solid {colour}">'
            f'<span class="rle-count" style="background:{colour}">{g.count}</span>'
            f'{_esc(run)} → {_esc(g.encoded)}</span>'
        )
    consumed, rest = step.text[:step.cursor], step.text[step.cursor:]
    return (
        f'<div class="rle-input" style="color:{palette.text}">'
        f'<span class="consumed" style="color:{palette.muted}">{_esc(consumed)}</span>{_esc(rest)}</div>'
        f'<div class="rle-steps">{"".join(groups)}</div>'
        f'<pre class="rle-output" style="background:{palette.surface};color:{palette.text}">'
        f'{_esc(step.encoded)}</pre>'
        + _stats(
            palette,
            original=step.original_size,
            compressed=step.encoded_size,
            ratio=step.result if step.is_final and step.result else "—",
            step=frame.label,
        )
        + _explanation(step, palette)
    )


# ---------------------------------------------------------------------------
# Packet switching
# ---------------------------------------------------------------------------
def paint_packets(step: PacketStep, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    w, h = resize_surface(surface, 300, 0.45)
    pad = 30
    pos = {
        n.id: (pad + n.rx * (w - pad * 2), pad + n.ry * (h - pad * 2))
        for n in packet_switching.NET_NODES
    }
    parts = [
        f'<svg class="pkt-canvas" width="{w:.0f}" height="{h:.0f}" viewBox="0 0 {w:.0f} {h:.0f}" '
        f'xmlns="http://www.w3.org/2000/svg">',
        f'<rect width="{w:.0f}" height="{h:.0f}" fill="{palette.bg}"/>',
    ]
    for a, b in packet_switching.NET_EDGES:
        (x1, y1), (x2, y2) = pos[a], pos[b]
        parts.append(
            f'<line x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
            f'stroke="{palette.border_muted}" stroke-width="1.5"/>'
        )
    for n in packet_switching.NET_NODES:
        x, y = pos[n.id]
        endpoint = n.id in ("src", "dst")
        parts.append(
            f'<circle cx="{x:.1f}" cy="{y:.1f}" r="{22 if endpoint else 16}" '
            f'fill="{palette.primary if endpoint else palette.muted}"/>'
            f'<text x="{x:.1f}" y="{y + 3:.1f}" text-anchor="middle" fill="#fff" '
            f'font-size="10" font-weight="{"bold" if endpoint else "normal"}">{n.label}</text>'
        )

    at_node: Dict[str, list] = {}
    for p in step.packets:
        if p.location is not None:
            at_node.setdefault(p.location, []).append(p)
    for node_id, pkts in at_node.items():
        x, y = pos[node_id]
        for i, p in enumerate(pkts):
            px, py = x + 25 + i * 22, y - 8
            parts.append(
                f'<rect x="{px:.1f}" y="{py:.1f}" width="18" height="16" fill="{p.colour}"/>'
                f'<text x="{px + 9:.1f}" y="{py + 11:.1f}" text-anchor="middle" fill="#fff" '
                f'font-size="9" font-weight="bold">{p.seq}</text>'
            )
    parts.append("</svg>")

    rows = "".join(
        f'<tr><td><span class="pkt-chip" style="background:{p.colour}">{p.seq}</span></td>'
        f'<td><code>{_esc(p.data)}</code></td><td>{p.seq}/{len(step.packets)}</td>'
        f'<td>{_esc(p.status)}</td></tr>'
        for p in step.packets
    )
    table = (
        f'<table class="pkt-table" style="color:{palette.text};border-color:{palette.border}">'
        f'<thead><tr><th>#</th><th>Data</th><th>Seq</th><th>Status</th></tr></thead>'
        f'<tbody>{rows}</tbody></table>'
    )
    return (
        "".join(parts) + table
        + f'<p class="reassembled">{_esc(partial_reassembly(step.packets))}</p>'
        + _stats(palette, tick=step.tick, step=frame.label)
        + _explanation(step, palette)
    )


# ---------------------------------------------------------------------------
# Binary arithmetic
# ---------------------------------------------------------------------------
def _bit_row(label: str, cells, palette: Palette, highlight: int = -1, cls: str = "") -> str:
    tds = "".join(
        f'<td class="add-cell{" highlight" if i == highlight else ""}" '
        f'style="border-color:{palette.border}">{_esc(c)}</td>'
        for i, c in enumerate(cells)
    )
    return f'<tr class="add-row {cls}"><th class="row-label">{_esc(label)}</th>{tds}</tr>'


def paint_addition(step: AdditionStep, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    col = step.column
    hl = col if col >= 0 else -1

    # carries are only shown for columns already added
    carry_vis = []
    for ci in range(BITS):
        if col == -1 or (col >= 0 and ci < col):
            carry_vis.append("")
        else:
            carry_vis.append(step.carry[ci + 1] or "")
    if col == -2 and step.carry[0]:
        carry_vis = [step.carry[0]] + carry_vis[:-1]

    if col == -2:
        result_vis = list(step.sum_bits)
    elif col == -1:
        result_vis = [""] * BITS
    else:
        result_vis = [v if i >= col else "" for i, v in enumerate(step.sum_bits)]

    table = (
        f'<table class="addition-grid" style="color:{palette.text}">'
        + _bit_row("carry", carry_vis, palette, hl, "carry-row")
        + _bit_row("A", step.a, palette, hl)
        + _bit_row("B", step.b, palette, hl)
        + _bit_row("=", result_vis, palette, hl, "result-row")
        + "</table>"
    )
    msg = ""
    if step.is_final:
        cls = "error" if step.overflow else "ok"
        msg = f'<p class="overflow-msg {cls}">{_esc(step.result)}</p>'
    return (
        table + msg
        + _stats(palette, A=to_int(step.a), B=to_int(step.b), step=frame.label)
        + _explanation(step, palette)
    )


def paint_shift(step: ShiftStep, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    before = "".join(f'<td class="shift-cell active">{b}</td>' for b in step.before)
    after = "".join(
        f'<td class="shift-cell {"new" if i in step.new_bits else "active"}">{b}</td>'
        for i, b in enumerate(step.after)
    )
    return (
        f'<table class="shift-display" style="color:{palette.text}">'
        f'<tr class="shift-row"><th class="row-label">Before</th>{before}</tr>'
        f'<tr class="shift-row"><th class="row-label">After</th>{after}</tr></table>'
        f'<p class="shift-value-label">{_esc(step.result)}</p>'
        + _stats(palette, before=bit_string(step.before), after=bit_string(step.after))
    )


def paint_binary(step, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    if isinstance(step, ShiftStep):
        return paint_shift(step, frame, palette, surface)
    return paint_addition(step, frame, palette, surface)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
Painter = Callable[..., str]

PAINTERS: Dict[str, Painter] = {
    "binary-arithmetic":    paint_binary,
    "searching-algorithms": paint_search,
    "sorting-algorithms":   paint_sort,
    "compression":          paint_rle,
    "packet-switching":     paint_packets,
}


def get_painter(key: str) -> Optional[Painter]:
    return PAINTERS.get(key)


def paint_placeholder(step, frame: FrameInfo, palette: Palette, surface: Surface) -> str:
    """Fallback for a snapshot type without a dedicated painter."""
    return (
        f'<div class="placeholder" style="color:{palette.text}">'
        f'{_esc(step.result or "")}</div>'
        + _explanation(step, palette)
    )
