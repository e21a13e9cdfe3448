"""
utils.py — Shared Simulation Utilities
=======================================
Stateless helpers every visualizer may use:

  • fisher_yates     – in-place uniform shuffle (the ONLY sanctioned source
                       of randomness for step generators)
  • resize_surface   – device-pixel-ratio aware sizing of a drawing surface
  • theme_colors     – palette for the ambient light / dark theme
  • debounce         – collapse a burst of resize events into one redraw

Nothing in this module keeps state between calls.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, MutableSequence, Optional, Tuple

from flask import current_app, has_request_context, request

logger = logging.getLogger(__name__)

DEFAULT_THEME      = "dark"
THEME_COOKIE       = "gcse-cs-theme"
DEBOUNCE_WAIT      = 0.1      # seconds of quiet before a resize redraw


# ---------------------------------------------------------------------------
# Shuffle
# ---------------------------------------------------------------------------
def fisher_yates(seq: MutableSequence, rng: Any = random) -> MutableSequence:
    """Shuffle `seq` in place and return it.  `rng` needs `randrange`."""
    for i in range(len(seq) - 1, 0, -1):
        j = rng.randrange(i + 1)
        seq[i], seq[j] = seq[j], seq[i]
    return seq


# ---------------------------------------------------------------------------
# Surface resize
# ---------------------------------------------------------------------------
@dataclass
class Surface:
    """
    A drawing target as the browser reports it.

    Attributes:
        parent_width       : CSS width of the containing element.
        device_pixel_ratio : window.devicePixelRatio (1 on plain displays).
        width / height     : Backing-store size in device pixels.
        css_width / css_height : Displayed size in CSS pixels.
    """

    parent_width:       float = 600.0
    device_pixel_ratio: float = 1.0
    width:              int   = 0
    height:             int   = 0
    css_width:          float = 0.0
    css_height:         float = 0.0


def resize_surface(
    surface: Surface,
    min_height: float,
    ratio: float,
    max_height: Optional[float] = None,
) -> Tuple[float, float]:
    """Size `surface` for its parent and return the logical (w, h)."""
    dpr = surface.device_pixel_ratio or 1.0
    w = float(surface.parent_width)
    h = max(min_height, w * ratio)
    if max_height:
        h = min(max_height, h)
    surface.width      = int(round(w * dpr))
    surface.height     = int(round(h * dpr))
    surface.css_width  = w
    surface.css_height = h
    return w, h


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Palette:
    bg:            str
    surface:       str
    surface_alt:   str
    border:        str
    border_muted:  str
    text:          str
    muted:         str
    primary:       str
    primary_fg:    str
    primary_light: str
    accent:        str
    highlight:     str


_PALETTES = {
    "light": dict(
        bg="#f8fafc", surface="#ffffff", surface_alt="#f1f5f9",
        border="#cbd5e1", border_muted="#e2e8f0",
        text="#0f172a", muted="#64748b",
        primary="#2563eb", primary_fg="#ffffff", primary_light="#dbeafe",
        accent="#f59e0b", highlight="#10b981",
    ),
    "dark": dict(
        bg="#0d1117", surface="#161b22", surface_alt="#1c2128",
        border="#30363d", border_muted="#21262d",
        text="#e6edf3", muted="#7d8590",
        primary="#0ea5e9", primary_fg="#010409", primary_light="#0c4a6e",
        accent="#f59e0b", highlight="#10b981",
    ),
}


def current_theme() -> str:
    """Theme name from the request cookie, or the configured default."""
    if not has_request_context():
        return DEFAULT_THEME
    cookie  = current_app.config.get("VIS_THEME_COOKIE", THEME_COOKIE)
    default = current_app.config.get("VIS_DEFAULT_THEME", DEFAULT_THEME)
    return request.cookies.get(cookie, default)


def theme_colors(theme: Optional[str] = None) -> Palette:
    """
    Palette for `theme`, or for the ambient theme when None.
    Called on every render: the theme can change between two frames.
    """
    name = theme or current_theme()
    if name not in _PALETTES:
        logger.warning(f"Unknown theme {name!r}, using {DEFAULT_THEME!r}")
        name = DEFAULT_THEME
    return Palette(**_PALETTES[name])


# ---------------------------------------------------------------------------
# Debounced redraw
# ---------------------------------------------------------------------------
def debounce(
    fn: Callable[[], None],
    scheduler: Any,
    wait: float = DEBOUNCE_WAIT,
) -> Callable[[], None]:
    """
    Wrap `fn` so a burst of calls runs it once, `wait` seconds after the
    last call.  `scheduler` provides `call_later(delay, cb) -> handle`.
    """
    pending = []

    def handler() -> None:
        if pending:
            pending.pop().cancel()
        pending.append(scheduler.call_later(wait, _fire))

    def _fire() -> None:
        pending.clear()
        fn()

    return handler
