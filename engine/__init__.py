"""
engine/
-------
Playback layer.

    from engine import PlaybackEngine, PlaybackState, TickScheduler
    from engine.visualizer import Visualizer

Visualizer is imported from its module directly: it depends on the
simulation registry and the painters, which themselves import from here.
"""

from engine.scheduler import TickScheduler, TimerHandle
from engine.playback  import PlaybackEngine, PlaybackState, ControlOptions, SPEEDS, BASE_INTERVAL
from engine.utils     import fisher_yates, resize_surface, theme_colors, debounce, Surface, Palette

__all__ = [
    "TickScheduler",
    "TimerHandle",
    "PlaybackEngine",
    "PlaybackState",
    "ControlOptions",
    "SPEEDS",
    "BASE_INTERVAL",
    "fisher_yates",
    "resize_surface",
    "theme_colors",
    "debounce",
    "Surface",
    "Palette",
]
