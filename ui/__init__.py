"""
ui/
---
Presentation layer.

    from ui import get_painter, FrameInfo
    from ui import playback_controls, parameter_panel, topic_index, …
"""

from ui.canvas import FrameInfo, PAINTERS, get_painter, paint_placeholder

from ui.controls import (
    playback_controls,
    parameter_panel,
    topic_index,
    breadcrumbs,
    theme_toggle,
)

__all__ = [
    "FrameInfo",
    "PAINTERS",
    "get_painter",
    "paint_placeholder",
    "playback_controls",
    "parameter_panel",
    "topic_index",
    "breadcrumbs",
    "theme_toggle",
]
