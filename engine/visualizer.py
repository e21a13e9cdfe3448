"""
visualizer.py — Build-Once Wiring of a Simulation to an Engine
===============================================================
A Visualizer owns ONE PlaybackEngine and binds a registry entry to it:

    on_reset  → sanitize params, run the step generator, time it
    on_step   → engine.advance()
    on_render → paint engine.current_step with a freshly looked-up palette

The last painted frame is kept so a control surface can fetch it
without forcing another render.

Usage:
    vis = Visualizer(get_simulation("searching-algorithms"))
    vis.update_params({"algorithm": "binary", "target": 9})   # resets
    vis.engine.play()
    vis.engine.scheduler.run_pending()
    vis.frame                      # HTML for the current step
    vis.export()                   # serialisable run for save / replay
"""

import logging
import random
import time
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Callable, Dict, Optional

from engine.playback import PlaybackEngine, PlaybackState
from engine.utils import DEBOUNCE_WAIT, Surface, debounce, theme_colors
from ui.canvas import FrameInfo, get_painter, paint_placeholder

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Run summary — what the stats panel and export report
# ---------------------------------------------------------------------------
@dataclass
class RunSummary:
    key:          str   = ""
    label:        str   = ""
    total_steps:  int   = 0
    result:       str   = ""
    wall_time_ms: float = 0.0       # time spent in the step generator
    resets:       int   = 0


# ---------------------------------------------------------------------------
# Visualizer
# ---------------------------------------------------------------------------
class Visualizer:
    """
    Attributes:
        info    : SimulationInfo from the registry.
        engine  : The PlaybackEngine this visualizer owns.
        params  : Current (sanitized) input parameters.
        surface : Drawing target size, updated by resize().
        frame   : HTML of the last render ("" before the first reset).
        theme   : Theme override; None = ambient theme at render time.
    """

    def __init__(
        self,
        info: Any,
        painter: Optional[Callable[..., str]] = None,
        scheduler: Any = None,
        rng: Any = None,
        theme: Optional[str] = None,
        debounce_wait: float = DEBOUNCE_WAIT,
    ):
        self.info     = info
        self.painter  = painter or get_painter(info.key) or paint_placeholder
        self.engine   = PlaybackEngine(target=info.key, controls=info.controls, scheduler=scheduler)
        self.params:  Dict[str, Any]     = info.sanitize(dict(info.defaults))
        self.surface: Surface            = Surface()
        self.frame:   str                = ""
        self.theme:   Optional[str]      = theme
        self.summary: RunSummary         = RunSummary(key=info.key, label=info.label)
        self.state_log: list             = []

        self._rng        = rng or random.Random()
        self._on_resize  = debounce(self.engine.render, self.engine.scheduler, debounce_wait)

        (self.engine
            .register_on_reset(self._generate)
            .register_on_step(self.engine.advance)
            .register_on_render(self._paint)
            .register_on_state_change(self._record_state))

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    def update_params(self, params: Optional[Dict[str, Any]] = None) -> None:
        """Merge new inputs over the current ones and reset."""
        merged = dict(self.params)
        merged.update(params or {})
        self.params = self.info.sanitize(merged)
        self.engine.reset()

    def resize(self, width: Any = None, dpr: Any = None) -> None:
        """Record the new surface size; the redraw is debounced."""
        try:
            if width is not None:
                self.surface.parent_width = max(1.0, float(width))
            if dpr is not None:
                self.surface.device_pixel_ratio = max(0.5, float(dpr))
        except (TypeError, ValueError):
            logger.warning(f"[{self.info.key}] ignoring resize width={width!r} dpr={dpr!r}")
            return
        self._on_resize()

    def set_theme(self, theme: Optional[str]) -> None:
        self.theme = theme
        self.engine.render()

    # ------------------------------------------------------------------
    # Read-only view for the control surface
    # ------------------------------------------------------------------
    def status(self) -> Dict[str, Any]:
        e = self.engine
        step = e.current_step
        return {
            "key":      self.info.key,
            "state":    e.state.value,
            "position": e.position,
            "length":   e.length,
            "speed":    e.speed,
            "result":   getattr(step, "result", None),
            "frame":    self.frame,
            "controls": asdict(e.controls),
        }

    def export(self) -> Dict[str, Any]:
        return {
            "key":     self.info.key,
            "params":  dict(self.params),
            "summary": asdict(self.summary),
            "steps":   [_to_dict(s) for s in self.engine.steps],
        }

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------
    def _generate(self):
        started = time.monotonic()
        if self.info.randomized:
            steps = self.info.generate(self.params, rng=self._rng)
        else:
            steps = self.info.generate(self.params)
        wall_ms = (time.monotonic() - started) * 1000

        last = steps[-1] if steps else None
        self.summary = RunSummary(
            key=self.info.key,
            label=self.info.label,
            total_steps=len(steps),
            result=(getattr(last, "result", None) or ""),
            wall_time_ms=round(wall_ms, 2),
            resets=self.summary.resets + 1,
        )
        logger.debug(f"[{self.info.key}] generated {len(steps)} step(s) in {wall_ms:.2f} ms")
        return steps

    def _paint(self) -> None:
        e = self.engine
        self.frame = self.painter(
            e.current_step,
            FrameInfo(e.position, e.length),
            theme_colors(self.theme),
            self.surface,
        )

    def _record_state(self, state: PlaybackState) -> None:
        self.state_log.append(state.value)
        del self.state_log[:-50]


def _to_dict(step: Any) -> Any:
    return asdict(step) if is_dataclass(step) else step
