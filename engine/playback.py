"""
playback.py — Step-Indexed Playback Engine
===========================================
The PlaybackEngine is the ONLY object a control surface talks to.
It owns the step sequence, the cursor into it, the playback state and
the single outstanding timer handle.  Everything visualizer-specific is
plugged in through three callbacks:

    on_reset  : () -> Sequence[Snapshot]   rebuild the step sequence
    on_step   : () -> bool                 advance; False = nothing left
    on_render : () -> None                 paint engine.current_step

State machine:
    IDLE     →  reset()            →  READY
    READY    →  play()             →  RUNNING
    RUNNING  →  pause()            →  PAUSED
    PAUSED   →  play()             →  RUNNING
    RUNNING  →  callback raises    →  PAUSED  (timer dropped, error re-raised)
    any      →  advancer is False  →  FINISHED
    any      →  finish()           →  FINISHED
    any      →  reset()            →  READY   (position 0)

Timing:
    The engine never sleeps.  play() asks the scheduler for a one-shot
    timer; each tick re-arms it with the interval in force at that
    moment, so set_speed() applies from the next tick.  pause(), reset()
    and finish() cancel the handle AND bump a generation counter, so a
    callback that was already due can never move the cursor.

Thread safety:
    None needed.  Everything runs on one thread;
    ticks happen only when the scheduler is pumped.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from engine.scheduler import TickScheduler

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackState(Enum):
    IDLE     = "idle"
    READY    = "ready"
    RUNNING  = "running"
    PAUSED   = "paused"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed (multipliers of the base interval)
# ---------------------------------------------------------------------------
BASE_INTERVAL = 0.5                          # seconds between ticks at 1x
SPEEDS        = (0.25, 0.5, 1, 1.5, 2, 4)    # what the speed slider offers
MIN_SPEED     = SPEEDS[0]
MAX_SPEED     = SPEEDS[-1]


# ---------------------------------------------------------------------------
# Control options
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ControlOptions:
    """Which controls the surface exposes.  Reset is always shown."""

    play:  bool = True
    speed: bool = True
    step:  bool = True

    @classmethod
    def coerce(cls, value: Union["ControlOptions", Dict[str, Any], None]) -> "ControlOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls(
            play=value.get("play", True) is not False,
            speed=value.get("speed", True) is not False,
            step=value.get("step", True) is not False,
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class PlaybackEngine:
    """
    Attributes:
        target    : Id of the control surface this engine is bound to.
        controls  : ControlOptions for that surface.
        scheduler : Timer source with call_later(delay, fn) -> handle.
    """

    def __init__(
        self,
        target: Optional[str] = None,
        controls: Union[ControlOptions, Dict[str, Any], None] = None,
        scheduler: Any = None,
    ):
        self.target:    Optional[str]  = target
        self.controls:  ControlOptions = ControlOptions.coerce(controls)
        self.scheduler: Any            = scheduler if scheduler is not None else TickScheduler()

        self._on_reset:        Optional[Callable[[], Sequence[Any]]] = None
        self._on_step:         Optional[Callable[[], Any]]           = None
        self._on_render:       Optional[Callable[[], None]]          = None
        self._on_state_change: Optional[Callable[[PlaybackState], None]] = None

        self._steps:      Tuple[Any, ...] = ()
        self._position:   int             = 0
        self._state:      PlaybackState   = PlaybackState.IDLE
        self._speed:      float           = 1.0
        self._timer:      Any             = None
        self._generation: int             = 0

    # ------------------------------------------------------------------
    # Registration (one subscriber per slot, last write wins)
    # ------------------------------------------------------------------
    def register_on_reset(self, generator: Callable[[], Sequence[Any]]) -> "PlaybackEngine":
        self._replace("reset", self._on_reset)
        self._on_reset = generator
        return self

    def register_on_step(self, advancer: Callable[[], Any]) -> "PlaybackEngine":
        self._replace("step", self._on_step)
        self._on_step = advancer
        return self

    def register_on_render(self, painter: Callable[[], None]) -> "PlaybackEngine":
        self._replace("render", self._on_render)
        self._on_render = painter
        return self

    def register_on_state_change(self, listener: Callable[[PlaybackState], None]) -> "PlaybackEngine":
        self._replace("state_change", self._on_state_change)
        self._on_state_change = listener
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Rebuild the sequence and rewind to position 0 (READY)."""
        self._cancel_timer()
        if self._on_reset is not None:
            self._steps = tuple(self._on_reset() or ())
        self._position = 0
        self._set_state(PlaybackState.READY)
        logger.debug(f"[{self.target}] reset: {len(self._steps)} step(s)")
        self.render()

    def play(self) -> None:
        if self._state is PlaybackState.RUNNING:
            return
        if not self._can_tick():
            logger.debug(f"[{self.target}] play ignored in state {self._state.value}")
            return
        self._set_state(PlaybackState.RUNNING)
        self._schedule()

    def pause(self) -> None:
        if self._state is not PlaybackState.RUNNING:
            return
        self._cancel_timer()
        self._set_state(PlaybackState.PAUSED)

    def step_once(self) -> None:
        """One synchronous tick.  Leaves the timer alone."""
        if not self._can_tick():
            return
        self._tick()

    def finish(self) -> None:
        self._cancel_timer()
        self._set_state(PlaybackState.FINISHED)

    def render(self) -> None:
        """Repaint the current position (theme change, resize, …)."""
        if self._on_render is not None and self._steps:
            self._on_render()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, multiplier: Any) -> None:
        try:
            value = float(multiplier)
        except (TypeError, ValueError):
            logger.warning(f"[{self.target}] ignoring speed {multiplier!r}")
            return
        if value != value:  # NaN
            logger.warning(f"[{self.target}] ignoring speed {multiplier!r}")
            return
        self._speed = min(MAX_SPEED, max(MIN_SPEED, value))

    # ------------------------------------------------------------------
    # Default advancer
    # ------------------------------------------------------------------
    def advance(self) -> bool:
        """Move the cursor forward by one.  False when already at the end."""
        if self._position >= len(self._steps) - 1:
            return False
        self._position += 1
        return True

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def position(self) -> int:
        return self._position

    @property
    def length(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> Tuple[Any, ...]:
        return self._steps

    @property
    def current_step(self) -> Optional[Any]:
        if 0 <= self._position < len(self._steps):
            return self._steps[self._position]
        return None

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def interval(self) -> float:
        return BASE_INTERVAL / self._speed

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state is PlaybackState.FINISHED

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _can_tick(self) -> bool:
        return bool(self._steps) and self._state not in (PlaybackState.IDLE, PlaybackState.FINISHED)

    def _tick(self) -> None:
        advancer = self._on_step or self.advance
        try:
            advanced = advancer()
            if advanced is False:
                self.finish()
                return
            self.render()
        except Exception:
            self._halt()
            raise

    def _schedule(self) -> None:
        generation = self._generation
        self._timer = self.scheduler.call_later(self.interval, lambda: self._on_timer(generation))

    def _on_timer(self, generation: int) -> None:
        if generation != self._generation or self._state is not PlaybackState.RUNNING:
            return
        self._timer = None
        self._tick()
        if self._state is PlaybackState.RUNNING and generation == self._generation:
            self._schedule()

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _halt(self) -> None:
        """A callback raised: drop the timer and leave RUNNING so play() can resume."""
        self._cancel_timer()
        if self._state is PlaybackState.RUNNING:
            self._set_state(PlaybackState.PAUSED)
        logger.warning(f"[{self.target}] callback failed at position {self._position}; state {self._state.value}")

    def _set_state(self, state: PlaybackState) -> None:
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)

    def _replace(self, slot: str, previous: Optional[Callable]) -> None:
        if previous is not None:
            logger.debug(f"[{self.target}] replacing on_{slot} callback")
