"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – play/pause/step/reset/speed, per ControlOptions
  • parameter_panel     – the inputs a simulation's generator reads
  • topic_index         – filterable card grid of every simulation
  • breadcrumbs         – Home › topic › simulation trail
  • theme_toggle        – light / dark switch

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

import html
from typing import Any, Dict, List, Optional

from engine.playback import SPEEDS, ControlOptions, PlaybackState
from simulations import SimulationInfo


def _esc(value: Any) -> str:
    return html.escape(str(value), quote=True)


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    controls: ControlOptions = ControlOptions(),
    state: str = PlaybackState.IDLE.value,
    position: int = 0,
    length: int = 0,
    speed: float = 1,
) -> str:
    playing  = state == PlaybackState.RUNNING.value
    finished = state == PlaybackState.FINISHED.value
    disabled = " disabled" if finished else ""

    buttons = []
    if controls.play:
        buttons.append(
            f'<button type="button" class="ctrl-btn" id="btn-play" title="Play"'
            f'{disabled}{" hidden" if playing else ""}>▶</button>'
        )
        buttons.append(
            f'<button type="button" class="ctrl-btn" id="btn-pause" title="Pause"'
            f'{"" if playing else " hidden"}>⏸</button>'
        )
    if controls.step:
        buttons.append(f'<button type="button" class="ctrl-btn" id="btn-step" title="Step"{disabled}>⏭</button>')
    # reset is always shown
    buttons.append('<button type="button" class="ctrl-btn" id="btn-reset" title="Reset">↺</button>')

    speed_block = ""
    if controls.speed:
        idx = SPEEDS.index(speed) if speed in SPEEDS else SPEEDS.index(1)
        speed_block = f"""
        <div class="speed-control">
          <span>Speed</span>
          <input type="range" id="speed-slider" min="0" max="{len(SPEEDS) - 1}" value="{idx}"
                 data-speeds="{','.join(str(s) for s in SPEEDS)}" aria-label="Playback speed">
          <span class="speed-label" id="speed-label">{SPEEDS[idx]}×</span>
        </div>
        """

    return f"""
    <div class="control-bar" data-state="{_esc(state)}">
      {''.join(buttons)}
      {speed_block}
      <span class="step-info">Step <span id="current-step">{position}</span> /
        <span id="total-steps">{max(0, length - 1)}</span>
        {'<span class="finished-badge">FINISHED</span>' if finished else ''}</span>
    </div>
    """


# ---------------------------------------------------------------------------
# Parameter Panel
# ---------------------------------------------------------------------------
def parameter_panel(info: SimulationInfo, params: Dict[str, Any]) -> str:
    rows = []
    for f in info.fields:
        value = params.get(f.name, "")
        fid = f"param-{f.name}"
        if f.kind == "select":
            opts = "".join(
                f'<option value="{_esc(o)}"{" selected" if str(o) == str(value) else ""}>{_esc(o)}</option>'
                for o in f.options
            )
            control = f'<select id="{fid}" name="{f.name}" class="param">{opts}</select>'
        elif f.kind == "checkbox":
            control = (
                f'<input type="checkbox" id="{fid}" name="{f.name}" class="param"'
                f'{" checked" if value else ""}>'
            )
        else:
            itype = "number" if f.kind == "number" else "text"
            control = f'<input type="{itype}" id="{fid}" name="{f.name}" class="param" value="{_esc(value)}">'
        rows.append(f'<label for="{fid}">{_esc(f.label)} {control}</label>')

    return f"""
    <div class="panel parameter-panel">
      <h3>Inputs</h3>
      {''.join(rows)}
    </div>
    """


# ---------------------------------------------------------------------------
# Topic Index
# ---------------------------------------------------------------------------
def topic_index(simulations: List[SimulationInfo], query: str = "", interactive_only: bool = False) -> str:
    by_topic: Dict[str, List[SimulationInfo]] = {}
    for info in simulations:
        if interactive_only and not info.controls.play:
            continue
        by_topic.setdefault(f"{info.topic_ref} {info.topic}", []).append(info)

    if not by_topic:
        return f'<p class="no-results">No simulations match “{_esc(query)}”.</p>'

    sections = []
    for heading in sorted(by_topic):
        cards = "".join(
            f'<a class="sim-card" href="/sim/{info.key}">'
            f'<h4>{_esc(info.label)}</h4><p>{_esc(info.description)}</p>'
            f'<span class="tags">{" ".join(_esc(t) for t in info.tags)}</span></a>'
            for info in by_topic[heading]
        )
        sections.append(f'<section class="topic"><h3>{_esc(heading)}</h3>{cards}</section>')

    return f"""
    <form class="topic-filter" method="get" action="/">
      <input type="search" name="q" value="{_esc(query)}" placeholder="Search topics…">
      <label><input type="checkbox" name="filter" value="interactive"
        {'checked' if interactive_only else ''}> Animated only</label>
    </form>
    {''.join(sections)}
    """


def breadcrumbs(info: Optional[SimulationInfo]) -> str:
    crumbs = ['<a href="/">Home</a>']
    if info is not None:
        crumbs.append(f"<span>{_esc(info.topic_ref)} {_esc(info.topic)}</span>")
        crumbs.append(f'<span aria-current="page">{_esc(info.label)}</span>')
    return f'<nav class="breadcrumbs">{" › ".join(crumbs)}</nav>'


def theme_toggle(theme: str) -> str:
    dark = theme == "dark"
    title = "Switch to light mode" if dark else "Switch to dark mode"
    return (
        f'<button type="button" class="theme-toggle" data-theme="{_esc(theme)}" '
        f'title="{title}" aria-label="{title}">{"☀" if dark else "☾"}</button>'
    )
