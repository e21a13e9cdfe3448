"""
main.py — Algorithm Visualizers Flask App
==========================================
The web server that hosts every visualizer.

Routes:
  GET  /                        – topic index (?q= search, ?filter=interactive)
  GET  /sim/<key>               – one simulation page
  POST /api/<key>/reset         – new inputs → regenerate steps, rewind
  POST /api/<key>/play          – start automatic playback
  POST /api/<key>/pause         – pause automatic playback
  POST /api/<key>/step          – advance exactly one step
  POST /api/<key>/speed         – change the speed multiplier
  POST /api/<key>/resize        – report the drawing surface size
  GET  /api/<key>/state         – pump the timer, return state + frame
  GET  /api/<key>/export        – the full recorded run as JSON
  POST /api/theme               – switch light / dark

State management:
  Each browser session gets a session id (Flask session cookie).  The
  Visualizers for that id live in an in-process store, one per
  simulation key, each with its own PlaybackEngine and TickScheduler.
  Playback advances when the page polls /state: the poll pumps the
  scheduler, which fires whatever ticks are due.

Configuration (Flask app.config, overridable with FLASK_-prefixed env vars):
  VIS_DEFAULT_THEME    – "dark" | "light"
  VIS_THEME_COOKIE     – cookie holding the chosen theme
  VIS_RESIZE_DEBOUNCE  – quiet window (s) before a resize redraw
  VIS_MAX_SESSIONS     – sessions kept in the store; least recently used go first
"""

import functools
import logging
import secrets
import sys
import os
import threading
from collections import OrderedDict
from typing import Any, Dict

from flask import Flask, abort, jsonify, make_response, render_template_string, request, session

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from engine.utils import DEBOUNCE_WAIT, DEFAULT_THEME, THEME_COOKIE, current_theme
from engine.visualizer import Visualizer
from simulations import get_simulation, list_simulations, search_simulations
from ui import breadcrumbs, parameter_panel, playback_controls, theme_toggle, topic_index

logger = logging.getLogger(__name__)

THEMES = ("dark", "light")


app = Flask(__name__)
app.secret_key = secrets.token_hex(32)
app.config.from_mapping(
    VIS_DEFAULT_THEME=DEFAULT_THEME,
    VIS_THEME_COOKIE=THEME_COOKIE,
    VIS_RESIZE_DEBOUNCE=DEBOUNCE_WAIT,
    VIS_MAX_SESSIONS=256,
)
app.config.from_prefixed_env()

# session id → {simulation key → Visualizer}, least recently used first
_STORE: "OrderedDict[str, Dict[str, Visualizer]]" = OrderedDict()
_STORE_LOCK = threading.RLock()


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def session_id() -> str:
    if "sid" not in session:
        session["sid"] = secrets.token_hex(8)
    return session["sid"]


def get_visualizer(key: str) -> Visualizer:
    """This session's Visualizer for `key`, built and reset on first use."""
    info = get_simulation(key)
    if info is None:
        abort(404, description=f"Unknown simulation: {key}")

    sid = session_id()
    with _STORE_LOCK:
        bucket = _STORE.get(sid)
        if bucket is None:
            bucket = _STORE[sid] = {}
            _evict(int(app.config["VIS_MAX_SESSIONS"]))
        else:
            _STORE.move_to_end(sid)

        vis = bucket.get(key)
        if vis is None:
            vis = Visualizer(info, debounce_wait=float(app.config["VIS_RESIZE_DEBOUNCE"]))
            vis.engine.reset()
            bucket[key] = vis
            logger.info(f"session {sid}: created visualizer {key!r}")
        return vis


def _evict(limit: int) -> None:
    while len(_STORE) > max(1, limit):
        sid, bucket = _STORE.popitem(last=False)
        for vis in bucket.values():
            vis.engine.scheduler.clear()
        logger.info(f"session {sid}: evicted {len(bucket)} visualizer(s)")


def synchronized(view):
    """Run an API view under the store lock; engines are not thread-safe."""
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        with _STORE_LOCK:
            return view(*args, **kwargs)
    return wrapper


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    query = request.args.get("q", "")
    interactive = request.args.get("filter") == "interactive"
    body = topic_index(search_simulations(query), query=query, interactive_only=interactive)
    return render_template_string(
        PAGE_TEMPLATE,
        title="Algorithm Visualizers",
        crumbs=breadcrumbs(None),
        toggle=theme_toggle(current_theme()),
        theme=current_theme(),
        body=body,
        sim_key="",
        total=len(list_simulations()),
    )


@app.route("/sim/<key>")
@synchronized
def simulation_page(key: str):
    vis = get_visualizer(key)
    e = vis.engine
    vis.engine.render()  # pick up the theme of this request
    body = (
        f'<h2>{vis.info.label}</h2><p class="lead">{vis.info.description}</p>'
        + parameter_panel(vis.info, vis.params)
        + f'<div id="controls">{playback_controls(e.controls, e.state.value, e.position, e.length, e.speed)}</div>'
        + f'<div id="stage">{vis.frame}</div>'
    )
    return render_template_string(
        PAGE_TEMPLATE,
        title=vis.info.label,
        crumbs=breadcrumbs(vis.info),
        toggle=theme_toggle(current_theme()),
        theme=current_theme(),
        body=body,
        sim_key=key,
        total=len(list_simulations()),
    )


# ---------------------------------------------------------------------------
# API: Control surface
# ---------------------------------------------------------------------------
@app.route("/api/<key>/reset", methods=["POST"])
@synchronized
def api_reset(key: str):
    vis = get_visualizer(key)
    vis.update_params(json_body())
    return jsonify(vis.status())


@app.route("/api/<key>/play", methods=["POST"])
@synchronized
def api_play(key: str):
    vis = get_visualizer(key)
    vis.engine.play()
    return jsonify(vis.status())


@app.route("/api/<key>/pause", methods=["POST"])
@synchronized
def api_pause(key: str):
    vis = get_visualizer(key)
    vis.engine.pause()
    return jsonify(vis.status())


@app.route("/api/<key>/step", methods=["POST"])
@synchronized
def api_step(key: str):
    vis = get_visualizer(key)
    vis.engine.step_once()
    return jsonify(vis.status())


@app.route("/api/<key>/speed", methods=["POST"])
@synchronized
def api_speed(key: str):
    vis = get_visualizer(key)
    vis.engine.set_speed(json_body().get("speed", 1))
    return jsonify(vis.status())


@app.route("/api/<key>/resize", methods=["POST"])
@synchronized
def api_resize(key: str):
    vis = get_visualizer(key)
    data = json_body()
    vis.resize(data.get("width"), data.get("dpr"))
    return jsonify(vis.status())


@app.route("/api/<key>/state")
@synchronized
def api_state(key: str):
    vis = get_visualizer(key)
    vis.engine.scheduler.run_pending()
    return jsonify(vis.status())


@app.route("/api/<key>/export")
@synchronized
def api_export(key: str):
    return jsonify(get_visualizer(key).export())


@app.route("/api/theme", methods=["POST"])
@synchronized
def api_theme():
    theme = json_body().get("theme")
    if theme not in THEMES:
        theme = app.config["VIS_DEFAULT_THEME"]
    for vis in _STORE.get(session_id(), {}).values():
        vis.set_theme(theme)
    resp = make_response(jsonify({"theme": theme}))
    resp.set_cookie(app.config["VIS_THEME_COOKIE"], theme, samesite="Lax")
    return resp


@app.errorhandler(404)
def not_found(err):
    if request.path.startswith("/api/"):
        return jsonify({"error": getattr(err, "description", "Not found")}), 404
    return err


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
PAGE_TEMPLATE = """
<!DOCTYPE html>
<html lang="en" data-theme="{{ theme }}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ title }}</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    :root[data-theme="dark"]  { --clr-bg: #0d1117; --clr-surface: #161b22; --clr-border: #30363d;
                                --clr-text: #e6edf3; --clr-muted: #7d8590; --clr-primary: #0ea5e9; }
    :root[data-theme="light"] { --clr-bg: #f8fafc; --clr-surface: #ffffff; --clr-border: #cbd5e1;
                                --clr-text: #0f172a; --clr-muted: #64748b; --clr-primary: #2563eb; }
    body { font-family: system-ui, sans-serif; background: var(--clr-bg); color: var(--clr-text);
           max-width: 1100px; margin: 0 auto; padding: 24px; }
    header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 16px; }
    .breadcrumbs a { color: var(--clr-primary); }
    .panel, .sim-card { background: var(--clr-surface); border: 1px solid var(--clr-border);
                        border-radius: 12px; padding: 16px; margin-bottom: 16px; display: block;
                        color: inherit; text-decoration: none; }
    .panel label { display: inline-block; margin-right: 16px; }
    .control-bar { display: flex; gap: 8px; align-items: center; margin-bottom: 16px; }
    .ctrl-btn { padding: 6px 12px; border-radius: 6px; border: 1px solid var(--clr-border);
                background: var(--clr-surface); color: var(--clr-text); cursor: pointer; }
    .ctrl-btn[disabled] { opacity: 0.4; cursor: default; }
    .search-list { display: flex; gap: 6px; flex-wrap: wrap; padding: 12px; }
    .search-item { border: 1px solid; border-radius: 6px; padding: 8px 12px; position: relative; }
    .search-item .idx { position: absolute; top: -16px; left: 2px; font-size: 10px; opacity: .6; }
    .search-item.checking { background: #f59e0b; } .search-item.midpoint { background: #8b5cf6; }
    .search-item.found { background: #10b981; }    .search-item.eliminated { opacity: .35; }
    .search-item.in-range { background: #0c4a6e; }
    .stats { display: flex; gap: 24px; margin: 12px 0; }
    .stat-label { display: block; font-size: 11px; text-transform: uppercase; opacity: .6; }
    .rle-group { display: inline-block; margin: 4px; padding: 2px 6px; border-radius: 6px; }
    .rle-count { color: #fff; border-radius: 4px; padding: 0 4px; margin-right: 4px; }
    .add-cell, .shift-cell { width: 32px; text-align: center; font-family: monospace; }
    .add-cell.highlight { background: var(--clr-primary); }
    .shift-cell.new { color: #f59e0b; }
    .overflow-msg.error { color: #ef4444; } .overflow-msg.ok { color: #10b981; }
  </style>
</head>
<body>
  <header>{{ crumbs|safe }} {{ toggle|safe }}</header>
  <main>{{ body|safe }}</main>
  <footer><small>{{ total }} simulations</small></footer>
  <script>
  (function () {
    var key = "{{ sim_key }}";
    document.querySelector('.theme-toggle').addEventListener('click', function () {
      var next = document.documentElement.getAttribute('data-theme') === 'dark' ? 'light' : 'dark';
      post('/api/theme', { theme: next }).then(function () { location.reload(); });
    });
    if (!key) return;

    var stage = document.getElementById('stage');
    var pollTimer = null;

    function post(url, body) {
      return fetch(url, { method: 'POST', headers: { 'Content-Type': 'application/json' },
                          body: JSON.stringify(body || {}) }).then(function (r) { return r.json(); });
    }
    function apply(s) {
      stage.innerHTML = s.frame;
      document.getElementById('current-step').textContent = s.position;
      document.getElementById('total-steps').textContent = Math.max(0, s.length - 1);
      var running = s.state === 'running', finished = s.state === 'finished';
      var play = document.getElementById('btn-play'), pause = document.getElementById('btn-pause');
      var step = document.getElementById('btn-step');
      if (play)  { play.hidden = running; play.disabled = finished; }
      if (pause) { pause.hidden = !running; }
      if (step)  { step.disabled = finished; }
      if (running && !pollTimer) pollTimer = setInterval(poll, 100);
      if (!running && pollTimer) { clearInterval(pollTimer); pollTimer = null; }
    }
    function poll() { fetch('/api/' + key + '/state').then(function (r) { return r.json(); }).then(apply); }
    function params() {
      var out = {};
      document.querySelectorAll('.param').forEach(function (el) {
        out[el.name] = el.type === 'checkbox' ? el.checked : el.value;
      });
      return out;
    }
    function on(id, verb, body) {
      var el = document.getElementById(id);
      if (el) el.addEventListener('click', function () { post('/api/' + key + '/' + verb, body && body()).then(apply); });
    }
    on('btn-play', 'play'); on('btn-pause', 'pause'); on('btn-step', 'step'); on('btn-reset', 'reset', params);
    document.querySelectorAll('.param').forEach(function (el) {
      el.addEventListener('change', function () { post('/api/' + key + '/reset', params()).then(apply); });
    });
    var slider = document.getElementById('speed-slider');
    if (slider) slider.addEventListener('input', function () {
      var speeds = slider.dataset.speeds.split(',').map(Number), v = speeds[+slider.value];
      document.getElementById('speed-label').textContent = v + '×';
      post('/api/' + key + '/speed', { speed: v }).then(apply);
    });
    function reportSize() {
      post('/api/' + key + '/resize', { width: stage.clientWidth, dpr: window.devicePixelRatio || 1 });
    }
    window.addEventListener('resize', reportSize);
    reportSize();
  })();
  </script>
</body>
</html>
"""


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    app.run(debug=True, port=5000)
