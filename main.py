"""
main.py — Sorting Algorithm Visualizer Flask App
==================================================
The web server that powers the side-by-side visualizer.

Routes:
  GET  /                          – main UI
  GET  /api/state                 – current session state + rendered panels
  POST /api/start                 – start / resume both panels
  POST /api/pause                 – pause both panels
  POST /api/reset                 – reset both panels
  POST /api/tick                  – one display frame: pace both panels,
                                    return state, bars and tone events
  POST /api/config/algorithm      – {panel: "left"|"right", algorithm}
  POST /api/config/count          – {count}
  POST /api/config/distribution   – {distribution}
  POST /api/config/speed          – {speed}
  POST /api/config/sound          – toggle sound (or {enabled})
  POST /api/array/regenerate      – new array, same count + distribution
  POST /api/array/load            – {values: [...]} custom array
  GET  /api/compare/result        – live + full-run comparison

State management:
  Each browser gets a ComparisonSession kept in an in-process registry,
  keyed by a random id stored in the Flask session cookie and capped at
  MAX_SESSIONS (least recently used first out).  The browser
  drives the simulation by POSTing /api/tick from requestAnimationFrame;
  the server paces steps by its own monotonic clock.

Configuration:
  EngineConfig defaults, overridable from the environment with the
  SORTVIZ_ prefix (e.g. SORTVIZ_DEFAULT_SPEED=8).
"""

from flask import Flask, render_template_string, request, jsonify, session
from collections import OrderedDict
import logging
import secrets
import sys
import os

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from engine import ComparisonSession
from errors import ConfigOutOfRange
from settings import EngineConfig, configure_logging
from ui import (
    configuration_panel,
    playback_controls,
    visualization_panel,
    visualization_body,
    metrics_line,
    completion_message,
    comparison_panel,
)

logger = logging.getLogger(__name__)

SESSIONS_KEY = "sortviz_sessions"


def create_app(overrides=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(EngineConfig)
    app.config.from_prefixed_env("SORTVIZ")
    if overrides:
        app.config.update(overrides)
    if not app.config.get("SECRET_KEY"):
        app.secret_key = secrets.token_hex(32)

    app.extensions[SESSIONS_KEY] = OrderedDict()
    _register_routes(app)
    return app


# ---------------------------------------------------------------------------
# Session Helpers
# ---------------------------------------------------------------------------
def get_session(app: Flask) -> ComparisonSession:
    """
    Return this browser's ComparisonSession, creating it on first use.
    The registry is kept in least-recently-used order and never holds
    more than MAX_SESSIONS entries.
    """
    registry = app.extensions[SESSIONS_KEY]
    sid = session.get("sid")
    if sid is not None and sid in registry:
        registry.move_to_end(sid)
        return registry[sid]

    sid = secrets.token_hex(16)
    session["sid"] = sid
    registry[sid] = ComparisonSession(config=app.config)
    logger.debug("new comparison session %s", sid)

    limit = max(1, int(app.config["MAX_SESSIONS"]))
    while len(registry) > limit:
        evicted, _ = registry.popitem(last=False)
        logger.debug("evicted comparison session %s", evicted)
    return registry[sid]


def payload() -> dict:
    return request.get_json(silent=True) or {}


def require(data: dict, name: str):
    if name not in data:
        raise ConfigOutOfRange(f"Missing field: {name}")
    return data[name]


def render_panel_parts(snapshot: dict) -> dict:
    """HTML fragments the page script swaps in for one panel."""
    return {
        "title":   f'{snapshot["algorithm_name"]}: Sorting {len(snapshot["array"])} Elements',
        "body":    visualization_body(snapshot),
        "metrics": metrics_line(snapshot["comparisons"], snapshot["time_elapsed"]),
        "done":    completion_message(snapshot),
    }


def state_response(sess: ComparisonSession, snapshot: dict = None, tones: dict = None):
    snapshot = snapshot or sess.snapshot()
    body = {
        "state": snapshot,
        "panels": {
            "left":  render_panel_parts(snapshot["left"]),
            "right": render_panel_parts(snapshot["right"]),
        },
    }
    if tones is not None:
        body["tones"] = tones
    return jsonify(body)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
def _register_routes(app: Flask) -> None:

    @app.errorhandler(ConfigOutOfRange)
    def config_out_of_range(exc):
        return jsonify({"error": str(exc)}), 400

    # -- main UI --
    @app.route("/")
    def index():
        sess = get_session(app)
        snap = sess.snapshot()
        g    = snap["global"]

        html = render_template_string(INDEX_TEMPLATE,
            config=configuration_panel(
                g,
                left_key=snap["left"]["algorithm_key"],
                right_key=snap["right"]["algorithm_key"],
                min_elements=app.config["MIN_ELEMENTS"],
                max_elements=app.config["MAX_ELEMENTS"],
            ),
            playback=playback_controls(
                is_running=g["is_running"],
                is_paused=g["is_paused"],
                speed=g["speed"],
                sound_enabled=g["sound_enabled"],
            ),
            left=visualization_panel("left", snap["left"]),
            right=visualization_panel("right", snap["right"]),
            comparison=comparison_panel(),
        )
        return html

    @app.route("/api/state")
    def api_state():
        return state_response(get_session(app))

    # -- transport --
    @app.route("/api/start", methods=["POST"])
    def api_start():
        sess = get_session(app)
        sess.start()
        return state_response(sess)

    @app.route("/api/pause", methods=["POST"])
    def api_pause():
        sess = get_session(app)
        sess.pause()
        return state_response(sess)

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        sess = get_session(app)
        sess.reset()
        return state_response(sess)

    @app.route("/api/tick", methods=["POST"])
    def api_tick():
        sess = get_session(app)
        snap = sess.tick()
        return state_response(sess, snapshot=snap, tones=sess.drain_tones())

    # -- configuration --
    @app.route("/api/config/algorithm", methods=["POST"])
    def api_config_algorithm():
        data = payload()
        sess = get_session(app)
        sess.set_algorithm(require(data, "panel"), require(data, "algorithm"))
        return state_response(sess)

    @app.route("/api/config/count", methods=["POST"])
    def api_config_count():
        sess = get_session(app)
        sess.set_element_count(require(payload(), "count"))
        return state_response(sess)

    @app.route("/api/config/distribution", methods=["POST"])
    def api_config_distribution():
        sess = get_session(app)
        sess.set_distribution(require(payload(), "distribution"))
        return state_response(sess)

    @app.route("/api/config/speed", methods=["POST"])
    def api_config_speed():
        sess = get_session(app)
        sess.set_speed(require(payload(), "speed"))
        return state_response(sess)

    @app.route("/api/config/sound", methods=["POST"])
    def api_config_sound():
        data = payload()
        sess = get_session(app)
        if "enabled" not in data or bool(data["enabled"]) != sess.state.sound_enabled:
            sess.toggle_sound()
        return state_response(sess)

    # -- array supply --
    @app.route("/api/array/regenerate", methods=["POST"])
    def api_array_regenerate():
        sess = get_session(app)
        sess.regenerate_array()
        return state_response(sess)

    @app.route("/api/array/load", methods=["POST"])
    def api_array_load():
        sess = get_session(app)
        sess.load_array(require(payload(), "values"))
        return state_response(sess)

    # -- comparison --
    @app.route("/api/compare/result")
    def api_compare_result():
        sess     = get_session(app)
        live     = sess.comparison()
        forecast = sess.forecast()
        return jsonify({
            "live":     live.to_dict(),
            "forecast": forecast.to_dict(),
            "html":     comparison_panel(live, forecast),
        })


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sorting Algorithm Visualizer</title>
  <link rel="preconnect" href="https://fonts.googleapis.com">
  <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
  <link href="https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500;700&family=DM+Sans:wght@400;500;700&display=swap" rel="stylesheet">
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --border-bright: #484f58;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-blue: #3b82f6;
      --accent-emerald: #10b981;
      --accent-amber: #f59e0b;
      --accent-red: #ef4444;
    }

    body {
      font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    /* Sidebar */
    #sidebar {
      width: 340px;
      background: linear-gradient(180deg, var(--bg-dark) 0%, var(--bg-darker) 100%);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }

    /* Main area */
    #main {
      flex: 1;
      display: flex;
      flex-direction: column;
      padding: 20px;
      gap: 20px;
      overflow-y: auto;
    }

    #panels {
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 20px;
    }

    /* Panels */
    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 18px;
      margin-bottom: 16px;
      position: relative;
    }

    .panel h3 {
      font-size: 13px;
      font-weight: 700;
      margin-bottom: 14px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
    }

    .panel h4 { font-size: 12px; color: var(--text-secondary); margin: 12px 0 6px; }

    .field-row { margin-bottom: 12px; }
    .field-row label, .field-label { display: block; font-size: 13px; color: var(--text-secondary); margin-bottom: 6px; }
    .radio-group { display: grid; grid-template-columns: 1fr 1fr; gap: 6px; margin-bottom: 12px; font-size: 13px; }
    .range-labels { display: flex; justify-content: space-between; font-size: 11px; color: var(--text-secondary); }

    select, input[type=range] { width: 100%; }
    select {
      background: var(--bg-dark);
      color: var(--text-primary);
      border: 1px solid var(--border);
      border-radius: 6px;
      padding: 6px;
    }

    button {
      background: var(--bg-dark);
      color: var(--text-primary);
      border: 1px solid var(--border);
      border-radius: 8px;
      padding: 8px 14px;
      cursor: pointer;
      font-family: inherit;
    }
    button:hover { border-color: var(--border-bright); }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    .btn-primary { background: var(--accent-blue); border-color: var(--accent-blue); }
    .button-row { display: flex; gap: 8px; margin-bottom: 12px; }

    /* Visualization */
    .visualization-panel .bars {
      height: 320px;
      border: 1px solid var(--border);
      border-radius: 8px;
      overflow: hidden;
      position: relative;
    }
    .metrics { display: flex; justify-content: space-between; font-size: 13px; margin-top: 10px; color: var(--text-secondary); }
    .completion-message { font-size: 13px; color: var(--accent-emerald); margin-top: 6px; min-height: 1em; }
    .complete-overlay {
      position: absolute; inset: 0;
      display: flex; align-items: center; justify-content: center;
      background: rgba(1, 4, 9, 0.5);
      color: var(--accent-emerald);
      font-weight: 700;
    }
    .loading { display: flex; align-items: center; justify-content: center; height: 100%; color: var(--text-secondary); }
    .error-box { margin: 40px auto; max-width: 80%; border-left: 4px solid var(--accent-red); padding: 12px; background: rgba(239, 68, 68, 0.1); }
    .error-title { font-weight: 700; color: var(--accent-red); }
    .error-message { font-size: 13px; }

    .comparison-table { width: 100%; border-collapse: collapse; font-size: 13px; }
    .comparison-table th, .comparison-table td { padding: 6px; border-bottom: 1px solid var(--border); text-align: left; }
    .placeholder { color: var(--text-secondary); font-size: 13px; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="config">{{ config|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
  </div>

  <div id="main">
    <div id="panels">
      <div>{{ left|safe }}</div>
      <div>{{ right|safe }}</div>
    </div>
    <div id="comparison">{{ comparison|safe }}</div>
    <button id="btn-compare" class="btn-secondary">Compare</button>
  </div>

  <script>
    let running = false;
    let soundOn = true;
    let audioCtx = null;

    // API helpers
    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      const body = await res.json();
      if (!res.ok) { alert(body.error || 'Request failed'); return null; }
      return body;
    }

    // Web Audio: one oscillator per tone event
    function playTones(events) {
      if (!soundOn || !events || !events.length) return;
      if (!audioCtx) audioCtx = new (window.AudioContext || window.webkitAudioContext)();
      events.forEach(ev => {
        const start = audioCtx.currentTime + ev.offset_ms / 1000;
        const osc = audioCtx.createOscillator();
        const gain = audioCtx.createGain();
        osc.type = ev.waveform;
        osc.frequency.value = ev.frequency;
        gain.gain.setValueAtTime(ev.volume, start);
        gain.gain.exponentialRampToValueAtTime(0.0001, start + ev.duration_ms / 1000);
        osc.connect(gain);
        gain.connect(audioCtx.destination);
        osc.start(start);
        osc.stop(start + ev.duration_ms / 1000);
      });
    }

    function applyState(data) {
      if (!data) return;
      ['left', 'right'].forEach(side => {
        const parts = data.panels[side];
        document.getElementById('title-' + side).textContent = parts.title;
        document.getElementById('bars-' + side).innerHTML = parts.body;
        document.getElementById('metrics-' + side).innerHTML = parts.metrics;
        document.getElementById('done-' + side).innerHTML = parts.done;
      });
      if (data.tones) { playTones(data.tones.left); playTones(data.tones.right); }

      const g = data.state.global;
      soundOn = g.sound_enabled;
      document.getElementById('btn-start').disabled = g.is_running && !g.is_paused;
      document.getElementById('btn-pause').disabled = !g.is_running || g.is_paused;
      document.querySelectorAll('#config select, #config input, #btn-regenerate').forEach(el => {
        el.disabled = g.is_running && !g.is_paused;
      });
      document.getElementById('element-count').value = g.element_count;
      document.getElementById('element-count-value').textContent = g.element_count;

      const wasRunning = running;
      running = g.is_running && !g.is_paused;
      if (running && !wasRunning) requestAnimationFrame(loop);
    }

    // Host frame loop: one tick request per animation frame
    let inFlight = false;
    async function loop() {
      if (!running) return;
      if (!inFlight) {
        inFlight = true;
        try { applyState(await post('/api/tick')); }
        finally { inFlight = false; }
      }
      if (running) requestAnimationFrame(loop);
    }

    // Transport
    document.getElementById('btn-start').addEventListener('click', async () => applyState(await post('/api/start')));
    document.getElementById('btn-pause').addEventListener('click', async () => applyState(await post('/api/pause')));
    document.getElementById('btn-reset').addEventListener('click', async () => applyState(await post('/api/reset')));

    // Configuration
    document.querySelectorAll('#config select').forEach(sel => {
      sel.addEventListener('change', async () => {
        applyState(await post('/api/config/algorithm', {panel: sel.dataset.panel, algorithm: sel.value}));
      });
    });
    document.getElementById('element-count').addEventListener('input', e => {
      document.getElementById('element-count-value').textContent = e.target.value;
    });
    document.getElementById('element-count').addEventListener('change', async e => {
      applyState(await post('/api/config/count', {count: parseInt(e.target.value, 10)}));
    });
    document.querySelectorAll('input[name=distribution]').forEach(radio => {
      radio.addEventListener('change', async () => {
        applyState(await post('/api/config/distribution', {distribution: radio.value}));
      });
    });
    document.getElementById('btn-regenerate').addEventListener('click', async () => applyState(await post('/api/array/regenerate')));
    document.getElementById('speed').addEventListener('input', async e => {
      document.getElementById('speed-value').textContent = e.target.value;
      applyState(await post('/api/config/speed', {speed: parseInt(e.target.value, 10)}));
    });
    document.getElementById('sound-toggle').addEventListener('change', async e => {
      applyState(await post('/api/config/sound', {enabled: e.target.checked}));
    });

    // Comparison
    document.getElementById('btn-compare').addEventListener('click', async () => {
      const res = await fetch('/api/compare/result');
      const data = await res.json();
      document.getElementById('comparison').innerHTML = data.html;
    });
  </script>
</body>
</html>
"""


app = create_app()


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    configure_logging()
    print("=" * 60)
    print("  Sorting Algorithm Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)
