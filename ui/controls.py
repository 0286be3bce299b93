"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • configuration_panel   – algorithm pickers, element count, distribution
  • playback_controls     – start/pause/reset, sound toggle, speed slider
  • visualization_panel   – one algorithm's bars, loading/error/complete
                            overlays and its live metrics line
  • comparison_panel      – side-by-side metrics of the two panels

Design:
  - All panels are stateless render functions.
  - State is passed in as plain dicts (the session snapshot) or engine
    dataclasses.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together; the page script replaces the
    inner parts on every tick.
"""

from typing import Any, List, Mapping, Optional

from markupsafe import escape

from algorithms import AlgoInfo, list_algorithms
from arrays import Distribution
from engine import ComparisonResult
from ui.canvas import render_bars


# ---------------------------------------------------------------------------
# Configuration Panel
# ---------------------------------------------------------------------------
def _algorithm_options(algorithms: List[AlgoInfo], selected_key: str) -> str:
    options = []
    for algo in algorithms:
        sel    = 'selected' if algo.key.value == selected_key else ''
        stable = ", stable" if algo.stable else ""
        options.append(
            f'<option value="{algo.key.value}" title="{escape(algo.description)}" {sel}>'
            f'{algo.label} — {algo.complexity_time}{stable}</option>'
        )
    return "".join(options)


def configuration_panel(
    global_state: Mapping[str, Any],
    left_key: str = "bubble",
    right_key: str = "quick",
    min_elements: int = 10,
    max_elements: int = 200,
) -> str:
    algorithms = list_algorithms()
    disabled   = 'disabled' if global_state.get("is_running") and not global_state.get("is_paused") else ''
    count      = global_state.get("element_count", 30)
    current    = global_state.get("distribution", Distribution.RANDOM.value)

    radios = []
    for dist in Distribution:
        checked = 'checked' if dist.value == current else ''
        radios.append(
            f'<label class="radio"><input type="radio" name="distribution" value="{dist.value}" '
            f'{checked} {disabled}> {dist.label}</label>'
        )

    return f"""
    <div class="panel configuration-panel">
      <h3>Algorithm Selection</h3>
      <div class="field-row">
        <label for="algorithm-left">Algorithm 1</label>
        <select id="algorithm-left" data-panel="left" {disabled}>
          {_algorithm_options(algorithms, left_key)}
        </select>
      </div>
      <div class="field-row">
        <label for="algorithm-right">Algorithm 2</label>
        <select id="algorithm-right" data-panel="right" {disabled}>
          {_algorithm_options(algorithms, right_key)}
        </select>
      </div>

      <h3>Array Configuration</h3>
      <div class="field-row">
        <label for="element-count">Number of Elements: <span id="element-count-value">{count}</span></label>
        <input type="range" id="element-count" min="{min_elements}" max="{max_elements}" value="{count}" {disabled}>
      </div>
      <p class="field-label">Distribution of Elements</p>
      <div class="radio-group">
        {''.join(radios)}
      </div>
      <button id="btn-regenerate" class="btn-secondary" {disabled}>New Array</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    is_running: bool = False,
    is_paused: bool = False,
    speed: int = 5,
    sound_enabled: bool = True,
) -> str:
    active = is_running and not is_paused
    start_label = "Resume" if is_paused else "Start"

    return f"""
    <div class="panel playback-controls">
      <h3>Controls</h3>
      <div class="button-row">
        <button id="btn-start" class="btn-primary" aria-label="Start sorting" {'disabled' if active else ''}>▶ {start_label}</button>
        <button id="btn-pause" aria-label="Pause sorting" {'' if active else 'disabled'}>⏸ Pause</button>
        <button id="btn-reset" aria-label="Reset sorting">⏮ Reset</button>
      </div>
      <label class="toggle">
        <input type="checkbox" id="sound-toggle" {'checked' if sound_enabled else ''}>
        Sound
      </label>
      <div class="speed-control">
        <label for="speed">Animation Speed: <span id="speed-value">{speed}</span></label>
        <input type="range" id="speed" min="1" max="10" value="{speed}">
        <div class="range-labels"><span>Slow</span><span>Fast</span></div>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Visualization Panel
# ---------------------------------------------------------------------------
def metrics_line(comparisons: int, time_elapsed: float) -> str:
    return (
        f'<span class="metric">Comparisons: {comparisons:,}</span>'
        f'<span class="metric">Time Elapsed: {time_elapsed:.3f} seconds</span>'
    )


def visualization_body(snapshot: Mapping[str, Any]) -> str:
    """Inner area of a panel: loading, error, or bars (+ complete overlay)."""
    name = escape(snapshot.get("algorithm_name", ""))
    if snapshot.get("is_loading"):
        return f'<div class="loading">Preparing {name}...</div>'
    if snapshot.get("error"):
        return f"""
        <div class="error-box">
          <p class="error-title">Error</p>
          <p class="error-message">{escape(snapshot["error"])}</p>
        </div>
        """
    overlay = ""
    if snapshot.get("is_complete"):
        overlay = '<div class="complete-overlay"><p>Sorting Complete!</p></div>'
    return render_bars(snapshot) + overlay


def completion_message(snapshot: Mapping[str, Any]) -> str:
    if not snapshot.get("is_complete"):
        return ""
    return (
        f'{escape(snapshot.get("algorithm_name", ""))} finished sorting {len(snapshot.get("array", ()))} elements. '
        f'Comparisons: {snapshot.get("comparisons", 0):,}, Time: {snapshot.get("time_elapsed", 0.0):.3f} seconds.'
    )


def visualization_panel(panel_id: str, snapshot: Mapping[str, Any]) -> str:
    name  = escape(snapshot.get("algorithm_name", ""))
    count = len(snapshot.get("array", ()))

    return f"""
    <div class="panel visualization-panel" id="panel-{panel_id}">
      <h3 class="panel-title" id="title-{panel_id}">{name}: Sorting {count} Elements</h3>
      <div class="bars" id="bars-{panel_id}">
        {visualization_body(snapshot)}
      </div>
      <div class="metrics" id="metrics-{panel_id}">
        {metrics_line(snapshot.get("comparisons", 0), snapshot.get("time_elapsed", 0.0))}
      </div>
      <p class="completion-message" id="done-{panel_id}">{completion_message(snapshot)}</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Comparison Panel (side-by-side)
# ---------------------------------------------------------------------------
def comparison_table(comp: ComparisonResult) -> str:
    left  = comp.left
    right = comp.right

    def winner_badge(winner_label):
        if winner_label == "tie":
            return "🟰 Tie"
        return f"👑 {escape(winner_label)}"

    rows = [
        ("Comparisons", f"{left.comparisons:,}", f"{right.comparisons:,}", comp.winner_comparisons),
        ("Swaps / Writes", f"{left.swaps:,}", f"{right.swaps:,}", comp.winner_swaps),
        ("Steps", f"{left.total_steps:,}", f"{right.total_steps:,}", comp.winner_steps),
        ("Time", f"{left.wall_time_ms:.2f} ms", f"{right.wall_time_ms:.2f} ms", comp.winner_time),
    ]
    body = "".join(
        f"<tr><td>{label}</td><td>{l}</td><td>{r}</td><td>{winner_badge(w)}</td></tr>"
        for label, l, r, w in rows
    )
    return f"""
      <table class="comparison-table">
        <thead>
          <tr><th>Metric</th><th>{escape(left.algo_label)}</th><th>{escape(right.algo_label)}</th><th>Winner</th></tr>
        </thead>
        <tbody>{body}</tbody>
      </table>
    """


def comparison_panel(
    live: Optional[ComparisonResult] = None,
    forecast: Optional[ComparisonResult] = None,
) -> str:
    if not live and not forecast:
        return """
        <div class="panel comparison-panel">
          <h3>⚖️ Comparison</h3>
          <p class="placeholder">Start a run to compare the two algorithms on the same array.</p>
        </div>
        """

    sections = []
    if live:
        sections.append(f"<h4>Live</h4>{comparison_table(live)}")
    if forecast:
        sections.append(f"<h4>Full run on this array</h4>{comparison_table(forecast)}")

    return f"""
    <div class="panel comparison-panel">
      <h3>⚖️ Comparison</h3>
      <div id="comparison-body">
        {''.join(sections)}
      </div>
    </div>
    """
