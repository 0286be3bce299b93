"""
ui/
---
Presentation layer.

    from ui import render_bars
    from ui import configuration_panel, playback_controls, visualization_panel, …
"""

from ui.canvas import render_bars, BarConfig

from ui.controls import (
    configuration_panel,
    playback_controls,
    visualization_panel,
    visualization_body,
    metrics_line,
    completion_message,
    comparison_panel,
    comparison_table,
)

__all__ = [
    "render_bars",
    "BarConfig",
    "configuration_panel",
    "playback_controls",
    "visualization_panel",
    "visualization_body",
    "metrics_line",
    "completion_message",
    "comparison_panel",
    "comparison_table",
]
