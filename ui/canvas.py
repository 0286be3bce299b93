"""
canvas.py — SVG Bar Renderer
==============================
Pure rendering function: panel snapshot → SVG string.

The renderer consumes:
  • snapshot – one panel's dict from RunController.snapshot()
               (array, comparing/swapped/sorted indices, flags)
  • config   – visual config (size, colors, spacing)

And produces an SVG string ready to inject into the DOM.

Coloring, first match wins:
    swapped   → red
    comparing → amber
    sorted    → green
    otherwise → blue

Bar height is value / max(array) of the drawable height.  Arrays above
`dense_threshold` drop the gap between bars.
"""

from typing import Any, Dict, Mapping, Optional

from markupsafe import escape


# ---------------------------------------------------------------------------
# Visual Config — color palette, dimensions
# ---------------------------------------------------------------------------
class BarConfig:
    # canvas
    width:   int = 600
    height:  int = 320
    padding: int = 8
    bg:      str = "#0d1117"

    # bar state → fill
    bar_colors: Dict[str, str] = {
        "default":   "#3b82f6",   # blue
        "comparing": "#f59e0b",   # amber
        "swapped":   "#ef4444",   # red
        "sorted":    "#10b981",   # emerald green
    }

    gap:             float = 1.0
    min_bar_width:   float = 1.0
    dense_threshold: int   = 100
    corner_radius:   float = 1.5


CONFIG = BarConfig()


def bar_state(index: int, comparing, swapped, sorted_) -> str:
    if index in swapped:
        return "swapped"
    if index in comparing:
        return "comparing"
    if index in sorted_:
        return "sorted"
    return "default"


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_bars(snapshot: Mapping[str, Any], config: BarConfig = CONFIG, title: Optional[str] = None) -> str:
    """
    Returns an SVG string.

    Args:
        snapshot : Panel snapshot (see RunController.snapshot()).
        config   : Visual config.
        title    : Optional <title> for accessibility; defaults to the
                   algorithm name.
    """
    values    = list(snapshot.get("array", ()))
    comparing = set(snapshot.get("comparing_indices", ()))
    swapped   = set(snapshot.get("swapped_indices", ()))
    sorted_   = set(snapshot.get("sorted_indices", ()))
    label     = title or snapshot.get("algorithm_name", "")

    w, h, pad = config.width, config.height, config.padding
    svg_parts = [
        f'<svg width="100%" height="100%" viewBox="0 0 {w} {h}" preserveAspectRatio="none" '
        f'xmlns="http://www.w3.org/2000/svg" role="img">',
        f'<title>{escape(label)}: {len(values)} bars</title>',
        f'<rect width="{w}" height="{h}" fill="{config.bg}"/>',
    ]

    if values:
        max_value = max(max(values), 1)
        slot      = (w - 2 * pad) / len(values)
        gap       = 0.0 if len(values) > config.dense_threshold else config.gap
        bar_w     = max(slot - gap, config.min_bar_width)
        usable_h  = h - 2 * pad

        for i, value in enumerate(values):
            bar_h = max(value, 0) / max_value * usable_h
            x     = pad + i * slot + gap / 2
            y     = h - pad - bar_h
            fill  = config.bar_colors[bar_state(i, comparing, swapped, sorted_)]
            svg_parts.append(
                f'<rect class="bar" data-index="{i}" data-value="{value}" '
                f'x="{x:.2f}" y="{y:.2f}" width="{bar_w:.2f}" height="{bar_h:.2f}" '
                f'rx="{config.corner_radius}" fill="{fill}"/>'
            )

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)
