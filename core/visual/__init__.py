"""Canvas geometry and rendering."""

from core.visual.geometry import anchor_points, connection_curve, connection_curves, curve
from core.visual.renderer import ConnectionRenderer, NodeRenderer, render_scene, render_svg

__all__ = [
    "ConnectionRenderer",
    "NodeRenderer",
    "anchor_points",
    "connection_curve",
    "connection_curves",
    "curve",
    "render_scene",
    "render_svg",
]
