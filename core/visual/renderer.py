# core/visual/renderer.py
"""Render workflows into view dictionaries and SVG documents."""

from typing import Any, Dict, Optional

import jinja2

from core.visual.geometry import (
    NODE_HEIGHT,
    NODE_WIDTH,
    ConnectionCurve,
    canvas_size,
    connection_curve,
    connection_curves,
)
from core.workflow.models import Connection, Node, NodeKind, Workflow

DEFAULT_NODE_COLOR = "#c084fc"
CONNECTION_COLOR = "#475569"
CONNECTION_WIDTH = 2

SVG_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" width="{{ canvas.width }}" height="{{ canvas.height }}" viewBox="0 0 {{ canvas.width }} {{ canvas.height }}">
  <title>{{ header.name }}</title>
  <g class="connections">
  {%- for conn in connections %}
    <path id="{{ conn.id }}" d="{{ conn.path }}" stroke="{{ conn.style.stroke }}" stroke-width="{{ conn.style.strokeWidth }}" fill="none"/>
  {%- endfor %}
  </g>
  <g class="nodes">
  {%- for node in nodes %}
    <g id="node-{{ node.id }}" transform="translate({{ node.position.x }} {{ node.position.y }})">
      <rect width="{{ node.style.width }}" height="{{ node.style.height }}" rx="12" fill="#1e293b" stroke="#334155"/>
      <rect x="12" y="12" width="32" height="32" rx="8" fill="{{ node.style.color }}" fill-opacity="0.2"/>
      <text x="28" y="33" text-anchor="middle" font-size="12" font-weight="bold" fill="{{ node.style.color }}">{{ node.badge }}</text>
      <text x="56" y="26" font-size="14" fill="#ffffff">{{ node.name }}</text>
      <text x="56" y="40" font-size="10" fill="#64748b">{{ node.kind | upper }}</text>
      <text x="12" y="68" font-size="11" fill="#94a3b8">{{ node.status }}</text>
    </g>
  {%- endfor %}
  </g>
</svg>
"""


class NodeRenderer:
    """Renders nodes to view dictionaries."""

    def __init__(self, width: float = NODE_WIDTH, height: float = NODE_HEIGHT):
        self.width = width
        self.height = height
        self._node_colors = {
            NodeKind.TRIGGER.value: "#4ade80",
            NodeKind.ACTION.value: "#60a5fa",
        }

    def color_for(self, kind: str) -> str:
        return self._node_colors.get(kind, DEFAULT_NODE_COLOR)

    def render_node(self, node: Node) -> Dict[str, Any]:
        """Render node to visual format."""
        return {
            "id": node.id,
            "name": node.name,
            "kind": node.kind,
            "icon": node.icon_hint,
            "position": node.position.to_dict(),
            "style": {
                "width": self.width,
                "height": self.height,
                "color": self.color_for(node.kind),
            },
            "badge": node.kind[:1].upper(),
            "configured": node.is_configured,
            "status": "Configured" if node.is_configured else "No configuration",
        }


class ConnectionRenderer:
    """Renders connections to view dictionaries."""

    def render_connection(
        self,
        connection: Connection,
        nodes: Dict[str, Node]
    ) -> Optional[Dict[str, Any]]:
        """Render a connection, or ``None`` if an endpoint is missing."""
        item = connection_curve(connection, nodes)
        return None if item is None else self.render_curve(item)

    def render_curve(self, item: ConnectionCurve) -> Dict[str, Any]:
        spec = item.curve
        return {
            "id": item.connection_id,
            "source": item.source,
            "target": item.target,
            "path": spec.to_svg_path(),
            "controlPoints": [
                {"x": point.x, "y": point.y} for point in spec.control_points()
            ],
            "style": {
                "stroke": CONNECTION_COLOR,
                "strokeWidth": CONNECTION_WIDTH,
            },
        }


def render_scene(workflow: Workflow) -> Dict[str, Any]:
    """Everything a canvas view needs to draw ``workflow``."""
    node_renderer = NodeRenderer()
    connection_renderer = ConnectionRenderer()
    connections = [
        connection_renderer.render_curve(item) for item in connection_curves(workflow)
    ]

    width, height = canvas_size(workflow)
    return {
        "header": {
            "id": workflow.id,
            "name": workflow.name,
            "nodeCount": len(workflow.nodes),
            "activeLabel": "Active" if workflow.active else "Inactive",
        },
        "canvas": {"width": width, "height": height},
        "nodes": [node_renderer.render_node(node) for node in workflow.nodes],
        "connections": connections,
    }


_svg_env = jinja2.Environment(autoescape=True, trim_blocks=False, lstrip_blocks=True)
_svg_template = _svg_env.from_string(SVG_TEMPLATE)


def render_svg(workflow: Workflow) -> str:
    """Standalone SVG document of the workflow canvas."""
    return _svg_template.render(**render_scene(workflow))
