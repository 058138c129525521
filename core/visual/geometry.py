# core/visual/geometry.py
"""Canvas geometry: node boxes, anchor points and connection curves.

Every node is drawn as a fixed-size box whose ``position`` is the
top-left corner. Connections leave a node at the middle of its right
edge and enter at the middle of the left edge, drawn as a cubic bezier
whose control points sit halfway between the two anchors.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Union

import structlog

from core.workflow.models import Connection, Node, Workflow

logger = structlog.get_logger(__name__)

NODE_WIDTH = 180
NODE_HEIGHT = 80

MIN_CANVAS_WIDTH = 1000
MIN_CANVAS_HEIGHT = 600
CANVAS_MARGIN = 32


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box on the canvas."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class AnchorPoints:
    """Where connections attach: ``left`` is the input, ``right`` the output."""
    left: Point
    right: Point


@dataclass(frozen=True)
class CurveSpec:
    """Cubic bezier from ``start`` to ``end``."""
    start: Point
    control1: Point
    control2: Point
    end: Point

    def control_points(self) -> Tuple[Point, Point]:
        return (self.control1, self.control2)

    def to_svg_path(self) -> str:
        """SVG path data, e.g. ``M 230 140 C 265 140, 265 140, 300 140``."""
        s, c1, c2, e = self.start, self.control1, self.control2, self.end
        return (
            f"M {_fmt(s.x)} {_fmt(s.y)} "
            f"C {_fmt(c1.x)} {_fmt(c1.y)}, {_fmt(c2.x)} {_fmt(c2.y)}, "
            f"{_fmt(e.x)} {_fmt(e.y)}"
        )


@dataclass(frozen=True)
class ConnectionCurve:
    connection_id: str
    source: str
    target: str
    curve: CurveSpec


def node_bounds(node: Node, width: float = NODE_WIDTH, height: float = NODE_HEIGHT) -> Bounds:
    return Bounds(node.position.x, node.position.y, width, height)


def anchor_points(node: Node, width: float = NODE_WIDTH, height: float = NODE_HEIGHT) -> AnchorPoints:
    """Input (left) and output (right) anchors of a node box."""
    x, y = node.position.x, node.position.y
    mid_y = y + height / 2
    return AnchorPoints(left=Point(x, mid_y), right=Point(x + width, mid_y))


def curve(source: Point, target: Point) -> CurveSpec:
    """S-shaped bezier from an output anchor to an input anchor.

    Both control points share the horizontal midpoint; each keeps the
    y-coordinate of its own anchor.
    """
    mid_x = (source.x + target.x) / 2
    return CurveSpec(
        start=source,
        control1=Point(mid_x, source.y),
        control2=Point(mid_x, target.y),
        end=target,
    )


def connection_curve(connection: Connection, nodes: Mapping[str, Node]) -> Optional[ConnectionCurve]:
    """Curve for one connection, or ``None`` if an endpoint does not resolve."""
    source_node = nodes.get(connection.source)
    target_node = nodes.get(connection.target)
    if source_node is None or target_node is None:
        return None

    return ConnectionCurve(
        connection_id=connection.id,
        source=connection.source,
        target=connection.target,
        curve=curve(anchor_points(source_node).right, anchor_points(target_node).left),
    )


def connection_curves(workflow: Workflow) -> List[ConnectionCurve]:
    """Curves for every drawable connection, in connection order.

    Connections whose endpoints cannot be resolved are skipped.
    """
    nodes: Dict[str, Node] = {node.id: node for node in workflow.nodes}
    curves: List[ConnectionCurve] = []

    for conn in workflow.connections:
        item = connection_curve(conn, nodes)
        if item is None:
            logger.debug(
                "connection_skipped",
                workflow_id=workflow.id,
                connection_id=conn.id,
            )
            continue
        curves.append(item)

    return curves


def canvas_size(workflow: Workflow) -> Tuple[float, float]:
    """Canvas extent: the minimum size, grown to fit every node box."""
    width, height = MIN_CANVAS_WIDTH, MIN_CANVAS_HEIGHT
    for node in workflow.nodes:
        box = node_bounds(node)
        width = max(width, box.right + CANVAS_MARGIN)
        height = max(height, box.bottom + CANVAS_MARGIN)
    return width, height


def _fmt(value: Union[int, float]) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
