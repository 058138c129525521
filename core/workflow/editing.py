# core/workflow/editing.py
"""Copy-on-write editing operations for workflows.

Each function takes a workflow and returns a new one; the argument is
never modified. Callers hand the result to ``GraphStore.update``.
"""

import uuid
from collections import defaultdict, deque
from dataclasses import replace
from typing import Any, Dict, List, Optional

import structlog

from core.workflow.errors import UnknownConnectionId, UnknownNodeId
from core.workflow.models import Connection, Node, NodeKind, Position, Workflow
from core.workflow.validator import validate

logger = structlog.get_logger(__name__)

# Auto layout grid
X_SPACING = 250
Y_SPACING = 100
X_OFFSET = 100
Y_OFFSET = 100


def new_workflow(name: str, description: str = "") -> Workflow:
    """Create an empty, inactive workflow shell with a fresh id."""
    if not name or not name.strip():
        raise ValueError("Workflow name must be non-empty")
    return Workflow(id=str(uuid.uuid4()), name=name, description=description)


def add_node(
    workflow: Workflow,
    name: str,
    kind: str,
    position: Optional[Position] = None,
    configuration: Optional[Dict[str, Any]] = None,
    icon_hint: Optional[str] = None,
    node_id: Optional[str] = None
) -> Workflow:
    """Append a node. Without a position it goes right of the last node."""
    if not name or not name.strip():
        raise ValueError("Node name must be non-empty")
    kind = NodeKind(kind).value

    if position is None:
        if workflow.nodes:
            last = workflow.nodes[-1].position
            position = Position(last.x + X_SPACING, last.y)
        else:
            position = Position(X_OFFSET, Y_OFFSET)

    node = Node(
        id=node_id or f"{kind}_{uuid.uuid4().hex[:8]}",
        name=name,
        kind=kind,
        position=position,
        configuration=dict(configuration or {}),
        icon_hint=icon_hint,
    )
    updated = replace(workflow, nodes=workflow.nodes + (node,))
    return validate(updated).raise_for_error()


def move_node(workflow: Workflow, node_id: str, x: float, y: float) -> Workflow:
    """Place a node's top-left corner at ``(x, y)``."""
    return _replace_node(workflow, node_id, position=Position(x, y))


def configure_node(workflow: Workflow, node_id: str, configuration: Dict[str, Any]) -> Workflow:
    """Replace a node's configuration mapping."""
    return _replace_node(workflow, node_id, configuration=dict(configuration))


def rename_node(workflow: Workflow, node_id: str, name: str) -> Workflow:
    if not name or not name.strip():
        raise ValueError("Node name must be non-empty")
    return _replace_node(workflow, node_id, name=name)


def remove_node(workflow: Workflow, node_id: str) -> Workflow:
    """Remove a node and every connection attached to it."""
    if workflow.get_node(node_id) is None:
        raise UnknownNodeId(node_id)
    return replace(
        workflow,
        nodes=tuple(node for node in workflow.nodes if node.id != node_id),
        connections=tuple(
            conn for conn in workflow.connections
            if conn.source != node_id and conn.target != node_id
        ),
    )


def connect(
    workflow: Workflow,
    source: str,
    target: str,
    connection_id: Optional[str] = None
) -> Workflow:
    """Add a connection from ``source`` to ``target``.

    Raises:
        GraphValidationError: an endpoint is missing or the id is taken.
    """
    conn = Connection(
        id=connection_id or f"c_{uuid.uuid4().hex[:8]}",
        source=source,
        target=target,
    )
    updated = replace(workflow, connections=workflow.connections + (conn,))
    result = validate(updated)
    for warning in result.warnings:
        if warning.connection_id == conn.id:
            logger.info("self_loop_connected", workflow_id=workflow.id, node_id=source)
    return result.raise_for_error()


def disconnect(workflow: Workflow, connection_id: str) -> Workflow:
    """Remove a connection by id."""
    if workflow.get_connection(connection_id) is None:
        raise UnknownConnectionId(connection_id)
    return replace(
        workflow,
        connections=tuple(c for c in workflow.connections if c.id != connection_id),
    )


def set_active(workflow: Workflow, active: bool) -> Workflow:
    return replace(workflow, active=active)


def auto_layout(workflow: Workflow) -> Workflow:
    """Arrange nodes in columns by their longest distance from a root.

    Graphs containing a cycle are laid out as a single row in insertion
    order.
    """
    levels = _levels(workflow)
    if levels is None:
        logger.debug("auto_layout_cycle_fallback", workflow_id=workflow.id)
        levels = [[node.id] for node in workflow.nodes]

    positions: Dict[str, Position] = {}
    for level_idx, level_nodes in enumerate(levels):
        x = X_OFFSET + level_idx * X_SPACING
        for node_idx, node_id in enumerate(level_nodes):
            positions[node_id] = Position(x, Y_OFFSET + node_idx * Y_SPACING)

    return replace(
        workflow,
        nodes=tuple(replace(node, position=positions[node.id]) for node in workflow.nodes),
    )


# ============================================================================
# Internals
# ============================================================================

def _replace_node(workflow: Workflow, node_id: str, **changes: Any) -> Workflow:
    if workflow.get_node(node_id) is None:
        raise UnknownNodeId(node_id)
    return replace(
        workflow,
        nodes=tuple(
            replace(node, **changes) if node.id == node_id else node
            for node in workflow.nodes
        ),
    )


def _levels(workflow: Workflow) -> Optional[List[List[str]]]:
    """Longest-path levels (Kahn's algorithm); ``None`` if there is a cycle."""
    order = {node.id: idx for idx, node in enumerate(workflow.nodes)}
    in_degree: Dict[str, int] = {node_id: 0 for node_id in order}
    successors: Dict[str, List[str]] = defaultdict(list)

    for conn in workflow.connections:
        if conn.source in order and conn.target in order:
            successors[conn.source].append(conn.target)
            in_degree[conn.target] += 1

    level: Dict[str, int] = {}
    queue = deque(node_id for node_id in order if in_degree[node_id] == 0)
    for node_id in queue:
        level[node_id] = 0

    visited = 0
    while queue:
        current = queue.popleft()
        visited += 1
        for nxt in successors[current]:
            level[nxt] = max(level.get(nxt, 0), level[current] + 1)
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                queue.append(nxt)

    if visited != len(order):
        return None

    grouped: Dict[int, List[str]] = defaultdict(list)
    for node_id in sorted(level, key=order.__getitem__):
        grouped[level[node_id]].append(node_id)
    return [grouped[idx] for idx in sorted(grouped)]
