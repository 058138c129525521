# core/workflow/models.py
"""Workflow graph entities: nodes, connections and the workflow aggregate.

All records are frozen. Changing a workflow means building a new one
with ``dataclasses.replace`` so that anyone holding the previous value
never observes a half-applied edit.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


ConfigValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]


def freeze_config(value: Any) -> Any:
    """Read-only copy of a configuration value: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_config(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_config(item) for item in value)
    return value


def thaw_config(value: Any) -> Any:
    """Plain dict/list copy of a frozen configuration value."""
    if isinstance(value, Mapping):
        return {key: thaw_config(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw_config(item) for item in value]
    return value


class NodeKind(str, Enum):
    """Closed set of node kinds."""
    TRIGGER = "trigger"
    ACTION = "action"
    FUNCTION = "function"
    WEBHOOK = "webhook"


NODE_KINDS = frozenset(kind.value for kind in NodeKind)


class WorkflowStatus(str, Enum):
    """Informational status of a workflow."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Position:
    """Top-left corner of a node on the canvas."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Node:
    """A unit of work placed on the workflow canvas.

    ``kind`` is kept as a plain string so untrusted candidates can be
    represented and rejected by the validator. ``NodeKind`` members
    compare equal to their values. ``configuration`` is stored read-only
    so snapshots sharing a node cannot see each other's edits.
    """
    id: str
    name: str
    kind: str
    position: Position = field(default_factory=lambda: Position(0, 0))
    configuration: Mapping[str, ConfigValue] = field(default_factory=dict, hash=False)
    icon_hint: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.kind, NodeKind):
            object.__setattr__(self, "kind", self.kind.value)
        object.__setattr__(self, "configuration", freeze_config(self.configuration or {}))

    @property
    def is_configured(self) -> bool:
        return bool(self.configuration)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "position": self.position.to_dict(),
            "data": thaw_config(self.configuration),
        }
        if self.icon_hint is not None:
            data["icon"] = self.icon_hint
        return data


@dataclass(frozen=True)
class Connection:
    """Directed edge from one node's output to another node's input."""
    id: str
    source: str
    target: str

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "source": self.source, "target": self.target}


@dataclass(frozen=True)
class Workflow:
    """The aggregate root: a named graph of nodes and connections."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Untitled Workflow"
    description: str = ""
    active: bool = False
    status: WorkflowStatus = WorkflowStatus.IDLE
    nodes: Tuple[Node, ...] = ()
    connections: Tuple[Connection, ...] = ()
    last_run: Optional[str] = None

    def __post_init__(self):
        # Sequences are always stored as tuples
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "connections", tuple(self.connections))
        object.__setattr__(self, "status", WorkflowStatus(self.status))

    def get_node(self, node_id: str) -> Optional[Node]:
        """Find a node by id."""
        return next((node for node in self.nodes if node.id == node_id), None)

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        """Find a connection by id."""
        return next(
            (conn for conn in self.connections if conn.id == connection_id), None
        )

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape shared with the dashboard."""
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "active": self.active,
            "status": self.status.value,
            "nodes": [node.to_dict() for node in self.nodes],
            "connections": [conn.to_dict() for conn in self.connections],
        }
        if self.last_run is not None:
            data["lastRun"] = self.last_run
        return data

    def summary(self) -> Dict[str, Any]:
        """Short listing used by dashboards and the CLI."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "active": self.active,
            "status": self.status.value,
            "nodes": len(self.nodes),
            "connections": len(self.connections),
            "lastRun": self.last_run,
        }
