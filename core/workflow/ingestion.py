# core/workflow/ingestion.py
"""Ingestion of externally generated workflow graphs.

This is the only path by which assistant output becomes a ``Workflow``.
The payload is shape-checked, given a fresh identity and validated; an
invalid payload is rejected as a whole and never patched up.
"""

import json
import uuid
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog

from core.workflow.errors import (
    InvalidGeneratedGraph,
    MalformedPayload,
    SelfLoopWarning,
)
from core.workflow.models import (
    Connection,
    Node,
    Position,
    Workflow,
    WorkflowStatus,
)
from core.workflow.validator import validate

logger = structlog.get_logger(__name__)

# Lane used for nodes that arrive without a position
DEFAULT_LANE_X = 100
DEFAULT_LANE_Y = 100
DEFAULT_LANE_SPACING = 250


@dataclass(frozen=True)
class IngestionResult:
    """An accepted workflow plus the advisory warnings raised while validating it."""
    workflow: Workflow
    warnings: Tuple[SelfLoopWarning, ...] = ()


def ingest(raw: Any, *, workflow_id: Optional[str] = None) -> IngestionResult:
    """Turn an untrusted graph payload into a validated workflow.

    Args:
        raw: Mapping (or JSON text) with ``name``, ``nodes`` and ``connections``.
        workflow_id: Identity to assign; a fresh uuid4 when omitted. Any id
            carried by the payload itself is ignored.

    Returns:
        IngestionResult with the new workflow (inactive, idle).

    Raises:
        MalformedPayload: a required field is missing or mis-typed.
        InvalidGeneratedGraph: the graph breaks a structural invariant.
    """
    payload = _coerce_payload(raw)

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise MalformedPayload("name", "expected a non-empty string")

    raw_nodes = payload.get("nodes")
    if not isinstance(raw_nodes, list):
        raise MalformedPayload("nodes", "expected a list")

    raw_connections = payload.get("connections")
    if not isinstance(raw_connections, list):
        raise MalformedPayload("connections", "expected a list")

    description = payload.get("description", "")
    if description is None:
        description = ""
    if not isinstance(description, str):
        raise MalformedPayload("description", "expected a string")

    nodes = [_parse_node(index, item) for index, item in enumerate(raw_nodes)]
    connections = [
        _parse_connection(index, item) for index, item in enumerate(raw_connections)
    ]

    candidate = Workflow(
        id=workflow_id or str(uuid.uuid4()),
        name=name,
        description=description,
        active=False,
        status=WorkflowStatus.IDLE,
        nodes=nodes,
        connections=connections,
    )

    result = validate(candidate)
    if result.error is not None:
        logger.warning(
            "generated_graph_rejected",
            workflow_name=name,
            reason=str(result.error),
        )
        raise InvalidGeneratedGraph(result.error) from result.error

    for warning in result.warnings:
        logger.info("generated_graph_warning", workflow_id=candidate.id, warning=warning.message)

    logger.info(
        "generated_graph_ingested",
        workflow_id=candidate.id,
        workflow_name=name,
        nodes=len(nodes),
        connections=len(connections),
    )
    return IngestionResult(workflow=candidate, warnings=result.warnings)


# ============================================================================
# Shape checks
# ============================================================================

def _coerce_payload(raw: Any) -> Mapping[str, Any]:
    if raw is None:
        raise MalformedPayload("payload", "no result")
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise MalformedPayload("payload", f"invalid JSON: {e}") from e
    if not isinstance(raw, Mapping):
        raise MalformedPayload("payload", "expected an object")
    return raw


def _require_string(item: Mapping[str, Any], key: str, where: str, non_empty: bool = False) -> str:
    value = item.get(key)
    if not isinstance(value, str) or (non_empty and not value.strip()):
        expected = "a non-empty string" if non_empty else "a string"
        raise MalformedPayload(f"{where}.{key}", f"expected {expected}")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _parse_node(index: int, item: Any) -> Node:
    where = f"nodes[{index}]"
    if not isinstance(item, Mapping):
        raise MalformedPayload(where, "expected an object")

    node_id = _require_string(item, "id", where)
    name = _require_string(item, "name", where, non_empty=True)
    kind_key = "type" if "type" in item else "kind"
    kind = _require_string(item, kind_key, where)

    raw_position = item.get("position")
    if raw_position is None:
        position = Position(DEFAULT_LANE_X + DEFAULT_LANE_SPACING * index, DEFAULT_LANE_Y)
    else:
        if not isinstance(raw_position, Mapping):
            raise MalformedPayload(f"{where}.position", "expected an object")
        x, y = raw_position.get("x"), raw_position.get("y")
        if not _is_number(x) or not _is_number(y):
            raise MalformedPayload(f"{where}.position", "x and y must be numbers")
        position = Position(float(x), float(y))

    config_key = "data" if "data" in item else "configuration"
    configuration = _parse_configuration(item.get(config_key), f"{where}.{config_key}")

    icon = item.get("icon")
    if icon is not None and not isinstance(icon, str):
        raise MalformedPayload(f"{where}.icon", "expected a string")

    return Node(
        id=node_id,
        name=name,
        kind=kind,
        position=position,
        configuration=configuration,
        icon_hint=icon,
    )


def _parse_configuration(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MalformedPayload(where, "expected an object")
    if not all(isinstance(key, str) for key in value):
        raise MalformedPayload(where, "keys must be strings")
    return dict(value)


def _parse_connection(index: int, item: Any) -> Connection:
    where = f"connections[{index}]"
    if not isinstance(item, Mapping):
        raise MalformedPayload(where, "expected an object")
    return Connection(
        id=_require_string(item, "id", where),
        source=_require_string(item, "source", where),
        target=_require_string(item, "target", where),
    )


def ingest_many(payloads: List[Any]) -> List[IngestionResult]:
    """Ingest several payloads, failing on the first rejected one."""
    return [ingest(payload) for payload in payloads]
