"""Workflow editor endpoints: nodes, connections, layout and lifecycle.

Every route applies one editing operation to the stored workflow, stores
the result with ``GraphStore.update`` and swaps in the new snapshot.
"""

from typing import Any, Callable, Dict, Optional

import structlog
from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field

from core.api.rest.state import commit, current_store, require_workflow
from core.workflow import editing
from core.workflow.errors import UnknownNodeId
from core.workflow.models import Position, Workflow
from core.workflow.validator import validate

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api/workflows/{workflow_id}", tags=["workflow-editor"])


# Pydantic models for request/response
class PositionModel(BaseModel):
    x: float
    y: float


class NodeCreate(BaseModel):
    name: str = Field(..., min_length=1)
    kind: str
    position: Optional[PositionModel] = None
    configuration: Dict[str, Any] = Field(default_factory=dict)
    icon: Optional[str] = None
    id: Optional[str] = None


class NodeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    position: Optional[PositionModel] = None
    configuration: Optional[Dict[str, Any]] = None


class ConnectionCreate(BaseModel):
    source: str
    target: str
    id: Optional[str] = None


class ActivationRequest(BaseModel):
    active: bool


def _apply(request: Request, workflow_id: str, edit: Callable[[Workflow], Workflow]) -> Dict[str, Any]:
    """Run ``edit`` on the stored workflow, commit it and return it with its warnings."""
    workflow = require_workflow(request, workflow_id)
    try:
        updated = edit(workflow)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    commit(request, current_store(request).update(updated))
    logger.info("workflow_edited", workflow_id=workflow_id, nodes=len(updated.nodes))

    return {
        "workflow": updated.to_dict(),
        "warnings": [warning.message for warning in validate(updated).warnings],
    }


# ============================================================================
# Nodes
# ============================================================================

@router.post("/nodes", status_code=201)
async def add_node(request: Request, workflow_id: str, body: NodeCreate) -> Dict[str, Any]:
    position = Position(body.position.x, body.position.y) if body.position else None
    return _apply(request, workflow_id, lambda wf: editing.add_node(
        wf,
        body.name,
        body.kind,
        position=position,
        configuration=body.configuration,
        icon_hint=body.icon,
        node_id=body.id,
    ))


@router.patch("/nodes/{node_id}")
async def update_node(request: Request, workflow_id: str, node_id: str, body: NodeUpdate) -> Dict[str, Any]:
    """Rename, move and/or reconfigure a node; omitted fields stay as they are."""

    def edit(wf: Workflow) -> Workflow:
        if wf.get_node(node_id) is None:
            raise UnknownNodeId(node_id)
        if body.name is not None:
            wf = editing.rename_node(wf, node_id, body.name)
        if body.position is not None:
            wf = editing.move_node(wf, node_id, body.position.x, body.position.y)
        if body.configuration is not None:
            wf = editing.configure_node(wf, node_id, body.configuration)
        return wf

    return _apply(request, workflow_id, edit)


@router.delete("/nodes/{node_id}")
async def remove_node(request: Request, workflow_id: str, node_id: str) -> Dict[str, Any]:
    return _apply(request, workflow_id, lambda wf: editing.remove_node(wf, node_id))


# ============================================================================
# Connections
# ============================================================================

@router.post("/connections", status_code=201)
async def connect(request: Request, workflow_id: str, body: ConnectionCreate) -> Dict[str, Any]:
    return _apply(request, workflow_id, lambda wf: editing.connect(
        wf, body.source, body.target, connection_id=body.id
    ))


@router.delete("/connections/{connection_id}")
async def disconnect(request: Request, workflow_id: str, connection_id: str) -> Dict[str, Any]:
    return _apply(request, workflow_id, lambda wf: editing.disconnect(wf, connection_id))


# ============================================================================
# Workflow
# ============================================================================

@router.post("/layout")
async def layout(request: Request, workflow_id: str) -> Dict[str, Any]:
    return _apply(request, workflow_id, editing.auto_layout)


@router.post("/activation")
async def set_activation(request: Request, workflow_id: str, body: ActivationRequest) -> Dict[str, Any]:
    return _apply(request, workflow_id, lambda wf: editing.set_active(wf, body.active))


@router.delete("", status_code=204)
async def delete_workflow(request: Request, workflow_id: str) -> Response:
    commit(request, current_store(request).remove(workflow_id))
    logger.info("workflow_deleted", workflow_id=workflow_id)
    return Response(status_code=204)
