"""Workflow graph model, validation, ingestion and the graph store."""

from core.workflow.errors import (
    DanglingConnection,
    DuplicateConnectionId,
    DuplicateNodeId,
    DuplicateWorkflowId,
    GraphValidationError,
    IngestionError,
    InvalidGeneratedGraph,
    MalformedPayload,
    SelfLoopWarning,
    UnknownNodeKind,
    UnknownWorkflowId,
    WorkflowError,
)
from core.workflow.ingestion import IngestionResult, ingest
from core.workflow.models import (
    Connection,
    Node,
    NodeKind,
    Position,
    Workflow,
    WorkflowStatus,
)
from core.workflow.store import GraphStore
from core.workflow.validator import ValidationResult, validate

__all__ = [
    "Connection",
    "DanglingConnection",
    "DuplicateConnectionId",
    "DuplicateNodeId",
    "DuplicateWorkflowId",
    "GraphStore",
    "GraphValidationError",
    "IngestionError",
    "IngestionResult",
    "InvalidGeneratedGraph",
    "MalformedPayload",
    "Node",
    "NodeKind",
    "Position",
    "SelfLoopWarning",
    "UnknownNodeKind",
    "UnknownWorkflowId",
    "ValidationResult",
    "Workflow",
    "WorkflowError",
    "WorkflowStatus",
    "ingest",
    "validate",
]
