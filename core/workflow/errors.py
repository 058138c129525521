# core/workflow/errors.py
"""Error taxonomy for workflow graphs, ingestion, the store and the assistant."""

from dataclasses import dataclass
from typing import Any


class WorkflowError(Exception):
    """Base class for every workflow related failure."""
    pass


# ============================================================================
# Structural validation
# ============================================================================

class GraphValidationError(WorkflowError):
    """Raised when a graph violates a structural invariant."""
    pass


class DuplicateNodeId(GraphValidationError):
    """Two nodes of the same graph share an id."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Duplicate node id: {node_id!r}")


class DuplicateConnectionId(GraphValidationError):
    """Two connections of the same graph share an id."""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Duplicate connection id: {connection_id!r}")


class DanglingConnection(GraphValidationError):
    """A connection endpoint does not resolve to a node of the graph."""

    def __init__(self, connection_id: str, missing_endpoint: str):
        self.connection_id = connection_id
        self.missing_endpoint = missing_endpoint
        super().__init__(
            f"Connection {connection_id!r} references unknown node: {missing_endpoint!r}"
        )


class UnknownNodeKind(GraphValidationError):
    """A node kind is outside the closed node-kind set."""

    def __init__(self, node_id: str, value: Any):
        self.node_id = node_id
        self.value = value
        super().__init__(f"Node {node_id!r} has unknown kind: {value!r}")


@dataclass(frozen=True)
class SelfLoopWarning:
    """Advisory: a connection whose source and target are the same node."""
    connection_id: str
    node_id: str

    @property
    def message(self) -> str:
        return f"Connection {self.connection_id!r} loops back to node {self.node_id!r}"


# ============================================================================
# Ingestion
# ============================================================================

class IngestionError(WorkflowError):
    """Raised when an external graph payload cannot be accepted."""
    pass


class MalformedPayload(IngestionError):
    """A required field is missing or has the wrong shape."""

    def __init__(self, field: str, detail: str = ""):
        self.field = field
        self.detail = detail
        message = f"Malformed payload field: {field}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class InvalidGeneratedGraph(IngestionError):
    """A well-shaped payload describes a structurally invalid graph."""

    def __init__(self, reason: GraphValidationError):
        self.reason = reason
        super().__init__(f"Generated graph is invalid: {reason}")


# ============================================================================
# Store and editing
# ============================================================================

class StoreError(WorkflowError):
    """Graph store misuse."""
    pass


class DuplicateWorkflowId(StoreError):

    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        super().__init__(f"Workflow already exists: {workflow_id!r}")


class UnknownWorkflowId(StoreError):

    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        super().__init__(f"Unknown workflow: {workflow_id!r}")


class EditError(WorkflowError):
    """An edit referenced something the workflow does not contain."""
    pass


class UnknownNodeId(EditError):

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Unknown node: {node_id!r}")


class UnknownConnectionId(EditError):

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Unknown connection: {connection_id!r}")


# ============================================================================
# Assistant
# ============================================================================

class AssistantTransportFailure(WorkflowError):
    """The assistant service could not be reached or answered garbage."""
    pass
