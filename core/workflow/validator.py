# core/workflow/validator.py
"""Structural validation of workflow graphs."""

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

import structlog

from core.workflow.errors import (
    DanglingConnection,
    DuplicateConnectionId,
    DuplicateNodeId,
    GraphValidationError,
    SelfLoopWarning,
    UnknownNodeKind,
)
from core.workflow.models import NODE_KINDS, Workflow

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a candidate workflow.

    Either ``error`` is set (rejected) or the workflow is accepted with a
    possibly empty tuple of advisory warnings.
    """
    workflow: Workflow
    warnings: Tuple[SelfLoopWarning, ...] = ()
    error: Optional[GraphValidationError] = None

    @property
    def accepted(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> Workflow:
        """Return the workflow, or raise the structural error."""
        if self.error is not None:
            raise self.error
        return self.workflow


def validate(candidate: Workflow) -> ValidationResult:
    """Check the structural invariants of ``candidate``.

    Checks run in a fixed order and stop at the first structural failure:
    node id uniqueness, connection id uniqueness, connection endpoints,
    node kinds. Self loops are collected as warnings only.
    """
    error = _first_structural_error(candidate)
    if error is not None:
        logger.debug(
            "workflow_rejected",
            workflow_id=candidate.id,
            error=str(error),
        )
        return ValidationResult(workflow=candidate, error=error)

    warnings = tuple(
        SelfLoopWarning(connection_id=conn.id, node_id=conn.source)
        for conn in candidate.connections
        if conn.is_self_loop
    )
    return ValidationResult(workflow=candidate, warnings=warnings)


def _first_structural_error(candidate: Workflow) -> Optional[GraphValidationError]:
    node_ids: Set[str] = set()
    for node in candidate.nodes:
        if node.id in node_ids:
            return DuplicateNodeId(node.id)
        node_ids.add(node.id)

    seen: Set[str] = set()
    for conn in candidate.connections:
        if conn.id in seen:
            return DuplicateConnectionId(conn.id)
        seen.add(conn.id)

    for conn in candidate.connections:
        for endpoint in (conn.source, conn.target):
            if endpoint not in node_ids:
                return DanglingConnection(conn.id, endpoint)

    for node in candidate.nodes:
        if not isinstance(node.kind, str) or node.kind not in NODE_KINDS:
            return UnknownNodeKind(node.id, node.kind)

    return None


def validation_messages(result: ValidationResult) -> List[str]:
    """Human readable lines for a validation result."""
    if result.error is not None:
        return [str(result.error)]
    return [warning.message for warning in result.warnings]
