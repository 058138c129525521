# core/workflow/store.py
"""Graph Store: copy-on-write collection of workflows.

Every mutating call returns a new ``GraphStore``. Snapshots handed out
earlier stay valid and unchanged, so a view rendering an older snapshot
never sees a half-applied update.
"""

from typing import Iterable, Iterator, Optional, Tuple

import structlog

from core.workflow.errors import DuplicateWorkflowId, UnknownWorkflowId
from core.workflow.models import Workflow
from core.workflow.validator import validate

logger = structlog.get_logger(__name__)


class GraphStore:
    """Ordered workflows (newest first) plus the active workflow pointer.

    A store starts empty, or is seeded with ``from_workflows``; either way
    every workflow it holds went through ``insert``.
    """

    __slots__ = ("_workflows", "_active_id")

    def __init__(self):
        self._workflows: Tuple[Workflow, ...] = ()
        self._active_id: Optional[str] = None

    @classmethod
    def _snapshot(cls, workflows: Tuple[Workflow, ...], active_id: Optional[str]) -> "GraphStore":
        """Wrap already checked contents; only the mutation methods call this."""
        store = cls.__new__(cls)
        store._workflows = workflows
        store._active_id = active_id
        return store

    @classmethod
    def from_workflows(cls, workflows: Iterable[Workflow]) -> "GraphStore":
        """Build a store by inserting ``workflows`` in order of appearance.

        The resulting store lists them in the given order.
        """
        store = cls()
        for workflow in reversed(list(workflows)):
            store = store.insert(workflow)
        return store

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def workflows(self) -> Tuple[Workflow, ...]:
        return self._workflows

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    def get(self, workflow_id: str) -> Optional[Workflow]:
        """Look up a workflow by id."""
        return next((wf for wf in self._workflows if wf.id == workflow_id), None)

    def active_workflow(self) -> Optional[Workflow]:
        """The selected workflow, or ``None`` if unset or no longer present."""
        if self._active_id is None:
            return None
        return self.get(self._active_id)

    def __len__(self) -> int:
        return len(self._workflows)

    def __iter__(self) -> Iterator[Workflow]:
        return iter(self._workflows)

    def __contains__(self, workflow_id: object) -> bool:
        return any(wf.id == workflow_id for wf in self._workflows)

    def __repr__(self) -> str:
        return f"GraphStore(workflows={len(self._workflows)}, active_id={self._active_id!r})"

    # ------------------------------------------------------------------
    # Mutations (each returns a new snapshot)
    # ------------------------------------------------------------------

    def insert(self, workflow: Workflow) -> "GraphStore":
        """Prepend ``workflow``.

        Raises:
            DuplicateWorkflowId: a workflow with that id is already stored.
            GraphValidationError: the workflow breaks a structural invariant.
        """
        if workflow.id in self:
            raise DuplicateWorkflowId(workflow.id)
        validate(workflow).raise_for_error()

        logger.info("workflow_inserted", workflow_id=workflow.id, workflow_name=workflow.name)
        return self._snapshot((workflow,) + self._workflows, self._active_id)

    def update(self, workflow: Workflow) -> "GraphStore":
        """Replace the stored workflow with the same id, keeping its place."""
        if workflow.id not in self:
            raise UnknownWorkflowId(workflow.id)
        validate(workflow).raise_for_error()

        logger.debug("workflow_updated", workflow_id=workflow.id)
        return self._snapshot(
            tuple(workflow if wf.id == workflow.id else wf for wf in self._workflows),
            self._active_id,
        )

    def remove(self, workflow_id: str) -> "GraphStore":
        """Stop referencing a workflow; clears the pointer if it was active."""
        if workflow_id not in self:
            raise UnknownWorkflowId(workflow_id)

        active_id = None if self._active_id == workflow_id else self._active_id
        logger.info("workflow_removed", workflow_id=workflow_id)
        return self._snapshot(
            tuple(wf for wf in self._workflows if wf.id != workflow_id),
            active_id,
        )

    def select(self, workflow_id: str) -> "GraphStore":
        """Point the active pointer at ``workflow_id``."""
        if workflow_id not in self:
            raise UnknownWorkflowId(workflow_id)
        return self._snapshot(self._workflows, workflow_id)

    def clear_selection(self) -> "GraphStore":
        return self._snapshot(self._workflows, None)
