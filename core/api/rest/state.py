"""Access to the store snapshot and assistant held on ``app.state``."""

from fastapi import Request

from assistant.client import AssistantClient, AssistantConfig
from core.workflow.errors import UnknownWorkflowId
from core.workflow.models import Workflow
from core.workflow.store import GraphStore


def current_store(request: Request) -> GraphStore:
    return request.app.state.store


def commit(request: Request, store: GraphStore) -> GraphStore:
    """Swap in a new store snapshot."""
    request.app.state.store = store
    return store


def require_workflow(request: Request, workflow_id: str) -> Workflow:
    workflow = current_store(request).get(workflow_id)
    if workflow is None:
        raise UnknownWorkflowId(workflow_id)
    return workflow


def assistant_client(request: Request) -> AssistantClient:
    """The app's assistant, created from settings on first use."""
    state = request.app.state
    if state.assistant is None:
        state.assistant = AssistantClient(AssistantConfig.from_settings(state.settings))
        state.owns_assistant = True
    return state.assistant
