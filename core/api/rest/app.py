"""FastAPI application serving the workflow dashboard."""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, StreamingResponse

from assistant.client import AssistantClient
from core.api.rest import editor
from core.api.rest.models import (
    AnalysisResponse,
    ChatRequest,
    GenerateRequest,
    IngestRequest,
    IngestResponse,
    WorkflowCreate,
)
from core.api.rest.state import assistant_client, commit, current_store, require_workflow
from core.config import Settings, get_settings
from core.visual.renderer import render_scene, render_svg
from core.workflow.editing import new_workflow
from core.workflow.errors import (
    DuplicateWorkflowId,
    EditError,
    GraphValidationError,
    InvalidGeneratedGraph,
    MalformedPayload,
    UnknownWorkflowId,
)
from core.workflow.ingestion import IngestionResult, ingest
from core.workflow.store import GraphStore
from core.workflow.templates import default_store

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api")


def _accept(request: Request, result: IngestionResult) -> IngestResponse:
    store = current_store(request).insert(result.workflow).select(result.workflow.id)
    commit(request, store)
    return IngestResponse(
        workflow=result.workflow.to_dict(),
        warnings=[warning.message for warning in result.warnings],
    )


# ============================================================================
# Routes
# ============================================================================

@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    return {
        "status": "healthy",
        "app": request.app.state.settings.app_name,
        "workflows": len(current_store(request)),
    }


@router.get("/workflows")
async def list_workflows(request: Request) -> List[Dict[str, Any]]:
    return [workflow.summary() for workflow in current_store(request)]


@router.post("/workflows", status_code=201)
async def create_workflow(request: Request, body: WorkflowCreate) -> Dict[str, Any]:
    try:
        workflow = new_workflow(body.name, body.description)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    commit(request, current_store(request).insert(workflow).select(workflow.id))
    return workflow.to_dict()


@router.get("/workflows/active")
async def get_active_workflow(request: Request) -> Dict[str, Any]:
    workflow = current_store(request).active_workflow()
    if workflow is None:
        raise HTTPException(status_code=404, detail="No workflow selected")
    return workflow.to_dict()


@router.post("/workflows/ingest", status_code=201, response_model=IngestResponse)
async def ingest_workflow(request: Request, body: IngestRequest) -> IngestResponse:
    return _accept(request, ingest(body.payload))


@router.get("/workflows/{workflow_id}")
async def get_workflow(request: Request, workflow_id: str) -> Dict[str, Any]:
    return require_workflow(request, workflow_id).to_dict()


@router.post("/workflows/{workflow_id}/select")
async def select_workflow(request: Request, workflow_id: str) -> Dict[str, Any]:
    store = commit(request, current_store(request).select(workflow_id))
    return {"activeWorkflowId": store.active_id}


@router.get("/workflows/{workflow_id}/scene")
async def get_workflow_scene(request: Request, workflow_id: str) -> Dict[str, Any]:
    return render_scene(require_workflow(request, workflow_id))


@router.get("/workflows/{workflow_id}/svg")
async def get_workflow_svg(request: Request, workflow_id: str) -> Response:
    return Response(
        content=render_svg(require_workflow(request, workflow_id)),
        media_type="image/svg+xml",
    )


@router.post("/workflows/{workflow_id}/analyze", response_model=AnalysisResponse)
async def analyze_workflow(request: Request, workflow_id: str) -> AnalysisResponse:
    workflow = require_workflow(request, workflow_id)
    analysis = await assistant_client(request).analyze_workflow(workflow)
    return AnalysisResponse(workflow_id=workflow.id, analysis=analysis)


@router.post("/assistant/generate", status_code=201, response_model=IngestResponse)
async def generate_workflow(request: Request, body: GenerateRequest) -> IngestResponse:
    raw = await assistant_client(request).generate_workflow(body.prompt)
    return _accept(request, ingest(raw))


@router.post("/assistant/chat")
async def chat(request: Request, body: ChatRequest) -> StreamingResponse:
    client = assistant_client(request)
    history = [turn.model_dump() for turn in body.history]
    return StreamingResponse(
        client.stream_chat(history, body.message),
        media_type="text/plain; charset=utf-8",
    )


# ============================================================================
# Application factory
# ============================================================================

def _error(status_code: int, exc: Exception, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc), **extra},
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[GraphStore] = None,
    assistant: Optional[AssistantClient] = None
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Application settings; loaded from the environment if omitted.
        store: Initial store snapshot; sample workflows or empty by default.
        assistant: Assistant client; created from settings on first use.
    """
    settings = settings or get_settings()
    if store is None:
        store = default_store() if settings.seed_samples else GraphStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("api_starting", app=settings.app_name, workflows=len(app.state.store))
        yield
        if app.state.owns_assistant and app.state.assistant is not None:
            await app.state.assistant.aclose()
        logger.info("api_stopped")

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Workflow graph design and assistant endpoints",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.store = store
    app.state.assistant = assistant
    app.state.owns_assistant = False

    @app.exception_handler(UnknownWorkflowId)
    async def unknown_workflow_handler(request: Request, exc: UnknownWorkflowId):
        return _error(404, exc, workflowId=exc.workflow_id)

    @app.exception_handler(DuplicateWorkflowId)
    async def duplicate_workflow_handler(request: Request, exc: DuplicateWorkflowId):
        return _error(409, exc, workflowId=exc.workflow_id)

    @app.exception_handler(EditError)
    async def edit_error_handler(request: Request, exc: EditError):
        return _error(404, exc)

    @app.exception_handler(MalformedPayload)
    async def malformed_payload_handler(request: Request, exc: MalformedPayload):
        return _error(422, exc, field=exc.field)

    @app.exception_handler(InvalidGeneratedGraph)
    async def invalid_graph_handler(request: Request, exc: InvalidGeneratedGraph):
        return _error(422, exc, reason=type(exc.reason).__name__)

    @app.exception_handler(GraphValidationError)
    async def validation_handler(request: Request, exc: GraphValidationError):
        return _error(422, exc)

    app.include_router(router)
    app.include_router(editor.router)
    return app
