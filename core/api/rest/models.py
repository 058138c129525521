"""Pydantic models for REST API."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class WorkflowCreate(BaseModel):
    """Create an empty workflow."""
    name: str = Field(..., min_length=1)
    description: str = ""


class IngestRequest(BaseModel):
    """Externally generated graph payload to ingest."""
    payload: Any = None


class GenerateRequest(BaseModel):
    """Natural-language prompt for graph generation."""
    prompt: str = Field(..., min_length=1)


class ChatTurn(BaseModel):
    role: str = "user"
    text: str = ""


class ChatRequest(BaseModel):
    """A chat message plus the turns before it."""
    history: List[ChatTurn] = Field(default_factory=list)
    message: str = Field(..., min_length=1)


class IngestResponse(BaseModel):
    """Accepted workflow and the advisory warnings it produced."""
    workflow: Dict[str, Any]
    warnings: List[str] = Field(default_factory=list)


class AnalysisResponse(BaseModel):
    workflow_id: str
    analysis: str
