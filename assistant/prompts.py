"""Prompts for the workflow assistant."""

import json
from typing import Any, Dict

from core.workflow.models import NodeKind, Workflow

ASSISTANT_SYSTEM_PROMPT = """You are Lumina, an expert AI workflow architect specializing in n8n-style automation.
Your goal is to help users design, debug, and optimize automation workflows.
Be concise, technical but accessible, and always suggest practical node configurations.
"""

WORKFLOW_GENERATION_SYSTEM_PROMPT = """You are an expert workflow automation architect. You design workflow graphs for a visual node-based editor similar to n8n.

Reply with a single JSON object and nothing else.
"""

WORKFLOW_GENERATION_PROMPT = """Generate a JSON representation of an automation workflow based on this request: "{request}".

The structure must strictly follow this schema:
{{
  "name": "Workflow Name",
  "description": "Short description",
  "nodes": [
    {{ "id": "1", "name": "Webhook", "type": "trigger", "position": {{ "x": 100, "y": 100 }}, "data": {{}}, "icon": "webhook" }}
  ],
  "connections": [
    {{ "id": "c1", "source": "1", "target": "2" }}
  ]
}}

Available node types: {node_types}.
Node ids and connection ids must be unique. Every connection must reference existing node ids.
Spread nodes out horizontally (x axis increments by 250).
"""

WORKFLOW_ANALYSIS_PROMPT = """Analyze this workflow structure and provide 3 brief bullet points on potential improvements or security risks: {workflow_json}"""

WELCOME_MESSAGE = (
    "Hello! I'm Lumina. I can help you design automation workflows, debug issues, "
    "or answer questions about n8n integrations. What are we building today?"
)

CHAT_FALLBACK_MESSAGE = (
    "I encountered an error processing your request. Please check your API key."
)
ANALYSIS_FALLBACK_MESSAGE = "Error analyzing workflow."
ANALYSIS_EMPTY_MESSAGE = "Unable to analyze workflow."

GENERATION_PENDING_MESSAGE = "Analyzing your requirements and designing a workflow..."
GENERATION_FAILED_MESSAGE = (
    "I couldn't generate a valid workflow from that description. "
    "Could you provide more details?"
)
GENERATION_SUCCESS_MESSAGE = (
    'I\'ve created a workflow for "{name}" based on your description. '
    "It has {node_count} nodes. Check the Workflow Editor to customize it further."
)


def build_generation_prompt(request: str) -> str:
    node_types = ", ".join(f"'{kind.value}'" for kind in NodeKind)
    return WORKFLOW_GENERATION_PROMPT.format(request=request, node_types=node_types)


def serialize_for_analysis(workflow: Workflow) -> str:
    """Only the graph itself is sent for analysis."""
    data: Dict[str, Any] = workflow.to_dict()
    return json.dumps({"nodes": data["nodes"], "connections": data["connections"]})


def build_analysis_prompt(workflow: Workflow) -> str:
    return WORKFLOW_ANALYSIS_PROMPT.format(workflow_json=serialize_for_analysis(workflow))
