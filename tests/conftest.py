"""
Pytest configuration and fixtures for the Lumina Workflows project.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from core.workflow.models import Connection, Node, NodeKind, Position, Workflow
from core.workflow.templates import create_email_digest_template


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def email_digest():
    """The three node schedule -> request -> email sample workflow."""
    return create_email_digest_template()


@pytest.fixture
def two_node_workflow():
    """Two nodes one lane apart, joined by a single connection."""
    return Workflow(
        id="wf-two",
        name="Two Nodes",
        nodes=[
            Node("a", "Start", NodeKind.TRIGGER, Position(50, 100)),
            Node("b", "Finish", NodeKind.ACTION, Position(300, 100)),
        ],
        connections=[Connection("c1", "a", "b")],
    )


@pytest.fixture
def generated_payload():
    """A well formed graph payload as the assistant would produce it."""
    return {
        "name": "Webhook to Slack",
        "description": "Forward incoming webhooks to a Slack channel",
        "nodes": [
            {"id": "1", "name": "Webhook", "type": "webhook",
             "position": {"x": 100, "y": 100}, "data": {"path": "/hook"}, "icon": "webhook"},
            {"id": "2", "name": "Post to Slack", "type": "action",
             "position": {"x": 350, "y": 100}, "data": {}},
        ],
        "connections": [
            {"id": "c1", "source": "1", "target": "2"},
        ],
    }


class FakeAssistantClient:
    """Stands in for AssistantClient with canned results."""

    def __init__(self, generated=None, fragments=("Hello", " there"), analysis="Looks fine."):
        self.generated = generated
        self.fragments = list(fragments)
        self.analysis = analysis
        self.chat_calls = []
        self.generate_calls = []
        self.analyze_calls = []
        self.closed = False

    async def stream_chat(self, history, message):
        self.chat_calls.append((list(history), message))
        for fragment in self.fragments:
            yield fragment

    async def generate_workflow(self, prompt):
        self.generate_calls.append(prompt)
        return self.generated

    async def analyze_workflow(self, workflow):
        self.analyze_calls.append(workflow)
        return self.analysis

    async def aclose(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


@pytest.fixture
def fake_assistant(generated_payload):
    return FakeAssistantClient(generated=generated_payload)


@pytest.fixture
def make_assistant():
    """The fake client class, for tests that need custom canned results."""
    return FakeAssistantClient
