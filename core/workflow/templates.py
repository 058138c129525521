# core/workflow/templates.py
"""Sample workflows shown on a fresh dashboard."""

from typing import List

from core.workflow.models import Connection, Node, NodeKind, Position, Workflow
from core.workflow.store import GraphStore


def create_email_digest_template() -> Workflow:
    """Schedule → HTTP request → email, the daily news digest."""
    return Workflow(
        id="1",
        name="Daily Email Digest",
        description="Scrapes news and sends summary",
        active=True,
        last_run="2 mins ago",
        nodes=[
            Node("1", "Schedule Trigger", NodeKind.TRIGGER, Position(50, 100), icon_hint="clock"),
            Node("2", "HTTP Request", NodeKind.ACTION, Position(300, 100), icon_hint="globe"),
            Node("3", "Send Email", NodeKind.ACTION, Position(550, 100), icon_hint="mail"),
        ],
        connections=[
            Connection("c1", "1", "2"),
            Connection("c2", "2", "3"),
        ],
    )


def create_lead_sync_template() -> Workflow:
    """Webhook → transform, syncing inbound leads to a CRM."""
    return Workflow(
        id="2",
        name="Lead Sync CRM",
        description="Syncs new webhook leads to CRM",
        active=False,
        last_run="1 day ago",
        nodes=[
            Node("1", "Webhook", NodeKind.WEBHOOK, Position(50, 150), icon_hint="webhook"),
            Node("2", "Transform Data", NodeKind.FUNCTION, Position(300, 150), icon_hint="code"),
        ],
        connections=[
            Connection("c1", "1", "2"),
        ],
    )


def sample_workflows() -> List[Workflow]:
    return [create_email_digest_template(), create_lead_sync_template()]


def default_store() -> GraphStore:
    """A store seeded with the sample workflows, nothing selected."""
    return GraphStore.from_workflows(sample_workflows())
