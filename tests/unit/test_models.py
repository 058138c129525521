"""
Tests for core.workflow.models.

Tests cover:
- Node kind coercion and configuration flag
- Workflow defaults, lookups and tuple storage
- Dashboard serialization
"""

import dataclasses

import pytest

from core.workflow.models import (
    NODE_KINDS,
    Connection,
    Node,
    NodeKind,
    Position,
    Workflow,
    WorkflowStatus,
)


class TestNode:
    """Test Node record."""

    def test_kind_enum_is_stored_as_value(self):
        node = Node("1", "Start", NodeKind.TRIGGER)
        assert node.kind == "trigger"
        assert node.kind == NodeKind.TRIGGER
        assert type(node.kind) is str

    def test_defaults(self):
        node = Node("1", "Start", "action")
        assert node.position == Position(0, 0)
        assert node.configuration == {}
        assert node.icon_hint is None
        assert not node.is_configured

    def test_is_configured(self):
        node = Node("1", "Fetch", "action", configuration={"url": "https://example.com"})
        assert node.is_configured

    def test_configuration_is_read_only_copy(self):
        source = {"recipients": ["a@example.com"], "smtp": {"port": 25}}
        node = Node("1", "Mail", "action", configuration=source)
        source["recipients"].append("b@example.com")
        source["smtp"]["port"] = 587

        assert node.configuration["recipients"] == ("a@example.com",)
        assert node.configuration["smtp"] == {"port": 25}
        with pytest.raises(TypeError):
            node.configuration["smtp"]["port"] = 2525
        assert node.to_dict()["data"] == {"recipients": ["a@example.com"], "smtp": {"port": 25}}

    def test_hashable(self):
        node = Node("1", "Fetch", "action", configuration={"url": "x"})
        assert hash(node) == hash(Node("1", "Fetch", "action", configuration={"url": "y"}))

    def test_frozen(self):
        node = Node("1", "Start", "trigger")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.name = "Other"

    def test_to_dict(self):
        node = Node("1", "Start", "trigger", Position(50, 100), {"cron": "0 9 * * *"}, "clock")
        assert node.to_dict() == {
            "id": "1",
            "name": "Start",
            "type": "trigger",
            "position": {"x": 50, "y": 100},
            "data": {"cron": "0 9 * * *"},
            "icon": "clock",
        }

    def test_to_dict_without_icon(self):
        assert "icon" not in Node("1", "Start", "trigger").to_dict()


class TestConnection:
    """Test Connection record."""

    def test_self_loop(self):
        assert Connection("c1", "a", "a").is_self_loop
        assert not Connection("c1", "a", "b").is_self_loop

    def test_to_dict(self):
        assert Connection("c1", "a", "b").to_dict() == {"id": "c1", "source": "a", "target": "b"}


class TestWorkflow:
    """Test Workflow aggregate."""

    def test_defaults(self):
        workflow = Workflow()
        assert workflow.id
        assert workflow.name == "Untitled Workflow"
        assert workflow.active is False
        assert workflow.status == WorkflowStatus.IDLE
        assert workflow.nodes == ()
        assert workflow.connections == ()

    def test_fresh_ids(self):
        assert Workflow().id != Workflow().id

    def test_sequences_become_tuples(self):
        workflow = Workflow(nodes=[Node("1", "Start", "trigger")], connections=[])
        assert isinstance(workflow.nodes, tuple)
        assert isinstance(workflow.connections, tuple)

    def test_status_coerced(self):
        assert Workflow(status="running").status is WorkflowStatus.RUNNING

    def test_lookups(self, email_digest):
        assert email_digest.get_node("2").name == "HTTP Request"
        assert email_digest.get_node("missing") is None
        assert email_digest.get_connection("c2").target == "3"
        assert email_digest.get_connection("missing") is None
        assert email_digest.node_ids == ["1", "2", "3"]

    def test_to_dict(self, email_digest):
        data = email_digest.to_dict()
        assert data["id"] == "1"
        assert data["status"] == "idle"
        assert data["lastRun"] == "2 mins ago"
        assert [n["id"] for n in data["nodes"]] == ["1", "2", "3"]
        assert data["connections"][0] == {"id": "c1", "source": "1", "target": "2"}

    def test_to_dict_omits_missing_last_run(self):
        assert "lastRun" not in Workflow(name="X").to_dict()

    def test_summary(self, email_digest):
        summary = email_digest.summary()
        assert summary["nodes"] == 3
        assert summary["connections"] == 2
        assert summary["active"] is True


def test_node_kinds_closed_set():
    assert NODE_KINDS == {"trigger", "action", "function", "webhook"}
