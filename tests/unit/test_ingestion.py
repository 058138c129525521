"""
Tests for core.workflow.ingestion.

Tests cover:
- Accepting well formed payloads (mapping and JSON text)
- Fresh identity and default state
- Field level shape errors
- Structural rejection wrapped as InvalidGeneratedGraph
"""

import json

import pytest

from core.workflow.errors import (
    DanglingConnection,
    DuplicateNodeId,
    InvalidGeneratedGraph,
    MalformedPayload,
)
from core.workflow.ingestion import ingest, ingest_many
from core.workflow.models import WorkflowStatus


class TestAccepted:

    def test_single_node_payload(self):
        result = ingest({
            "name": "X",
            "nodes": [{"id": "1", "name": "Start", "kind": "trigger", "position": {"x": 0, "y": 0}}],
            "connections": [],
        })
        workflow = result.workflow

        assert workflow.id
        assert workflow.active is False
        assert workflow.status == WorkflowStatus.IDLE
        assert len(workflow.nodes) == 1
        assert workflow.nodes[0].kind == "trigger"
        assert result.warnings == ()

    def test_generated_payload(self, generated_payload):
        workflow = ingest(generated_payload).workflow

        assert workflow.name == "Webhook to Slack"
        assert workflow.description == "Forward incoming webhooks to a Slack channel"
        webhook = workflow.get_node("1")
        assert webhook.kind == "webhook"
        assert webhook.configuration == {"path": "/hook"}
        assert webhook.icon_hint == "webhook"
        assert webhook.position.x == 100
        assert workflow.connections[0].target == "2"

    def test_fresh_id_each_time(self, generated_payload):
        first = ingest(generated_payload).workflow
        second = ingest(generated_payload).workflow
        assert first.id != second.id

    def test_payload_id_and_active_flag_ignored(self, generated_payload):
        generated_payload["id"] = "attacker-chosen"
        generated_payload["active"] = True
        workflow = ingest(generated_payload).workflow
        assert workflow.id != "attacker-chosen"
        assert workflow.active is False

    def test_explicit_workflow_id(self, generated_payload):
        assert ingest(generated_payload, workflow_id="wf-42").workflow.id == "wf-42"

    def test_json_text(self, generated_payload):
        workflow = ingest(json.dumps(generated_payload)).workflow
        assert len(workflow.nodes) == 2

    def test_configuration_is_copied(self, generated_payload):
        workflow = ingest(generated_payload).workflow
        generated_payload["nodes"][0]["data"]["path"] = "/changed"
        assert workflow.get_node("1").configuration == {"path": "/hook"}

    def test_missing_positions_use_default_lane(self):
        workflow = ingest({
            "name": "Lane",
            "nodes": [
                {"id": "a", "name": "A", "type": "trigger"},
                {"id": "b", "name": "B", "type": "action"},
            ],
            "connections": [],
        }).workflow
        assert [(n.position.x, n.position.y) for n in workflow.nodes] == [(100, 100), (350, 100)]

    def test_self_loop_accepted_with_warning(self):
        result = ingest({
            "name": "Loop",
            "nodes": [{"id": "1", "name": "Retry", "type": "function"}],
            "connections": [{"id": "c1", "source": "1", "target": "1"}],
        })
        assert len(result.workflow.connections) == 1
        assert [w.connection_id for w in result.warnings] == ["c1"]

    def test_ingest_many(self, generated_payload):
        results = ingest_many([generated_payload, generated_payload])
        assert len(results) == 2
        assert results[0].workflow.id != results[1].workflow.id


class TestMalformed:

    @pytest.mark.parametrize("raw, field", [
        (None, "payload"),
        ("not json", "payload"),
        ([1, 2], "payload"),
        ({"nodes": [], "connections": []}, "name"),
        ({"name": "", "nodes": [], "connections": []}, "name"),
        ({"name": "X", "connections": []}, "nodes"),
        ({"name": "X", "nodes": {}, "connections": []}, "nodes"),
        ({"name": "X", "nodes": []}, "connections"),
        ({"name": "X", "nodes": [], "connections": [], "description": 3}, "description"),
    ])
    def test_top_level_fields(self, raw, field):
        with pytest.raises(MalformedPayload) as exc_info:
            ingest(raw)
        assert exc_info.value.field == field

    @pytest.mark.parametrize("node, field", [
        ("oops", "nodes[0]"),
        ({"name": "A", "type": "trigger"}, "nodes[0].id"),
        ({"id": "1", "type": "trigger"}, "nodes[0].name"),
        ({"id": "1", "name": "A"}, "nodes[0].kind"),
        ({"id": "1", "name": "A", "type": "trigger", "position": {"x": "1", "y": 2}}, "nodes[0].position"),
        ({"id": "1", "name": "A", "type": "trigger", "position": {"x": True, "y": 2}}, "nodes[0].position"),
        ({"id": "1", "name": "A", "type": "trigger", "data": []}, "nodes[0].data"),
        ({"id": "1", "name": "A", "type": "trigger", "icon": 7}, "nodes[0].icon"),
    ])
    def test_node_fields(self, node, field):
        with pytest.raises(MalformedPayload) as exc_info:
            ingest({"name": "X", "nodes": [node], "connections": []})
        assert exc_info.value.field == field

    def test_connection_fields(self):
        with pytest.raises(MalformedPayload) as exc_info:
            ingest({
                "name": "X",
                "nodes": [{"id": "1", "name": "A", "type": "trigger"}],
                "connections": [{"id": "c1", "source": "1"}],
            })
        assert exc_info.value.field == "connections[0].target"


class TestInvalidGraph:

    def test_dangling_connection(self):
        with pytest.raises(InvalidGeneratedGraph) as exc_info:
            ingest({
                "name": "Y",
                "nodes": [{"id": "1", "name": "A", "type": "trigger"}],
                "connections": [{"id": "c1", "source": "1", "target": "2"}],
            })
        reason = exc_info.value.reason
        assert isinstance(reason, DanglingConnection)
        assert (reason.connection_id, reason.missing_endpoint) == ("c1", "2")

    def test_duplicate_node_id(self):
        with pytest.raises(InvalidGeneratedGraph) as exc_info:
            ingest({
                "name": "Dup",
                "nodes": [
                    {"id": "1", "name": "A", "type": "trigger"},
                    {"id": "1", "name": "B", "type": "action"},
                ],
                "connections": [],
            })
        assert isinstance(exc_info.value.reason, DuplicateNodeId)

    def test_unknown_kind(self):
        with pytest.raises(InvalidGeneratedGraph):
            ingest({
                "name": "Kind",
                "nodes": [{"id": "1", "name": "A", "type": "database"}],
                "connections": [],
            })
