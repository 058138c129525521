"""
Tests for core.workflow.editing.
"""

import pytest

from core.workflow.editing import (
    add_node,
    auto_layout,
    configure_node,
    connect,
    disconnect,
    move_node,
    new_workflow,
    remove_node,
    rename_node,
    set_active,
)
from core.workflow.errors import (
    DanglingConnection,
    DuplicateConnectionId,
    DuplicateNodeId,
    UnknownConnectionId,
    UnknownNodeId,
)
from core.workflow.models import Connection, Node, Position, Workflow


class TestNewWorkflow:

    def test_new_workflow(self):
        workflow = new_workflow("Invoices", "Process invoices")
        assert workflow.name == "Invoices"
        assert workflow.nodes == ()
        assert workflow.active is False

    def test_empty_name(self):
        with pytest.raises(ValueError):
            new_workflow("   ")


class TestNodes:

    def test_add_first_node_at_origin_offset(self):
        workflow = add_node(new_workflow("W"), "Start", "trigger", node_id="s")
        assert workflow.get_node("s").position == Position(100, 100)

    def test_add_node_right_of_last(self, two_node_workflow):
        workflow = add_node(two_node_workflow, "Notify", "action", node_id="n")
        assert workflow.get_node("n").position == Position(550, 100)
        assert len(two_node_workflow.nodes) == 2

    def test_generated_node_id(self):
        workflow = add_node(new_workflow("W"), "Code", "function")
        assert workflow.nodes[0].id.startswith("function_")

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            add_node(new_workflow("W"), "DB", "database")

    def test_duplicate_node_id(self, two_node_workflow):
        with pytest.raises(DuplicateNodeId):
            add_node(two_node_workflow, "Again", "action", node_id="a")

    def test_move_configure_rename(self, two_node_workflow):
        workflow = move_node(two_node_workflow, "b", 400, 220)
        workflow = configure_node(workflow, "b", {"channel": "#ops"})
        workflow = rename_node(workflow, "b", "Post")
        node = workflow.get_node("b")

        assert node.position == Position(400, 220)
        assert node.configuration == {"channel": "#ops"}
        assert node.name == "Post"
        assert two_node_workflow.get_node("b").name == "Finish"

    def test_unknown_node(self, two_node_workflow):
        with pytest.raises(UnknownNodeId):
            move_node(two_node_workflow, "zzz", 0, 0)
        with pytest.raises(UnknownNodeId):
            remove_node(two_node_workflow, "zzz")

    def test_remove_node_drops_connections(self, email_digest):
        workflow = remove_node(email_digest, "2")
        assert workflow.node_ids == ["1", "3"]
        assert workflow.connections == ()


class TestConnections:

    def test_connect(self, two_node_workflow):
        workflow = connect(two_node_workflow, "b", "a", connection_id="back")
        assert workflow.get_connection("back") == Connection("back", "b", "a")

    def test_connect_missing_node(self, two_node_workflow):
        with pytest.raises(DanglingConnection):
            connect(two_node_workflow, "a", "nowhere")

    def test_connect_duplicate_id(self, two_node_workflow):
        with pytest.raises(DuplicateConnectionId):
            connect(two_node_workflow, "b", "a", connection_id="c1")

    def test_self_loop_allowed(self, two_node_workflow):
        workflow = connect(two_node_workflow, "a", "a", connection_id="loop")
        assert workflow.get_connection("loop").is_self_loop

    def test_disconnect(self, two_node_workflow):
        assert disconnect(two_node_workflow, "c1").connections == ()
        with pytest.raises(UnknownConnectionId):
            disconnect(two_node_workflow, "c9")


class TestLayout:

    def test_set_active(self, two_node_workflow):
        assert set_active(two_node_workflow, True).active is True
        assert two_node_workflow.active is False

    def test_auto_layout_levels(self):
        workflow = Workflow(
            name="Fan out",
            nodes=[
                Node("t", "Trigger", "trigger"),
                Node("x", "X", "action"),
                Node("y", "Y", "action"),
                Node("z", "Join", "function"),
            ],
            connections=[
                Connection("c1", "t", "x"),
                Connection("c2", "t", "y"),
                Connection("c3", "x", "z"),
                Connection("c4", "y", "z"),
            ],
        )
        positions = {n.id: (n.position.x, n.position.y) for n in auto_layout(workflow).nodes}
        assert positions == {
            "t": (100, 100),
            "x": (350, 100),
            "y": (350, 200),
            "z": (600, 100),
        }

    def test_auto_layout_cycle_falls_back_to_row(self):
        workflow = Workflow(
            name="Cycle",
            nodes=[Node("a", "A", "trigger"), Node("b", "B", "action")],
            connections=[Connection("c1", "a", "b"), Connection("c2", "b", "a")],
        )
        positions = [(n.position.x, n.position.y) for n in auto_layout(workflow).nodes]
        assert positions == [(100, 100), (350, 100)]
