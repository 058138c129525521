"""
Tests for core.workflow.validator.
"""

import pytest

from core.workflow.errors import (
    DanglingConnection,
    DuplicateConnectionId,
    DuplicateNodeId,
    UnknownNodeKind,
)
from core.workflow.models import Connection, Node, Workflow
from core.workflow.validator import validate, validation_messages


def make_workflow(nodes, connections=()):
    return Workflow(id="wf", name="Candidate", nodes=nodes, connections=connections)


class TestStructuralErrors:

    def test_duplicate_node_id(self):
        candidate = make_workflow([
            Node("1", "First", "trigger"),
            Node("1", "Second", "action"),
        ])
        result = validate(candidate)

        assert not result.accepted
        assert isinstance(result.error, DuplicateNodeId)
        assert result.error.node_id == "1"

    def test_duplicate_connection_id(self):
        candidate = make_workflow(
            [Node("1", "A", "trigger"), Node("2", "B", "action"), Node("3", "C", "action")],
            [Connection("c1", "1", "2"), Connection("c1", "2", "3")],
        )
        error = validate(candidate).error
        assert isinstance(error, DuplicateConnectionId)
        assert error.connection_id == "c1"

    def test_dangling_target(self):
        candidate = make_workflow([Node("1", "A", "trigger")], [Connection("c1", "1", "2")])
        error = validate(candidate).error
        assert isinstance(error, DanglingConnection)
        assert (error.connection_id, error.missing_endpoint) == ("c1", "2")

    def test_dangling_source_reported_first(self):
        candidate = make_workflow([Node("1", "A", "trigger")], [Connection("c1", "x", "y")])
        assert validate(candidate).error.missing_endpoint == "x"

    def test_unknown_kind(self):
        candidate = make_workflow([Node("1", "A", "trigger"), Node("2", "B", "database")])
        error = validate(candidate).error
        assert isinstance(error, UnknownNodeKind)
        assert (error.node_id, error.value) == ("2", "database")

    def test_non_string_kind(self):
        candidate = make_workflow([Node("1", "A", ["trigger"])])
        assert isinstance(validate(candidate).error, UnknownNodeKind)

    def test_checks_run_in_order(self):
        # Duplicate node id wins over the dangling connection and bad kind
        candidate = make_workflow(
            [Node("1", "A", "bogus"), Node("1", "B", "action")],
            [Connection("c1", "1", "missing")],
        )
        assert isinstance(validate(candidate).error, DuplicateNodeId)

    def test_raise_for_error(self):
        candidate = make_workflow([Node("1", "A", "trigger"), Node("1", "B", "action")])
        with pytest.raises(DuplicateNodeId):
            validate(candidate).raise_for_error()


class TestAcceptance:

    def test_valid_graph(self, email_digest):
        result = validate(email_digest)
        assert result.accepted
        assert result.warnings == ()
        assert result.workflow is email_digest
        assert result.raise_for_error() is email_digest

    def test_self_loop_is_a_warning(self):
        candidate = make_workflow([Node("1", "Loop", "function")], [Connection("c1", "1", "1")])
        result = validate(candidate)

        assert result.accepted
        assert len(result.warnings) == 1
        assert result.warnings[0].connection_id == "c1"
        assert result.warnings[0].node_id == "1"

    def test_no_warnings_on_rejection(self):
        candidate = make_workflow(
            [Node("1", "Loop", "nonsense")],
            [Connection("c1", "1", "1")],
        )
        result = validate(candidate)
        assert not result.accepted
        assert result.warnings == ()

    def test_does_not_mutate_candidate(self, email_digest):
        before = email_digest.to_dict()
        validate(email_digest)
        assert email_digest.to_dict() == before

    def test_messages(self):
        candidate = make_workflow([Node("1", "Loop", "function")], [Connection("c1", "1", "1")])
        assert validation_messages(validate(candidate)) == [
            "Connection 'c1' loops back to node '1'"
        ]
        rejected = make_workflow([Node("1", "A", "nope")])
        assert validation_messages(validate(rejected)) == ["Node '1' has unknown kind: 'nope'"]
