"""
Unit tests for the node preview boundary.
"""

import pytest
from unittest.mock import Mock, patch
from services.preview.engine.executor import execute_node_preview, run_node_preview
from services.worker.handlers.registry import get_executor, list_executor_kinds
from shared.constants import REDACTED_PLACEHOLDER
from shared.exceptions import (
    ErrorCode,
    ExecutionFailedError,
    NodeNotFoundError,
    StatusClass,
    UnsupportedNodeKindError,
)
from shared.types import NodeKind, PREVIEW_KINDS, Workflow

REQUEST_PATH = "services.worker.handlers.http_request.requests.request"


def make_workflow(nodes):
    return Workflow.model_validate({"id": "wf", "nodes": nodes, "edges": []})


def http_node(node_id="http", **config):
    return {"id": node_id, "type": "httpRequest", "data": {"config": {"url": "https://api.example.com", **config}}}


def json_response(text):
    response = Mock()
    response.status_code = 200
    response.text = text
    response.content = text.encode("utf-8")
    response.headers = {}
    return response


def test_registry_matches_preview_allow_list():
    assert set(list_executor_kinds()) == set(PREVIEW_KINDS)


def test_unsupported_kind():
    with pytest.raises(UnsupportedNodeKindError):
        get_executor(NodeKind.AI)


def test_missing_node():
    with pytest.raises(NodeNotFoundError):
        execute_node_preview(make_workflow([]), "nope")


def test_run_success_memoizes_last_execution():
    workflow = make_workflow([http_node()])

    with patch(REQUEST_PATH, return_value=json_response('{"price": 1, "token": "abc"}')):
        result = run_node_preview(workflow, "http")

    assert result.ok is True
    assert result.preview.normalized == {"price": 1, "token": REDACTED_PLACEHOLDER}
    assert result.preview.truncated is True
    assert result.data_schema.type == "object"
    assert result.executed_at.endswith("Z")

    memo = workflow.get_node("http").data.last_execution
    assert memo.normalized == result.preview.normalized
    assert memo.data_schema == result.data_schema
    assert memo.executed_at == result.executed_at


def test_run_overwrites_previous_execution():
    workflow = make_workflow([http_node()])

    with patch(REQUEST_PATH, return_value=json_response('{"n": 1}')):
        run_node_preview(workflow, "http")
    with patch(REQUEST_PATH, return_value=json_response('{"n": 2}')):
        run_node_preview(workflow, "http")

    assert workflow.get_node("http").data.last_execution.normalized == {"n": 2}


def test_run_failure_returns_typed_error():
    workflow = make_workflow([{"id": "ai", "type": "ai", "data": {"config": {}}}])

    result = run_node_preview(workflow, "ai")

    assert result.ok is False
    assert result.error.code == ErrorCode.UNSUPPORTED_NODE_KIND
    assert result.error.status == StatusClass.BAD_REQUEST
    assert workflow.get_node("ai").data.last_execution is None


def test_run_missing_node_is_not_found():
    result = run_node_preview(make_workflow([]), "ghost")

    assert result.error.code == ErrorCode.NODE_NOT_FOUND
    assert result.error.status.http_status_code == 404


def test_unexpected_exception_becomes_execution_failed():
    workflow = make_workflow([http_node()])

    with patch(REQUEST_PATH, side_effect=RuntimeError("boom")):
        with pytest.raises(ExecutionFailedError, match="boom"):
            execute_node_preview(workflow, "http")
        result = run_node_preview(workflow, "http")

    assert result.error.code == ErrorCode.EXECUTION_FAILED
    assert result.error.status == StatusClass.SERVER_ERROR


def test_reference_failure_keeps_its_code():
    workflow = make_workflow([http_node(url="https://api.example.com/{{trigger.id}}")])

    result = run_node_preview(workflow, "http")

    assert result.error.code == ErrorCode.REFERENCE_RESOLUTION_FAILED


def test_failure_serializes_to_wire_shape():
    result = run_node_preview(make_workflow([]), "ghost")

    assert result.error.to_dict() == {
        "code": "node_not_found",
        "message": "Node 'ghost' was not found in the workflow.",
        "status": "not_found",
    }
