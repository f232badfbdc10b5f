"""Node preview API routes."""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from services.api.domain.models import ExecuteNodeResponse, NodeRequest, UpstreamResponse
from services.api.domain.validation import validate_workflow_document, WorkflowValidationError
from services.preview.engine.executor import get_upstream_nodes, run_node_preview
from shared.exceptions import PreviewFailure


router = APIRouter()


def _failure_response(failure: PreviewFailure) -> JSONResponse:
    return JSONResponse(
        status_code=failure.status.http_status_code,
        content={"error": failure.message, "code": failure.code.value}
    )


def _invalid_request(e: WorkflowValidationError) -> JSONResponse:
    logging.warning("Rejected workflow document", extra={"error": str(e)})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(e), "code": e.code}
    )


# Sync routes run in the FastAPI threadpool
@router.post("/nodes/execute", response_model=ExecuteNodeResponse)
def execute_node(request: NodeRequest):
    try:
        validate_workflow_document(request.workflow)
    except WorkflowValidationError as e:
        return _invalid_request(e)

    result = run_node_preview(request.workflow, request.node_id)
    if not result.ok:
        return _failure_response(result.error)

    node = request.workflow.get_node(request.node_id)
    return ExecuteNodeResponse(
        preview=result.preview,
        data_schema=result.data_schema,
        executed_at=result.executed_at,
        last_execution=node.data.last_execution
    )


@router.post("/nodes/upstream", response_model=UpstreamResponse)
def upstream_nodes(request: NodeRequest):
    try:
        validate_workflow_document(request.workflow)
    except WorkflowValidationError as e:
        return _invalid_request(e)

    upstream = get_upstream_nodes(request.node_id, request.workflow.nodes, request.workflow.edges)
    return UpstreamResponse(node_id=request.node_id, upstream=upstream)
