"""
Node execution preview: runs one supported node against live services and
memoizes a bounded, redacted copy of the result on the node.
"""

import logging
from typing import Any, List, Optional
from pydantic import Field
from services.preview.engine.inference import infer_data_schema
from services.preview.engine.sanitizer import sanitize_execution_value
from services.preview.engine.upstream import get_upstream_nodes
from services.worker.handlers.registry import get_executor, verify_registry
# Executors register themselves on import
import services.worker.handlers.http_request  # noqa: F401
import services.worker.handlers.evm  # noqa: F401
from shared.exceptions import ExecutionFailedError, NodeNotFoundError, PreviewError, PreviewFailure
from shared.logging_config import set_preview_node
from shared.types import CamelModel, DataSchema, ExecutionOutcome, LastExecution, Workflow
from shared.utils import utc_now_iso

verify_registry()

__all__ = ["PreviewPayload", "PreviewResult", "execute_node_preview", "run_node_preview", "get_upstream_nodes"]


class PreviewPayload(CamelModel):
    raw: Any = None
    normalized: Any = None
    warnings: List[str] = Field(default_factory=list)
    truncated: bool = False


class PreviewResult(CamelModel):
    ok: bool
    preview: Optional[PreviewPayload] = None
    data_schema: Optional[DataSchema] = Field(default=None, alias="schema")
    executed_at: Optional[str] = None
    error: Optional[PreviewFailure] = None


def execute_node_preview(workflow: Workflow, node_id: str) -> ExecutionOutcome:
    """Dispatches the node to its executor; only PreviewError subclasses escape"""
    node = workflow.get_node(node_id)
    if node is None:
        raise NodeNotFoundError(f"Node '{node_id}' was not found in the workflow.", node_id=node_id)

    set_preview_node(node.id)
    handler = get_executor(node.type)
    logging.info("Executing node preview", extra={"node_id": node.id, "node_type": node.type.value})

    try:
        return handler(node, workflow)
    except PreviewError:
        raise
    except Exception as e:
        logging.error("Node preview failed unexpectedly", exc_info=True, extra={
            "node_id": node.id,
            "node_type": node.type.value
        })
        raise ExecutionFailedError(f"Node execution preview failed: {str(e)}", node_id=node.id)


def run_node_preview(workflow: Workflow, node_id: str) -> PreviewResult:
    """Outermost preview boundary: always returns a result, never raises"""
    try:
        outcome = execute_node_preview(workflow, node_id)
    except PreviewError as e:
        logging.warning("Node preview rejected", extra={
            "node_id": node_id,
            "code": e.code.value,
            "error": e.message
        })
        return PreviewResult(ok=False, error=e.to_failure())
    finally:
        set_preview_node("")

    raw = sanitize_execution_value(outcome.raw)
    normalized = sanitize_execution_value(outcome.normalized)
    schema = infer_data_schema(normalized.value)
    executed_at = utc_now_iso()
    truncated = raw.truncated or normalized.truncated

    node = workflow.get_node(node_id)
    node.data.last_execution = LastExecution(
        raw=raw.value,
        normalized=normalized.value,
        warnings=list(outcome.warnings),
        truncated=truncated,
        data_schema=schema,
        executed_at=executed_at
    )

    logging.info("Node preview completed", extra={
        "node_id": node_id,
        "truncated": truncated,
        "warning_count": len(outcome.warnings)
    })

    return PreviewResult(
        ok=True,
        preview=PreviewPayload(
            raw=raw.value,
            normalized=normalized.value,
            warnings=list(outcome.warnings),
            truncated=truncated
        ),
        data_schema=schema,
        executed_at=executed_at
    )
