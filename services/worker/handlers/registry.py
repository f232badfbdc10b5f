"""Executor registry: one preview handler per executable node kind."""

from typing import Dict, Callable, List
from shared.exceptions import UnsupportedNodeKindError
from shared.types import ExecutionOutcome, Node, NodeKind, Workflow, PREVIEW_KINDS


ExecutorHandler = Callable[[Node, Workflow], ExecutionOutcome]
_executor_registry: Dict[NodeKind, ExecutorHandler] = {}


def register_executor(kind: NodeKind):
    def decorator(func: ExecutorHandler):
        if kind in _executor_registry:
            raise RuntimeError(f"Executor already registered for '{kind.value}'")
        _executor_registry[kind] = func
        return func
    return decorator


def get_executor(kind: NodeKind) -> ExecutorHandler:
    if kind not in _executor_registry:
        raise UnsupportedNodeKindError(
            f"Execution preview is not supported for '{kind.value}' nodes.",
            node_type=kind.value
        )
    return _executor_registry[kind]


def list_executor_kinds() -> List[NodeKind]:
    return list(_executor_registry.keys())


def verify_registry() -> None:
    """The table must cover exactly the preview allow-list; called once handlers are imported"""
    registered = set(_executor_registry)
    if registered != PREVIEW_KINDS:
        missing = sorted(k.value for k in PREVIEW_KINDS - registered)
        extra = sorted(k.value for k in registered - PREVIEW_KINDS)
        raise RuntimeError(f"Executor registry mismatch: missing={missing} unexpected={extra}")
