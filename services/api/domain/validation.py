"""Workflow document validation for preview requests."""

import json
import re
from typing import Any, Dict
from shared.constants import (
    MAX_NODES_PER_WORKFLOW,
    MAX_CONFIG_SIZE_BYTES,
    MAX_TEMPLATE_LENGTH,
)
from shared.types import Workflow


class WorkflowValidationError(Exception):
    code = "invalid_request"


def validate_workflow_document(workflow: Workflow) -> None:
    """Rejects documents the preview engine should not process. Cycles are allowed."""
    if len(workflow.nodes) > MAX_NODES_PER_WORKFLOW:
        raise WorkflowValidationError(
            f"Workflow exceeds maximum node limit: {len(workflow.nodes)} > {MAX_NODES_PER_WORKFLOW}"
        )

    node_ids = set()
    for node in workflow.nodes:
        if not node.id.strip():
            raise WorkflowValidationError("All nodes must have a non-empty 'id'")
        if node.id in node_ids:
            raise WorkflowValidationError(f"Duplicate node ID: {node.id}")
        node_ids.add(node.id)

        validate_node_config(node.id, node.data.config)


def validate_node_config(node_id: str, config: Dict[str, Any]) -> None:
    config_size = len(json.dumps(config, default=str).encode('utf-8'))
    if config_size > MAX_CONFIG_SIZE_BYTES:
        raise WorkflowValidationError(
            f"Node '{node_id}' config exceeds size limit: {config_size} > {MAX_CONFIG_SIZE_BYTES} bytes"
        )
    validate_templates_in_config(node_id, config)


def validate_templates_in_config(node_id: str, config: Dict[str, Any]) -> None:
    """Check all reference expressions in config against the length limit"""
    template_pattern = re.compile(r'\{\{.*?\}\}')

    def check_value(value: Any, path: str = "") -> None:
        if isinstance(value, str):
            for template in template_pattern.findall(value):
                if len(template) > MAX_TEMPLATE_LENGTH:
                    raise WorkflowValidationError(
                        f"Node '{node_id}' has template exceeding length limit at {path}: "
                        f"{len(template)} > {MAX_TEMPLATE_LENGTH}"
                    )

        elif isinstance(value, dict):
            for k, v in value.items():
                check_value(v, f"{path}.{k}" if path else k)

        elif isinstance(value, list):
            for i, item in enumerate(value):
                check_value(item, f"{path}[{i}]")

    check_value(config)
