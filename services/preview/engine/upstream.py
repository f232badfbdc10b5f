"""Upstream schema resolution: BFS backward from a target node through incoming edges."""

import logging
from collections import deque
from typing import Dict, List, Set
from services.preview.engine.output_schema import NODE_OUTPUT_SCHEMAS, resolve_output_fields
from shared.constants import DEFAULT_SOURCE_HANDLE
from shared.types import Edge, Node, UpstreamNode, PASSTHROUGH_KINDS


def get_upstream_nodes(target_node_id: str, nodes: List[Node], edges: List[Edge]) -> List[UpstreamNode]:
    """Returns the target's ancestors closest-first, skipping passthrough nodes but not what lies beyond them"""
    node_map: Dict[str, Node] = {node.id: node for node in nodes}
    incoming: Dict[str, List[Edge]] = {}
    for edge in edges:
        incoming.setdefault(edge.target, []).append(edge)

    result: List[UpstreamNode] = []
    visited: Set[str] = {target_node_id}
    queue = deque([target_node_id])

    while queue:
        current_id = queue.popleft()

        for edge in incoming.get(current_id, []):
            if edge.source in visited:
                continue
            visited.add(edge.source)

            source = node_map.get(edge.source)
            if source is None:
                continue

            queue.append(source.id)
            if source.type in PASSTHROUGH_KINDS:
                continue

            result.append(UpstreamNode(
                node_id=source.id,
                node_label=source.data.label,
                node_type=source.type,
                source_handle=edge.source_handle or DEFAULT_SOURCE_HANDLE,
                fields=resolve_output_fields(source.type, source.data.config),
                schema_mode=NODE_OUTPUT_SCHEMAS[source.type].schema_mode,
            ))

    logging.debug("Resolved upstream nodes", extra={
        "target_node_id": target_node_id,
        "upstream_count": len(result)
    })
    return result
