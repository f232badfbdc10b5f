"""API request/response models."""

from typing import List, Optional
from pydantic import Field
from services.preview.engine.executor import PreviewPayload
from shared.types import CamelModel, DataSchema, LastExecution, UpstreamNode, Workflow


class NodeRequest(CamelModel):
    """A workflow document and the node the request is about"""
    workflow: Workflow
    node_id: str


class ExecuteNodeResponse(CamelModel):
    preview: PreviewPayload
    data_schema: Optional[DataSchema] = Field(default=None, alias="schema")
    executed_at: str
    last_execution: LastExecution


class UpstreamResponse(CamelModel):
    node_id: str
    upstream: List[UpstreamNode]