"""Shared types for the preview engine, executors, and API."""

from enum import Enum
from typing import Dict, List, Any, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel
from shared.constants import PASSTHROUGH_NODE_TYPES, PREVIEW_NODE_TYPES


class CamelModel(BaseModel):
    """Accepts and emits the editor's camelCase wire format"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NodeKind(str, Enum):
    # Triggers
    CRON_TRIGGER = "cronTrigger"
    HTTP_TRIGGER = "httpTrigger"
    EVM_LOG_TRIGGER = "evmLogTrigger"
    # Actions
    HTTP_REQUEST = "httpRequest"
    EVM_READ = "evmRead"
    EVM_WRITE = "evmWrite"
    GET_SECRET = "getSecret"
    # Transforms
    CODE = "codeNode"
    JSON_PARSE = "jsonParse"
    ABI_ENCODE = "abiEncode"
    ABI_DECODE = "abiDecode"
    MERGE = "merge"
    # Control flow
    FILTER = "filter"
    IF = "if"
    # AI
    AI = "ai"
    # Output
    RETURN = "return"
    LOG = "log"
    ERROR = "error"
    # Tokenization
    MINT_TOKEN = "mintToken"
    BURN_TOKEN = "burnToken"
    TRANSFER_TOKEN = "transferToken"
    # Regulation
    CHECK_KYC = "checkKyc"
    CHECK_BALANCE = "checkBalance"


PASSTHROUGH_KINDS = frozenset(NodeKind(kind) for kind in PASSTHROUGH_NODE_TYPES)
PREVIEW_KINDS = frozenset(NodeKind(kind) for kind in PREVIEW_NODE_TYPES)


class SchemaMode(str, Enum):
    STATIC = "static"
    CONFIG_DERIVED = "config-derived"
    DYNAMIC = "dynamic"
    PASSTHROUGH = "passthrough"


class OutputField(CamelModel):
    name: str
    type: Literal["string", "number", "boolean", "object", "unknown"]
    description: Optional[str] = None


class SparseModel(CamelModel):
    """Omits unset optional members when serialized"""

    @model_serializer(mode="wrap")
    def _drop_none(self, handler) -> Dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


class DataSchemaField(SparseModel):
    key: str
    path: str
    data_schema: "DataSchema" = Field(alias="schema")
    optional: Optional[bool] = None


class DataSchema(SparseModel):
    type: Literal["string", "number", "boolean", "null", "object", "array", "unknown"]
    path: str
    fields: Optional[List[DataSchemaField]] = None
    item_schema: Optional["DataSchema"] = None


DataSchemaField.model_rebuild()
DataSchema.model_rebuild()


class LastExecution(CamelModel):
    raw: Any = None
    normalized: Any = None
    warnings: List[str] = Field(default_factory=list)
    truncated: bool = False
    data_schema: Optional[DataSchema] = Field(default=None, alias="schema")
    executed_at: Optional[str] = None


class NodeData(CamelModel):
    label: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)
    last_execution: Optional[LastExecution] = None


class Node(CamelModel):
    id: str
    type: NodeKind
    position: Optional[Dict[str, float]] = None
    data: NodeData = Field(default_factory=NodeData)


class Edge(CamelModel):
    id: Optional[str] = None
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None


class SecretReference(CamelModel):
    name: str
    env_variable: str

    @model_validator(mode="after")
    def validate_mapping(self) -> "SecretReference":
        name, env_variable = self.name.strip(), self.env_variable.strip()
        if not name or not env_variable:
            raise ValueError("secret name and envVariable must both be non-empty")
        if name == env_variable:
            raise ValueError(f"secret '{name}' must map to a differently named environment variable")
        return self


class RpcEntry(CamelModel):
    chain_name: str
    url: str


class GlobalConfig(CamelModel):
    is_testnet: bool = True
    secrets: List[SecretReference] = Field(default_factory=list)
    rpcs: List[RpcEntry] = Field(default_factory=list)


class Workflow(CamelModel):
    id: str = ""
    name: str = ""
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    global_config: GlobalConfig = Field(default_factory=GlobalConfig)

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


class UpstreamNode(CamelModel):
    node_id: str
    node_label: str
    node_type: NodeKind
    source_handle: str
    fields: List[OutputField]
    schema_mode: SchemaMode


class ExecutionOutcome(BaseModel):
    """Raw executor result before sanitization"""
    raw: Any = None
    normalized: Any = None
    warnings: List[str] = Field(default_factory=list)
