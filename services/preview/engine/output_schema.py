"""Output schema registry: what each node kind exposes to downstream {{ node_id.field }} references.

Schema modes:
  - static:         fields fully known from the node kind alone
  - dynamic:        fields only known after execution (code, JSON parse)
  - config-derived: fields read from the node's own config (EVM read ABI outputs, ABI decode names)
  - passthrough:    output mirrors input (if, filter, merge)
"""

from typing import Dict, Any, Callable, List, NamedTuple
from shared.types import NodeKind, OutputField, SchemaMode


class NodeOutputSchema(NamedTuple):
    schema_mode: SchemaMode
    fields: List[OutputField]


def _static(*fields) -> NodeOutputSchema:
    return NodeOutputSchema(
        SchemaMode.STATIC,
        [OutputField(name=name, type=type_, description=description) for name, type_, description in fields],
    )


_DYNAMIC = NodeOutputSchema(SchemaMode.DYNAMIC, [])
_PASSTHROUGH = NodeOutputSchema(SchemaMode.PASSTHROUGH, [])
_CONFIG_DERIVED = NodeOutputSchema(SchemaMode.CONFIG_DERIVED, [])
_TERMINAL = _static()

_TOKEN_WRITE = _static(
    ("txHash", "string", "Transaction hash"),
    ("status", "string", "SUCCESS | FAILED | PENDING"),
)

NODE_OUTPUT_SCHEMAS: Dict[NodeKind, NodeOutputSchema] = {
    # Triggers
    NodeKind.CRON_TRIGGER: _static(("triggeredAt", "number", "Unix timestamp")),
    NodeKind.HTTP_TRIGGER: _static(
        ("payload", "unknown", "Request body"),
        ("headers", "object", "Request headers"),
        ("method", "string", "HTTP method"),
    ),
    NodeKind.EVM_LOG_TRIGGER: _static(
        ("blockNumber", "string", "Block number (bigint)"),
        ("transactionHash", "string", "Transaction hash"),
        ("logIndex", "number", "Log index in block"),
        ("eventArgs", "object", "Decoded event arguments"),
    ),
    # Actions
    NodeKind.HTTP_REQUEST: _static(
        ("statusCode", "number", "HTTP status code"),
        ("body", "string", "Response body (base64)"),
        ("headers", "object", "Response headers"),
    ),
    NodeKind.EVM_READ: _CONFIG_DERIVED,
    NodeKind.EVM_WRITE: _TOKEN_WRITE,
    NodeKind.GET_SECRET: _static(("value", "string", "Secret value")),
    # Transforms
    NodeKind.CODE: _DYNAMIC,
    NodeKind.JSON_PARSE: _DYNAMIC,
    NodeKind.ABI_ENCODE: _static(("encoded", "string", "Hex-encoded bytes")),
    NodeKind.ABI_DECODE: _CONFIG_DERIVED,
    NodeKind.MERGE: _PASSTHROUGH,
    # Control flow
    NodeKind.FILTER: _PASSTHROUGH,
    NodeKind.IF: _PASSTHROUGH,
    # AI
    NodeKind.AI: _static(("response", "string", "AI model response")),
    # Output
    NodeKind.RETURN: _TERMINAL,
    NodeKind.LOG: _TERMINAL,
    NodeKind.ERROR: _TERMINAL,
    # Tokenization
    NodeKind.MINT_TOKEN: _TOKEN_WRITE,
    NodeKind.BURN_TOKEN: _TOKEN_WRITE,
    NodeKind.TRANSFER_TOKEN: _TOKEN_WRITE,
    # Regulation
    NodeKind.CHECK_KYC: _static(
        ("isApproved", "boolean", "KYC approval status"),
        ("kycLevel", "number", "KYC verification level"),
        ("expiresAt", "string", "Expiry timestamp (optional)"),
    ),
    NodeKind.CHECK_BALANCE: _static(("balance", "string", "Token balance (bigint)")),
}


def _evm_read_fields(config: Dict[str, Any]) -> List[OutputField]:
    abi = config.get("abi")
    outputs = abi.get("outputs") if isinstance(abi, dict) else None
    if not isinstance(outputs, list):
        return []
    fields = []
    for output in outputs:
        if not isinstance(output, dict):
            continue
        name = output.get("name")
        fields.append(OutputField(
            name=name if isinstance(name, str) and name else "result",
            type="unknown",
            description=f"ABI output ({output.get('type', 'unknown')})",
        ))
    return fields


def _abi_decode_fields(config: Dict[str, Any]) -> List[OutputField]:
    names = config.get("outputNames")
    if not isinstance(names, list):
        return []
    return [
        OutputField(name=name, type="unknown", description="Decoded ABI parameter")
        for name in names
        if isinstance(name, str) and name
    ]


CONFIG_FIELD_RESOLVERS: Dict[NodeKind, Callable[[Dict[str, Any]], List[OutputField]]] = {
    NodeKind.EVM_READ: _evm_read_fields,
    NodeKind.ABI_DECODE: _abi_decode_fields,
}


def resolve_output_fields(kind: NodeKind, config: Dict[str, Any]) -> List[OutputField]:
    """Resolves a node's output fields according to its schema mode"""
    schema = NODE_OUTPUT_SCHEMAS[kind]
    if schema.schema_mode == SchemaMode.STATIC:
        return list(schema.fields)
    if schema.schema_mode == SchemaMode.CONFIG_DERIVED:
        return CONFIG_FIELD_RESOLVERS[kind](config)
    return []


def _verify_registry() -> None:
    missing = set(NodeKind) - set(NODE_OUTPUT_SCHEMAS)
    if missing:
        raise RuntimeError(f"Output schema registry is missing node kinds: {sorted(k.value for k in missing)}")

    derived = {kind for kind, schema in NODE_OUTPUT_SCHEMAS.items()
               if schema.schema_mode == SchemaMode.CONFIG_DERIVED}
    if derived != set(CONFIG_FIELD_RESOLVERS):
        raise RuntimeError("Every config-derived node kind needs exactly one field resolver")


_verify_registry()
