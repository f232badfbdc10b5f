"""
Unit tests for the node output schema registry.
"""

from services.preview.engine.output_schema import NODE_OUTPUT_SCHEMAS, resolve_output_fields
from shared.types import NodeKind, SchemaMode, PASSTHROUGH_KINDS


def test_registry_covers_every_kind():
    assert set(NODE_OUTPUT_SCHEMAS) == set(NodeKind)


def test_passthrough_kinds():
    passthrough = {k for k, s in NODE_OUTPUT_SCHEMAS.items() if s.schema_mode == SchemaMode.PASSTHROUGH}

    assert passthrough == set(PASSTHROUGH_KINDS)
    assert passthrough == {NodeKind.IF, NodeKind.FILTER, NodeKind.MERGE}


def test_static_fields_are_copied():
    fields = resolve_output_fields(NodeKind.HTTP_REQUEST, {})
    fields.clear()

    assert len(resolve_output_fields(NodeKind.HTTP_REQUEST, {})) == 3


def test_evm_read_fields_tolerate_malformed_config():
    assert resolve_output_fields(NodeKind.EVM_READ, {}) == []
    assert resolve_output_fields(NodeKind.EVM_READ, {"abi": "not-an-object"}) == []
    assert resolve_output_fields(NodeKind.EVM_READ, {"abi": {"outputs": [1, {"type": "bool"}]}})[0].name == "result"


def test_abi_decode_fields_from_output_names():
    fields = resolve_output_fields(NodeKind.ABI_DECODE, {"outputNames": ["amount", "", 3, "to"]})

    assert [f.name for f in fields] == ["amount", "to"]


def test_terminal_nodes_expose_nothing():
    for kind in (NodeKind.RETURN, NodeKind.LOG, NodeKind.ERROR):
        assert resolve_output_fields(kind, {}) == []
