"""
Unit tests for upstream schema resolution.
"""

from services.preview.engine.upstream import get_upstream_nodes
from shared.types import Edge, Node, SchemaMode


def node(node_id, kind="httpRequest", config=None, label=None):
    return Node.model_validate({
        "id": node_id,
        "type": kind,
        "data": {"label": label or node_id, "config": config or {}},
    })


def edge(source, target, handle=None):
    return Edge(id=f"{source}->{target}", source=source, target=target, source_handle=handle)


def test_no_incoming_edges_returns_empty():
    nodes = [node("a"), node("b")]

    assert get_upstream_nodes("a", nodes, [edge("a", "b")]) == []


def test_ancestors_closest_first():
    nodes = [node("a", "cronTrigger"), node("b"), node("c")]
    edges = [edge("a", "b"), edge("b", "c")]

    upstream = get_upstream_nodes("c", nodes, edges)

    assert [u.node_id for u in upstream] == ["b", "a"]
    assert upstream[1].fields[0].name == "triggeredAt"
    assert upstream[0].schema_mode == SchemaMode.STATIC


def test_passthrough_nodes_skipped_but_traversed():
    """if/filter/merge never appear, but what feeds them does"""
    nodes = [node("src"), node("gate", "if"), node("f", "filter"), node("target")]
    edges = [edge("src", "gate"), edge("gate", "f", "true"), edge("f", "target")]

    upstream = get_upstream_nodes("target", nodes, edges)

    assert [u.node_id for u in upstream] == ["src"]


def test_diamond_ancestor_appears_once():
    nodes = [node("root"), node("left"), node("right"), node("join", "evmWrite")]
    edges = [edge("root", "left"), edge("root", "right"), edge("left", "join"), edge("right", "join")]

    upstream = get_upstream_nodes("join", nodes, edges)

    assert sorted(u.node_id for u in upstream) == ["left", "right", "root"]
    assert len(upstream) == 3


def test_source_handle_defaults_to_output():
    nodes = [node("a"), node("b", "if"), node("c")]
    edges = [edge("a", "c"), edge("b", "c", "false")]

    upstream = get_upstream_nodes("c", nodes, edges)

    assert upstream[0].source_handle == "output"


def test_dangling_edge_is_skipped():
    nodes = [node("b")]

    assert get_upstream_nodes("b", nodes, [edge("ghost", "b")]) == []


def test_cycle_does_not_report_target():
    nodes = [node("a"), node("b")]
    edges = [edge("a", "b"), edge("b", "a")]

    upstream = get_upstream_nodes("b", nodes, edges)

    assert [u.node_id for u in upstream] == ["a"]


def test_config_derived_fields_from_abi_outputs():
    config = {
        "abi": {
            "name": "getReserves",
            "outputs": [{"name": "reserve0", "type": "uint112"}, {"name": "", "type": "uint32"}],
        }
    }
    nodes = [node("reader", "evmRead", config), node("target")]

    upstream = get_upstream_nodes("target", nodes, [edge("reader", "target")])

    assert upstream[0].schema_mode == SchemaMode.CONFIG_DERIVED
    assert [f.name for f in upstream[0].fields] == ["reserve0", "result"]
    assert upstream[0].fields[0].description == "ABI output (uint112)"


def test_malformed_abi_output_names_never_fail():
    """Draft configs with non-text output names still resolve"""
    config = {"abi": {"outputs": [{"name": 7, "type": "uint256"}, {"name": None}, "junk"]}}
    nodes = [node("reader", "evmRead", config), node("target", "log")]

    upstream = get_upstream_nodes("target", nodes, [edge("reader", "target")])

    assert [f.name for f in upstream[0].fields] == ["result", "result"]
    assert upstream[0].fields[1].description == "ABI output (unknown)"


def test_dynamic_node_has_no_fields():
    nodes = [node("code", "codeNode"), node("target")]

    upstream = get_upstream_nodes("target", nodes, [edge("code", "target")])

    assert upstream[0].schema_mode == SchemaMode.DYNAMIC
    assert upstream[0].fields == []
