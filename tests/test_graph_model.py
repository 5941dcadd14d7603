import pytest

from graph_layout.errors import MalformedGraphError
from graph_layout.graph_model import (
    EdgeStmt,
    GraphModel,
    GraphSource,
    NodeDecl,
    normalize_identity,
)


def test_first_seen_order_and_lookup():
    src = GraphSource(
        nodes=[NodeDecl("zeta"), NodeDecl("alpha"), NodeDecl("mid")],
        edges=[EdgeStmt(["alpha", "zeta"])],
    )
    model = GraphModel.from_source(src)
    assert [n.identity for n in model.nodes] == ["zeta", "alpha", "mid"]
    assert [n.index for n in model.nodes] == [0, 1, 2]
    assert model.index_of("alpha") == 1
    assert model.edges == ((1, 0),)


def test_chain_expands_to_consecutive_pairs():
    model = GraphModel.from_mapping({k: {} for k in "abcd"}, [["a", "b", "c", "d"]])
    assert model.edges == ((0, 1), (1, 2), (2, 3))


def test_multi_edges_and_self_loops_are_kept():
    model = GraphModel.from_mapping({"a": {}, "b": {}}, [["a", "b"], ["a", "b"], ["b", "b"]])
    assert model.edges == ((0, 1), (0, 1), (1, 1))
    assert model.edge_count == 3


def test_duplicate_declarations_merge_attributes():
    src = GraphSource(
        nodes=[
            NodeDecl("a", [("color", "green")]),
            NodeDecl("b"),
            NodeDecl("a", [("shape", "square"), ("color", "red")]),
        ],
    )
    model = GraphModel.from_source(src)
    assert model.node_count == 2
    a = model.nodes[0]
    assert a.attributes == (("color", "red"), ("shape", "square"))
    assert a.attribute("shape") == "square"
    assert a.attribute("label") is None
    assert a.has_attribute("shape") and not a.has_attribute("label")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a", "a"),
        ("a:p1", "a"),
        ("a:p1:n", "a"),
        ('"quoted name"', "quoted name"),
        ('"with:colon":port', "with:colon"),
        ("  spaced  ", "spaced"),
    ],
)
def test_normalize_identity(raw, expected):
    assert normalize_identity(raw) == expected


def test_ports_fold_onto_declared_node():
    src = GraphSource(
        nodes=[NodeDecl("a"), NodeDecl('"b"')],
        edges=[EdgeStmt(["a:out", "b:in:n"])],
    )
    model = GraphModel.from_source(src)
    assert model.edges == ((0, 1),)
    assert "b:whatever" in model


def test_unknown_endpoint_is_malformed():
    src = GraphSource(nodes=[NodeDecl("a")], edges=[EdgeStmt(["a", "ghost"])])
    with pytest.raises(MalformedGraphError) as exc:
        GraphModel.from_source(src)
    assert "ghost" in str(exc.value)
    assert exc.value.identity == "ghost"


def test_short_edge_statement_is_malformed():
    src = GraphSource(nodes=[NodeDecl("a")], edges=[EdgeStmt(["a"])])
    with pytest.raises(MalformedGraphError):
        GraphModel.from_source(src)


def test_constructor_rejects_out_of_range_edges():
    model = GraphModel.from_mapping({"a": {}}, [])
    with pytest.raises(MalformedGraphError):
        GraphModel(model.nodes, [(0, 3)])
