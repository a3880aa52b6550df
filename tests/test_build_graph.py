import pytest

from precedence_scheduler.core.errors import MalformedEdge
from precedence_scheduler.core.graph.build_graph import build_graph
from precedence_scheduler.core.io.load_edges import load_edges
from precedence_scheduler.core.model import Edge


def test_build_graph_links_both_directions():
    graph = build_graph(load_edges("examples/steps.txt").edges)
    assert graph.tasks == ("A", "B", "C", "D", "E", "F")
    assert graph["C"].blocks == {"A", "F"}
    assert graph["E"].blocked_by == {"B", "D", "F"}
    assert graph.roots() == ["C"]

    for u in graph.tasks:
        for t in graph[u].blocks:
            assert u in graph[t].blocked_by
        for t in graph[u].blocked_by:
            assert u in graph[t].blocks


def test_build_graph_accepts_tuples_and_duplicates():
    graph = build_graph([("A", "B"), ("A", "B"), Edge("B", "C")])
    assert len(graph) == 3
    assert graph["A"].blocks == {"B"}


def test_build_graph_empty():
    graph = build_graph([])
    assert len(graph) == 0
    assert graph.tasks == ()
    assert graph.roots() == []


def test_build_graph_extra_tasks_are_isolated():
    graph = build_graph([("A", "B")], extra_tasks=["Z", "A"])
    assert graph.tasks == ("A", "B", "Z")
    assert graph["Z"].blocks == set()
    assert graph["Z"].blocked_by == set()


def test_build_graph_rejects_self_edge():
    with pytest.raises(MalformedEdge) as ei:
        build_graph([("A", "B"), ("C", "C")])
    assert ei.value.path == "edges[1]"


def test_build_graph_rejects_missing_end():
    with pytest.raises(MalformedEdge):
        build_graph([("A", None)])


def test_build_graph_rejects_non_pair():
    with pytest.raises(MalformedEdge):
        build_graph([("A", "B", "C")])


def test_build_graph_rejects_unordered_tasks():
    with pytest.raises(MalformedEdge):
        build_graph([("A", 1)])


def test_build_graph_does_not_detect_cycles():
    graph = build_graph([("A", "B"), ("B", "A")])
    assert graph.roots() == []


def test_graph_membership():
    graph = build_graph([("A", "B")], extra_tasks=["Z"])
    assert "A" in graph and "B" in graph and "Z" in graph
    assert "C" not in graph
