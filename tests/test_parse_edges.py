import pytest

from precedence_scheduler.core.errors import MalformedEdge
from precedence_scheduler.core.model import Edge
from precedence_scheduler.core.parse.parse_edges import parse_edge, parse_edges


def test_parse_edge_statement():
    e = parse_edge("Step C must be finished before step A can begin.")
    assert e == Edge(blocker="C", blocked="A")


def test_parse_edge_ignores_surrounding_whitespace():
    e = parse_edge("  Step Q must be finished before step Z can begin.\n")
    assert e == Edge(blocker="Q", blocked="Z")


def test_parse_edges_skips_blank_lines():
    edges = parse_edges(
        [
            "Step C must be finished before step A can begin.",
            "",
            "Step A must be finished before step B can begin.",
        ]
    )
    assert edges == [Edge("C", "A"), Edge("A", "B")]


def test_parse_edge_rejects_garbage():
    with pytest.raises(MalformedEdge) as ei:
        parse_edge("C -> A", path="lines[1]")
    assert ei.value.code == "E_MALFORMED_EDGE"
    assert ei.value.path == "lines[1]"


def test_parse_edges_rejects_self_edge_with_line_number():
    with pytest.raises(MalformedEdge) as ei:
        parse_edges(
            [
                "Step C must be finished before step A can begin.",
                "Step A must be finished before step A can begin.",
            ],
            file="steps.txt",
        )
    assert ei.value.path == "lines[2]"
    assert str(ei.value).startswith("steps.txt:lines[2]: E_MALFORMED_EDGE:")
