from __future__ import annotations

import logging
from typing import Any, Iterable, Union

from precedence_scheduler.core.errors import MalformedEdge
from precedence_scheduler.core.model import Edge, Node, TaskGraph

logger = logging.getLogger(__name__)

EdgeLike = Union[Edge, tuple[Any, Any], list[Any]]


def build_graph(edges: Iterable[EdgeLike], extra_tasks: Iterable[Any] = ()) -> TaskGraph:
    """Build the dependency graph from ``(blocker, blocked)`` edges.

    Every task mentioned on either side gets a node. ``extra_tasks`` adds
    tasks that appear in no edge. Cycles are not detected here; the scheduler
    reports them as ``Unschedulable``.
    """

    nodes: dict[Any, Node] = {}
    for i, raw in enumerate(edges):
        edge = _coerce_edge(raw, path=f"edges[{i}]")
        nodes.setdefault(edge.blocker, Node()).blocks.add(edge.blocked)
        nodes.setdefault(edge.blocked, Node()).blocked_by.add(edge.blocker)

    for task in extra_tasks:
        if task is None:
            raise MalformedEdge(code="E_MALFORMED_EDGE", message="task id must not be None", path="tasks")
        nodes.setdefault(task, Node())

    try:
        tasks = tuple(sorted(nodes))
    except TypeError as e:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"task ids must share a total order: {e}",
            path="edges",
        ) from e

    logger.debug(f"Built graph: tasks={len(tasks)}, roots={sum(1 for n in nodes.values() if not n.blocked_by)}")
    return TaskGraph(nodes=nodes, tasks=tasks)


def _coerce_edge(raw: EdgeLike, *, path: str) -> Edge:
    if isinstance(raw, Edge):
        blocker, blocked = raw.blocker, raw.blocked
    elif isinstance(raw, (tuple, list)) and len(raw) == 2:
        blocker, blocked = raw
    else:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"edge must be a (blocker, blocked) pair, got {raw!r}",
            path=path,
        )

    if blocker is None or blocked is None:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"edge ends must be task ids, got {blocker!r} -> {blocked!r}",
            path=path,
        )
    if blocker == blocked:
        raise MalformedEdge(
            code="E_MALFORMED_EDGE",
            message=f"task {blocker} cannot block itself",
            path=path,
        )
    return Edge(blocker=blocker, blocked=blocked)
