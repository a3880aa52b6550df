from __future__ import annotations

from typing import Any

from precedence_scheduler.core.errors import Unschedulable
from precedence_scheduler.core.model import TaskGraph
from precedence_scheduler.core.schedule.frontier import Frontier


def single_worker_order(graph: TaskGraph) -> list[Any]:
    """Return the lexicographically smallest valid execution order.

    With one worker and no durations a dispatched task completes at once, so
    newly unblocked tasks compete with the rest of the frontier on the next pop.
    """

    frontier = Frontier.initial(graph)
    completed: set[Any] = set()
    order: list[Any] = []

    while frontier:
        task = frontier.pop()
        order.append(task)
        completed.add(task)
        frontier.on_task_completed(graph, task, completed)

    if len(completed) < len(graph):
        raise Unschedulable(
            code="E_UNSCHEDULABLE",
            message="dependency cycle: tasks never became ready: "
            + ", ".join(str(t) for t in graph.tasks if t not in completed),
            path="graph",
        )
    return order


def format_order(order: list[Any]) -> str:
    """Join single-character tasks into a string, otherwise separate with spaces."""
    parts = [str(t) for t in order]
    if all(len(p) == 1 for p in parts):
        return "".join(parts)
    return " ".join(parts)
