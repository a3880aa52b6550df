from __future__ import annotations

import heapq
from typing import AbstractSet, Any

from precedence_scheduler.core.model import TaskGraph


class Frontier:
    """Tasks whose blockers are all complete but which are not dispatched yet.

    Ordered by the tasks' natural order; ``pop`` always yields the smallest.
    A task is admitted at most once over the lifetime of a frontier.
    """

    def __init__(self) -> None:
        self._heap: list[Any] = []
        self._pending: set[Any] = set()
        self._admitted: set[Any] = set()

    @classmethod
    def initial(cls, graph: TaskGraph) -> "Frontier":
        frontier = cls()
        for task in graph.roots():
            frontier.add(task)
        return frontier

    def add(self, task: Any) -> bool:
        if task in self._admitted:
            return False
        self._admitted.add(task)
        self._pending.add(task)
        heapq.heappush(self._heap, task)
        return True

    def pop(self) -> Any:
        task = heapq.heappop(self._heap)
        self._pending.discard(task)
        return task

    def on_task_completed(self, graph: TaskGraph, task: Any, completed: AbstractSet[Any]) -> list[Any]:
        """Admit every task unblocked by ``task`` finishing. Returns the newly admitted ones."""
        admitted: list[Any] = []
        for candidate in sorted(graph[task].blocks):
            if graph[candidate].blocked_by <= completed and self.add(candidate):
                admitted.append(candidate)
        return admitted

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, task: object) -> bool:
        return task in self._pending

    def peek(self) -> list[Any]:
        return sorted(self._heap)
