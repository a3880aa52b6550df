from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional


# Tasks are any hashable, mutually comparable values; the puzzle inputs use single letters.
DurationFn = Callable[[Any], int]

EventKind = Literal["start", "finish"]


@dataclass(frozen=True)
class Edge:
    blocker: Any
    blocked: Any


@dataclass
class Node:
    blocks: set[Any] = field(default_factory=set)
    blocked_by: set[Any] = field(default_factory=set)


@dataclass(frozen=True)
class TaskGraph:
    nodes: dict[Any, Node]
    tasks: tuple[Any, ...]  # sorted

    def __getitem__(self, task: Any) -> Node:
        return self.nodes[task]

    def __contains__(self, task: object) -> bool:
        return task in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def roots(self) -> list[Any]:
        return [t for t in self.tasks if not self.nodes[t].blocked_by]


@dataclass
class WorkerSlot:
    task: Optional[Any] = None
    remaining: int = 0

    @property
    def idle(self) -> bool:
        return self.task is None


@dataclass(frozen=True)
class ScheduleEvent:
    time: int
    kind: EventKind
    task: Any
    worker: int


@dataclass(frozen=True)
class SimulationResult:
    elapsed: int
    worker_count: int
    order: list[Any]  # completion order
    events: list[ScheduleEvent]
    steps: list[int]  # elapsed after each advance phase
