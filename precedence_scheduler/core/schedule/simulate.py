from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from precedence_scheduler.core.errors import InvalidParameter, Unschedulable
from precedence_scheduler.core.model import (
    DurationFn,
    ScheduleEvent,
    SimulationResult,
    TaskGraph,
    WorkerSlot,
)
from precedence_scheduler.core.schedule.frontier import Frontier

logger = logging.getLogger(__name__)


def alphabet_duration(base_duration: int) -> DurationFn:
    """Duration of a lettered step: ``base_duration`` plus its position in the alphabet (A=1)."""
    if isinstance(base_duration, bool) or not isinstance(base_duration, int) or base_duration < 0:
        raise InvalidParameter(
            code="E_INVALID_DURATION",
            message=f"base_duration must be a non-negative integer, got {base_duration!r}",
            path="base_duration",
        )

    def duration(task: Any) -> int:
        if not (isinstance(task, str) and len(task) == 1 and task.isascii() and task.isalpha()):
            raise InvalidParameter(
                code="E_INVALID_DURATION",
                message=f"alphabet durations need single-letter tasks, got {task!r}",
                path=f"tasks.{task}",
            )
        return base_duration + ord(task.upper()) - ord("A") + 1

    return duration


def table_duration(durations: Mapping[Any, int], fallback: Optional[DurationFn] = None) -> DurationFn:
    """Look durations up in ``durations``; tasks missing from it go to ``fallback``."""

    def duration(task: Any) -> int:
        if task in durations:
            return durations[task]
        if fallback is None:
            raise InvalidParameter(
                code="E_INVALID_DURATION",
                message=f"no duration declared for task {task!r}",
                path=f"durations.{task}",
            )
        return fallback(task)

    return duration


def simulate(graph: TaskGraph, worker_count: int, duration_fn: DurationFn) -> SimulationResult:
    """Run ``graph`` on ``worker_count`` simulated workers.

    Time jumps straight to the next completion: each step advances by the
    smallest remaining duration among busy slots. Idle slots pick up ready
    tasks in slot order, smallest task first.
    """

    if isinstance(worker_count, bool) or not isinstance(worker_count, int) or worker_count < 1:
        raise InvalidParameter(
            code="E_INVALID_WORKERS",
            message=f"worker_count must be a positive integer, got {worker_count!r}",
            path="workers",
        )

    frontier = Frontier.initial(graph)
    completed: set[Any] = set()
    slots = [WorkerSlot() for _ in range(worker_count)]
    elapsed = 0
    order: list[Any] = []
    events: list[ScheduleEvent] = []
    steps: list[int] = []

    while True:
        # Assignment phase.
        for i, slot in enumerate(slots):
            if not frontier:
                break
            if not slot.idle:
                continue
            task = frontier.pop()
            slot.task = task
            slot.remaining = _checked_duration(duration_fn, task)
            events.append(ScheduleEvent(time=elapsed, kind="start", task=task, worker=i))
            logger.debug(f"t={elapsed}: worker {i} starts {task} (duration={slot.remaining})")

        if len(completed) == len(graph):
            break

        busy = [slot for slot in slots if not slot.idle]
        if not busy:
            raise Unschedulable(
                code="E_UNSCHEDULABLE",
                message="dependency cycle: no worker busy while tasks remain: "
                + ", ".join(str(t) for t in graph.tasks if t not in completed),
                path="graph",
            )

        # Advance phase.
        delta = min(slot.remaining for slot in busy)
        elapsed += delta
        steps.append(elapsed)
        for slot in busy:
            slot.remaining -= delta

        # Completion phase.
        for i, slot in enumerate(slots):
            if slot.idle or slot.remaining:
                continue
            task = slot.task
            slot.task = None
            completed.add(task)
            order.append(task)
            events.append(ScheduleEvent(time=elapsed, kind="finish", task=task, worker=i))
            admitted = frontier.on_task_completed(graph, task, completed)
            logger.debug(f"t={elapsed}: worker {i} finished {task}, ready={admitted}")

    logger.debug(f"Simulation done: workers={worker_count}, tasks={len(graph)}, elapsed={elapsed}")
    return SimulationResult(
        elapsed=elapsed,
        worker_count=worker_count,
        order=order,
        events=events,
        steps=steps,
    )


def total_time(graph: TaskGraph, worker_count: int, duration_fn: DurationFn) -> int:
    return simulate(graph, worker_count, duration_fn).elapsed


def _checked_duration(duration_fn: DurationFn, task: Any) -> int:
    d = duration_fn(task)
    if isinstance(d, bool) or not isinstance(d, int) or d <= 0:
        raise InvalidParameter(
            code="E_INVALID_DURATION",
            message=f"duration for task {task!r} must be a positive integer, got {d!r}",
            path=f"tasks.{task}",
        )
    return d
