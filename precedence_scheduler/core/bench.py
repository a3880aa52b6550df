from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

from precedence_scheduler.core.errors import InvalidParameter
from precedence_scheduler.core.model import DurationFn, TaskGraph
from precedence_scheduler.core.schedule.order import single_worker_order
from precedence_scheduler.core.schedule.simulate import simulate


@dataclass(frozen=True)
class BenchResult:
    name: str
    runs: int
    best_seconds: float
    mean_seconds: float


def bench(
    graph: TaskGraph,
    *,
    repeat: int,
    worker_count: int,
    duration_fn: DurationFn,
) -> list[BenchResult]:
    """Time both scheduling modes over ``repeat`` runs each."""
    if repeat < 1:
        raise InvalidParameter(
            code="E_INVALID_REPEAT",
            message=f"repeat must be >= 1, got {repeat}",
            path="repeat",
        )

    return [
        _time("order", repeat, lambda: single_worker_order(graph)),
        _time(f"simulate[{worker_count}]", repeat, lambda: simulate(graph, worker_count, duration_fn)),
    ]


def _time(name: str, repeat: int, fn: Callable[[], Any]) -> BenchResult:
    samples: list[float] = []
    for _ in range(repeat):
        start = time.perf_counter()
        fn()
        samples.append(time.perf_counter() - start)
    return BenchResult(
        name=name,
        runs=repeat,
        best_seconds=min(samples),
        mean_seconds=sum(samples) / len(samples),
    )
