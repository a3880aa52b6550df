from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Optional

from precedence_scheduler.core.errors import InvalidParameter
from precedence_scheduler.core.model import DurationFn, TaskGraph
from precedence_scheduler.core.schedule.simulate import total_time

logger = logging.getLogger(__name__)


def sweep_worker_counts(
    graph: TaskGraph,
    counts: Iterable[int],
    duration_fn: DurationFn,
    *,
    max_workers: Optional[int] = None,
) -> dict[int, int]:
    """Total time for each worker count, keyed and sorted by count.

    Runs are independent and only read ``graph``, so they are batched on a
    thread pool. The first failing run's error is raised.
    """

    unique = sorted(set(counts))
    if not unique:
        raise InvalidParameter(
            code="E_INVALID_WORKERS",
            message="at least one worker count is required",
            path="workers",
        )

    results: dict[int, int] = {}
    with ThreadPoolExecutor(max_workers=max(1, max_workers or len(unique))) as ex:
        futures = {ex.submit(total_time, graph, n, duration_fn): n for n in unique}
        for f in as_completed(futures):
            n = futures[f]
            results[n] = f.result()
            logger.debug(f"Sweep: workers={n}, elapsed={results[n]}")

    return {n: results[n] for n in unique}
