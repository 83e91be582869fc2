# bagging_ensemble/training/executor.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, TypeVar

from bagging_ensemble import logs

T = TypeVar("T")


class ParallelExecutor:
    """
    ParallelExecutor

    - fixed-size thread pool of `max_workers`
    - results returned in SUBMISSION order, never completion order
    - no timeout, no cancellation: waits for every submitted task
    - a failing task re-raises its original exception once all started
      tasks have finished (first failure in submission order wins)
    """

    @staticmethod
    def run(
            *,
            items: Iterable[T],
            handler: Callable[[T], Any],
            max_workers: int = 1,
            name: str = "task",
    ) -> list[Any]:
        items = list(items)
        if not items:
            logs.info(f"[ParallelExecutor] no {name} to process")
            return []

        workers = ParallelExecutor._resolve_workers(items, max_workers)

        logs.info(
            f"[ParallelExecutor] start {name} total={len(items)} workers={workers}"
        )

        if workers == 1:
            return ParallelExecutor._run_sequential(items, handler)
        return ParallelExecutor._run_parallel(items, handler, workers, name)

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(items: list, max_workers: int) -> int:
        return max(1, min(max_workers, len(items)))

    @staticmethod
    def _run_sequential(items: list, handler: Callable[[Any], Any]) -> list[Any]:
        return [handler(item) for item in items]

    @staticmethod
    def _run_parallel(
            items: list,
            handler: Callable[[Any], Any],
            workers: int,
            name: str,
    ) -> list[Any]:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=name) as pool:
            futures = [pool.submit(handler, item) for item in items]

            # index order, so results line up with items
            results = []
            for fut in futures:
                results.append(fut.result())

        return results
