"""Local parallel execution of per-gene work.

Genes are independent of each other, so region collection can be spread
over threads or processes. Results always come back in input order.

Features:
    - Multiple execution backends (serial, threads, processes)
    - Input order restored after parallel completion
    - Per-task timing and aggregate statistics
    - Fail-fast or continue-on-error handling

Example:
    >>> from generegions.parallel.executor import ParallelExecutor
    >>> executor = ParallelExecutor(n_workers=4, backend="threads")
    >>> results, stats = executor.map_items(process_gene, genes)
    >>> print(f"Processed {stats.successful}/{stats.total_tasks} genes")
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import (
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)
from enum import Enum
from typing import Any, Callable, TypeVar

import attrs

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


# =============================================================================
# Enums
# =============================================================================


class ExecutorBackend(Enum):
    """Available execution backends."""

    SERIAL = "serial"
    THREADS = "threads"
    PROCESSES = "processes"


# =============================================================================
# Data Structures
# =============================================================================


@attrs.define(slots=True)
class TaskResult:
    """Result from a single task.

    Attributes:
        index: Position of the item in the input list.
        success: Whether the task completed without raising.
        result: Return value of the task function.
        error: Error message when the task failed.
        exception: The exception raised by the task, if any.
        duration_seconds: Wall-clock duration of the task.
    """

    index: int
    success: bool
    result: Any | None = None
    error: str | None = None
    exception: BaseException | None = None
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "success": self.success,
            "error": self.error,
            "duration_seconds": round(self.duration_seconds, 3),
        }


@attrs.define(slots=True)
class ExecutionStats:
    """Statistics from parallel execution."""

    total_tasks: int
    successful: int
    failed: int
    total_duration: float
    mean_task_duration: float
    max_task_duration: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total_tasks": self.total_tasks,
            "successful": self.successful,
            "failed": self.failed,
            "total_duration": round(self.total_duration, 3),
            "mean_task_duration": round(self.mean_task_duration, 3),
            "max_task_duration": round(self.max_task_duration, 3),
        }


def _run_task(func: Callable[[T], R], index: int, item: T) -> TaskResult:
    """Run one task and capture its outcome.

    Module-level so the process backend can pickle it.
    """
    start_time = time.time()
    try:
        result = func(item)
    except Exception as e:
        return TaskResult(
            index=index,
            success=False,
            error=str(e),
            exception=e,
            duration_seconds=time.time() - start_time,
        )
    return TaskResult(
        index=index,
        success=True,
        result=result,
        duration_seconds=time.time() - start_time,
    )


# =============================================================================
# Parallel Executor
# =============================================================================


class ParallelExecutor:
    """Apply a function to many items, optionally in parallel.

    Example:
        >>> executor = ParallelExecutor(n_workers=4, backend="processes")
        >>> results, stats = executor.map_items(func, items, continue_on_error=False)
        >>> values = [r.result for r in results]
    """

    def __init__(
        self,
        n_workers: int = 1,
        backend: ExecutorBackend | str = ExecutorBackend.THREADS,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            n_workers: Number of parallel workers (1 = serial).
            backend: Execution backend.
            progress_callback: Called with (completed, total) after each task.
        """
        self.n_workers = max(1, n_workers)
        self.backend = (
            ExecutorBackend(backend) if isinstance(backend, str) else backend
        )
        self.progress_callback = progress_callback

        # Auto-select serial if n_workers=1
        if self.n_workers == 1:
            self.backend = ExecutorBackend.SERIAL

    def map_items(
        self,
        func: Callable[[T], R],
        items: list[T],
        continue_on_error: bool = True,
    ) -> tuple[list[TaskResult], ExecutionStats]:
        """Apply function to each item.

        Args:
            func: Function taking one item. Must be picklable for the
                process backend.
            items: Items to process.
            continue_on_error: If False, the first failure re-raises the
                task's original exception.

        Returns:
            Tuple of (results in input order, execution statistics).
        """
        if not items:
            return [], ExecutionStats(
                total_tasks=0,
                successful=0,
                failed=0,
                total_duration=0.0,
                mean_task_duration=0.0,
                max_task_duration=0.0,
            )

        logger.debug(
            f"Processing {len(items)} items with {self.n_workers} workers "
            f"(backend={self.backend.value})"
        )

        start_time = time.time()
        if self.backend == ExecutorBackend.SERIAL:
            results = self._execute_serial(func, items, continue_on_error)
        else:
            results = self._execute_pool(func, items, continue_on_error)
        results.sort(key=lambda r: r.index)

        total_duration = time.time() - start_time
        successful = sum(1 for r in results if r.success)
        durations = [r.duration_seconds for r in results]

        stats = ExecutionStats(
            total_tasks=len(results),
            successful=successful,
            failed=len(results) - successful,
            total_duration=total_duration,
            mean_task_duration=sum(durations) / len(durations) if durations else 0,
            max_task_duration=max(durations) if durations else 0,
        )

        logger.debug(
            f"Completed: {successful}/{len(items)} items, "
            f"duration={total_duration:.1f}s"
        )

        return results, stats

    def _execute_serial(
        self,
        func: Callable,
        items: list,
        continue_on_error: bool,
    ) -> list[TaskResult]:
        """Serial execution in the calling thread."""
        results = []
        total = len(items)

        for i, item in enumerate(items):
            task_result = _run_task(func, i, item)
            results.append(task_result)

            if not task_result.success and not continue_on_error:
                logger.error(f"Task {i} failed: {task_result.error}")
                raise task_result.exception

            if self.progress_callback:
                self.progress_callback(i + 1, total)

        return results

    def _execute_pool(
        self,
        func: Callable,
        items: list,
        continue_on_error: bool,
    ) -> list[TaskResult]:
        """Thread or process pool execution."""
        results = []
        total = len(items)
        completed = 0

        pool_class = (
            ThreadPoolExecutor
            if self.backend == ExecutorBackend.THREADS
            else ProcessPoolExecutor
        )

        with pool_class(max_workers=self.n_workers) as executor:
            futures: list[Future] = [
                executor.submit(_run_task, func, i, item)
                for i, item in enumerate(items)
            ]

            for future in as_completed(futures):
                completed += 1
                task_result = future.result()
                results.append(task_result)

                if not task_result.success and not continue_on_error:
                    logger.error(f"Task {task_result.index} failed: {task_result.error}")
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise task_result.exception

                if self.progress_callback:
                    self.progress_callback(completed, total)

        return results
