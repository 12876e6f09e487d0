"""Tests for generegions.parallel.executor module.

Tests cover:
- TaskResult and ExecutionStats data structures
- ParallelExecutor with serial and thread backends
- Result ordering, progress callbacks and error handling
"""

import time

import pytest

from generegions.parallel.executor import (
    ExecutionStats,
    ExecutorBackend,
    ParallelExecutor,
    TaskResult,
)


def square(x):
    return x * x


def fail_on_three(x):
    if x == 3:
        raise ValueError("three")
    return x


# =============================================================================
# Data Structure Tests
# =============================================================================


class TestTaskResult:
    """Tests for TaskResult data structure."""

    def test_to_dict(self):
        """Test serialization to dict."""
        result = TaskResult(index=2, success=False, error="boom", duration_seconds=1.23456)
        assert result.to_dict() == {
            "index": 2,
            "success": False,
            "error": "boom",
            "duration_seconds": 1.235,
        }


class TestExecutionStats:
    """Tests for ExecutionStats data structure."""

    def test_to_dict(self):
        """Test serialization rounds durations."""
        stats = ExecutionStats(
            total_tasks=3,
            successful=2,
            failed=1,
            total_duration=1.23456,
            mean_task_duration=0.41152,
            max_task_duration=0.9,
        )
        data = stats.to_dict()
        assert data["failed"] == 1
        assert data["total_duration"] == 1.235


# =============================================================================
# ParallelExecutor Tests
# =============================================================================


class TestParallelExecutor:
    """Tests for ParallelExecutor."""

    def test_single_worker_is_serial(self):
        """One worker forces the serial backend."""
        executor = ParallelExecutor(n_workers=1, backend="threads")
        assert executor.backend == ExecutorBackend.SERIAL

    def test_backend_from_string(self):
        """Backends can be given by name."""
        executor = ParallelExecutor(n_workers=2, backend="threads")
        assert executor.backend == ExecutorBackend.THREADS

    def test_invalid_backend(self):
        """Unknown backend names are rejected."""
        with pytest.raises(ValueError):
            ParallelExecutor(n_workers=2, backend="cluster")

    def test_empty_items(self):
        """No items gives no results."""
        results, stats = ParallelExecutor().map_items(square, [])
        assert results == []
        assert stats.total_tasks == 0

    @pytest.mark.parametrize("n_workers", [1, 4])
    def test_results_in_input_order(self, n_workers):
        """Results come back in input order."""
        executor = ParallelExecutor(n_workers=n_workers)
        results, stats = executor.map_items(square, list(range(20)))
        assert [r.result for r in results] == [x * x for x in range(20)]
        assert [r.index for r in results] == list(range(20))
        assert stats.successful == 20

    def test_threads_out_of_order_completion(self):
        """Order is restored even when later tasks finish first."""

        def delayed(x):
            time.sleep(0.01 * (5 - x))
            return x

        executor = ParallelExecutor(n_workers=5, backend="threads")
        results, _ = executor.map_items(delayed, list(range(5)))
        assert [r.result for r in results] == list(range(5))

    def test_progress_callback(self):
        """The callback sees every completion."""
        calls = []
        executor = ParallelExecutor(
            n_workers=1,
            progress_callback=lambda completed, total: calls.append((completed, total)),
        )
        executor.map_items(square, [1, 2, 3])
        assert calls == [(1, 3), (2, 3), (3, 3)]

    @pytest.mark.parametrize("n_workers", [1, 2])
    def test_continue_on_error(self, n_workers):
        """Failures are recorded and other tasks still run."""
        executor = ParallelExecutor(n_workers=n_workers)
        results, stats = executor.map_items(fail_on_three, [1, 2, 3, 4])
        assert stats.failed == 1
        failed = [r for r in results if not r.success]
        assert failed[0].index == 2
        assert failed[0].error == "three"
        assert isinstance(failed[0].exception, ValueError)

    @pytest.mark.parametrize("n_workers", [1, 2])
    def test_fail_fast_reraises(self, n_workers):
        """The original exception is raised when not continuing."""
        executor = ParallelExecutor(n_workers=n_workers)
        with pytest.raises(ValueError, match="three"):
            executor.map_items(fail_on_three, [1, 2, 3, 4], continue_on_error=False)
