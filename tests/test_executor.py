"""Tests for row partitioning and the parallel filter executor."""

import threading

import numpy as np
import pytest

from parallel_editor.core import (
    FilterCancelledError,
    NullImageError,
    PixelBuffer,
    UnknownFilterError,
)
from parallel_editor.processing import (
    FILTER_REGISTRY,
    ChunkProgress,
    FilterDescriptor,
    ParallelFilterExecutor,
    calculate_optimal_workers,
    get_filter,
    partition_rows,
)
from parallel_editor.processing.executor import iter_chunks


# ============================================================================
# PARTITIONING
# ============================================================================

@pytest.mark.parametrize("height, parts", [(1, 1), (10, 3), (97, 8), (5, 10), (64, 4)])
def test_partition_covers_rows_exactly_once(height, parts):
    bands = partition_rows(height, parts)
    assert len(bands) == min(height, parts)
    assert bands[0][0] == 0
    assert bands[-1][1] == height
    for (_, stop), (start, _) in zip(bands, bands[1:]):
        assert stop == start
    sizes = [stop - start for start, stop in bands]
    assert max(sizes) - min(sizes) <= 1
    assert min(sizes) >= 1


def test_partition_of_empty_image_is_empty():
    assert partition_rows(0, 4) == []


def test_iter_chunks_splits_band():
    assert list(iter_chunks((10, 25), 6)) == [(10, 16), (16, 22), (22, 25)]
    assert list(iter_chunks((3, 3), 6)) == []


def test_optimal_workers_scale_with_image_size():
    assert calculate_optimal_workers(100) == 1
    assert calculate_optimal_workers(10_000_000, limit=2) <= 2
    assert calculate_optimal_workers(10_000_000) >= 1


def test_chunk_progress_reports_percent():
    progress = ChunkProgress(4)
    assert progress.get_percent() == 0
    assert progress.increment() == 25
    progress.increment()
    progress.increment()
    assert progress.increment() == 100
    assert ChunkProgress(0).get_percent() == 100


# ============================================================================
# EXECUTOR
# ============================================================================

def test_invalid_configuration_rejected():
    with pytest.raises(ValueError):
        ParallelFilterExecutor(max_workers=-1)
    with pytest.raises(ValueError):
        ParallelFilterExecutor(rows_per_chunk=0)


def test_worker_count_is_capped_by_height():
    executor = ParallelFilterExecutor(max_workers=8)
    assert executor.worker_count(PixelBuffer.create(10, 3)) == 3
    assert ParallelFilterExecutor(max_workers=0).max_workers is None


def test_missing_source_raises_null_image():
    with pytest.raises(NullImageError):
        ParallelFilterExecutor().apply(None, "invert")


def test_unknown_filter_raises(primaries):
    with pytest.raises(UnknownFilterError):
        ParallelFilterExecutor().apply(primaries, "no_such_filter")


def test_result_is_new_buffer_with_same_dimensions(random_buffer):
    result = ParallelFilterExecutor(max_workers=4).apply(random_buffer, "sepia")
    assert result is not random_buffer
    assert (result.width, result.height) == (random_buffer.width, random_buffer.height)
    assert not np.shares_memory(result.pixels, random_buffer.pixels)


def test_empty_image_yields_empty_result():
    empty = PixelBuffer.create(0, 0)
    result = ParallelFilterExecutor(max_workers=4).apply(empty, "invert")
    assert result.size == 0


@pytest.mark.parametrize("filter_id", sorted(FILTER_REGISTRY))
def test_output_independent_of_workers_and_chunking(filter_id, random_buffer):
    reference = ParallelFilterExecutor(max_workers=1).apply(random_buffer, filter_id)
    for workers, rows in [(2, 64), (4, 1), (8, 7), (3, 1000)]:
        executor = ParallelFilterExecutor(max_workers=workers, rows_per_chunk=rows)
        assert executor.apply(random_buffer, filter_id) == reference
    assert ParallelFilterExecutor(max_workers=4).apply(random_buffer, filter_id) == reference


def test_statistic_is_computed_once_from_source(random_buffer):
    calls = []

    def counting_average(pixels):
        calls.append(pixels.shape)
        return float(pixels.mean())

    descriptor = FilterDescriptor(
        filter_id="counting",
        name="Counting",
        category="Test",
        kernel=get_filter("contrast_high").kernel,
        statistic=counting_average,
    )
    ParallelFilterExecutor(max_workers=4, rows_per_chunk=5).apply(random_buffer, descriptor)
    assert calls == [random_buffer.pixels.shape]


def test_progress_callback_reaches_100(random_buffer):
    reported = []
    executor = ParallelFilterExecutor(max_workers=1, rows_per_chunk=10)
    executor.apply(random_buffer, "invert", progress=reported.append)
    assert len(reported) == 10
    assert reported == sorted(reported)
    assert reported[-1] == 100


def test_progress_from_many_workers(random_buffer):
    reported = []
    lock = threading.Lock()

    def on_progress(percent):
        with lock:
            reported.append(percent)

    ParallelFilterExecutor(max_workers=4, rows_per_chunk=8).apply(
        random_buffer, "invert", progress=on_progress
    )
    assert max(reported) == 100


@pytest.mark.parametrize("workers", [1, 4])
def test_pre_set_cancel_event_cancels(workers, random_buffer):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(FilterCancelledError):
        ParallelFilterExecutor(max_workers=workers).apply(
            random_buffer, "invert", cancel_event=cancel
        )


def test_timeout_cancels_slow_filter():
    release = threading.Event()

    def slow(pixels, statistic):
        release.wait(1.0)
        return pixels.copy()

    descriptor = FilterDescriptor(filter_id="slow", name="Slow", category="Test", kernel=slow)
    buffer = PixelBuffer.create(4, 4)
    with pytest.raises(FilterCancelledError, match="timed out"):
        ParallelFilterExecutor(max_workers=2, rows_per_chunk=1).apply(
            buffer, descriptor, timeout=0.05
        )


def test_worker_errors_propagate(primaries):
    def broken(pixels, statistic):
        raise RuntimeError("kernel failed")

    descriptor = FilterDescriptor(filter_id="broken", name="Broken", category="Test", kernel=broken)
    with pytest.raises(RuntimeError, match="kernel failed"):
        ParallelFilterExecutor(max_workers=2).apply(primaries, descriptor)


def test_timeout_leaves_caller_event_clear(random_buffer):
    release = threading.Event()

    def slow(pixels, statistic):
        release.wait(0.5)
        return pixels.copy()

    descriptor = FilterDescriptor(filter_id="slow", name="Slow", category="Test", kernel=slow)
    cancel = threading.Event()
    executor = ParallelFilterExecutor(max_workers=2, rows_per_chunk=1)
    with pytest.raises(FilterCancelledError, match="timed out"):
        executor.apply(PixelBuffer.create(2, 4), descriptor, cancel_event=cancel, timeout=0.05)
    assert not cancel.is_set()

    # The same event can drive the next pass
    result = executor.apply(random_buffer, "invert", cancel_event=cancel)
    assert result.get(0, 0) == tuple(255 - c for c in random_buffer.get(0, 0))


def test_worker_error_leaves_caller_event_clear(primaries):
    def broken(pixels, statistic):
        raise RuntimeError("kernel failed")

    descriptor = FilterDescriptor(filter_id="broken", name="Broken", category="Test", kernel=broken)
    cancel = threading.Event()
    with pytest.raises(RuntimeError):
        ParallelFilterExecutor(max_workers=2).apply(primaries, descriptor, cancel_event=cancel)
    assert not cancel.is_set()
