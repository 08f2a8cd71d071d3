"""
Processing executor - applies one filter to a PixelBuffer in parallel.

The row index space of the destination is split into contiguous, disjoint
bands, one per worker. A worker reads only its band of the source and writes
only its band of the destination, so workers never touch the same pixel and
no locking is needed around pixel access. The source is never written.

Filters that need a whole-image statistic get it computed once, up front,
from the untouched source before any worker starts.
"""

import os
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from ..core import FilterCancelledError, NullImageError, PixelBuffer
from ..utils.logging import get_logger
from .filters import FilterDescriptor, resolve_filter

logger = get_logger(__name__)

RowRange = Tuple[int, int]

DEFAULT_ROWS_PER_CHUNK = 64


class ChunkProgress:
    """Thread-safe progress counter for parallel workers."""

    def __init__(self, total: int):
        self.lock = threading.Lock()
        self.completed = 0
        self.total = total

    def increment(self) -> int:
        """
        Record one finished chunk.
        Returns current percentage (0-100).
        """
        with self.lock:
            self.completed += 1
            return self._percent()

    def get_percent(self) -> int:
        with self.lock:
            return self._percent()

    def _percent(self) -> int:
        if self.total <= 0:
            return 100
        return int((self.completed / self.total) * 100)


def partition_rows(height: int, parts: int) -> List[RowRange]:
    """
    Split rows [0, height) into at most ``parts`` contiguous bands.

    Bands are disjoint, cover every row exactly once, and differ in size by
    at most one row. Returns an empty list for an empty image.
    """
    if height <= 0:
        return []
    parts = max(1, min(parts, height))
    base, extra = divmod(height, parts)
    bands = []
    start = 0
    for index in range(parts):
        stop = start + base + (1 if index < extra else 0)
        bands.append((start, stop))
        start = stop
    return bands


def iter_chunks(band: RowRange, rows_per_chunk: int) -> Iterator[RowRange]:
    """Yield sub-ranges of ``band`` of at most ``rows_per_chunk`` rows."""
    start, stop = band
    step = max(1, rows_per_chunk)
    for chunk_start in range(start, stop, step):
        yield chunk_start, min(chunk_start + step, stop)


def calculate_optimal_workers(pixel_count: int, limit: Optional[int] = None) -> int:
    """
    Number of worker threads for an image of ``pixel_count`` pixels.

    Strategy:
    - Small images (<64K pixels): 1 worker, thread overhead is not worth it
    - Medium images (<4M pixels): min(4, cpu_count)
    - Large images: cpu_count
    ``limit`` caps the result when set.
    """
    if pixel_count < 64 * 1024:
        workers = 1
    else:
        available_cores = os.cpu_count() or 4
        workers = min(4, available_cores) if pixel_count < 4 * 1024 * 1024 else available_cores
    if limit:
        workers = min(workers, limit)
    return max(1, workers)


class ParallelFilterExecutor:
    """Executes a single filter over a PixelBuffer with a bounded thread pool."""

    def __init__(
        self,
        max_workers: Optional[int] = None,
        rows_per_chunk: int = DEFAULT_ROWS_PER_CHUNK,
    ):
        """
        Args:
            max_workers: Fixed worker count; None or 0 picks one per image size
            rows_per_chunk: Rows processed between cancellation checks
        """
        if max_workers is not None and max_workers < 0:
            raise ValueError("max_workers must be >= 0")
        if rows_per_chunk < 1:
            raise ValueError("rows_per_chunk must be >= 1")
        self.max_workers = max_workers or None
        self.rows_per_chunk = rows_per_chunk

    @classmethod
    def from_settings(cls, settings) -> "ParallelFilterExecutor":
        """Build an executor from a Settings instance."""
        return cls(
            max_workers=settings.get_max_workers(),
            rows_per_chunk=settings.get_rows_per_chunk(),
        )

    def worker_count(self, buffer: PixelBuffer) -> int:
        if self.max_workers:
            return max(1, min(self.max_workers, buffer.height or 1))
        return calculate_optimal_workers(buffer.size)

    def apply(
        self,
        source: PixelBuffer,
        filter,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
        progress: Optional[Callable[[int], None]] = None,
    ) -> PixelBuffer:
        """
        Apply ``filter`` (a FilterDescriptor or filter id) to ``source``.

        Args:
            source: Image to read; never modified
            filter: Filter to apply
            cancel_event: Set from another thread to stop the pass; never set here
            timeout: Seconds to wait for the workers before cancelling
            progress: Called with a percentage after each finished chunk

        Returns:
            A new PixelBuffer with the same dimensions

        Raises:
            NullImageError: if source is None
            UnknownFilterError: if a filter id is not registered
            FilterCancelledError: if cancelled or timed out; no partial
                result is returned
        """
        if source is None:
            raise NullImageError("Cannot apply a filter without an image")
        descriptor = resolve_filter(filter)

        # Computed once, before any worker touches pixel data
        statistic = descriptor.compute_statistic(source.pixels)

        destination = PixelBuffer.create(source.width, source.height)
        if source.size == 0:
            return destination

        workers = self.worker_count(source)
        bands = partition_rows(source.height, workers)
        total_chunks = sum(
            len(range(start, stop, self.rows_per_chunk)) for start, stop in bands
        )
        tracker = ChunkProgress(total_chunks)
        # Private stop flag; the caller's event is only ever read
        stop_event = threading.Event()

        def cancelled() -> bool:
            return stop_event.is_set() or (cancel_event is not None and cancel_event.is_set())

        logger.debug(
            "Applying %s to %dx%d with %d worker(s), bands=%s",
            descriptor.filter_id, source.width, source.height, len(bands), bands,
        )

        if len(bands) == 1 and timeout is None:
            self._process_band(
                source.pixels, destination.pixels, bands[0],
                descriptor, statistic, cancelled, tracker, progress,
            )
            return destination

        with ThreadPoolExecutor(max_workers=len(bands)) as pool:
            futures = [
                pool.submit(
                    self._process_band,
                    source.pixels, destination.pixels, band,
                    descriptor, statistic, cancelled, tracker, progress,
                )
                for band in bands
            ]
            done, not_done = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)

            if not_done:
                # Timed out or a worker failed: stop the rest cooperatively
                stop_event.set()
                for future in not_done:
                    future.cancel()

            was_cancelled = False
            for future in done:
                error = future.exception()
                if isinstance(error, FilterCancelledError):
                    was_cancelled = True
                elif error is not None:
                    raise error

            if not_done and not was_cancelled:
                raise FilterCancelledError(
                    f"Filter {descriptor.filter_id} timed out after {timeout}s"
                )
            if was_cancelled:
                raise FilterCancelledError(f"Filter {descriptor.filter_id} was cancelled")

        return destination

    def _process_band(
        self,
        src: np.ndarray,
        dst: np.ndarray,
        band: RowRange,
        descriptor: FilterDescriptor,
        statistic: Optional[float],
        cancelled: Callable[[], bool],
        tracker: ChunkProgress,
        progress: Optional[Callable[[int], None]],
    ) -> None:
        """Map rows of one band, checking for cancellation between chunks."""
        for start, stop in iter_chunks(band, self.rows_per_chunk):
            if cancelled():
                raise FilterCancelledError(f"Filter {descriptor.filter_id} was cancelled")
            dst[start:stop] = descriptor.map_pixels(src[start:stop], statistic)
            percent = tracker.increment()
            if progress is not None:
                progress(percent)


def apply_filter(
    buffer: PixelBuffer,
    filter_name: str,
    max_workers: Optional[int] = None,
) -> PixelBuffer:
    """Convenience wrapper: apply one registered filter with default settings."""
    return ParallelFilterExecutor(max_workers=max_workers).apply(buffer, filter_name)
