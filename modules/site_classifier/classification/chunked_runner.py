"""Chunked, cooperative driver for classification batches.

A batch of several thousand sites is classified in fixed-size slices. Each
slice is one step of a ChunkedRun; whoever owns the run decides when the next
step happens (a plain loop, an asyncio event loop, a UI timer). Nothing here
starts threads.

Only one run is live per runner. Starting a new run retires the previous one:
its remaining steps become no-ops and it never reports progress or
completion again.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from ..models import ClassificationResult, SitePoint

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 200

ClassifierFn = Callable[[SitePoint], ClassificationResult]
ProgressCallback = Callable[[int, int, int, int], None]
CompleteCallback = Callable[[List[ClassificationResult]], None]


class ChunkedRun:
    """One classification run, advanced one slice at a time via :meth:`step`."""

    def __init__(self, runner: "ChunkedRunner", generation: int,
                 points: Sequence[SitePoint], classifier_fn: ClassifierFn,
                 chunk_size: int,
                 on_progress: Optional[ProgressCallback] = None,
                 on_complete: Optional[CompleteCallback] = None):
        self._runner = runner
        self.generation = generation
        self._points = list(points)
        self._classifier_fn = classifier_fn
        self.chunk_size = chunk_size
        self._on_progress = on_progress
        self._on_complete = on_complete

        self.results: List[ClassificationResult] = []
        self.processed_count = 0
        self.matched_count = 0
        self.empty_safety_count = 0
        self.cancelled = False
        self.completed = False

    @property
    def total_count(self) -> int:
        return len(self._points)

    @property
    def is_stale(self) -> bool:
        """True once a newer run has been started on the same runner."""
        return self._runner.generation != self.generation

    @property
    def is_active(self) -> bool:
        return not (self.completed or self.cancelled or self.is_stale)

    def cancel(self) -> None:
        """Stop the run before its next slice; on_complete will not be called."""
        if self.is_active:
            logger.info(f"Cancelling classification run {self.generation} "
                        f"at {self.processed_count}/{self.total_count}")
        self.cancelled = True

    def step(self) -> bool:
        """Classify the next slice.

        Returns:
            True if more work remains, False once the run is complete,
            cancelled or superseded
        """
        if not self.is_active:
            return False

        start = self.processed_count
        chunk = self._points[start:start + self.chunk_size]

        for point in chunk:
            result = self._classifier_fn(point)
            self.results.append(result)
            if result.is_matched:
                self.matched_count += 1
            if result.missing_safety_data:
                self.empty_safety_count += 1

        self.processed_count += len(chunk)

        if chunk and self._on_progress is not None:
            self._on_progress(self.processed_count, self.total_count,
                              self.matched_count, self.empty_safety_count)

        # The progress callback may cancel this run or start a newer one
        if self.cancelled or self.is_stale:
            return False

        if self.processed_count < self.total_count:
            return True

        self.completed = True
        logger.info(f"Classification run {self.generation} complete: {self.processed_count} sites, "
                    f"{self.matched_count} matched, {self.empty_safety_count} without emergency contacts")
        if self._on_complete is not None:
            self._on_complete(list(self.results))
        return False


class ChunkedRunner:
    """Owns the live classification run and hands out step-able runs."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = _check_chunk_size(chunk_size)
        self.generation = 0
        self.active_run: Optional[ChunkedRun] = None

    def start(self, points: Sequence[SitePoint], classifier_fn: ClassifierFn,
              on_progress: Optional[ProgressCallback] = None,
              on_complete: Optional[CompleteCallback] = None,
              chunk_size: Optional[int] = None) -> ChunkedRun:
        """Start a new run, retiring any run in progress.

        Args:
            points: Sites to classify
            classifier_fn: Callable classifying one site
            on_progress: Called after every slice with
                (processed, total, matched, empty_safety)
            on_complete: Called once with all results after the last slice
            chunk_size: Slice size override for this run

        Returns:
            The new ChunkedRun; call ``step()`` until it returns False

        Raises:
            ValueError: If the chunk_size override is smaller than 1
        """
        chunk_size = self.chunk_size if chunk_size is None else _check_chunk_size(chunk_size)

        if self.active_run is not None and self.active_run.is_active:
            logger.info(f"Superseding classification run {self.active_run.generation}")

        self.generation += 1
        self.active_run = ChunkedRun(
            runner=self,
            generation=self.generation,
            points=points,
            classifier_fn=classifier_fn,
            chunk_size=chunk_size,
            on_progress=on_progress,
            on_complete=on_complete,
        )
        logger.debug(f"Started classification run {self.generation} for {len(points)} sites")
        return self.active_run

    def run(self, points: Sequence[SitePoint], classifier_fn: ClassifierFn,
            on_progress: Optional[ProgressCallback] = None,
            on_complete: Optional[CompleteCallback] = None,
            chunk_size: Optional[int] = None) -> ChunkedRun:
        """Start a run and drive it to the end in the calling thread."""
        current = self.start(points, classifier_fn, on_progress, on_complete, chunk_size)
        while current.step():
            pass
        return current

    async def run_async(self, points: Sequence[SitePoint], classifier_fn: ClassifierFn,
                        on_progress: Optional[ProgressCallback] = None,
                        on_complete: Optional[CompleteCallback] = None,
                        chunk_size: Optional[int] = None) -> ChunkedRun:
        """Start a run and yield to the event loop between slices."""
        current = self.start(points, classifier_fn, on_progress, on_complete, chunk_size)
        while current.step():
            await asyncio.sleep(0)
        return current

    def cancel(self) -> None:
        """Cancel the live run, if any."""
        if self.active_run is not None:
            self.active_run.cancel()


def _check_chunk_size(chunk_size: int) -> int:
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return chunk_size
