"""Bounded worker pool that schedules label files and the inventory members they discover."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set

from harvest.config import Job
from harvest.logging import get_logger
from harvest.model.enums import ProcessorStatus, ProductVariant
from harvest.model.label import ProcessingResult, WorkItem
from harvest.processing.classifier import classify_root
from harvest.processing.parser import peek_root_name
from harvest.processing.product_processor import ProductProcessor

ProgressCallback = Callable[[ProcessingResult, int], None]


@dataclass
class HarvestStats:
    """Counters for one harvest run."""

    processed: int = 0
    skipped: int = 0
    failed: int = 0
    discovered: int = 0
    duplicates: int = 0
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.processed + self.skipped + self.failed


class HarvestRunner:
    """
    Runs `ProductProcessor` over label files with a fixed number of workers.

    Every label file is processed at most once per run. Input files are
    scheduled in two passes: collection labels first, then everything else.
    A member label listed by a collection inventory that is also an input
    file is therefore processed once, with its owning collection attached.
    Paths listed again (a collection naming itself, two collections naming
    each other) are dropped with a warning.

    Failure policy: a file whose pipeline raises is logged and counted as
    failed, and the run goes on. Inventory members are independent of their
    collection, so a failing member never affects the collection record.
    With `fail_fast`, the first failure stops the run: queued items are
    abandoned and the error is re-raised once the workers are drained.
    """

    def __init__(
        self,
        processor: ProductProcessor,
        job: Job,
        workers: int = 4,
        fail_fast: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.processor = processor
        self.job = job
        self.workers = workers
        self.fail_fast = fail_fast
        self.on_progress = on_progress
        self.logger = get_logger(self.__class__.__name__)
        self._stop_event: Optional[asyncio.Event] = None
        self._error: Optional[BaseException] = None
        self._scheduled: Set[Path] = set()
        self._pending: Dict[Path, WorkItem] = {}

    def stop(self) -> None:
        """Ask the workers to stop picking up new files."""
        if self._stop_event is not None:
            self._stop_event.set()

    async def run(self, paths: Iterable[Path]) -> HarvestStats:
        stats = HarvestStats()
        self._stop_event = asyncio.Event()
        self._error = None
        self._scheduled = set()
        self._pending = {}

        items = []
        for path in paths:
            item = WorkItem(path=Path(path))
            key = self._key(item.path)
            if key in self._scheduled:
                stats.duplicates += 1
                self.logger.warning(f"Skipping duplicate input file {item.path}")
                continue
            self._scheduled.add(key)
            items.append(item)

        self.logger.info(f"Harvesting {len(items)} files with {self.workers} workers, job {self.job.job_id}")

        root_names = await asyncio.gather(*(asyncio.to_thread(peek_root_name, item.path) for item in items))
        collections = []
        for item, root_name in zip(items, root_names):
            if classify_root(root_name) == ProductVariant.COLLECTION:
                collections.append(item)
            else:
                self._pending[self._key(item.path)] = item

        # collections first, so their members are still pending when discovered
        await self._drain(collections, stats)
        remaining = list(self._pending.values())
        self._pending = {}
        await self._drain(remaining, stats)

        self.logger.info(
            f"Harvest complete: {stats.processed} processed, {stats.skipped} skipped, "
            f"{stats.failed} failed, {stats.discovered} discovered from inventories, "
            f"{stats.duplicates} duplicates dropped"
        )
        if self._error is not None:
            raise self._error
        return stats

    @staticmethod
    def _key(path: Path) -> Path:
        return path.resolve()

    async def _drain(self, items: List[WorkItem], stats: HarvestStats) -> None:
        if not items:
            return

        queue: asyncio.Queue = asyncio.Queue()
        for item in items:
            queue.put_nowait(item)

        tasks = [asyncio.create_task(self._worker(queue, stats)) for _ in range(self.workers)]
        try:
            await queue.join()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _worker(self, queue: asyncio.Queue, stats: HarvestStats) -> None:
        while True:
            item = await queue.get()
            try:
                if not self._stop_event.is_set():
                    await self._process_item(item, queue, stats)
            finally:
                queue.task_done()

    async def _process_item(self, item: WorkItem, queue: asyncio.Queue, stats: HarvestStats) -> None:
        try:
            result = await self.processor.process(item, self.job)
        except Exception as e:
            stats.failed += 1
            stats.failures[str(item.path)] = str(e)
            if item.owner_lidvid:
                self.logger.error(f"Failed to process inventory member {item.path} of {item.owner_lidvid}: {e}")
            else:
                self.logger.error(f"Failed to process {item.path}: {e}")

            if self.fail_fast and self._error is None:
                self._error = e
                self._stop_event.set()
            self._notify(ProcessingResult(status=ProcessorStatus.FAILED, path=item.path, error_message=str(e)), 0)
            return

        if result.is_skipped:
            stats.skipped += 1
        else:
            stats.processed += 1

        added = self._schedule(result.work_items, queue, stats)
        self._notify(result, added)

    def _schedule(self, work_items: List[WorkItem], queue: asyncio.Queue, stats: HarvestStats) -> int:
        """Queue discovered members once per run. Returns how many files are new to the run."""
        added = 0
        for item in work_items:
            key = self._key(item.path)
            if self._pending.pop(key, None) is not None:
                # input file not processed yet: run it now, with its owner
                queue.put_nowait(item)
                stats.discovered += 1
            elif key in self._scheduled:
                stats.duplicates += 1
                self.logger.warning(f"Skipping {item.path} listed by {item.owner_lidvid}: already scheduled in this run")
            else:
                self._scheduled.add(key)
                queue.put_nowait(item)
                stats.discovered += 1
                added += 1
        return added

    def _notify(self, result: ProcessingResult, discovered: int) -> None:
        if self.on_progress is not None:
            self.on_progress(result, discovered)
