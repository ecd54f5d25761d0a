"""
Bounded worker pool for page render jobs.

`JobScheduler.run(jobs)` starts `max_workers` threads that pull jobs from a
single queue. A job that raises is recorded as a failed `JobOutcome` and the
pool moves on: no retries, no cancellation of sibling jobs. Once every job
has been taken, workers are stopped with one sentinel each.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .models.pages import Page
from .rendering.options import DEFAULT_MAX_WORKERS

LOGGER = logging.getLogger(__name__)

_STOP = object()


@dataclass(frozen=True)
class RenderJob:
    page: Page
    path: str
    run: Callable[[], object]


@dataclass(frozen=True)
class JobOutcome:
    job: RenderJob
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class JobScheduler:
    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        *,
        show_progress: bool = True,
        description: str = "migrating notion pages",
        console: Optional[Console] = None,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self._show_progress = show_progress
        self._description = description
        self._console = console or Console(stderr=True)

    def run(self, jobs: Sequence[RenderJob]) -> List[JobOutcome]:
        """Run every job; outcomes come back in completion order."""
        if not jobs:
            return []

        work: "queue.Queue[object]" = queue.Queue()
        for job in jobs:
            work.put(job)
        workers = min(self.max_workers, len(jobs))
        for _ in range(workers):
            work.put(_STOP)

        outcomes: List[JobOutcome] = []
        lock = threading.Lock()
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
            disable=not self._show_progress,
            transient=False,
        )
        LOGGER.info("Running %d jobs on %d workers", len(jobs), workers)

        with progress:
            task = progress.add_task(self._description, total=len(jobs))

            def _worker() -> None:
                while True:
                    item = work.get()
                    try:
                        if item is _STOP:
                            return
                        outcome = self._run_one(item)  # type: ignore[arg-type]
                        with lock:
                            outcomes.append(outcome)
                        progress.advance(task)
                    finally:
                        work.task_done()

            threads = [
                threading.Thread(target=_worker, name=f"notionvault-worker-{i}", daemon=True)
                for i in range(workers)
            ]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        failed = sum(1 for o in outcomes if not o.ok)
        LOGGER.info("Finished %d jobs, %d failed", len(outcomes), failed)
        return outcomes

    @staticmethod
    def _run_one(job: RenderJob) -> JobOutcome:
        try:
            job.run()
        except Exception as e:
            LOGGER.warning("Job for %s failed: %s", job.path, e)
            LOGGER.debug("Job failure detail", exc_info=True)
            return JobOutcome(job, e)
        return JobOutcome(job)


def failures(outcomes: Sequence[JobOutcome]) -> List[JobOutcome]:
    return [o for o in outcomes if not o.ok]


__all__ = ["JobOutcome", "JobScheduler", "RenderJob", "failures"]
