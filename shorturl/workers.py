"""Background removal of users' short links."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Iterable, Protocol

log = logging.getLogger(__name__)

_STOP = object()


class Deleter(Protocol):
    def soft_delete_short_urls(self, user_uuid: str, *args: str) -> None: ...


@dataclass(frozen=True)
class _Job:
    user_uuid: str
    short_urls: tuple[str, ...]


class DeleteWorker:
    """Runs soft deletions of short links on background threads."""

    def __init__(self, deleter: Deleter, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError("at least one worker is required")
        self._deleter = deleter
        self._jobs: queue.Queue[object] = queue.Queue()
        self._stopped = threading.Event()
        self._threads = [
            threading.Thread(target=self._run, name=f"url-deleter-{n}", daemon=True)
            for n in range(workers)
        ]
        for thread in self._threads:
            thread.start()

    def __enter__(self) -> DeleteWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def delete(self, user_uuid: str, short_urls: Iterable[str]) -> None:
        """Queue the user's short links for deletion."""
        if self._stopped.is_set():
            log.info("deleter is stopped, dropping links for %s", user_uuid)
            return
        job = _Job(user_uuid, tuple(short_urls))
        log.info("links queued for deletion: %s", list(job.short_urls))
        self._jobs.put(job)

    def stop(self) -> None:
        """Stop the workers; queued jobs that have not started are dropped."""
        if self._stopped.is_set():
            return
        self._stopped.set()
        for _ in self._threads:
            self._jobs.put(_STOP)
        for thread in self._threads:
            thread.join()

    def _run(self) -> None:
        while True:
            job = self._jobs.get()
            if job is _STOP or self._stopped.is_set() or not isinstance(job, _Job):
                log.info("deleter worker stopping")
                return
            log.info("deleting links %s for user %s", list(job.short_urls), job.user_uuid)
            try:
                self._deleter.soft_delete_short_urls(job.user_uuid, *job.short_urls)
            except Exception as exc:
                log.info("deletion failed: %s", exc)