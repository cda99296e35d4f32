"""Background workers that fetch diffs off the input path.

Both schedulers post result objects into a shared mailbox queue which the
event loop drains between key reads; workers never touch panel state.
"""

from __future__ import annotations

import abc
import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from queue import Empty, Queue

logger = logging.getLogger(__name__)

DiffLoader = Callable[[str], str]


@dataclass(frozen=True)
class DiffLoadRequest:
    """One single-file diff load."""

    request_id: int
    path: str


@dataclass(frozen=True)
class DiffLoadResult:
    """Completed single-file load; ``error`` is set when the loader failed."""

    request: DiffLoadRequest
    diff: str = ""
    error: str | None = None

    @property
    def path(self) -> str:
        return self.request.path


@dataclass(frozen=True)
class PreloadBatchRequest:
    """One bulk preload job covering every uncached path at search start."""

    request_id: int
    paths: tuple[str, ...]


@dataclass(frozen=True)
class PreloadBatchResult:
    """All diffs fetched by one preload batch, delivered together."""

    request: PreloadBatchRequest
    diffs: dict[str, str] = field(default_factory=dict)
    failed: tuple[str, ...] = ()


def drain_mailbox(mailbox: Queue) -> list[object]:
    """Drain all completed results currently in ``mailbox``."""
    out: list[object] = []
    while True:
        try:
            out.append(mailbox.get_nowait())
        except Empty:
            break
    return out


class _LatestRequestScheduler(abc.ABC):
    """Single worker thread; pending work collapses to the newest request."""

    thread_name = "lazyreview-worker"

    def __init__(self, mailbox: Queue | None = None) -> None:
        self._lock = threading.Lock()
        self._pending: object | None = None
        self._running = False
        self._next_request_id = 1
        self.mailbox: Queue = mailbox if mailbox is not None else Queue()

    @abc.abstractmethod
    def _run_request(self, request) -> object | None:
        """Do the work for one request; a non-None result is posted to the mailbox."""

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    return

            result = self._run_request(request)
            if result is not None:
                self.mailbox.put(result)

    def _submit(self, build_request: Callable[[int], object]) -> int:
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._pending = build_request(request_id)
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name=self.thread_name,
            daemon=True,
        )
        worker.start()
        return request_id


class DiffLoadScheduler(_LatestRequestScheduler):
    """Loads the diff of the file the reviewer just selected."""

    thread_name = "lazyreview-diff-load"

    def __init__(self, load_diff: DiffLoader, mailbox: Queue | None = None) -> None:
        super().__init__(mailbox)
        self._load_diff = load_diff

    def _run_request(self, request: DiffLoadRequest) -> DiffLoadResult:
        try:
            diff = self._load_diff(request.path)
        except Exception as exc:
            logger.debug("diff load failed for %s: %s", request.path, exc)
            return DiffLoadResult(request=request, error=str(exc) or exc.__class__.__name__)
        return DiffLoadResult(request=request, diff=diff)

    def schedule(self, path: str) -> int:
        """Queue/replace the pending load and return its request id."""
        return self._submit(lambda request_id: DiffLoadRequest(request_id=request_id, path=path))


class DiffPreloadScheduler(_LatestRequestScheduler):
    """Fetches many diffs sequentially and posts them as one batch."""

    thread_name = "lazyreview-diff-preload"

    def __init__(self, load_diff: DiffLoader, mailbox: Queue | None = None) -> None:
        super().__init__(mailbox)
        self._load_diff = load_diff

    def _run_request(self, request: PreloadBatchRequest) -> PreloadBatchResult:
        diffs: dict[str, str] = {}
        failed: list[str] = []
        for path in request.paths:
            try:
                diffs[path] = self._load_diff(path)
            except Exception as exc:
                logger.debug("preload skipped %s: %s", path, exc)
                failed.append(path)
        return PreloadBatchResult(request=request, diffs=diffs, failed=tuple(failed))

    def schedule(self, paths: Sequence[str]) -> int | None:
        """Queue a batch for ``paths``; nothing is scheduled for an empty list."""
        batch = tuple(paths)
        if not batch:
            return None
        return self._submit(lambda request_id: PreloadBatchRequest(request_id=request_id, paths=batch))


__all__ = [
    "DiffLoadRequest",
    "DiffLoadResult",
    "DiffLoadScheduler",
    "DiffPreloadScheduler",
    "PreloadBatchRequest",
    "PreloadBatchResult",
    "drain_mailbox",
]
