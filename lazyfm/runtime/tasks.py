"""Background task runners feeding a result channel.

Work submitted here is tagged with the path and generation it was issued
for. The foreground session drains results and discards the stale ones;
runners never decide staleness themselves.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue
from typing import Protocol

from ..errors import FileManagerError

LOGGER = logging.getLogger(__name__)

TASK_LISTING = "listing"
TASK_PARENT_LISTING = "parent-listing"
TASK_GIT_STATUS = "git-status"
TASK_PREVIEW = "preview"
TASK_CONTENT_SEARCH = "content-search"


@dataclass(frozen=True)
class TaskRequest:
    key: str
    path: Path
    generation: int
    work: Callable[[], object]


@dataclass(frozen=True)
class TaskResult:
    key: str
    path: Path
    generation: int
    payload: object = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_task(request: TaskRequest) -> TaskResult:
    """Execute one request, converting raised errors into a failed result."""
    try:
        payload = request.work()
    except FileManagerError as exc:
        LOGGER.info("%s task for %s failed: %s", request.key, request.path, exc)
        return TaskResult(request.key, request.path, request.generation, error=exc)
    except Exception as exc:
        LOGGER.exception("%s task for %s crashed", request.key, request.path)
        return TaskResult(request.key, request.path, request.generation, error=exc)
    return TaskResult(request.key, request.path, request.generation, payload=payload)


class TaskRunner(Protocol):
    def submit(self, request: TaskRequest) -> None: ...

    def drain_results(self) -> list[TaskResult]: ...


class BackgroundTaskRunner:
    """Single-threaded runner; a newer request replaces a pending one with the same key."""

    def __init__(self, name: str = "lazyfm-tasks") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._pending: OrderedDict[str, TaskRequest] = OrderedDict()
        self._running = False
        self._results: Queue[TaskResult] = Queue()

    def _worker(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._running = False
                    return
                _key, request = self._pending.popitem(last=False)
            self._results.put(run_task(request))

    def submit(self, request: TaskRequest) -> None:
        with self._lock:
            replaced = self._pending.pop(request.key, None)
            self._pending[request.key] = request
            if replaced is not None:
                LOGGER.debug(
                    "%s task superseded: generation %d -> %d",
                    request.key,
                    replaced.generation,
                    request.generation,
                )
            if self._running:
                return
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name=self._name,
            daemon=True,
        )
        worker.start()

    @property
    def idle(self) -> bool:
        with self._lock:
            return not self._running and not self._pending

    def drain_results(self) -> list[TaskResult]:
        out: list[TaskResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


class InlineTaskRunner:
    """Runs each request synchronously at submit time; results wait for draining."""

    def __init__(self) -> None:
        self._results: list[TaskResult] = []
        self.submitted: list[TaskRequest] = []

    def submit(self, request: TaskRequest) -> None:
        self.submitted.append(request)
        self._results.append(run_task(request))

    def drain_results(self) -> list[TaskResult]:
        out, self._results = self._results, []
        return out


__all__ = [
    "TASK_LISTING",
    "TASK_PARENT_LISTING",
    "TASK_GIT_STATUS",
    "TASK_PREVIEW",
    "TASK_CONTENT_SEARCH",
    "TaskRequest",
    "TaskResult",
    "TaskRunner",
    "BackgroundTaskRunner",
    "InlineTaskRunner",
    "run_task",
]
