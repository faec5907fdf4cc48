"""Serialized execution of bulk copy/move/delete operations.

One operation is active at a time; later requests wait in a FIFO queue.
Items run independently, so one failure never aborts the rest. Cancelling
stops dequeuing further items and leaves completed items in place.
Rename, create, and chmod are single-path and run immediately.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Iterable
from pathlib import Path
from queue import Empty, Queue

from ..errors import FileManagerError, TrashError
from ..runtime.capabilities import Trash
from .fs import CreateKind, chmod_path, copy_path, create_path, move_path, path_exists, rename_path
from .types import (
    ItemStatus,
    OperationEvent,
    OperationItem,
    OperationKind,
    OperationStatus,
    PendingOperation,
    final_status,
)

LOGGER = logging.getLogger(__name__)


class FileOperationEngine:
    """Single-slot bulk operation runner with a FIFO backlog."""

    def __init__(self, trash: Trash, *, background: bool = True) -> None:
        self._trash = trash
        self._background = background
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._queue: deque[PendingOperation] = deque()
        self._active: PendingOperation | None = None
        self._cancel_active = False
        self._running = False
        self._next_op_id = 1
        self._events: Queue[OperationEvent] = Queue()

    @property
    def active(self) -> PendingOperation | None:
        with self._lock:
            return self._active

    @property
    def queued(self) -> tuple[PendingOperation, ...]:
        with self._lock:
            return tuple(self._queue)

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._running or bool(self._queue)

    def submit_copy(self, sources: Iterable[Path], dest_dir: Path) -> PendingOperation:
        return self._submit(OperationKind.COPY, sources, dest_dir)

    def submit_move(self, sources: Iterable[Path], dest_dir: Path) -> PendingOperation:
        return self._submit(OperationKind.MOVE, sources, dest_dir)

    def submit_delete(self, paths: Iterable[Path]) -> PendingOperation:
        return self._submit(OperationKind.DELETE, paths, None)

    def rename(self, path: Path, new_name: str) -> Path:
        """Rename immediately; raises :class:`NameCollisionError` without touching anything."""
        destination = rename_path(path, new_name)
        LOGGER.info("renamed %s -> %s", path, destination)
        return destination

    def create(self, directory: Path, kind: CreateKind, name: str) -> Path:
        destination = create_path(directory, name, kind)
        LOGGER.info("created %s %s", kind.value, destination)
        return destination

    def chmod(self, path: Path, mode_text: str) -> int:
        mode = chmod_path(path, mode_text)
        LOGGER.info("chmod %o %s", mode, path)
        return mode

    def cancel(self, op_id: int | None = None) -> bool:
        """Cancel ``op_id`` (or the active operation); return whether anything was cancelled.

        A queued operation is dropped before it starts. The active one stops
        before its next item.
        """
        cancelled_queued: PendingOperation | None = None
        with self._lock:
            if self._active is not None and (op_id is None or op_id == self._active.op_id):
                self._cancel_active = True
                LOGGER.info("cancel requested for operation %d", self._active.op_id)
                return True
            for queued in list(self._queue):
                if op_id is not None and queued.op_id == op_id:
                    self._queue.remove(queued)
                    cancelled_queued = self._cancel_all_items(queued)
                    break
        if cancelled_queued is None:
            return False
        LOGGER.info("dropped queued operation %d", cancelled_queued.op_id)
        self._events.put(OperationEvent(cancelled_queued))
        return True

    def drain_events(self) -> list[OperationEvent]:
        out: list[OperationEvent] = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except Empty:
                break
        return out

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no operation is active or queued."""
        with self._idle:
            return self._idle.wait_for(lambda: not self._running and not self._queue, timeout=timeout)

    def _submit(self, kind: OperationKind, sources: Iterable[Path], destination: Path | None) -> PendingOperation:
        items = tuple(OperationItem(source=Path(source)) for source in sources)
        with self._lock:
            operation = PendingOperation(
                op_id=self._next_op_id,
                kind=kind,
                destination=destination,
                items=items,
            )
            self._next_op_id += 1
            self._queue.append(operation)
            start_worker = not self._running
            if start_worker:
                self._running = True
        LOGGER.info("queued %s operation %d (%d items)", kind.value, operation.op_id, len(items))
        self._events.put(OperationEvent(operation))

        if start_worker:
            if self._background:
                threading.Thread(
                    target=self._worker,
                    name="lazyfm-file-operations",
                    daemon=True,
                ).start()
            else:
                self._worker()
        return operation

    @staticmethod
    def _cancel_all_items(operation: PendingOperation) -> PendingOperation:
        for index, item in enumerate(operation.items):
            operation = operation.with_item(index, OperationItem(source=item.source, status=ItemStatus.CANCELLED))
        return operation.with_status(OperationStatus.CANCELLED)

    def _worker(self) -> None:
        while True:
            with self._lock:
                if not self._queue:
                    self._running = False
                    self._active = None
                    self._idle.notify_all()
                    return
                operation = self._queue.popleft().with_status(OperationStatus.RUNNING)
                self._active = operation
                self._cancel_active = False
            self._events.put(OperationEvent(operation))
            finished = self._run_operation(operation)
            with self._lock:
                self._active = None
            LOGGER.info("operation %d finished: %s", finished.op_id, finished.status.value)
            self._events.put(OperationEvent(finished))

    def _run_operation(self, operation: PendingOperation) -> PendingOperation:
        cancelled = False
        for index, item in enumerate(operation.items):
            with self._lock:
                cancelled = self._cancel_active
            if cancelled:
                for rest in range(index, len(operation.items)):
                    operation = operation.with_item(
                        rest,
                        OperationItem(source=operation.items[rest].source, status=ItemStatus.CANCELLED),
                    )
                break

            operation = operation.with_item(index, OperationItem(source=item.source, status=ItemStatus.RUNNING))
            with self._lock:
                self._active = operation
            operation = operation.with_item(index, self._run_item(operation.kind, item.source, operation.destination))
            with self._lock:
                self._active = operation
            self._events.put(OperationEvent(operation))

        return operation.with_status(final_status(operation.items, cancelled))

    def _run_item(self, kind: OperationKind, source: Path, destination: Path | None) -> OperationItem:
        try:
            if kind is OperationKind.COPY:
                result_path = copy_path(source, destination)
            elif kind is OperationKind.MOVE:
                result_path = move_path(source, destination)
            elif kind is OperationKind.DELETE:
                result_path = self._delete_one(source)
            else:
                raise FileManagerError(f"{kind.value} is not a bulk operation")
        except FileManagerError as exc:
            LOGGER.warning("%s failed for %s: %s", kind.value, source, exc)
            return OperationItem(source=source, status=ItemStatus.FAILED, reason=str(exc))
        except OSError as exc:
            reason = exc.strerror or str(exc)
            LOGGER.warning("%s failed for %s: %s", kind.value, source, reason)
            return OperationItem(source=source, status=ItemStatus.FAILED, reason=reason)
        except Exception as exc:
            LOGGER.exception("unexpected %s failure for %s", kind.value, source)
            return OperationItem(source=source, status=ItemStatus.FAILED, reason=str(exc))
        return OperationItem(source=source, status=ItemStatus.DONE, result_path=result_path)

    def _delete_one(self, source: Path) -> Path | None:
        if not path_exists(source):
            LOGGER.debug("delete: %s already absent", source)
            return None
        try:
            self._trash.move_to_trash(source)
        except OSError as exc:
            raise TrashError(f"Cannot trash {source.name}: {exc}", source) from exc
        return None


__all__ = [
    "FileOperationEngine",
]
