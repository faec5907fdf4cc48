"""Operation records reported by the file-operation engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from pathlib import Path


class OperationKind(enum.Enum):
    COPY = "copy"
    MOVE = "move"
    DELETE = "delete"
    RENAME = "rename"
    CREATE = "create"
    CHMOD = "chmod"


class ItemStatus(enum.Enum):
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class OperationStatus(enum.Enum):
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
    PARTIALLY_FAILED = "partially_failed"
    CANCELLED = "cancelled"

    @property
    def finished(self) -> bool:
        return self not in {OperationStatus.QUEUED, OperationStatus.RUNNING}


@dataclass(frozen=True)
class OperationItem:
    source: Path
    status: ItemStatus = ItemStatus.QUEUED
    result_path: Path | None = None
    reason: str | None = None


@dataclass(frozen=True)
class PendingOperation:
    """Immutable view of one bulk operation at a point in time."""

    op_id: int
    kind: OperationKind
    destination: Path | None
    items: tuple[OperationItem, ...]
    status: OperationStatus = OperationStatus.QUEUED

    @property
    def sources(self) -> tuple[Path, ...]:
        return tuple(item.source for item in self.items)

    @property
    def done_count(self) -> int:
        return sum(1 for item in self.items if item.status is ItemStatus.DONE)

    @property
    def failed_items(self) -> tuple[OperationItem, ...]:
        return tuple(item for item in self.items if item.status is ItemStatus.FAILED)

    @property
    def failure_reasons(self) -> dict[Path, str]:
        return {item.source: item.reason or "failed" for item in self.failed_items}

    def with_item(self, index: int, item: OperationItem) -> PendingOperation:
        items = list(self.items)
        items[index] = item
        return replace(self, items=tuple(items))

    def with_status(self, status: OperationStatus) -> PendingOperation:
        return replace(self, status=status)

    def summary(self) -> str:
        """One-line status-bar text."""
        total = len(self.items)
        verb = self.kind.value.capitalize()
        if self.status is OperationStatus.QUEUED:
            return f"{verb}: queued ({total} items)"
        if self.status is OperationStatus.RUNNING:
            processed = sum(1 for item in self.items if item.status in {ItemStatus.DONE, ItemStatus.FAILED})
            return f"{verb}: {processed}/{total}"
        if self.status is OperationStatus.DONE:
            return f"{verb}: {self.done_count} of {total} done"
        if self.status is OperationStatus.CANCELLED:
            return f"{verb}: cancelled after {self.done_count} of {total}"
        failed = self.failed_items
        if self.status is OperationStatus.FAILED and len(failed) == 1:
            return f"{verb} failed: {failed[0].reason}"
        return f"{verb}: {len(failed)} of {total} failed"


def final_status(items: tuple[OperationItem, ...], cancelled: bool) -> OperationStatus:
    if cancelled:
        return OperationStatus.CANCELLED
    failed = sum(1 for item in items if item.status is ItemStatus.FAILED)
    if failed == 0:
        return OperationStatus.DONE
    if failed == len(items):
        return OperationStatus.FAILED
    return OperationStatus.PARTIALLY_FAILED


@dataclass(frozen=True)
class OperationEvent:
    """Progress notice drained by the foreground loop."""

    operation: PendingOperation

    @property
    def finished(self) -> bool:
        return self.operation.status.finished


__all__ = [
    "OperationKind",
    "ItemStatus",
    "OperationStatus",
    "OperationItem",
    "PendingOperation",
    "OperationEvent",
    "final_status",
]
