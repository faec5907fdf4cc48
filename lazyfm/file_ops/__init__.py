"""File operation engine: copy/move/delete batches plus rename/create/chmod."""

from __future__ import annotations

from .engine import FileOperationEngine
from .fs import CreateKind, parse_octal_mode, unique_destination, validate_name
from .types import (
    ItemStatus,
    OperationEvent,
    OperationItem,
    OperationKind,
    OperationStatus,
    PendingOperation,
)

__all__ = [
    "FileOperationEngine",
    "CreateKind",
    "parse_octal_mode",
    "unique_destination",
    "validate_name",
    "ItemStatus",
    "OperationEvent",
    "OperationItem",
    "OperationKind",
    "OperationStatus",
    "PendingOperation",
]
