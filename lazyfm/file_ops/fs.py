"""Single-path filesystem primitives used by the operation engine.

Rename, create and chmod raise only :mod:`lazyfm.errors` exceptions. Copy,
move and remove may also raise ``OSError``, which the engine records as the
item failure reason. Batch semantics (continue on failure) live in the engine.
"""

from __future__ import annotations

import enum
import errno
import logging
import os
import shutil
from pathlib import Path

from ..errors import (
    FileManagerError,
    FileOperationError,
    InvalidModeError,
    InvalidNameError,
    NameCollisionError,
    NotFoundError,
)

LOGGER = logging.getLogger(__name__)

MAX_COLLISION_SUFFIX = 10_000


class CreateKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"


def path_exists(path: Path) -> bool:
    """Existence check that also counts broken symlinks."""
    return os.path.lexists(path)


def _split_name(name: str, is_dir: bool) -> tuple[str, str]:
    if is_dir:
        return name, ""
    suffix = Path(name).suffix
    if not suffix or suffix == name:
        return name, ""
    return name[: -len(suffix)], suffix


def unique_destination(dest_dir: Path, name: str, is_dir: bool = False) -> Path:
    """Return ``dest_dir / name`` or the first free ``name (N).ext`` with N >= 2."""
    candidate = dest_dir / name
    if not path_exists(candidate):
        return candidate
    stem, suffix = _split_name(name, is_dir)
    for number in range(2, MAX_COLLISION_SUFFIX):
        candidate = dest_dir / f"{stem} ({number}){suffix}"
        if not path_exists(candidate):
            return candidate
    raise NameCollisionError(f"No free name for {name} in {dest_dir}", dest_dir / name)


def validate_name(name: str, *, allow_nested: bool = False) -> str:
    """Return the stripped name or raise :class:`InvalidNameError`."""
    stripped = name.strip()
    if not stripped:
        raise InvalidNameError("Name cannot be empty.")
    if os.path.isabs(stripped):
        raise InvalidNameError(f"Name must be relative: {stripped}")
    parts = Path(stripped).parts
    if not allow_nested and len(parts) != 1:
        raise InvalidNameError(f"Name cannot contain a path separator: {stripped}")
    if any(part in {".", ".."} for part in parts):
        raise InvalidNameError(f"Invalid name: {stripped}")
    return stripped


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def _reject_copy_into_self(source: Path, dest_dir: Path) -> None:
    if not _is_real_dir(source):
        return
    try:
        inside = dest_dir.resolve().is_relative_to(source.resolve())
    except OSError:
        return
    if inside:
        raise FileManagerError(f"Cannot place {source.name} inside itself", source)


def _copy_into(source: Path, destination: Path) -> None:
    if source.is_symlink():
        os.symlink(os.readlink(source), destination)
    elif source.is_dir():
        shutil.copytree(source, destination, symlinks=True)
    else:
        shutil.copy2(source, destination)


def remove_path(path: Path) -> None:
    if _is_real_dir(path):
        shutil.rmtree(path)
    else:
        path.unlink()


def copy_path(source: Path, dest_dir: Path) -> Path:
    """Duplicate ``source`` into ``dest_dir`` and return the new path."""
    if not path_exists(source):
        raise NotFoundError(f"Source no longer exists: {source}", source)
    if not dest_dir.is_dir():
        raise NotFoundError(f"Destination is not a directory: {dest_dir}", dest_dir)
    _reject_copy_into_self(source, dest_dir)
    destination = unique_destination(dest_dir, source.name, _is_real_dir(source))
    _copy_into(source, destination)
    return destination


def move_path(source: Path, dest_dir: Path) -> Path:
    """Relocate ``source`` into ``dest_dir`` and return its new path.

    Falls back to copy-then-delete when the rename crosses filesystems.
    Moving an entry into the directory that already holds it is a no-op.
    """
    if not path_exists(source):
        raise NotFoundError(f"Source no longer exists: {source}", source)
    if not dest_dir.is_dir():
        raise NotFoundError(f"Destination is not a directory: {dest_dir}", dest_dir)
    if source.parent.absolute() == dest_dir.absolute():
        return source
    _reject_copy_into_self(source, dest_dir)
    destination = unique_destination(dest_dir, source.name, _is_real_dir(source))
    try:
        os.rename(source, destination)
        return destination
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise

    LOGGER.info("cross-device move of %s, copying then removing source", source)
    try:
        _copy_into(source, destination)
    except BaseException:
        if path_exists(destination):
            remove_path(destination)
        raise
    remove_path(source)
    return destination


def _operation_error(verb: str, name: str, path: Path, exc: OSError) -> FileOperationError:
    reason = exc.strerror or str(exc)
    return FileOperationError(f"Cannot {verb} {name}: {reason}", path)


def rename_path(path: Path, new_name: str) -> Path:
    """Rename ``path`` within its directory without overwriting."""
    new_name = validate_name(new_name)
    if not path_exists(path):
        raise NotFoundError(f"No such file: {path}", path)
    destination = path.parent / new_name
    if destination == path:
        return path
    if path_exists(destination) and not _same_entry(path, destination):
        raise NameCollisionError(f"{new_name} already exists", destination)
    try:
        os.rename(path, destination)
    except OSError as exc:
        raise _operation_error("rename", path.name, path, exc) from exc
    return destination


def _same_entry(first: Path, second: Path) -> bool:
    """True when both names point at one directory entry (case-only rename)."""
    try:
        return os.path.samefile(first, second) and first.name.casefold() == second.name.casefold()
    except OSError:
        return False


def create_path(directory: Path, name: str, kind: CreateKind) -> Path:
    """Create an empty file or a directory (nested names allowed)."""
    name = validate_name(name, allow_nested=True)
    destination = directory / name
    if path_exists(destination):
        raise NameCollisionError(f"{name} already exists", destination)
    try:
        if kind is CreateKind.DIRECTORY:
            os.makedirs(destination)
            return destination
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, "x", encoding="utf-8"):
            pass
    except FileExistsError as exc:
        if exc.filename is not None and Path(exc.filename) != destination:
            raise _operation_error("create", name, destination, exc) from exc
        raise NameCollisionError(f"{name} already exists", destination) from exc
    except OSError as exc:
        raise _operation_error("create", name, destination, exc) from exc
    return destination


def parse_octal_mode(text: str) -> int:
    """Parse ``"755"``-style text into a mode, rejecting values above ``0o7777``."""
    stripped = text.strip()
    try:
        mode = int(stripped, 8)
    except ValueError as exc:
        raise InvalidModeError(f"Invalid octal mode: {text}") from exc
    if not stripped or mode < 0 or mode > 0o7777:
        raise InvalidModeError(f"Invalid octal mode: {text}")
    return mode


def chmod_path(path: Path, mode_text: str) -> int:
    mode = parse_octal_mode(mode_text)
    if not path_exists(path):
        raise NotFoundError(f"No such file: {path}", path)
    try:
        os.chmod(path, mode)
    except OSError as exc:
        raise _operation_error("chmod", path.name, path, exc) from exc
    return mode


__all__ = [
    "CreateKind",
    "path_exists",
    "unique_destination",
    "validate_name",
    "copy_path",
    "move_path",
    "remove_path",
    "rename_path",
    "create_path",
    "parse_octal_mode",
    "chmod_path",
]
