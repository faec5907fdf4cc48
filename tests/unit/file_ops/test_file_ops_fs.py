"""Tests for single-path file operation primitives."""

from __future__ import annotations

import errno
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyfm.errors import (
    FileManagerError,
    FileOperationError,
    InvalidModeError,
    InvalidNameError,
    NameCollisionError,
    NotFoundError,
)
from lazyfm.file_ops import CreateKind, parse_octal_mode, unique_destination, validate_name
from lazyfm.file_ops.fs import chmod_path, copy_path, create_path, move_path, rename_path


class UniqueDestinationTests(unittest.TestCase):
    def test_free_name_is_returned_unchanged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.assertEqual(unique_destination(root, "x.txt"), root / "x.txt")

    def test_collision_appends_suffix_before_extension(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "x.txt").write_text("", encoding="utf-8")

            self.assertEqual(unique_destination(root, "x.txt"), root / "x (2).txt")

    def test_lowest_free_number_fills_gaps(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("x.txt", "x (2).txt", "x (4).txt"):
                (root / name).write_text("", encoding="utf-8")

            self.assertEqual(unique_destination(root, "x.txt"), root / "x (3).txt")

    def test_directories_and_dotfiles_have_no_extension_split(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "v1.2").mkdir()
            (root / ".env").write_text("", encoding="utf-8")

            self.assertEqual(unique_destination(root, "v1.2", is_dir=True), root / "v1.2 (2)")
            self.assertEqual(unique_destination(root, ".env"), root / ".env (2)")


class NameValidationTests(unittest.TestCase):
    def test_names_are_stripped(self) -> None:
        self.assertEqual(validate_name("  notes.md "), "notes.md")

    def test_invalid_names_are_rejected(self) -> None:
        for name in ("", "   ", "..", "/etc/passwd", "a/b"):
            with self.subTest(name=name):
                with self.assertRaises(InvalidNameError):
                    validate_name(name)

    def test_nested_names_allowed_on_request(self) -> None:
        self.assertEqual(validate_name("a/b.txt", allow_nested=True), "a/b.txt")
        with self.assertRaises(InvalidNameError):
            validate_name("a/../b", allow_nested=True)


class RenameCreateTests(unittest.TestCase):
    def test_rename_collision_leaves_both_entries_untouched(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "a.txt"
            taken = root / "b.txt"
            source.write_text("source", encoding="utf-8")
            taken.write_text("taken", encoding="utf-8")

            with self.assertRaises(NameCollisionError):
                rename_path(source, "b.txt")

            self.assertEqual(source.read_text(encoding="utf-8"), "source")
            self.assertEqual(taken.read_text(encoding="utf-8"), "taken")

    def test_rename_moves_entry_within_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "a.txt"
            source.write_text("data", encoding="utf-8")

            destination = rename_path(source, "renamed.txt")

            self.assertEqual(destination, root / "renamed.txt")
            self.assertFalse(source.exists())
            self.assertEqual(destination.read_text(encoding="utf-8"), "data")

    def test_rename_missing_source_raises_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(NotFoundError):
                rename_path(Path(tmp) / "gone.txt", "other.txt")

    def test_create_file_and_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)

            new_file = create_path(root, "notes.md", CreateKind.FILE)
            new_dir = create_path(root, "pkg/sub", CreateKind.DIRECTORY)

            self.assertTrue(new_file.is_file())
            self.assertTrue(new_dir.is_dir())

    def test_create_collision_raises_without_overwriting(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            existing = root / "notes.md"
            existing.write_text("keep", encoding="utf-8")

            with self.assertRaises(NameCollisionError):
                create_path(root, "notes.md", CreateKind.FILE)
            with self.assertRaises(NameCollisionError):
                create_path(root, "notes.md", CreateKind.DIRECTORY)
            self.assertEqual(existing.read_text(encoding="utf-8"), "keep")

    def test_create_name_too_long_reports_operation_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)

            with self.assertRaises(FileOperationError) as ctx:
                create_path(root, "z" * 300, CreateKind.FILE)

            self.assertTrue(ctx.exception.message.startswith("Cannot create "))
            self.assertEqual(list(root.iterdir()), [])

    def test_create_under_existing_file_reports_operation_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("keep", encoding="utf-8")

            for kind in (CreateKind.FILE, CreateKind.DIRECTORY):
                with self.subTest(kind=kind):
                    with self.assertRaises(FileOperationError):
                        create_path(root, "a.txt/b", kind)

            self.assertEqual((root / "a.txt").read_text(encoding="utf-8"), "keep")

    def test_rename_refused_by_os_reports_operation_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "a.txt"
            source.write_text("a", encoding="utf-8")
            denied = OSError(errno.EACCES, os.strerror(errno.EACCES))

            with mock.patch("lazyfm.file_ops.fs.os.rename", side_effect=denied):
                with self.assertRaises(FileOperationError) as ctx:
                    rename_path(source, "b.txt")

            self.assertEqual(ctx.exception.message, f"Cannot rename a.txt: {os.strerror(errno.EACCES)}")
            self.assertTrue(source.exists())


class CopyMoveTests(unittest.TestCase):
    def test_copy_directory_recursively(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "src" / "tree"
            (source / "inner").mkdir(parents=True)
            (source / "inner" / "f.txt").write_text("deep", encoding="utf-8")
            dest = root / "dest"
            dest.mkdir()

            copied = copy_path(source, dest)

            self.assertEqual((copied / "inner" / "f.txt").read_text(encoding="utf-8"), "deep")
            self.assertTrue(source.exists())

    def test_copy_directory_into_itself_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "tree"
            (source / "inner").mkdir(parents=True)

            with self.assertRaises(FileManagerError):
                copy_path(source, source / "inner")

    def test_copy_missing_source_raises_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(NotFoundError):
                copy_path(Path(tmp) / "gone", Path(tmp))

    def test_move_into_same_directory_is_noop(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "a.txt"
            source.write_text("x", encoding="utf-8")

            self.assertEqual(move_path(source, Path(tmp)), source)
            self.assertTrue(source.exists())

    def test_move_never_overwrites_existing_destination(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "src").mkdir()
            (root / "dest").mkdir()
            source = root / "src" / "a.txt"
            source.write_text("moved", encoding="utf-8")
            (root / "dest" / "a.txt").write_text("original", encoding="utf-8")

            moved = move_path(source, root / "dest")

            self.assertEqual(moved, root / "dest" / "a (2).txt")
            self.assertEqual((root / "dest" / "a.txt").read_text(encoding="utf-8"), "original")
            self.assertFalse(source.exists())

    def test_cross_device_move_falls_back_to_copy_then_delete(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "src").mkdir()
            (root / "dest").mkdir()
            source = root / "src" / "a.txt"
            source.write_text("payload", encoding="utf-8")
            exdev = OSError(errno.EXDEV, os.strerror(errno.EXDEV))

            with mock.patch("lazyfm.file_ops.fs.os.rename", side_effect=exdev):
                moved = move_path(source, root / "dest")

            self.assertEqual(moved.read_text(encoding="utf-8"), "payload")
            self.assertFalse(source.exists())

    def test_other_rename_errors_propagate(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "src").mkdir()
            (root / "dest").mkdir()
            source = root / "src" / "a.txt"
            source.write_text("payload", encoding="utf-8")
            denied = OSError(errno.EACCES, os.strerror(errno.EACCES))

            with mock.patch("lazyfm.file_ops.fs.os.rename", side_effect=denied):
                with self.assertRaises(OSError):
                    move_path(source, root / "dest")

            self.assertTrue(source.exists())


class ChmodTests(unittest.TestCase):
    def test_parse_octal_mode(self) -> None:
        self.assertEqual(parse_octal_mode("755"), 0o755)
        self.assertEqual(parse_octal_mode(" 0644 "), 0o644)
        for text in ("", "9", "abc", "17777"):
            with self.subTest(text=text):
                with self.assertRaises(InvalidModeError):
                    parse_octal_mode(text)

    @unittest.skipIf(os.name != "posix", "POSIX permission bits required")
    def test_chmod_applies_mode(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "script.sh"
            target.write_text("#!/bin/sh\n", encoding="utf-8")

            self.assertEqual(chmod_path(target, "750"), 0o750)
            self.assertEqual(target.stat().st_mode & 0o7777, 0o750)

    def test_chmod_refused_by_os_reports_operation_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.txt"
            target.write_text("a", encoding="utf-8")
            denied = PermissionError(errno.EPERM, os.strerror(errno.EPERM))

            with mock.patch("lazyfm.file_ops.fs.os.chmod", side_effect=denied):
                with self.assertRaises(FileOperationError):
                    chmod_path(target, "600")


if __name__ == "__main__":
    unittest.main()
