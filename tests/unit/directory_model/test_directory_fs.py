"""Tests for directory scanning and snapshot loading."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from lazyfm.directory_model import EntryKind, SortMode, load_directory
from lazyfm.errors import DirectoryLoadError, PermissionDeniedError


class LoadDirectoryTests(unittest.TestCase):
    def test_hidden_entries_are_filtered_unless_requested(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".env").write_text("x", encoding="utf-8")
            (root / "visible.txt").write_text("x", encoding="utf-8")

            hidden_off = load_directory(root, SortMode.NAME, False, generation=1)
            hidden_on = load_directory(root, SortMode.NAME, True, generation=2)

            self.assertEqual([entry.name for entry in hidden_off.entries], ["visible.txt"])
            self.assertEqual([entry.name for entry in hidden_on.entries], [".env", "visible.txt"])
            self.assertEqual(hidden_on.generation, 2)

    def test_entries_carry_kind_size_and_mode(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "docs").mkdir()
            payload = root / "data.bin"
            payload.write_bytes(b"12345")
            os.chmod(payload, 0o640)

            snapshot = load_directory(root, SortMode.NAME, False, generation=1)

            docs, data = snapshot.entries
            self.assertEqual(docs.kind, EntryKind.DIRECTORY)
            self.assertTrue(docs.is_dir)
            self.assertEqual(data.kind, EntryKind.FILE)
            self.assertEqual(data.size, 5)
            self.assertEqual(data.permissions_label, "rw-r-----")
            self.assertEqual(snapshot.visible, snapshot.entries)

    @unittest.skipIf(not hasattr(os, "symlink"), "symlinks unavailable")
    def test_broken_symlink_is_listed_not_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "target_dir").mkdir()
            os.symlink(root / "target_dir", root / "good")
            os.symlink(root / "missing", root / "dangling")

            snapshot = load_directory(root, SortMode.NAME, False, generation=1)

            by_name = {entry.name: entry for entry in snapshot.entries}
            self.assertEqual(by_name["good"].kind, EntryKind.SYMLINK)
            self.assertTrue(by_name["good"].is_dir)
            self.assertFalse(by_name["good"].broken_link)
            self.assertTrue(by_name["dangling"].broken_link)
            self.assertFalse(by_name["dangling"].is_dir)
            self.assertEqual(by_name["dangling"].symlink_target, str(root / "missing"))

    def test_missing_directory_raises_load_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(DirectoryLoadError):
                load_directory(Path(tmp) / "gone", SortMode.NAME, False, generation=1)

    @unittest.skipIf(os.name != "posix" or os.geteuid() == 0, "permission bits are not enforced")
    def test_unreadable_directory_raises_permission_denied(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            locked = Path(tmp) / "locked"
            locked.mkdir()
            os.chmod(locked, 0)
            try:
                with self.assertRaises(PermissionDeniedError):
                    load_directory(locked, SortMode.NAME, False, generation=1)
            finally:
                os.chmod(locked, 0o700)


if __name__ == "__main__":
    unittest.main()
