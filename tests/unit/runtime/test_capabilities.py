"""Tests for the default system capabilities."""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from lazyfm.errors import ClipboardError, OpenError, TrashError
from lazyfm.runtime.capabilities import SendToTrash, SystemOpener, SystemTextClipboard


class SendToTrashTests(unittest.TestCase):
    def test_delegates_to_send2trash(self) -> None:
        with mock.patch("lazyfm.runtime.capabilities.send2trash") as send:
            SendToTrash().move_to_trash(Path("/tmp/doomed.txt"))

        send.assert_called_once_with("/tmp/doomed.txt")

    def test_os_error_becomes_trash_error(self) -> None:
        with mock.patch("lazyfm.runtime.capabilities.send2trash", side_effect=OSError("read-only")):
            with self.assertRaises(TrashError) as ctx:
                SendToTrash().move_to_trash(Path("/tmp/doomed.txt"))

        self.assertIn("doomed.txt", ctx.exception.message)
        self.assertEqual(ctx.exception.path, Path("/tmp/doomed.txt"))


class SystemOpenerTests(unittest.TestCase):
    def test_missing_opener_raises_open_error(self) -> None:
        with mock.patch("lazyfm.runtime.capabilities.os.name", "posix"), mock.patch(
            "lazyfm.runtime.capabilities._opener_command", return_value=None
        ):
            with self.assertRaises(OpenError) as ctx:
                SystemOpener().open(Path("/tmp/a.txt"))

        self.assertEqual(ctx.exception.message, "No system opener available.")

    def test_launches_detached_process(self) -> None:
        with mock.patch("lazyfm.runtime.capabilities.os.name", "posix"), mock.patch(
            "lazyfm.runtime.capabilities._opener_command", return_value=["xdg-open"]
        ), mock.patch("lazyfm.runtime.capabilities.subprocess.Popen") as popen:
            SystemOpener().open(Path("/tmp/a.txt"))

        args, kwargs = popen.call_args
        self.assertEqual(args[0], ["xdg-open", "/tmp/a.txt"])
        self.assertTrue(kwargs["start_new_session"])

    def test_spawn_failure_raises_open_error(self) -> None:
        with mock.patch("lazyfm.runtime.capabilities.os.name", "posix"), mock.patch(
            "lazyfm.runtime.capabilities._opener_command", return_value=["xdg-open"]
        ), mock.patch("lazyfm.runtime.capabilities.subprocess.Popen", side_effect=OSError("boom")):
            with self.assertRaises(OpenError):
                SystemOpener().open(Path("/tmp/a.txt"))


class SystemTextClipboardTests(unittest.TestCase):
    def _patch_tools(self, *available: str):
        commands = [["first-tool"], ["second-tool", "--in"]]
        return (
            mock.patch("lazyfm.runtime.capabilities._clipboard_commands", return_value=commands),
            mock.patch(
                "lazyfm.runtime.capabilities.shutil.which",
                side_effect=lambda name: f"/usr/bin/{name}" if name in available else None,
            ),
        )

    def test_skips_missing_tool_and_pipes_text(self) -> None:
        commands, which = self._patch_tools("second-tool")
        with commands, which, mock.patch("lazyfm.runtime.capabilities.subprocess.run") as run:
            run.return_value.returncode = 0
            SystemTextClipboard().copy("/tmp/a.txt")

        run.assert_called_once_with(["second-tool", "--in"], input="/tmp/a.txt", text=True, check=False)

    def test_falls_through_failing_tools_to_clipboard_error(self) -> None:
        commands, which = self._patch_tools("first-tool", "second-tool")
        with commands, which, mock.patch(
            "lazyfm.runtime.capabilities.subprocess.run", side_effect=[OSError("gone"), mock.Mock(returncode=1)]
        ) as run:
            with self.assertRaises(ClipboardError):
                SystemTextClipboard().copy("/tmp/a.txt")

        self.assertEqual(run.call_count, 2)



if __name__ == "__main__":
    unittest.main()
