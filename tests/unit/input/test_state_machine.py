"""Tests for the multi-key input state machine.

Uses a manual clock so dual-key expiry is deterministic.
"""

from __future__ import annotations

import unittest

from lazyfm.file_ops import CreateKind
from lazyfm.input import actions
from lazyfm.input.state_machine import (
    AwaitingBookmarkArg,
    AwaitingSecondKey,
    BookmarkArgKind,
    ChmodMode,
    CreateMode,
    FilterMode,
    InputStateMachine,
    Normal,
    RenameMode,
    SearchMode,
    SearchResultsMode,
)
from lazyfm.selection import ClipboardMode


class ManualClock:
    def __init__(self) -> None:
        self.now = 100.0

    def monotonic(self) -> float:
        return self.now


def _feed_all(machine: InputStateMachine, *keys: str) -> list[actions.Action]:
    out: list[actions.Action] = []
    for key in keys:
        out.extend(machine.feed(key))
    return out


class DualKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = ManualClock()
        self.machine = InputStateMachine(self.clock, expiry_seconds=0.6)

    def test_gg_within_window_jumps_to_top(self) -> None:
        self.assertEqual(self.machine.feed("g"), [])
        self.assertIsInstance(self.machine.state, AwaitingSecondKey)
        self.clock.now += 0.3

        self.assertEqual(self.machine.feed("g"), [actions.JumpTop()])
        self.assertIsInstance(self.machine.state, Normal)

    def test_expired_prefix_starts_fresh_sequence(self) -> None:
        self.machine.feed("g")
        self.clock.now += 1.0

        self.assertEqual(self.machine.feed("g"), [])
        state = self.machine.state
        self.assertIsInstance(state, AwaitingSecondKey)
        assert isinstance(state, AwaitingSecondKey)
        self.assertEqual(state.expiry, self.clock.now + 0.6)

    def test_tick_expires_pending_prefix(self) -> None:
        self.machine.feed("d")
        self.assertFalse(self.machine.tick())
        self.clock.now += 0.6

        self.assertTrue(self.machine.tick())
        self.assertIsInstance(self.machine.state, Normal)
        self.assertIsNone(self.machine.pending_indicator())

    def test_non_matching_second_key_is_consumed(self) -> None:
        self.machine.feed("g")

        self.assertEqual(self.machine.feed("j"), [])
        self.assertIsInstance(self.machine.state, Normal)

    def test_composite_actions(self) -> None:
        expected = {
            "dd": actions.DeleteSelected(),
            "yy": actions.Yank(ClipboardMode.COPY),
            "pp": actions.Paste(),
        }
        for keys, action in expected.items():
            with self.subTest(keys=keys):
                self.assertEqual(_feed_all(self.machine, *keys), [action])

    def test_pending_indicator_shows_prefix(self) -> None:
        self.machine.feed("y")

        self.assertEqual(self.machine.pending_indicator(), "y")


class SingleKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.machine = InputStateMachine(ManualClock())

    def test_mapped_keys_emit_immediately(self) -> None:
        cases = {
            "j": actions.MoveCursor(1),
            "DOWN": actions.MoveCursor(1),
            "k": actions.MoveCursor(-1),
            "l": actions.EnterSelected(),
            "ENTER_CR": actions.EnterSelected(),
            "h": actions.GoParent(),
            "G": actions.JumpBottom(),
            " ": actions.ToggleSelection(),
            "x": actions.Yank(ClipboardMode.MOVE),
            "s": actions.CycleSort(),
            ".": actions.ToggleHidden(),
            "R": actions.Refresh(),
            "X": actions.CancelOperation(),
            "ESC": actions.ClearSelection(),
            "q": actions.Quit(),
        }
        for key, action in cases.items():
            with self.subTest(key=key):
                self.assertEqual(self.machine.feed(key), [action])
                self.assertIsInstance(self.machine.state, Normal)

    def test_unmapped_key_is_ignored(self) -> None:
        self.assertEqual(self.machine.feed("Z"), [])
        self.assertIsInstance(self.machine.state, Normal)


class BookmarkArgTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = ManualClock()
        self.machine = InputStateMachine(self.clock)

    def test_set_and_jump_take_next_printable_key(self) -> None:
        self.assertEqual(self.machine.feed("m"), [])
        self.assertEqual(self.machine.state, AwaitingBookmarkArg(BookmarkArgKind.SET))
        self.assertEqual(self.machine.feed("a"), [actions.SetBookmark("a")])

        self.machine.feed("'")
        self.assertEqual(self.machine.pending_indicator(), "'")
        self.assertEqual(self.machine.feed("a"), [actions.JumpBookmark("a")])
        self.assertIsInstance(self.machine.state, Normal)

    def test_bookmark_argument_has_no_expiry(self) -> None:
        self.machine.feed("m")
        self.clock.now += 60.0
        self.machine.tick()

        self.assertEqual(self.machine.feed("z"), [actions.SetBookmark("z")])

    def test_escape_cancels_bookmark_argument(self) -> None:
        self.machine.feed("'")

        self.assertEqual(self.machine.feed("ESC"), [])
        self.assertIsInstance(self.machine.state, Normal)


class FilterModeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.machine = InputStateMachine(ManualClock())

    def test_characters_update_live_query(self) -> None:
        self.assertEqual(self.machine.feed("/"), [actions.SetFilterQuery("")])
        self.assertEqual(self.machine.feed("a"), [actions.SetFilterQuery("a")])
        self.assertEqual(self.machine.feed("b"), [actions.SetFilterQuery("ab")])
        self.assertEqual(self.machine.feed("BACKSPACE"), [actions.SetFilterQuery("a")])
        self.assertEqual(self.machine.state, FilterMode("a"))
        self.assertEqual(self.machine.pending_indicator(), "/a")

    def test_letters_are_text_not_commands(self) -> None:
        self.machine.feed("/")

        self.assertEqual(self.machine.feed("g"), [actions.SetFilterQuery("g")])
        self.assertEqual(self.machine.feed("q"), [actions.SetFilterQuery("gq")])
        self.assertIsInstance(self.machine.state, FilterMode)

    def test_enter_commits_and_escape_clears(self) -> None:
        _feed_all(self.machine, "/", "p", "y")
        self.assertEqual(self.machine.feed("ENTER_LF"), [actions.CommitFilter("py")])
        self.assertIsInstance(self.machine.state, Normal)

        _feed_all(self.machine, "/", "x")
        self.assertEqual(self.machine.feed("ESC"), [actions.ClearFilter()])
        self.assertIsInstance(self.machine.state, Normal)

    def test_arrow_keys_move_cursor_while_filtering(self) -> None:
        self.machine.feed("/")

        self.assertEqual(self.machine.feed("DOWN"), [actions.MoveCursor(1)])
        self.assertIsInstance(self.machine.state, FilterMode)


class TextEntryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.machine = InputStateMachine(ManualClock())

    def test_rename_commits_edited_prefill(self) -> None:
        self.assertEqual(self.machine.feed("r"), [actions.BeginRename()])
        self.machine.set_text("old.txt")
        _feed_all(self.machine, "BACKSPACE", "BACKSPACE", "BACKSPACE", "m", "d")

        self.assertEqual(self.machine.state, RenameMode("old.md"))
        self.assertEqual(self.machine.feed("ENTER"), [actions.CommitRename("old.md")])

    def test_create_modes_carry_kind(self) -> None:
        self.assertEqual(self.machine.feed("N"), [actions.BeginCreate(CreateKind.DIRECTORY)])
        _feed_all(self.machine, "s", "r", "c")
        self.assertEqual(self.machine.state, CreateMode(CreateKind.DIRECTORY, "src"))
        self.assertEqual(self.machine.pending_indicator(), "new directory: src")
        self.assertEqual(self.machine.feed("ENTER"), [actions.CommitCreate(CreateKind.DIRECTORY, "src")])

        self.machine.feed("n")
        self.machine.feed("a")
        self.assertEqual(self.machine.feed("ENTER"), [actions.CommitCreate(CreateKind.FILE, "a")])

    def test_escape_discards_input(self) -> None:
        self.machine.feed("n")
        _feed_all(self.machine, "a", "b")

        self.assertEqual(self.machine.feed("ESC"), [actions.CancelInput()])
        self.assertIsInstance(self.machine.state, Normal)

    def test_chmod_accepts_only_octal_digits(self) -> None:
        self.assertEqual(self.machine.feed("c"), [actions.BeginChmod()])
        _feed_all(self.machine, "7", "9", "x", "5", "5", "1", "4")

        self.assertEqual(self.machine.state, ChmodMode("7551"))
        self.assertEqual(self.machine.feed("ENTER"), [actions.CommitChmod("7551")])


class ContentSearchInputTests(unittest.TestCase):
    def setUp(self) -> None:
        self.machine = InputStateMachine(ManualClock())

    def test_query_is_typed_then_committed(self) -> None:
        self.assertEqual(self.machine.feed("F"), [])
        _feed_all(self.machine, "T", "O", "D", "X", "BACKSPACE", "O")

        self.assertEqual(self.machine.state, SearchMode("TODO"))
        self.assertEqual(self.machine.pending_indicator(), "search: TODO")
        self.assertEqual(self.machine.feed("ENTER"), [actions.CommitSearch("TODO")])
        self.assertIsInstance(self.machine.state, SearchResultsMode)

    def test_blank_query_cancels(self) -> None:
        _feed_all(self.machine, "F", " ")

        self.assertEqual(self.machine.feed("ENTER"), [actions.CancelInput()])
        self.assertIsInstance(self.machine.state, Normal)

    def test_result_browsing_keys(self) -> None:
        _feed_all(self.machine, "F", "a", "ENTER")

        self.assertEqual(_feed_all(self.machine, "j", "DOWN"), [actions.MoveSearchCursor(1)] * 2)
        self.assertEqual(_feed_all(self.machine, "k", "UP"), [actions.MoveSearchCursor(-1)] * 2)
        self.assertEqual(
            _feed_all(self.machine, "g", "G"),
            [actions.JumpSearchCursor(to_end=False), actions.JumpSearchCursor(to_end=True)],
        )
        self.assertEqual(self.machine.feed("d"), [])
        self.assertIsInstance(self.machine.state, SearchResultsMode)

    def test_enter_opens_and_q_closes(self) -> None:
        _feed_all(self.machine, "F", "a", "ENTER")
        self.assertEqual(self.machine.feed("ENTER"), [actions.OpenSearchResult()])
        self.assertIsInstance(self.machine.state, Normal)

        _feed_all(self.machine, "F", "a", "ENTER")
        self.assertEqual(self.machine.feed("q"), [actions.CloseSearchResults()])
        self.assertIsInstance(self.machine.state, Normal)



if __name__ == "__main__":
    unittest.main()
