"""Foreground session context.

A :class:`Session` owns every piece of mutable UI state (tabs, selection,
clipboard, bookmarks, input mode, content search) and is only touched from
the foreground loop. Slow work goes to the task runner or the file operation
engine; their results are drained in :meth:`Session.tick` and dropped when
their generation is stale. A new :class:`ViewState` is emitted after every
change.

Each tab owns its navigation, selection and preview. Background task keys
carry the tab id so a result always lands in the tab that asked for it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from functools import partial
from pathlib import Path

from ..bookmarks import BookmarkStore
from ..directory_model import DirectorySnapshot, DirectoryWatcher, PollingDirectoryWatcher, load_directory
from ..errors import FileManagerError
from ..file_ops import FileOperationEngine, ItemStatus, OperationKind, OperationStatus, PendingOperation
from ..git_status import GitStatusCache, GitStatusResult, collect_directory_git_status
from ..input import actions
from ..input.state_machine import InputStateMachine, SearchResultsMode
from ..logging_setup import configure_logging
from ..search import ContentSearchResult, search_directory_content
from ..selection import Clipboard, ClipboardMode, SelectionSet, yank
from .capabilities import (
    Clock,
    Opener,
    PreviewProvider,
    SendToTrash,
    SystemClock,
    SystemOpener,
    SystemTextClipboard,
    TextClipboard,
    Trash,
)
from .config import AppConfig, load_app_config, load_bookmarks, save_bookmarks
from .navigation import PANE_CURRENT, PANE_PARENT, LoadRequest, NavigationController
from .tabs import Tab, TabSet
from .tasks import (
    TASK_CONTENT_SEARCH,
    TASK_GIT_STATUS,
    TASK_LISTING,
    TASK_PARENT_LISTING,
    TASK_PREVIEW,
    BackgroundTaskRunner,
    TaskRequest,
    TaskResult,
    TaskRunner,
)
from .view_state import PaneView, PreviewView, SearchView, ViewState

LOGGER = logging.getLogger(__name__)

ViewListener = Callable[[ViewState], None]

_LISTING_TASK_KEYS = {PANE_CURRENT: TASK_LISTING, PANE_PARENT: TASK_PARENT_LISTING}
_PANE_BY_TASK_KEY = {value: key for key, value in _LISTING_TASK_KEYS.items()}


def _git_task_kind(pane: str) -> str:
    return f"{TASK_GIT_STATUS}:{pane}"


def _tab_task_key(kind: str, tab: Tab) -> str:
    return f"{kind}:{tab.tab_id}"


def _error_message(error: Exception | None) -> str:
    return error.message if isinstance(error, FileManagerError) else str(error)


class Session:
    """Explicit context threaded through every component call."""

    def __init__(
        self,
        start_path: Path,
        *,
        opener: Opener,
        trash: Trash,
        clock: Clock,
        runner: TaskRunner,
        config: AppConfig | None = None,
        engine: FileOperationEngine | None = None,
        watcher: DirectoryWatcher | None = None,
        preview_provider: PreviewProvider | None = None,
        bookmarks: BookmarkStore | None = None,
        git_cache: GitStatusCache | None = None,
        git_status: Callable[[Path], GitStatusResult | None] | None = collect_directory_git_status,
        text_clipboard: TextClipboard | None = None,
        on_bookmarks_changed: Callable[[dict[str, Path]], None] | None = None,
        expiry_seconds: float | None = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()
        self.start_path = start_path
        self._opener = opener
        self._next_tab_id = 1
        self.tabs = TabSet(
            self._new_tab(
                NavigationController(
                    opener,
                    sort_mode=self.config.sort_by,
                    show_hidden=self.config.show_hidden,
                )
            )
        )
        self.clipboard: Clipboard | None = None
        self.bookmarks = bookmarks if bookmarks is not None else BookmarkStore()
        self.machine = InputStateMachine(clock)
        if expiry_seconds is not None:
            self.machine.expiry_seconds = expiry_seconds
        self.engine = engine if engine is not None else FileOperationEngine(trash)
        self.runner = runner
        self.watcher = watcher
        self.git_cache = git_cache if git_cache is not None else GitStatusCache()
        self._git_status = git_status
        self._preview_provider = preview_provider
        self._text_clipboard = text_clipboard
        self._on_bookmarks_changed = on_bookmarks_changed

        self.running = True
        self.status_message: str | None = None
        self.operation: PendingOperation | None = None
        self._listeners: list[ViewListener] = []
        self._view: ViewState | None = None
        self._watched: set[Path] = set()
        self._move_pastes: dict[int, Clipboard] = {}
        self._input_target: Path | None = None
        self._search: SearchView | None = None
        self._search_generation = 0

    def _new_tab(self, navigation: NavigationController) -> Tab:
        tab = Tab(tab_id=self._next_tab_id, navigation=navigation)
        self._next_tab_id += 1
        return tab

    # public surface

    @property
    def active_tab(self) -> Tab:
        return self.tabs.active

    @property
    def navigation(self) -> NavigationController:
        return self.tabs.active.navigation

    @property
    def selection(self) -> SelectionSet:
        return self.tabs.active.selection

    @property
    def view(self) -> ViewState:
        if self._view is None:
            self._view = self._build_view()
        return self._view

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def start(self) -> ViewState:
        self._submit_loads(self.active_tab, self.navigation.start(self.start_path))
        self._pump()
        return self._emit()

    def handle_key(self, key: str) -> ViewState:
        """Feed one key through the input state machine and apply the resulting actions."""
        self.status_message = None
        for action in self.machine.feed(key):
            self.dispatch(action)
        self._pump()
        return self._emit()

    def tick(self) -> ViewState:
        """Expire pending input, poll watched directories, and drain background results."""
        self.machine.tick()
        if self.watcher is not None:
            for directory in self.watcher.poll():
                self.git_cache.invalidate(directory)
                for tab in self.tabs:
                    self._submit_loads(tab, tab.navigation.reload_if_showing(directory))
        self._pump()
        return self._emit()

    def dispatch(self, action: actions.Action) -> None:
        """Apply one action; domain errors become a status message."""
        try:
            self._dispatch(action)
        except FileManagerError as exc:
            LOGGER.info("%s failed: %s", type(action).__name__, exc)
            self.status_message = exc.message
            self._input_target = None
        self._sync_background_requests()

    # action handlers

    def _dispatch(self, action: actions.Action) -> None:
        nav = self.navigation
        if isinstance(action, actions.MoveCursor):
            nav.move_cursor(action.delta)
        elif isinstance(action, actions.JumpTop):
            nav.jump_top()
        elif isinstance(action, actions.JumpBottom):
            nav.jump_bottom()
        elif isinstance(action, actions.EnterSelected):
            self._enter_selected()
        elif isinstance(action, actions.GoParent):
            self._submit_loads(self.active_tab, nav.go_parent())
        elif isinstance(action, actions.ToggleSelection):
            entry = nav.selected_entry()
            if entry is not None:
                self.selection.toggle(entry.path)
                if action.advance:
                    nav.move_cursor(1)
        elif isinstance(action, actions.ClearSelection):
            self.selection.clear()
        elif isinstance(action, actions.Yank):
            self._yank(action)
        elif isinstance(action, actions.Paste):
            self._paste()
        elif isinstance(action, actions.DeleteSelected):
            self._delete()
        elif isinstance(action, actions.SetBookmark):
            self._set_bookmark(action.key)
        elif isinstance(action, actions.JumpBookmark):
            target = self.bookmarks.resolve(action.key)
            self._submit_loads(self.active_tab, nav.enter_directory(target))
        elif isinstance(action, (actions.SetFilterQuery, actions.CommitFilter)):
            nav.set_filter_query(action.query)
        elif isinstance(action, actions.ClearFilter):
            nav.set_filter_query("")
        elif isinstance(action, actions.BeginRename):
            self._begin_rename()
        elif isinstance(action, actions.CommitRename):
            self._commit_rename(action.new_name)
        elif isinstance(action, actions.BeginCreate):
            if nav.current is None or nav.current.loading:
                self.machine.reset()
                self.status_message = "Directory is still loading"
        elif isinstance(action, actions.CommitCreate):
            self._commit_create(action)
        elif isinstance(action, actions.BeginChmod):
            self._begin_chmod()
        elif isinstance(action, actions.CommitChmod):
            self._commit_chmod(action.mode_text)
        elif isinstance(action, actions.CancelInput):
            self._input_target = None
        elif isinstance(action, actions.CycleSort):
            nav.set_sort_mode(nav.sort_mode.next())
            self.status_message = f"Sort: {nav.sort_mode.value}"
        elif isinstance(action, actions.ToggleHidden):
            self._submit_loads(self.active_tab, nav.set_show_hidden(not nav.show_hidden))
        elif isinstance(action, actions.Refresh):
            self._invalidate_shown_git_status(self.active_tab)
            self._submit_loads(self.active_tab, nav.refresh())
        elif isinstance(action, actions.CancelOperation):
            cancelled = self.engine.cancel()
            self.status_message = "Cancelling operation" if cancelled else "No operation running"
        elif isinstance(action, actions.CopyPath):
            self._copy_path()
        elif isinstance(action, actions.CommitSearch):
            self._commit_search(action.query)
        elif isinstance(action, actions.MoveSearchCursor):
            self._move_search_cursor(action.delta)
        elif isinstance(action, actions.JumpSearchCursor):
            self._jump_search_cursor(action.to_end)
        elif isinstance(action, actions.OpenSearchResult):
            self._open_search_result()
        elif isinstance(action, actions.CloseSearchResults):
            self._close_search()
        elif isinstance(action, actions.OpenTab):
            self._open_tab()
        elif isinstance(action, actions.CloseTab):
            self._close_tab()
        elif isinstance(action, actions.NextTab):
            if len(self.tabs) > 1:
                self.tabs.next()
        elif isinstance(action, actions.PreviousTab):
            if len(self.tabs) > 1:
                self.tabs.previous()
        elif isinstance(action, actions.SwitchTab):
            self.tabs.activate(action.index)
        elif isinstance(action, actions.Quit):
            self.running = False
        else:
            LOGGER.warning("unhandled action %r", action)

    def _enter_selected(self) -> None:
        entry = self.navigation.selected_entry()
        if entry is None:
            return
        if entry.is_dir:
            self._submit_loads(self.active_tab, self.navigation.enter_directory(entry))
        else:
            self.navigation.enter_file(entry)

    def _yank(self, action: actions.Yank) -> None:
        current = self.navigation.current
        if current is None:
            return
        entry = self.navigation.selected_entry()
        clipboard = yank(action.mode, self.selection, None if entry is None else entry.path, current.path)
        if clipboard is None:
            self.status_message = "Nothing to yank"
            return
        self.clipboard = clipboard
        self.selection.clear()
        self.status_message = f"Yanked {clipboard.summary()}"

    def _paste(self) -> None:
        clipboard = self.clipboard
        current = self.navigation.current
        if clipboard is None:
            self.status_message = "Clipboard is empty"
            return
        if current is None:
            return
        if clipboard.mode is ClipboardMode.MOVE:
            operation = self.engine.submit_move(clipboard.paths, current.path)
            self._move_pastes[operation.op_id] = clipboard
        else:
            operation = self.engine.submit_copy(clipboard.paths, current.path)
        self.operation = operation

    def _delete(self) -> None:
        if self.selection:
            paths = tuple(self.selection)
        else:
            entry = self.navigation.selected_entry()
            if entry is None:
                self.status_message = "Nothing to delete"
                return
            paths = (entry.path,)
        self.operation = self.engine.submit_delete(paths)

    def _set_bookmark(self, key: str) -> None:
        current = self.navigation.current
        if current is None:
            return
        self.bookmarks.set(key, current.path)
        self.status_message = f"Bookmark '{key}' set to {current.path}"
        if self._on_bookmarks_changed is not None:
            self._on_bookmarks_changed(self.bookmarks.items())

    def _begin_rename(self) -> None:
        entry = self.navigation.selected_entry()
        if entry is None:
            self.machine.reset()
            self.status_message = "Nothing to rename"
            return
        self._input_target = entry.path
        self.machine.set_text(entry.name)

    def _commit_rename(self, new_name: str) -> None:
        target = self._input_target
        self._input_target = None
        if target is None:
            return
        destination = self.engine.rename(target, new_name)
        for tab in self.tabs:
            if target in tab.selection:
                tab.selection.discard(target)
                tab.selection.toggle(destination)
        self._after_immediate_change(destination)

    def _commit_create(self, action: actions.CommitCreate) -> None:
        current = self.navigation.current
        if current is None:
            return
        destination = self.engine.create(current.path, action.kind, action.name)
        self._after_immediate_change(destination)

    def _begin_chmod(self) -> None:
        entry = self.navigation.selected_entry()
        if entry is None:
            self.machine.reset()
            self.status_message = "Nothing to chmod"
            return
        self._input_target = entry.path
        self.machine.set_text(f"{entry.mode & 0o7777:o}" if entry.mode else "")

    def _commit_chmod(self, mode_text: str) -> None:
        target = self._input_target
        self._input_target = None
        if target is None:
            return
        mode = self.engine.chmod(target, mode_text)
        self.status_message = f"Mode of {target.name} set to {mode:o}"
        self._after_immediate_change(target)

    def _after_immediate_change(self, focus: Path) -> None:
        tab = self.active_tab
        self._invalidate_shown_git_status(tab)
        self._submit_loads(tab, tab.navigation.refresh(focus=focus))

    def _copy_path(self) -> None:
        entry = self.navigation.selected_entry()
        if entry is None:
            self.status_message = "Nothing to copy"
            return
        if self._text_clipboard is None:
            self.status_message = "Clipboard is unavailable"
            return
        self._text_clipboard.copy(str(entry.path))
        self.status_message = f"Path copied: {entry.path}"

    # content search

    def _commit_search(self, query: str) -> None:
        nav = self.navigation
        root = nav.path
        if root is None:
            self.machine.reset()
            self.status_message = "Directory is still loading"
            return
        self._search_generation += 1
        self._search = SearchView(query=query, root=root, loading=True)
        self.status_message = f'Searching for "{query}"'
        self.runner.submit(
            TaskRequest(
                key=TASK_CONTENT_SEARCH,
                path=root,
                generation=self._search_generation,
                work=partial(search_directory_content, root, query, show_hidden=nav.show_hidden),
            )
        )

    def _move_search_cursor(self, delta: int) -> None:
        search = self._search
        if search is None or not search.matches:
            return
        cursor = max(0, min(len(search.matches) - 1, search.cursor + delta))
        self._search = replace(search, cursor=cursor)

    def _jump_search_cursor(self, to_end: bool) -> None:
        search = self._search
        if search is None or not search.matches:
            return
        self._search = replace(search, cursor=len(search.matches) - 1 if to_end else 0)

    def _open_search_result(self) -> None:
        search = self._search
        match = None if search is None else search.selected()
        self._close_search()
        if match is None:
            return
        self._submit_loads(self.active_tab, self.navigation.reveal(match.path))
        self.status_message = f"Opened: {match.path}"

    def _close_search(self) -> None:
        self._search = None
        self._search_generation += 1
        if isinstance(self.machine.state, SearchResultsMode):
            self.machine.reset()

    def _apply_search_result(self, result: TaskResult) -> None:
        search = self._search
        if search is None or result.generation != self._search_generation:
            LOGGER.debug("dropping stale content search under %s", result.path)
            return
        if not result.ok or not isinstance(result.payload, ContentSearchResult):
            self.status_message = _error_message(result.error)
            self._close_search()
            return
        found = result.payload
        if not found.matches:
            self.status_message = f'No results for "{found.query}"'
            self._close_search()
            return
        self._search = replace(search, matches=found.matches, cursor=0, loading=False, truncated=found.truncated)
        self.status_message = f'{len(found.matches)} results for "{found.query}"'
        if found.truncated:
            self.status_message += " (truncated)"

    # tabs

    def _open_tab(self) -> None:
        nav = self.navigation
        path = nav.path
        if path is None:
            self.status_message = "Directory is still loading"
            return
        tab = self._new_tab(NavigationController(self._opener, sort_mode=nav.sort_mode, show_hidden=nav.show_hidden))
        self.tabs.open(tab)
        self._submit_loads(tab, tab.navigation.start(path))
        self.status_message = f"Tab {self.tabs.active_index + 1} opened"

    def _close_tab(self) -> None:
        closed = self.tabs.close_active()
        if closed is None:
            self.running = False
            return
        LOGGER.debug("closed tab %d at %s", closed.tab_id, closed.navigation.path)
        self._sync_watches()
        self.status_message = f"Tab closed ({len(self.tabs)} remaining)"

    # background plumbing

    def _submit_loads(self, tab: Tab, requests: list[LoadRequest]) -> None:
        for request in requests:
            self.runner.submit(
                TaskRequest(
                    key=_tab_task_key(_LISTING_TASK_KEYS[request.pane], tab),
                    path=request.path,
                    generation=request.generation,
                    work=partial(
                        load_directory,
                        request.path,
                        request.sort_mode,
                        request.show_hidden,
                        request.generation,
                    ),
                )
            )

    def _invalidate_shown_git_status(self, tab: Tab) -> None:
        for snapshot in (tab.navigation.current, tab.navigation.parent):
            if snapshot is not None:
                self.git_cache.invalidate(snapshot.path)

    def _request_git_status(self, tab: Tab, pane: str, snapshot: DirectorySnapshot | None) -> None:
        if self._git_status is None or snapshot is None or snapshot.loading or snapshot.git_statuses_applied:
            return
        key = (snapshot.path, snapshot.generation)
        if key in tab.git_requested:
            return
        tab.git_requested.add(key)

        cached = self.git_cache.lookup(snapshot.path)
        if cached is not None:
            tab.navigation.apply_git_status(snapshot.path, snapshot.generation, cached)
            return
        self.runner.submit(
            TaskRequest(
                key=_tab_task_key(_git_task_kind(pane), tab),
                path=snapshot.path,
                generation=snapshot.generation,
                work=partial(self._git_status, snapshot.path),
            )
        )

    def _request_preview(self, tab: Tab) -> None:
        nav = tab.navigation
        current = nav.current
        entry = nav.selected_entry()
        if current is None or entry is None:
            tab.preview_key = None
            tab.preview = PreviewView()
            return
        key = (entry.path, current.generation)
        if key == tab.preview_key:
            return
        tab.preview_key = key
        tab.preview_generation += 1

        if entry.is_dir:
            work = partial(load_directory, entry.path, nav.sort_mode, nav.show_hidden, 0)
        elif self._preview_provider is not None:
            work = partial(self._preview_provider.preview, entry.path)
        else:
            tab.preview = PreviewView(path=entry.path)
            return
        tab.preview = PreviewView(path=entry.path, loading=True)
        self.runner.submit(
            TaskRequest(
                key=_tab_task_key(TASK_PREVIEW, tab),
                path=entry.path,
                generation=tab.preview_generation,
                work=work,
            )
        )

    def _sync_watches(self) -> None:
        if self.watcher is None:
            return
        wanted = {
            snapshot.path
            for tab in self.tabs
            for snapshot in (tab.navigation.current, tab.navigation.parent)
            if snapshot is not None and not snapshot.loading
        }
        for directory in self._watched - wanted:
            self.watcher.unwatch(directory)
        for directory in wanted - self._watched:
            self.watcher.watch(directory)
        self._watched = wanted

    def _sync_background_requests(self) -> None:
        tab = self.active_tab
        # only snapshots still on screen can receive a git result
        tab.git_requested &= tab.live_snapshot_keys()
        self._request_git_status(tab, PANE_CURRENT, tab.navigation.current)
        self._request_git_status(tab, PANE_PARENT, tab.navigation.parent)
        self._request_preview(tab)

    def _apply_task_result(self, result: TaskResult) -> None:
        if result.key == TASK_CONTENT_SEARCH:
            self._apply_search_result(result)
            return
        kind, _, tab_id = result.key.rpartition(":")
        tab = self.tabs.find(int(tab_id)) if tab_id.isdigit() else None
        if tab is None:
            LOGGER.debug("dropping %s result for a closed tab", result.key)
        elif kind in _PANE_BY_TASK_KEY:
            self._apply_listing_result(tab, _PANE_BY_TASK_KEY[kind], result)
        elif kind.startswith(TASK_GIT_STATUS):
            self._apply_git_result(tab, result)
        elif kind == TASK_PREVIEW:
            self._apply_preview_result(tab, result)
        else:
            LOGGER.warning("unknown task result %s", result.key)

    def _apply_listing_result(self, tab: Tab, pane: str, result: TaskResult) -> None:
        nav = tab.navigation
        if result.ok and isinstance(result.payload, DirectorySnapshot):
            if nav.apply_load_result(pane, result.payload):
                self._sync_watches()
            return
        requests = nav.apply_load_failure(pane, result.path, result.generation)
        if requests is None:
            return
        if pane == PANE_CURRENT and tab is self.active_tab:
            self.status_message = _error_message(result.error)
        self._submit_loads(tab, requests)
        self._sync_watches()

    def _apply_git_result(self, tab: Tab, result: TaskResult) -> None:
        if not result.ok or not isinstance(result.payload, GitStatusResult):
            return
        if tab.navigation.apply_git_status(result.path, result.generation, result.payload):
            self.git_cache.store(result.path, result.payload)

    def _apply_preview_result(self, tab: Tab, result: TaskResult) -> None:
        if result.generation != tab.preview_generation or result.path != tab.preview.path:
            LOGGER.debug("dropping stale preview for %s", result.path)
            return
        if not result.ok:
            tab.preview = PreviewView(path=result.path, error=_error_message(result.error))
        elif isinstance(result.payload, DirectorySnapshot):
            tab.preview = PreviewView(path=result.path, entries=result.payload.visible)
        else:
            tab.preview = PreviewView(path=result.path, content=result.payload)

    def _apply_operation(self, operation: PendingOperation) -> None:
        self.operation = operation
        if not operation.status.finished:
            return

        clipboard = self._move_pastes.pop(operation.op_id, None)
        if operation.kind in (OperationKind.MOVE, OperationKind.DELETE):
            for item in operation.items:
                if item.status is ItemStatus.DONE:
                    for tab in self.tabs:
                        tab.selection.discard(item.source)
        if clipboard is not None and self.clipboard is clipboard:
            if operation.status is OperationStatus.DONE:
                self.clipboard = None
            else:
                unmoved = [item.source for item in operation.items if item.status is not ItemStatus.DONE]
                self.clipboard = clipboard.retain(unmoved)

        self.status_message = operation.summary()
        if operation.status is not OperationStatus.CANCELLED or operation.done_count:
            for tab in self.tabs:
                self._invalidate_shown_git_status(tab)
                self._submit_loads(tab, tab.navigation.refresh())

    def _pump(self) -> None:
        """Drain task results and operation events until both channels are empty."""
        while True:
            results = self.runner.drain_results()
            events = self.engine.drain_events()
            if not results and not events:
                break
            for result in results:
                self._apply_task_result(result)
            for event in events:
                self._apply_operation(event.operation)
            self._sync_background_requests()

    # view

    def _build_view(self) -> ViewState:
        tab = self.active_tab
        nav = tab.navigation
        current, parent = nav.current, nav.parent
        parent_cursor = None
        if current is not None and parent is not None:
            parent_cursor = parent.index_of(current.path)
        operation = self.operation
        return ViewState(
            parent=PaneView.from_snapshot(parent, parent_cursor),
            current=PaneView.from_snapshot(current, nav.cursor),
            preview=tab.preview,
            selection=tab.selection.frozen(),
            clipboard_summary=None if self.clipboard is None else self.clipboard.summary(),
            filter_query=nav.filter_query,
            pending_input=self.machine.pending_indicator(),
            sort_mode=nav.sort_mode,
            show_hidden=nav.show_hidden,
            status_message=self.status_message,
            operation_summary=None if operation is None else operation.summary(),
            colors=tuple(sorted(self.config.colors.items())),
            search=self._search,
            tab_paths=tuple(each.navigation.path for each in self.tabs),
            active_tab=self.tabs.active_index,
        )

    def _emit(self) -> ViewState:
        view = self._build_view()
        if view != self._view:
            self._view = view
            for listener in list(self._listeners):
                listener(view)
        return self._view


def create_session(
    start_path: Path | None = None,
    *,
    config_path: Path | None = None,
    preview_provider: PreviewProvider | None = None,
    persist_bookmarks: bool = True,
    setup_logging: bool = True,
    log_path: Path | None = None,
) -> Session:
    """Compose a session with the default system capabilities and on-disk config.

    With ``setup_logging`` the ``lazyfm`` logger writes to ``log_path`` (or the
    default log file) before anything else runs.
    """
    if setup_logging:
        configure_logging(log_path=log_path)
    config = load_app_config(config_path)
    clock = SystemClock()
    on_bookmarks_changed = None
    if persist_bookmarks:
        on_bookmarks_changed = partial(save_bookmarks, path=config_path)
    return Session(
        start_path if start_path is not None else Path.cwd(),
        opener=SystemOpener(),
        trash=SendToTrash(),
        clock=clock,
        runner=BackgroundTaskRunner(),
        config=config,
        watcher=PollingDirectoryWatcher(monotonic=clock.monotonic),
        preview_provider=preview_provider,
        bookmarks=BookmarkStore(load_bookmarks(config_path)),
        text_clipboard=SystemTextClipboard(),
        on_bookmarks_changed=on_bookmarks_changed,
    )


__all__ = ["Session", "ViewListener", "create_session"]
