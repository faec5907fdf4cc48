"""Foreground loop driving a :class:`~lazyfm.runtime.session.Session`.

Reading keys and drawing are injected: ``read_key`` blocks for at most the
given number of milliseconds and returns ``""`` on timeout.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .session import Session

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionLoopTiming:
    """Timing constants controlling the foreground loop."""

    poll_interval_ms: int = 50


def run_session_loop(
    session: Session,
    read_key: Callable[[int], str],
    *,
    timing: SessionLoopTiming = SessionLoopTiming(),
) -> None:
    """Run until a quit action clears ``session.running``.

    Each iteration waits briefly for a key, dispatches it, then drains
    background results so async listings and operation progress land even
    when the user is idle.
    """
    session.start()
    while session.running:
        key = read_key(timing.poll_interval_ms)
        if key:
            session.handle_key(key)
            if not session.running:
                break
        session.tick()
    LOGGER.info("session loop finished")


__all__ = ["SessionLoopTiming", "run_session_loop"]
