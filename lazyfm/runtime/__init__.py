"""Session orchestration: navigation, background tasks, config, and the foreground loop.

Submodules are imported directly; this package keeps its own import light so
the file operation engine can depend on :mod:`lazyfm.runtime.capabilities`
without pulling in the session.
"""

from __future__ import annotations


def run_session_loop(*args, **kwargs):
    """Lazily import the loop runner to avoid package-import cycles."""
    from .loop import run_session_loop as _run_session_loop

    return _run_session_loop(*args, **kwargs)


__all__ = ["run_session_loop"]
