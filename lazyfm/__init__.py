"""Public package surface for lazyfm.

Exports ``create_session`` for composing a session with default
capabilities. Most implementation lives in submodules under ``lazyfm``.
"""

from __future__ import annotations


def create_session(*args, **kwargs):
    """Lazily import the session factory to keep package imports lightweight."""
    from .runtime.session import create_session as _create_session

    return _create_session(*args, **kwargs)


__all__ = ["create_session"]
