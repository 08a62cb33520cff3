#!/usr/bin/env python3
"""
api.py - Handle-based entry points for foreign callers
Giao diện cho chương trình bên ngoài

Callers that cannot hold Python objects (an IME bridge, a C extension, a
scripting host) drive the engine through integer handles. Nothing here
raises: failures are logged and reported as an absent result (None), and an
unknown or destroyed handle turns every operation into a no-op.

    transform_string(text, method, style)   -> str | None
    session_create(method, style)           -> int | None
    session_push(handle, unit)              -> None
    session_view(handle)                    -> str | None
    session_destroy(handle)                 -> None
"""

import itertools
import logging

from session import IncrementalSession, SessionClosedError
from transformer import transform

logger = logging.getLogger(__name__)


def transform_string(text, method, style):
    try:
        return transform(text, method, style)
    except ValueError as e:
        logger.error(f'transform_string failed: {e}')
    except OSError as e:
        logger.error(f'transform_string failed: {e!r}')
    except MemoryError:
        logger.error('transform_string failed: out of memory')
    return None


class SessionRegistry:
    """Table of live sessions keyed by integer handles. Handles are never reused."""

    def __init__(self):
        self._sessions = {}
        self._handles = itertools.count(1)

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, handle):
        return handle in self._sessions

    def create(self, method, style):
        try:
            session = IncrementalSession(method, style)
        except ValueError as e:
            logger.error(f'session_create failed: {e}')
            return None
        except (OSError, MemoryError) as e:
            logger.error(f'session_create failed: {e!r}')
            return None
        handle = next(self._handles)
        self._sessions[handle] = session
        return handle

    def push(self, handle, unit):
        session = self._sessions.get(handle)
        if session is None:
            logger.warning(f'session_push on unknown handle {handle!r} ignored')
            return
        try:
            session.push(unit)
        except (ValueError, SessionClosedError) as e:
            logger.warning(f'session_push ignored: {e}')

    def view(self, handle):
        session = self._sessions.get(handle)
        if session is None:
            logger.warning(f'session_view on unknown handle {handle!r}')
            return None
        try:
            return session.view()
        except SessionClosedError as e:
            logger.warning(f'session_view failed: {e}')
        except MemoryError:
            logger.error('session_view failed: out of memory')
        return None

    def destroy(self, handle):
        session = self._sessions.pop(handle, None)
        if session is None:
            logger.debug(f'session_destroy on unknown handle {handle!r} ignored')
            return
        session.destroy()


_default_registry = SessionRegistry()


def session_create(method, style):
    return _default_registry.create(method, style)


def session_push(handle, unit):
    _default_registry.push(handle, unit)


def session_view(handle):
    return _default_registry.view(handle)


def session_destroy(handle):
    _default_registry.destroy(handle)
