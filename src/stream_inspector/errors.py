"""Process-wide error log with observer subscriptions.

Every parser failure is reported here in addition to being raised, so an
observability surface (CLI, MCP tool) can list what went wrong during a
batch. The store is explicit state: a default instance is created at
import and replaced only through ``reset_error_store``; any caller may
pass its own ``ErrorStore`` instead.
"""

from __future__ import annotations

import logging
import secrets
import time
import traceback
from collections.abc import Callable

from stream_inspector.models import ErrorEntry, ErrorSeverity, ErrorSource

logger = logging.getLogger(__name__)

Listener = Callable[[list[ErrorEntry]], None]


class ErrorStore:
    """Append-only error log that notifies subscribers on every change."""

    def __init__(self) -> None:
        self._entries: list[ErrorEntry] = []
        self._listeners: list[Listener] = []

    def add(self, entry: ErrorEntry) -> None:
        """Append an entry and notify subscribers."""
        self._entries.append(entry)
        self._notify()

    def clear(self) -> None:
        """Remove all entries and notify subscribers."""
        self._entries.clear()
        self._notify()

    def get_errors(self) -> list[ErrorEntry]:
        """Return a copy of the current entries."""
        return list(self._entries)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener.

        The listener is called immediately with the current entries and
        again after every add/clear.

        Args:
            listener: Callable receiving a snapshot of the entries

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        listener(list(self._entries))

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = list(self._entries)
        for listener in list(self._listeners):
            listener(snapshot)

    def __len__(self) -> int:
        return len(self._entries)


_default_store = ErrorStore()


def get_error_store() -> ErrorStore:
    """Return the process-wide error store."""
    return _default_store


def reset_error_store() -> ErrorStore:
    """Replace the process-wide store with an empty one.

    Subscribers of the previous store are not carried over.

    Returns:
        The new store
    """
    global _default_store
    _default_store = ErrorStore()
    return _default_store


def _create_id() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"


def build_entry(
    source: ErrorSource,
    error: BaseException,
    context: dict[str, object] | None = None,
) -> ErrorEntry:
    """Build an error-log entry from an exception.

    Args:
        source: Component reporting the error
        error: The exception
        context: Call-specific context

    Returns:
        ErrorEntry with a formatted traceback when one is attached
    """
    stack = None
    if error.__traceback__ is not None:
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return ErrorEntry(
        id=_create_id(),
        timestamp=int(time.time() * 1000),
        source=source,
        message=str(error),
        severity=ErrorSeverity.ERROR,
        stack=stack,
        context=context,
    )


def report_error(
    source: ErrorSource,
    error: BaseException,
    context: dict[str, object] | None = None,
    *,
    store: ErrorStore | None = None,
) -> ErrorEntry:
    """Record an error in the error store and the log.

    Reporting is a side effect; callers still raise the exception.

    Args:
        source: Component reporting the error
        error: The exception
        context: Call-specific context (url, body preview...)
        store: Target store (default: process-wide store)

    Returns:
        The recorded entry
    """
    entry = build_entry(source, error, context)
    target = store if store is not None else get_error_store()
    target.add(entry)
    logger.error("[%s] %s: %s", source.value, type(error).__name__, error)
    return entry
