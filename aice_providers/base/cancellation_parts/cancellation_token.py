"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class threaded from a ``SessionRequest`` (or
from the connectivity prober's timer race) down to the vendor network call.
Cancellation is observed three ways: polling (``raise_if_cancelled``),
callbacks (``add_callback``), and racing an in-flight awaitable (``race``),
which aborts the underlying task as soon as the token fires.

All methods are meant to be used from a single event loop thread.
"""

from __future__ import annotations

import asyncio
import inspect
from contextlib import suppress
from typing import Awaitable, Callable, List, Optional, TypeVar

from .state import State
from .cancelled_error import CancelledError

T = TypeVar("T")


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    Child tokens inherit cancellation when the parent is cancelled. ``cancel``
    is idempotent and never raises, even when the guarded operation has
    already completed.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._children: List[CancellationToken] = []
        self._callbacks: List[Callable[[Optional[str]], None]] = []
        self._event: Optional[asyncio.Event] = None
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation, run callbacks, cascade to children."""
        if self._state.cancelled:
            return
        self._state.cancelled = True
        self._state.reason = reason
        if self._event is not None:
            self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            with suppress(Exception):
                callback(reason)
        for child in list(self._children):
            child.cancel(reason)

    def add_callback(self, callback: Callable[[Optional[str]], None]) -> None:
        """Register ``callback(reason)``; runs immediately if already cancelled."""
        if self._state.cancelled:
            with suppress(Exception):
                callback(self._state.reason)
            return
        self._callbacks.append(callback)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        self._children.append(token)
        if self._state.cancelled:
            token.cancel(self._state.reason)
        return token

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def child(self) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self)

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        if self._state.cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    async def race(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        When cancellation wins, the in-flight task is cancelled (aborting the
        network read underneath it), any late failure from it is discarded,
        and ``CancelledError`` is raised.
        """
        if self._state.cancelled:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise CancelledError(self._state.reason or "operation cancelled")
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if task.done():
            return task.result()
        task.cancel()
        with suppress(asyncio.CancelledError, Exception):
            await task
        raise CancelledError(self._state.reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken"]
