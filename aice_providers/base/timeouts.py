"""Timeout configuration and the cancellable timeout race.

Only the connectivity probe imposes an explicit deadline; sessions run until
the vendor stream ends, fails, or the caller cancels. This module keeps that
single value in one place and provides the race used to enforce it.

Key Components
--------------
TimeoutConfig
    Frozen dataclass with the normalized timeout values.

get_timeout_config()
    Process-cached configuration. Supported environment variables:
        AICE_PROBE_TIMEOUT_MS

with_cancellable_timeout(operation, timeout_ms)
    Runs ``operation(token)`` against a timer. On expiry the token is
    cancelled, the task is cancelled, any late failure is discarded and the
    timeout error is raised instead.
"""
from __future__ import annotations

import asyncio
import contextlib
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .cancellation import CancellationToken
from .errors import ProbeTimeoutError, normalize_error

T = TypeVar("T")

DEFAULT_PROBE_TIMEOUT_MS = 8000


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values.

    Attributes:
        probe_timeout_ms: Deadline for a connectivity probe call.
    """

    probe_timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS


_CACHED: TimeoutConfig | None = None
# Last seen env value, so tests can adjust it at runtime
_ENV_GUARD: str | None = None


def _parse_env_int(name: str, default: int) -> int:
    """Parse a positive integer environment variable, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = int(float(raw))
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    cur_guard = os.getenv("AICE_PROBE_TIMEOUT_MS", "")
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        probe_timeout_ms=_parse_env_int("AICE_PROBE_TIMEOUT_MS", DEFAULT_PROBE_TIMEOUT_MS),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


async def with_cancellable_timeout(
    operation: Callable[[CancellationToken], Awaitable[T]],
    timeout_ms: float,
    *,
    fallback_message: str = "Connectivity check failed",
    timeout_error: Optional[Callable[[], BaseException]] = None,
) -> T:
    """Race ``operation`` against a ``timeout_ms`` timer.

    Parameters:
        operation: Callable receiving the cancellation token for the call.
        timeout_ms: Deadline in milliseconds.
        fallback_message: Used when normalizing a failure without a message.
        timeout_error: Factory for the timeout exception; defaults to
            :class:`ProbeTimeoutError`.

    Returns:
        The operation's result when it finishes first.

    Raises:
        The timeout error on expiry, or the operation's normalized error.
    """
    token = CancellationToken()
    task: asyncio.Task[Any] = asyncio.ensure_future(operation(token))
    try:
        done, _ = await asyncio.wait({task}, timeout=max(timeout_ms, 0) / 1000.0)
    except BaseException:
        token.cancel("caller cancelled")
        task.cancel()
        raise
    if task not in done:
        token.cancel("timeout")
        task.cancel()
        # retrieve any late outcome so the loop never reports it
        task.add_done_callback(_discard_outcome)
        raise (timeout_error or ProbeTimeoutError)()
    exc = task.exception()
    if exc is not None:
        raise normalize_error(exc, fallback_message)
    return task.result()


def _discard_outcome(task: asyncio.Future) -> None:
    with contextlib.suppress(BaseException):
        task.exception()


__all__ = [
    "DEFAULT_PROBE_TIMEOUT_MS",
    "TimeoutConfig",
    "get_timeout_config",
    "with_cancellable_timeout",
]
