"""Lifecycle wrapper shared by adapters whose vendor SDK emits flat event streams.

The wrapper owns the status transitions of one adapter stream so every
vendor produces the same sequence:

``running`` → (``text`` | ``status``)* → [``usage``] → ``completed``

or, on any fault, ``running`` → ... → ``failed`` → ``error``. Nothing follows
an ``error`` chunk, and usage observed before a fault is discarded.

Adapters supply two things: a thunk that opens the vendor stream and a
mapping from one vendor event to zero, one or many canonical items. A mapper
reports a vendor-side fault by returning :class:`StreamFault` rather than
raising.

Cleanup
-------
The vendor stream is released exactly once in a ``finally`` block, whatever
the outcome. Early abandonment by the consumer (``aclose`` on the generator)
takes the same path.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, Optional, Sequence, Union

from ..cancellation import CancellationToken
from ..errors import normalize_error
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..protocol import (
    ErrorChunk,
    ProviderStreamChunk,
    StatusChunk,
    StreamStatus,
    TextChunk,
    UsageChunk,
)
from .stream_metrics import StreamMetrics, finalize_stream


@dataclass(frozen=True)
class StreamFault:
    """A vendor-reported mid-stream fault produced by an event mapper."""

    error: Any
    fallback_message: Optional[str] = None


MappedItem = Union[TextChunk, StatusChunk, UsageChunk, StreamFault]
EventMapper = Callable[[Any], Union[None, MappedItem, Sequence[MappedItem]]]
StreamOpener = Callable[[], Union[Awaitable[Any], Any]]

_RELEASE_METHODS = ("close", "aclose", "cancel")


def _as_items(mapped: Union[None, MappedItem, Sequence[MappedItem]]) -> Iterable[MappedItem]:
    if mapped is None:
        return ()
    if isinstance(mapped, (list, tuple)):
        return mapped
    return (mapped,)


def _find_release(stream: Any) -> Optional[Callable[[], Any]]:
    for name in _RELEASE_METHODS:
        method = getattr(stream, name, None)
        if callable(method):
            return method
    controller = getattr(stream, "controller", None)
    abort = getattr(controller, "abort", None)
    return abort if callable(abort) else None


async def release_stream(
    stream: Any,
    *,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> None:
    """Release a vendor stream via its first available close/cancel hook.

    Failures are logged at debug level and never propagate: the stream may
    already be finished or closed.
    """
    if stream is None:
        return
    release = _find_release(stream)
    if release is None:
        return
    try:
        result = release()
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        log_event(
            logger or get_logger("streaming"),
            "stream.release.error",
            ctx,
            level=logging.DEBUG,
            error=str(exc),
            error_type=type(exc).__name__,
        )


async def _open(open_stream: StreamOpener, token: Optional[CancellationToken]) -> Any:
    if token is not None:
        token.raise_if_cancelled()
    opened = open_stream()
    if inspect.isawaitable(opened):
        opened = await (token.race(opened) if token is not None else opened)
    return opened


async def _next_event(iterator: AsyncIterator[Any], token: Optional[CancellationToken]) -> Any:
    if token is None:
        return await iterator.__anext__()
    return await token.race(iterator.__anext__())


async def stream_with_lifecycle(
    *,
    open_stream: StreamOpener,
    map_event: EventMapper,
    start_fallback_message: str,
    stream_fallback_message: str,
    cancellation_token: Optional[CancellationToken] = None,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> AsyncIterator[ProviderStreamChunk]:
    """Drive one vendor stream through the canonical lifecycle.

    Parameters:
        open_stream: Thunk returning the vendor async iterable (or an
            awaitable resolving to one).
        map_event: Vendor event → ``None``, one item or a list of items.
        start_fallback_message: Error message when opening fails silently.
        stream_fallback_message: Error message when iteration fails silently.
        cancellation_token: Races the open call and every event read.
        logger: Logger for ``stream.*`` events (defaults to ``aice.streaming``).
        ctx: Provider/model context attached to each log event.

    Yields:
        Status, text, usage and error chunks; never ``meta`` or ``done``.
    """
    log = logger or get_logger("streaming")
    metrics = StreamMetrics()
    normalized_log_event(log, "stream.start", ctx, phase="start", attempt=None, emitted=False, tokens=None)
    yield StatusChunk(StreamStatus.RUNNING)

    try:
        stream = await _open(open_stream, cancellation_token)
    except Exception as exc:
        error = normalize_error(exc, start_fallback_message)
        finalize_stream(logger=log, ctx=ctx, metrics=metrics, error=error, phase="start")
        yield StatusChunk(StreamStatus.FAILED)
        yield ErrorChunk(error)
        return

    try:
        latest_usage: Optional[UsageChunk] = None
        failure: Optional[BaseException] = None
        try:
            iterator = stream.__aiter__()
            while failure is None:
                try:
                    event = await _next_event(iterator, cancellation_token)
                except StopAsyncIteration:
                    break
                for item in _as_items(map_event(event)):
                    if isinstance(item, StreamFault):
                        failure = normalize_error(item.error, item.fallback_message or stream_fallback_message)
                        break
                    if isinstance(item, ErrorChunk):
                        failure = normalize_error(item.error, stream_fallback_message)
                        break
                    if isinstance(item, UsageChunk):
                        latest_usage = item
                        continue
                    if isinstance(item, TextChunk):
                        metrics.mark_emitted()
                    yield item
        except Exception as exc:
            failure = normalize_error(exc, stream_fallback_message)

        if failure is not None:
            finalize_stream(logger=log, ctx=ctx, metrics=metrics, error=failure, phase="stream")
            yield StatusChunk(StreamStatus.FAILED)
            yield ErrorChunk(failure)
            return

        if latest_usage is not None:
            metrics.usage = latest_usage.usage
        finalize_stream(logger=log, ctx=ctx, metrics=metrics)
        if latest_usage is not None:
            yield latest_usage
        yield StatusChunk(StreamStatus.COMPLETED)
    finally:
        await release_stream(stream, logger=log, ctx=ctx)


__all__ = [
    "StreamFault",
    "MappedItem",
    "EventMapper",
    "release_stream",
    "stream_with_lifecycle",
]
