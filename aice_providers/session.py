"""Session runner: wraps one adapter stream in the session envelope.

A session sequence is ``meta`` → adapter chunks → exactly one terminal chunk.
The adapter (through the lifecycle wrapper) owns every ``status`` and
``usage`` chunk; the runner adds only the envelope:

- ``MetaChunk`` first, unconditionally;
- adapter chunks forwarded unmodified and in order;
- forwarding stops at the first ``ErrorChunk``;
- ``DoneChunk`` when the adapter stream ends without one.

``status: completed`` is a lifecycle status and never ends a session; only
``done`` and ``error`` do. If an adapter generator raises instead of reporting
an ``error`` chunk, the runner normalizes the exception into one so the
terminal guarantee holds for every adapter.
"""
from __future__ import annotations

from contextlib import aclosing
from typing import AsyncIterator

from .base.errors import ConfigurationError, normalize_error
from .base.interfaces import LLMProvider
from .base.logging import LogContext, get_logger, log_event
from .base.models import SessionRequest
from .base.protocol import DoneChunk, ErrorChunk, MetaChunk, StreamChunk

_logger = get_logger("session")

SESSION_FALLBACK_MESSAGE = "Session failed"


def run_session(provider: LLMProvider, request: SessionRequest) -> AsyncIterator[StreamChunk]:
    """Start a session for ``request`` on ``provider``.

    The identity check and the adapter's own configuration checks run here,
    synchronously, so a misconfigured call raises :class:`ConfigurationError`
    before any chunk (or network call) is produced.

    Raises:
        ConfigurationError: ``provider.id`` differs from ``request.provider_id``,
            or the adapter cannot resolve a model.
    """
    if provider.id != request.provider_id:
        raise ConfigurationError(
            f"Provider mismatch: expected {request.provider_id.value}, got {provider.id.value}",
            provider=provider.id.value,
        )
    resolve_model = getattr(provider, "resolve_model", None)
    model = resolve_model(request) if callable(resolve_model) else (request.model or "")
    adapter_stream = provider.stream(request)
    return _session_stream(provider, request, model, adapter_stream)


async def _session_stream(
    provider: LLMProvider,
    request: SessionRequest,
    model: str,
    adapter_stream: AsyncIterator,
) -> AsyncIterator[StreamChunk]:
    ctx = LogContext(provider=provider.id.value, model=model)
    log_event(_logger, "session.start", ctx)
    yield MetaChunk(provider_id=provider.id, model=model)

    async with aclosing(adapter_stream) as chunks:
        try:
            async for chunk in chunks:
                yield chunk
                if isinstance(chunk, ErrorChunk):
                    log_event(_logger, "session.end", ctx, outcome="error", error=chunk.message)
                    return
        except Exception as exc:
            error = normalize_error(exc, SESSION_FALLBACK_MESSAGE)
            log_event(_logger, "session.end", ctx, outcome="error", error=str(error))
            yield ErrorChunk(error)
            return

    log_event(_logger, "session.end", ctx, outcome="done")
    yield DoneChunk()


__all__ = ["run_session", "SESSION_FALLBACK_MESSAGE"]
