"""Tests for the session runner envelope (meta first, exactly one terminal)."""
from __future__ import annotations

import pytest

from aice_providers.base.errors import ConfigurationError, ProviderError
from aice_providers.base.models import SessionRequest
from aice_providers.base.protocol import (
    DoneChunk,
    ErrorChunk,
    MetaChunk,
    ProviderId,
    StatusChunk,
    StreamStatus,
    TextChunk,
    TokenUsage,
    UsageChunk,
    is_terminal,
)
from aice_providers.session import run_session


class _ScriptedProvider:
    """Adapter double replaying a fixed chunk script."""

    def __init__(self, script, *, provider_id=ProviderId.OPENAI, raise_after=None, model="m-default"):
        self.id = provider_id
        self._script = list(script)
        self._raise_after = raise_after
        self._model = model
        self.closed = False
        self.pulled = 0

    def resolve_model(self, request):
        model = request.model or self._model
        if not model:
            raise ConfigurationError("Test model is required")
        return model

    def stream(self, request):
        return self._gen()

    async def _gen(self):
        try:
            for chunk in self._script:
                self.pulled += 1
                yield chunk
            if self._raise_after is not None:
                raise self._raise_after
        finally:
            self.closed = True


def _request(**kwargs):
    kwargs.setdefault("provider_id", ProviderId.OPENAI)
    kwargs.setdefault("prompt", "hi")
    return SessionRequest(**kwargs)


async def test_success_sequence_is_wrapped(drain):
    provider = _ScriptedProvider(
        [
            StatusChunk(StreamStatus.RUNNING),
            TextChunk("Hello"),
            UsageChunk(TokenUsage(2, 1, 3)),
            StatusChunk(StreamStatus.COMPLETED),
        ]
    )
    chunks = await drain(run_session(provider, _request(model="gpt-test")))
    assert [c.type for c in chunks] == ["meta", "status", "text", "usage", "status", "done"]  # nosec B101
    meta = chunks[0]
    assert isinstance(meta, MetaChunk)  # nosec B101
    assert meta.provider_id is ProviderId.OPENAI and meta.model == "gpt-test"  # nosec B101
    # completed is forwarded, and the session still ends with done
    assert chunks[-2] == StatusChunk(StreamStatus.COMPLETED)  # nosec B101
    assert provider.closed  # nosec B101


async def test_meta_uses_adapter_default_model(drain):
    provider = _ScriptedProvider([StatusChunk(StreamStatus.COMPLETED)], model="fallback-model")
    chunks = await drain(run_session(provider, _request()))
    assert chunks[0].model == "fallback-model"  # nosec B101


async def test_exactly_one_terminal_and_it_is_last(drain):
    provider = _ScriptedProvider([StatusChunk(StreamStatus.RUNNING), TextChunk("a")])
    chunks = await drain(run_session(provider, _request()))
    terminals = [c for c in chunks if is_terminal(c)]
    assert len(terminals) == 1 and chunks[-1] is terminals[0]  # nosec B101
    assert isinstance(chunks[-1], DoneChunk)  # nosec B101


async def test_stops_after_first_error_chunk(drain):
    error = ProviderError("server_error: boom")
    provider = _ScriptedProvider(
        [
            StatusChunk(StreamStatus.RUNNING),
            StatusChunk(StreamStatus.FAILED),
            ErrorChunk(error),
            TextChunk("after the error"),
        ]
    )
    chunks = await drain(run_session(provider, _request()))
    assert [c.type for c in chunks] == ["meta", "status", "status", "error"]  # nosec B101
    assert chunks[-1].error is error  # nosec B101
    assert provider.pulled == 3  # nosec B101
    assert provider.closed  # nosec B101


async def test_adapter_exception_becomes_single_error(drain):
    provider = _ScriptedProvider([StatusChunk(StreamStatus.RUNNING)], raise_after=RuntimeError())
    chunks = await drain(run_session(provider, _request()))
    assert [c.type for c in chunks] == ["meta", "status", "error"]  # nosec B101
    assert chunks[-1].message == "Session failed"  # nosec B101


def test_provider_mismatch_raises_before_streaming():
    provider = _ScriptedProvider([], provider_id=ProviderId.ANTHROPIC)
    invoked = []
    provider.stream = lambda request: invoked.append(request)
    with pytest.raises(ConfigurationError, match="Provider mismatch: expected openai, got anthropic"):
        run_session(provider, _request())
    assert invoked == []  # nosec B101


def test_missing_model_raises_synchronously():
    provider = _ScriptedProvider([], model=None)
    with pytest.raises(ConfigurationError, match="model is required"):
        run_session(provider, _request())


async def test_consumer_abandonment_closes_adapter_stream():
    provider = _ScriptedProvider([StatusChunk(StreamStatus.RUNNING), TextChunk("a"), TextChunk("b")])
    session = run_session(provider, _request())
    assert isinstance(await session.__anext__(), MetaChunk)  # nosec B101
    await session.__anext__()
    await session.aclose()
    assert provider.closed  # nosec B101
