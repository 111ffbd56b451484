"""Pytest configuration for the providers test suite.

Isolates every test from the developer's environment (API keys, provider
selection, config files, a local ``.env``) and provides the fake vendor
stream used by the lifecycle and adapter tests.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Iterator, List, Optional

import pytest

from aice_providers.config import reset_config_cache

_ISOLATED_ENV = (
    "AICE_PROVIDER",
    "AICE_MODEL",
    "AICE_CONFIG_FILE",
    "AICE_PROBE_TIMEOUT_MS",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "AICE_OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_BASE_URL",
    "AICE_ANTHROPIC_API_KEY",
    "DEEPSEEK_API_KEY",
    "DEEPSEEK_MODEL",
    "DEEPSEEK_BASE_URL",
    "AICE_DEEPSEEK_API_KEY",
    "OPENAI_AGENTS_MODEL",
    "OPENAI_AGENTS_API_KEY",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear provider env vars and point the .env loader at a missing file."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AICE_DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class FakeStream:
    """Async-iterable stand-in for a vendor SDK stream.

    Yields ``events`` in order, then raises ``error`` (if given) or hangs
    forever when ``hang`` is set. ``close_calls`` counts releases.
    """

    def __init__(self, events: Iterable[Any] = (), *, error: Optional[BaseException] = None, hang: bool = False):
        self._events: List[Any] = list(events)
        self._error = error
        self._hang = hang
        self.close_calls = 0
        self.consumed = 0

    def __aiter__(self) -> "FakeStream":
        return self

    async def __anext__(self) -> Any:
        await asyncio.sleep(0)
        if self._events:
            self.consumed += 1
            return self._events.pop(0)
        if self._error is not None:
            raise self._error
        if self._hang:
            await asyncio.Event().wait()
        raise StopAsyncIteration

    async def close(self) -> None:
        self.close_calls += 1


@pytest.fixture()
def fake_stream():
    """Factory fixture returning :class:`FakeStream` instances."""
    return FakeStream


async def collect(stream) -> list:
    """Drain an async iterator into a list."""
    return [item async for item in stream]


@pytest.fixture()
def drain():
    return collect
