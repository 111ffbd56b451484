"""Connectivity probe tests with fake SDK clients."""
from __future__ import annotations

import asyncio
import time
from types import SimpleNamespace as NS

import pytest

from aice_providers.base.errors import (
    CONNECTIVITY_TIMEOUT_MESSAGE,
    ConfigurationError,
    ProbeTimeoutError,
    ProviderError,
)
from aice_providers.base.protocol import ProviderId
from aice_providers.base.timeouts import DEFAULT_PROBE_TIMEOUT_MS, get_timeout_config, with_cancellable_timeout
from aice_providers.config import ProviderEnv
from aice_providers.probe import ProbeClients, probe_provider


class _VendorError(Exception):
    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


def _env(provider_id=ProviderId.OPENAI, model=None):
    return ProviderEnv(provider_id=provider_id, api_key="sk-test", model=model)


async def test_success_returns_none_and_sends_minimal_call():
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        return NS(id="resp_1")

    result = await probe_provider(_env(), 1000, clients=ProbeClients(openai=NS(responses=NS(create=create))))
    assert result is None  # nosec B101
    assert calls == [{"model": "gpt-4o-mini", "input": "ping", "max_output_tokens": 16}]  # nosec B101


async def test_timeout_raises_fixed_message_and_aborts_call():
    aborted = asyncio.Event()

    async def create(**kwargs):
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            aborted.set()
            raise

    started = time.monotonic()
    with pytest.raises(ProbeTimeoutError) as info:
        await probe_provider(_env(), 10, clients=ProbeClients(openai=NS(responses=NS(create=create))))
    assert str(info.value) == CONNECTIVITY_TIMEOUT_MESSAGE  # nosec B101
    assert time.monotonic() - started < 1.0  # nosec B101
    await asyncio.wait_for(aborted.wait(), timeout=1)


async def test_failure_raises_normalized_error():
    async def create(**kwargs):
        raise _VendorError("Incorrect API key provided", code="invalid_api_key")

    with pytest.raises(ProviderError) as info:
        await probe_provider(_env(), 1000, clients=ProbeClients(openai=NS(responses=NS(create=create))))
    assert str(info.value) == "invalid_api_key: Incorrect API key provided"  # nosec B101


async def test_anthropic_probe_uses_one_token():
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)

    env = _env(ProviderId.ANTHROPIC, model="claude-test")
    await probe_provider(env, 1000, clients=ProbeClients(anthropic=NS(messages=NS(create=create))))
    assert calls[0]["max_tokens"] == 1 and calls[0]["model"] == "claude-test"  # nosec B101


async def test_deepseek_probe_uses_chat_completions():
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)

    env = _env(ProviderId.DEEPSEEK)
    await probe_provider(env, 1000, clients=ProbeClients(deepseek=NS(chat=NS(completions=NS(create=create)))))
    assert calls[0]["model"] == "deepseek-chat" and calls[0]["max_tokens"] == 1  # nosec B101


async def test_unsupported_provider_is_configuration_error():
    with pytest.raises(ConfigurationError, match="Unsupported provider: gemini"):
        await probe_provider(NS(provider_id="gemini", api_key="k", model=None, base_url=None), 10)


async def test_with_cancellable_timeout_passes_result_through():
    async def op(token):
        assert not token.cancelled  # nosec B101
        return "ok"

    assert await with_cancellable_timeout(op, 1000) == "ok"  # nosec B101


async def test_with_cancellable_timeout_cancels_token():
    seen = {}

    async def op(token):
        seen["token"] = token
        await asyncio.sleep(10)

    with pytest.raises(ProbeTimeoutError):
        await with_cancellable_timeout(op, 5)
    assert seen["token"].cancelled and seen["token"].reason == "timeout"  # nosec B101


def test_timeout_config_reads_env(monkeypatch):
    assert get_timeout_config().probe_timeout_ms == DEFAULT_PROBE_TIMEOUT_MS  # nosec B101
    monkeypatch.setenv("AICE_PROBE_TIMEOUT_MS", "2500")
    assert get_timeout_config().probe_timeout_ms == 2500  # nosec B101
    monkeypatch.setenv("AICE_PROBE_TIMEOUT_MS", "-1")
    assert get_timeout_config().probe_timeout_ms == DEFAULT_PROBE_TIMEOUT_MS  # nosec B101
