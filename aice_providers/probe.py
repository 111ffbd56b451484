"""Connectivity prober: validate credentials with a minimal real call.

``probe_provider`` issues the cheapest completion each vendor offers
(a one-token completion, or sixteen output tokens for the Responses API,
which rejects smaller caps) and races it against a timer:

- call succeeds first → returns ``None``;
- call fails first → raises the call's normalized error;
- timer fires first → the call's cancellation token is cancelled, the task is
  cancelled, whatever the call does afterwards is discarded, and
  :class:`ProbeTimeoutError` (fixed message) is raised.

Vendor SDK retries are disabled for probes so the timeout bounds one attempt.
"""
from __future__ import annotations

import logging
from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from .base.cancellation import CancellationToken
from .base.errors import ConfigurationError, ProbeTimeoutError, classify_exception
from .base.logging import LogContext, get_logger, log_event
from .base.protocol import ProviderId
from .base.timeouts import get_timeout_config, with_cancellable_timeout
from .config import ProviderEnv
from .config.defaults import resolve_default_base_url
from .registry import get_registry_entry

_logger = get_logger("probe")

PROBE_PROMPT = "ping"
PROBE_FALLBACK_MESSAGE = "Connectivity check failed"
# Responses API minimum for max_output_tokens
OPENAI_PROBE_MAX_OUTPUT_TOKENS = 16


@dataclass(frozen=True)
class ProbeClients:
    """Pre-built SDK clients, mainly for tests; missing ones are created per probe."""

    openai: Any = None
    anthropic: Any = None
    deepseek: Any = None


ProbeCall = Callable[[Any, str, CancellationToken], Awaitable[Any]]


async def _probe_openai(client: Any, model: str, token: CancellationToken) -> Any:
    return await token.race(
        client.responses.create(model=model, input=PROBE_PROMPT, max_output_tokens=OPENAI_PROBE_MAX_OUTPUT_TOKENS)
    )


async def _probe_chat_completions(client: Any, model: str, token: CancellationToken) -> Any:
    return await token.race(
        client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": PROBE_PROMPT}],
            max_tokens=1,
        )
    )


async def _probe_anthropic(client: Any, model: str, token: CancellationToken) -> Any:
    return await token.race(
        client.messages.create(
            model=model,
            max_tokens=1,
            messages=[{"role": "user", "content": PROBE_PROMPT}],
        )
    )


_PROBE_CALLS: Dict[ProviderId, ProbeCall] = {
    ProviderId.OPENAI: _probe_openai,
    ProviderId.OPENAI_AGENTS: _probe_openai,
    ProviderId.DEEPSEEK: _probe_chat_completions,
    ProviderId.ANTHROPIC: _probe_anthropic,
}


def _injected_client(env: ProviderEnv, clients: ProbeClients) -> Any:
    if env.provider_id in (ProviderId.OPENAI, ProviderId.OPENAI_AGENTS):
        return clients.openai
    if env.provider_id is ProviderId.DEEPSEEK:
        return clients.deepseek
    return clients.anthropic


def _make_client(env: ProviderEnv) -> Any:
    base_url = resolve_default_base_url(env.provider_id, env.base_url)
    if env.provider_id is ProviderId.ANTHROPIC:
        return AsyncAnthropic(api_key=env.api_key, base_url=base_url, max_retries=0)
    return AsyncOpenAI(api_key=env.api_key, base_url=base_url, max_retries=0)


async def _close_client(client: Any) -> None:
    close = getattr(client, "close", None)
    if callable(close):
        with suppress(Exception):
            await close()


async def probe_provider(
    env: ProviderEnv,
    timeout_ms: Optional[float] = None,
    *,
    clients: Optional[ProbeClients] = None,
) -> None:
    """Probe ``env``'s provider within ``timeout_ms`` (default 8000 ms).

    Raises:
        ConfigurationError: unsupported provider id.
        ProbeTimeoutError: the call did not finish in time.
        Exception: the vendor call's normalized error.
    """
    entry = get_registry_entry(env.provider_id)
    call = _PROBE_CALLS.get(entry.provider_id)
    if call is None:  # pragma: no cover - every registered provider has a probe
        raise ConfigurationError(f"Unsupported provider: {entry.provider_id.value}")
    model = entry.probe_model(env)
    timeout = timeout_ms if timeout_ms is not None else get_timeout_config().probe_timeout_ms
    ctx = LogContext(provider=entry.provider_id.value, model=model)

    client = _injected_client(env, clients or ProbeClients())
    owned = client is None
    if owned:
        client = _make_client(env)

    log_event(_logger, "probe.start", ctx, timeout_ms=timeout)
    try:
        await with_cancellable_timeout(
            lambda token: call(client, model, token),
            timeout,
            fallback_message=PROBE_FALLBACK_MESSAGE,
        )
    except ProbeTimeoutError:
        log_event(_logger, "probe.timeout", ctx, level=logging.WARNING, timeout_ms=timeout)
        raise
    except Exception as exc:
        log_event(
            _logger,
            "probe.error",
            ctx,
            level=logging.WARNING,
            error=str(exc),
            error_code=classify_exception(exc).value,
        )
        raise
    finally:
        if owned:
            await _close_client(client)
    log_event(_logger, "probe.ok", ctx)


__all__ = ["ProbeClients", "probe_provider", "PROBE_FALLBACK_MESSAGE"]
