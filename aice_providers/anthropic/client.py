"""AnthropicProvider adapter.

Streams through ``AsyncAnthropic().messages.create(..., stream=True)`` and
maps the raw Messages API events:

* ``message_start`` → ``status: running``; its ``message.usage`` seeds the
  input token count.
* ``content_block_delta`` carrying text → ``text``.
* ``message_delta`` → ``usage``; the output count is merged with the input
  count seen at ``message_start`` since Anthropic reports them separately.
* ``error`` → fault with the vendor's ``error`` object.

Anthropic requires ``max_tokens`` on every call; the request value wins over
the constructor default (1024). System turns from the history are joined
into the top-level ``system`` parameter.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from anthropic import AsyncAnthropic

from ..base.models import SessionRequest
from ..base.protocol import ProviderId, StatusChunk, StreamStatus, TextChunk, TokenUsage, UsageChunk
from ..base.provider_base import BaseLifecycleProvider
from ..base.streaming import EventMapper, MappedItem, StreamFault
from ..base.tokens import merge_usage, normalize_usage
from ..base.utils.fields import read_field, read_path
from ..base.utils.messages import split_system
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS

__all__ = ["AnthropicProvider", "AnthropicEventMapper"]


class AnthropicEventMapper:
    """Stateful event mapper for one Anthropic message stream."""

    def __init__(self) -> None:
        self._usage: Optional[TokenUsage] = None

    def _merge(self, raw: Any) -> Optional[UsageChunk]:
        self._usage = merge_usage(self._usage, normalize_usage(raw))
        return UsageChunk(self._usage) if self._usage is not None else None

    def __call__(self, event: Any) -> MappedItem | list | None:
        kind = read_field(event, "type")
        if kind == "message_start":
            usage = self._merge(read_path(event, "message", "usage"))
            return [StatusChunk(StreamStatus.RUNNING), usage] if usage is not None else StatusChunk(StreamStatus.RUNNING)
        if kind == "content_block_delta":
            text = read_path(event, "delta", "text")
            return TextChunk(text) if text else None
        if kind == "message_delta":
            raw = read_field(event, "usage") or read_path(event, "delta", "usage")
            return self._merge(raw) if raw is not None else None
        if kind == "error":
            error = read_field(event, "error")
            return StreamFault(error if error is not None else event, "Anthropic stream error")
        return None


class AnthropicProvider(BaseLifecycleProvider):
    """Streaming adapter for the Anthropic Messages API."""

    id = ProviderId.ANTHROPIC
    label = "Anthropic"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = ANTHROPIC_DEFAULT_MAX_TOKENS,
        client: Any = None,
    ) -> None:
        self._max_tokens = max_tokens
        super().__init__(api_key, base_url=base_url, model=model, client=client)

    def _make_client(self) -> AsyncAnthropic:
        return AsyncAnthropic(api_key=self._api_key, base_url=self._base_url)

    def _request_params(self, request: SessionRequest, model: str) -> Dict[str, Any]:
        system, turns = split_system(request)
        params: Dict[str, Any] = {
            "model": model,
            "max_tokens": request.max_tokens or self._max_tokens,
            "messages": turns,
            "stream": True,
        }
        if system:
            params["system"] = system
        if request.temperature is not None:
            params["temperature"] = request.temperature
        return params

    async def _open_stream(self, request: SessionRequest, model: str) -> Any:
        return await self._client.messages.create(**self._request_params(request, model))

    def _new_event_mapper(self) -> EventMapper:
        return AnthropicEventMapper()
