"""DeepSeek adapter over the OpenAI-compatible Chat Completions API.

DeepSeek streams ``chat.completion.chunk`` objects rather than semantic
events, so the mapper keeps a little per-stream state:

- the first chunk reports ``status: running``;
- ``choices[0].delta.content`` becomes ``text``; ``reasoning_content`` from
  ``deepseek-reasoner`` is not part of the answer and is skipped;
- the trailing chunk requested via ``stream_options.include_usage`` carries
  ``usage`` (with empty ``choices``);
- ``finish_reason == "insufficient_system_resource"`` is a vendor fault.

The default base URL is ``https://api.deepseek.com``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from ..base.models import SessionRequest
from ..base.protocol import ProviderId, StatusChunk, StreamStatus, TextChunk, UsageChunk
from ..base.provider_base import BaseLifecycleProvider
from ..base.streaming import EventMapper, MappedItem, StreamFault
from ..base.tokens import extract_usage_from
from ..base.utils.fields import read_field
from ..base.utils.messages import request_messages
from ..config.defaults import DEEPSEEK_DEFAULT_BASE_URL

__all__ = ["DeepSeekProvider", "DeepSeekChunkMapper"]

_RESOURCE_EXHAUSTED = "insufficient_system_resource"


class DeepSeekChunkMapper:
    """Stateful chunk → canonical items mapper for one DeepSeek stream."""

    def __init__(self) -> None:
        self._started = False

    def __call__(self, chunk: Any) -> List[MappedItem]:
        items: List[MappedItem] = []
        if not self._started:
            self._started = True
            items.append(StatusChunk(StreamStatus.RUNNING))
        choices = read_field(chunk, "choices") or []
        if choices:
            choice = choices[0]
            content = read_field(read_field(choice, "delta"), "content")
            if content:
                items.append(TextChunk(content))
            if read_field(choice, "finish_reason") == _RESOURCE_EXHAUSTED:
                items.append(
                    StreamFault(
                        {"code": _RESOURCE_EXHAUSTED, "message": "DeepSeek ran out of capacity for this request"},
                        "DeepSeek stream failed",
                    )
                )
                return items
        usage = extract_usage_from(chunk)
        if usage is not None:
            items.append(UsageChunk(usage))
        return items


class DeepSeekProvider(BaseLifecycleProvider):
    """Streaming adapter for DeepSeek chat models."""

    id = ProviderId.DEEPSEEK
    label = "DeepSeek"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        client: Any = None,
    ) -> None:
        super().__init__(api_key, base_url=base_url or DEEPSEEK_DEFAULT_BASE_URL, model=model, client=client)

    def _make_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)

    def _request_params(self, request: SessionRequest, model: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": model,
            "messages": request_messages(request),
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        if request.temperature is not None:
            params["temperature"] = request.temperature
        if request.max_tokens is not None:
            params["max_tokens"] = request.max_tokens
        return params

    async def _open_stream(self, request: SessionRequest, model: str) -> Any:
        return await self._client.chat.completions.create(**self._request_params(request, model))

    def _new_event_mapper(self) -> EventMapper:
        return DeepSeekChunkMapper()
