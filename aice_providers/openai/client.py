"""OpenAI provider adapter over the Responses API.

The adapter opens ``client.responses.create(..., stream=True)`` on the async
SDK client and translates its semantic events:

=============================  =====================================
vendor event                   canonical item
=============================  =====================================
``response.created``           ``status: running``
``response.in_progress``       ``status: running``
``response.output_text.delta`` ``text``
``response.completed``         ``usage`` (from ``response.usage``)
``response.failed``            fault (``response.error``)
``response.incomplete``        fault (``incomplete_details.reason``)
``error``                      fault (event ``code`` / ``message``)
=============================  =====================================

Anything else (reasoning summaries, tool call deltas, ``output_text.done``)
is ignored. Lifecycle, usage capture and cleanup come from
:class:`~aice_providers.base.provider_base.BaseLifecycleProvider`.
"""

from __future__ import annotations

from typing import Any, Dict

from openai import AsyncOpenAI

from ..base.models import SessionRequest
from ..base.protocol import ProviderId, StatusChunk, StreamStatus, TextChunk, UsageChunk
from ..base.provider_base import BaseLifecycleProvider
from ..base.streaming import EventMapper, MappedItem, StreamFault
from ..base.tokens import extract_usage_from
from ..base.utils.fields import read_field, read_path
from ..base.utils.messages import request_messages

__all__ = ["OpenAIProvider", "RESPONSE_STARTED_EVENTS", "map_response_event"]

RESPONSE_STARTED_EVENTS = frozenset({"response.created", "response.in_progress"})


def map_response_event(event: Any) -> MappedItem | None:
    """Translate one Responses API stream event."""
    kind = read_field(event, "type")
    if kind in RESPONSE_STARTED_EVENTS:
        return StatusChunk(StreamStatus.RUNNING)
    if kind == "response.output_text.delta":
        delta = read_field(event, "delta")
        return TextChunk(delta) if delta else None
    if kind == "response.completed":
        usage = extract_usage_from(read_field(event, "response"))
        return UsageChunk(usage) if usage is not None else None
    if kind == "response.failed":
        error = read_path(event, "response", "error")
        return StreamFault(error if error is not None else event, "OpenAI response failed")
    if kind == "response.incomplete":
        reason = read_path(event, "response", "incomplete_details", "reason")
        message = f"OpenAI response incomplete: {reason}" if reason else "OpenAI response incomplete"
        return StreamFault({"code": "incomplete", "message": message}, message)
    if kind == "error":
        return StreamFault(event, "OpenAI stream error")
    return None


class OpenAIProvider(BaseLifecycleProvider):
    """Streaming adapter for the OpenAI Responses API."""

    id = ProviderId.OPENAI
    label = "OpenAI"

    def _make_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)

    def _request_params(self, request: SessionRequest, model: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": model,
            "input": request_messages(request),
            "stream": True,
        }
        if request.temperature is not None:
            params["temperature"] = request.temperature
        if request.max_tokens is not None:
            params["max_output_tokens"] = request.max_tokens
        return params

    async def _open_stream(self, request: SessionRequest, model: str) -> Any:
        return await self._client.responses.create(**self._request_params(request, model))

    def _new_event_mapper(self) -> EventMapper:
        return map_response_event
