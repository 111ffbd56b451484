"""DeepSeek chat-completions adapter tests against a fake SDK client."""
from __future__ import annotations

from types import SimpleNamespace as NS

from aice_providers.base.models import SessionRequest
from aice_providers.base.protocol import ProviderId, StatusChunk, StreamStatus, TextChunk, TokenUsage, UsageChunk
from aice_providers.base.streaming import StreamFault
from aice_providers.config.defaults import DEEPSEEK_DEFAULT_BASE_URL
from aice_providers.deepseek import DeepSeekProvider
from aice_providers.deepseek.client import DeepSeekChunkMapper
from aice_providers.session import run_session


def _chunk(content=None, finish_reason=None, usage=None):
    choices = [] if content is None and finish_reason is None else [
        NS(delta=NS(content=content, reasoning_content=None), finish_reason=finish_reason)
    ]
    return NS(choices=choices, usage=usage)


def _client(stream, calls):
    async def create(**kwargs):
        calls.append(kwargs)
        return stream

    return NS(chat=NS(completions=NS(create=create)))


async def test_stream_with_trailing_usage_chunk(fake_stream, drain):
    calls: list = []
    stream = fake_stream(
        [
            _chunk(content=""),
            _chunk(content="Bon"),
            _chunk(content="jour", finish_reason="stop"),
            _chunk(usage=NS(prompt_tokens=9, completion_tokens=2, total_tokens=11)),
        ]
    )
    provider = DeepSeekProvider("sk-ds", model="deepseek-chat", client=_client(stream, calls))
    chunks = await drain(run_session(provider, SessionRequest(provider_id=ProviderId.DEEPSEEK, prompt="hello")))

    assert [c.type for c in chunks] == ["meta", "status", "status", "text", "text", "usage", "status", "done"]  # nosec B101
    assert chunks[5].usage == TokenUsage(9, 2, 11)  # nosec B101
    assert calls[0]["stream_options"] == {"include_usage": True}  # nosec B101
    assert calls[0]["messages"] == [{"role": "user", "content": "hello"}]  # nosec B101
    assert stream.close_calls == 1  # nosec B101


async def test_resource_exhaustion_is_a_fault(fake_stream, drain):
    stream = fake_stream(
        [
            _chunk(content="a"),
            _chunk(content=None, finish_reason="insufficient_system_resource"),
        ]
    )
    provider = DeepSeekProvider("sk-ds", model="deepseek-chat", client=_client(stream, []))
    chunks = await drain(run_session(provider, SessionRequest(provider_id=ProviderId.DEEPSEEK, prompt="x")))
    assert chunks[-2].status is StreamStatus.FAILED  # nosec B101
    assert chunks[-1].message.startswith("insufficient_system_resource: ")  # nosec B101


def test_mapper_reports_running_once():
    mapper = DeepSeekChunkMapper()
    first = mapper(_chunk(content="x"))
    second = mapper(_chunk(content="y"))
    assert first == [StatusChunk(StreamStatus.RUNNING), TextChunk("x")]  # nosec B101
    assert second == [TextChunk("y")]  # nosec B101


def test_mapper_accepts_dict_chunks():
    mapper = DeepSeekChunkMapper()
    items = mapper({"choices": [], "usage": {"prompt_tokens": 1, "completion_tokens": 1}})
    assert items[-1] == UsageChunk(TokenUsage(1, 1, 2))  # nosec B101
    fault = DeepSeekChunkMapper()({"choices": [{"delta": {}, "finish_reason": "insufficient_system_resource"}]})
    assert isinstance(fault[-1], StreamFault)  # nosec B101


def test_default_base_url():
    provider = DeepSeekProvider("sk-ds", client=object())
    assert provider._base_url == DEEPSEEK_DEFAULT_BASE_URL  # nosec B101
