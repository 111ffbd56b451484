"""Anthropic Messages adapter tests against a fake SDK client."""
from __future__ import annotations

from types import SimpleNamespace as NS

from aice_providers.anthropic import AnthropicProvider
from aice_providers.anthropic.client import AnthropicEventMapper
from aice_providers.base.models import Message, SessionRequest
from aice_providers.base.protocol import ProviderId, StreamStatus, TokenUsage
from aice_providers.session import run_session


def _client(stream, calls):
    async def create(**kwargs):
        calls.append(kwargs)
        return stream

    return NS(messages=NS(create=create))


def _events():
    return [
        NS(type="message_start", message=NS(usage=NS(input_tokens=12, output_tokens=1))),
        NS(type="content_block_start", index=0),
        NS(type="content_block_delta", delta=NS(type="text_delta", text="Hel")),
        NS(type="content_block_delta", delta=NS(type="text_delta", text="lo")),
        NS(type="content_block_stop", index=0),
        NS(type="message_delta", delta=NS(stop_reason="end_turn"), usage=NS(output_tokens=6)),
        NS(type="message_stop"),
    ]


async def test_happy_path_merges_usage(fake_stream, drain):
    calls: list = []
    stream = fake_stream(_events())
    provider = AnthropicProvider("sk-ant", model="claude-test", client=_client(stream, calls))
    request = SessionRequest(
        provider_id=ProviderId.ANTHROPIC,
        system_prompt="be kind",
        messages=[Message("system", "use metric"), Message("user", "hi"), Message("assistant", "hey")],
        prompt="how tall?",
    )
    chunks = await drain(run_session(provider, request))

    assert [c.type for c in chunks] == ["meta", "status", "status", "text", "text", "usage", "status", "done"]  # nosec B101
    assert chunks[5].usage == TokenUsage(12, 6, 18)  # nosec B101
    assert stream.close_calls == 1  # nosec B101
    params = calls[0]
    assert params["system"] == "be kind\n\nuse metric"  # nosec B101
    assert params["messages"] == [  # nosec B101
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hey"},
        {"role": "user", "content": "how tall?"},
    ]
    assert params["max_tokens"] == 1024  # nosec B101


async def test_request_max_tokens_wins(fake_stream, drain):
    calls: list = []
    provider = AnthropicProvider("sk-ant", model="claude-test", client=_client(fake_stream([]), calls))
    await drain(provider.stream(SessionRequest(provider_id=ProviderId.ANTHROPIC, prompt="x", max_tokens=64)))
    assert calls[0]["max_tokens"] == 64  # nosec B101
    assert "system" not in calls[0]  # nosec B101


async def test_error_event_is_fault(fake_stream, drain):
    stream = fake_stream(
        [
            NS(type="message_start", message=NS(usage=NS(input_tokens=3, output_tokens=0))),
            NS(type="error", error=NS(type="overloaded_error", message="Overloaded")),
        ]
    )
    provider = AnthropicProvider("sk-ant", model="claude-test", client=_client(stream, []))
    chunks = await drain(run_session(provider, SessionRequest(provider_id=ProviderId.ANTHROPIC, prompt="x")))
    assert [c.type for c in chunks] == ["meta", "status", "status", "status", "error"]  # nosec B101
    assert chunks[-2].status is StreamStatus.FAILED  # nosec B101
    assert chunks[-1].message == "Overloaded"  # nosec B101


def test_mapper_ignores_non_text_deltas():
    mapper = AnthropicEventMapper()
    assert mapper({"type": "content_block_delta", "delta": {"type": "input_json_delta", "partial_json": "{"}}) is None  # nosec B101
    assert mapper({"type": "ping"}) is None  # nosec B101
    assert mapper({"type": "message_delta", "delta": {"stop_reason": "end_turn"}}) is None  # nosec B101
