"""Tests for the canonical chunk vocabulary and provider identities."""
from __future__ import annotations

from aice_providers.base.errors import ProviderError
from aice_providers.base.protocol import (
    DoneChunk,
    ErrorChunk,
    MetaChunk,
    ProviderId,
    StatusChunk,
    StreamStatus,
    TextChunk,
    TokenUsage,
    UsageAccumulator,
    UsageChunk,
    is_provider_id,
    is_terminal,
    parse_provider_id,
)


def test_provider_ids_are_closed_set():
    assert {p.value for p in ProviderId} == {"openai", "anthropic", "deepseek", "openai-agents"}  # nosec B101
    assert is_provider_id("openai-agents") is True  # nosec B101
    assert is_provider_id(ProviderId.DEEPSEEK) is True  # nosec B101
    assert is_provider_id("gemini") is False  # nosec B101
    assert is_provider_id(None) is False  # nosec B101


def test_parse_provider_id():
    assert parse_provider_id("anthropic") is ProviderId.ANTHROPIC  # nosec B101
    assert parse_provider_id(ProviderId.OPENAI) is ProviderId.OPENAI  # nosec B101
    assert parse_provider_id("OPENAI") is None  # nosec B101
    assert parse_provider_id(42) is None  # nosec B101


def test_chunk_type_tags():
    tags = [
        MetaChunk(ProviderId.OPENAI, "gpt-4o-mini").type,
        StatusChunk(StreamStatus.RUNNING).type,
        TextChunk("hi").type,
        UsageChunk(TokenUsage(1, 2, 3)).type,
        ErrorChunk(ProviderError("boom")).type,
        DoneChunk().type,
    ]
    assert tags == ["meta", "status", "text", "usage", "error", "done"]  # nosec B101


def test_only_done_and_error_are_terminal():
    assert is_terminal(DoneChunk())  # nosec B101
    assert is_terminal(ErrorChunk(ProviderError("x")))  # nosec B101
    # completed is a lifecycle status, not a session terminal
    assert not is_terminal(StatusChunk(StreamStatus.COMPLETED))  # nosec B101
    assert not is_terminal(TextChunk("a"))  # nosec B101


def test_chunks_compare_without_timestamp():
    assert TextChunk("a") == TextChunk("a")  # nosec B101
    assert StatusChunk(StreamStatus.RUNNING, "agent=x") != StatusChunk(StreamStatus.RUNNING)  # nosec B101


def test_error_chunk_message_is_error_string():
    chunk = ErrorChunk(ProviderError("rate_limit: slow down"))
    assert chunk.message == "rate_limit: slow down"  # nosec B101


def test_usage_accumulator_keeps_latest():
    acc = UsageAccumulator()
    assert acc.latest is None  # nosec B101
    acc.observe(UsageChunk(TokenUsage(1, None, None)))
    acc.observe(TextChunk("ignored"))
    acc.observe(UsageChunk(TokenUsage(1, 4, 5)))
    assert acc.latest == TokenUsage(1, 4, 5)  # nosec B101


def test_token_usage_helpers():
    assert TokenUsage().is_empty()  # nosec B101
    assert TokenUsage(2, 3, 5).to_dict() == {  # nosec B101
        "input_tokens": 2,
        "output_tokens": 3,
        "total_tokens": 5,
    }
