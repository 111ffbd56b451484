"""Canonical streaming protocol shared by every provider adapter.

Purpose
-------
Define the provider-agnostic vocabulary that a session speaks: the closed set
of provider identities, lifecycle status values, the token-usage shape, and
the six chunk variants a consumer can observe.

Ordering contract
-----------------
A session sequence always begins with exactly one ``MetaChunk`` and ends with
exactly one terminal chunk (``DoneChunk`` or ``ErrorChunk``). ``StatusChunk``
and ``UsageChunk`` may appear any number of times in between; ``TextChunk``
items appear in emission order and their concatenation is the response text.

A later ``UsageChunk`` supersedes an earlier one, so consumers only need the
most recent value (see :class:`UsageAccumulator`).

New vendors map onto this vocabulary; the chunk types are never extended per
vendor.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union


def _now_ms() -> float:
    return time.time() * 1000.0


class ProviderId(str, Enum):
    """Closed set of supported vendor identities."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    DEEPSEEK = "deepseek"
    OPENAI_AGENTS = "openai-agents"


def is_provider_id(value: object) -> bool:
    """Return True when ``value`` names a supported provider."""
    if isinstance(value, ProviderId):
        return True
    return isinstance(value, str) and value in _PROVIDER_VALUES


def parse_provider_id(value: object) -> Optional[ProviderId]:
    """Return the matching :class:`ProviderId` or ``None`` for unknown input."""
    if isinstance(value, ProviderId):
        return value
    if isinstance(value, str) and value in _PROVIDER_VALUES:
        return ProviderId(value)
    return None


_PROVIDER_VALUES = frozenset(p.value for p in ProviderId)


class StreamStatus(str, Enum):
    """Lifecycle status values carried by :class:`StatusChunk`."""

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class TokenUsage:
    """Token accounting; any field may be unknown."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def is_empty(self) -> bool:
        return self.input_tokens is None and self.output_tokens is None and self.total_tokens is None

    def to_dict(self) -> dict:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass(frozen=True)
class MetaChunk:
    """First chunk of every session: what is about to run."""

    type: ClassVar[str] = "meta"

    provider_id: ProviderId
    model: str
    timestamp: float = field(default_factory=_now_ms, compare=False)


@dataclass(frozen=True)
class StatusChunk:
    type: ClassVar[str] = "status"

    status: StreamStatus
    detail: Optional[str] = None
    timestamp: float = field(default_factory=_now_ms, compare=False)


@dataclass(frozen=True)
class TextChunk:
    type: ClassVar[str] = "text"

    text: str
    timestamp: float = field(default_factory=_now_ms, compare=False)


@dataclass(frozen=True)
class UsageChunk:
    type: ClassVar[str] = "usage"

    usage: TokenUsage
    timestamp: float = field(default_factory=_now_ms, compare=False)


@dataclass(frozen=True)
class ErrorChunk:
    """Terminal failure chunk carrying the normalized error."""

    type: ClassVar[str] = "error"

    error: BaseException
    timestamp: float = field(default_factory=_now_ms, compare=False)

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class DoneChunk:
    """Terminal chunk for a session whose stream ended without error."""

    type: ClassVar[str] = "done"

    timestamp: float = field(default_factory=_now_ms, compare=False)


ProviderStreamChunk = Union[StatusChunk, TextChunk, UsageChunk, ErrorChunk]
StreamChunk = Union[MetaChunk, StatusChunk, TextChunk, UsageChunk, ErrorChunk, DoneChunk]


def is_terminal(chunk: object) -> bool:
    """Return True for ``done`` and ``error`` chunks."""
    return isinstance(chunk, (DoneChunk, ErrorChunk))


class UsageAccumulator:
    """Consumer-side holder that retains only the most recent usage value."""

    def __init__(self) -> None:
        self._latest: Optional[TokenUsage] = None

    @property
    def latest(self) -> Optional[TokenUsage]:
        return self._latest

    def observe(self, chunk: object) -> None:
        if isinstance(chunk, UsageChunk):
            self._latest = chunk.usage


__all__ = [
    "ProviderId",
    "is_provider_id",
    "parse_provider_id",
    "StreamStatus",
    "TokenUsage",
    "MetaChunk",
    "StatusChunk",
    "TextChunk",
    "UsageChunk",
    "ErrorChunk",
    "DoneChunk",
    "ProviderStreamChunk",
    "StreamChunk",
    "is_terminal",
    "UsageAccumulator",
]
