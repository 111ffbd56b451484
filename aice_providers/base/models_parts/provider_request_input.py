"""Caller-facing input used by a provider binding to build a ``SessionRequest``."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..cancellation import CancellationToken
from .message import Message


@dataclass(frozen=True)
class ProviderRequestInput:
    """What a chat surface knows about the next turn.

    ``model`` may be omitted; the binding resolves it from the environment and
    then from the provider defaults. ``max_messages`` keeps only the most
    recent history turns; ``None`` sends the whole history.
    """

    prompt: Optional[str] = None
    messages: Sequence[Message] = ()
    system_prompt: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    model: Optional[str] = None
    max_messages: Optional[int] = None
    cancellation_token: Optional[CancellationToken] = field(default=None, compare=False, repr=False)


__all__ = ["ProviderRequestInput"]
