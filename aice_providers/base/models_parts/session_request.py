"""
Session request DTO handed to the session runner.

A ``SessionRequest`` is immutable for the life of one session. It carries
either a single ``prompt`` or a structured ``messages`` history (or both, in
which case the prompt is appended as the final user turn).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..cancellation import CancellationToken
from ..protocol import ProviderId
from .message import Message


@dataclass(frozen=True)
class SessionRequest:
    """Input to one streaming session.

    Attributes:
        provider_id: Identity the bound adapter must report.
        model: Model identifier; adapters fall back to their default when empty.
        prompt: Single user prompt.
        messages: Prior conversation turns, oldest first.
        system_prompt: Optional system instruction.
        temperature: Optional sampling temperature.
        max_tokens: Optional output token cap.
        cancellation_token: Threaded down to every vendor network read.
    """

    provider_id: ProviderId
    model: Optional[str] = None
    prompt: Optional[str] = None
    messages: Tuple[Message, ...] = ()
    system_prompt: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    cancellation_token: Optional[CancellationToken] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # accept lists or mappings from callers; store an immutable tuple
        object.__setattr__(self, "messages", tuple(Message.coerce(m) for m in self.messages))


__all__ = ["SessionRequest"]
