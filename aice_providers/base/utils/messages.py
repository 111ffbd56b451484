"""Message history helpers shared across providers.

Helpers here are side-effect free and operate on provider-agnostic DTOs only.
They cover three jobs:

- ``truncate_history`` keeps the most recent turns of a conversation;
  ``ProviderBinding.create_request`` applies it for ``max_messages``.
- ``build_messages`` / ``build_prompt`` turn a history into the structured or
  transcript form. Adapters do not call them; they are for chat surfaces that
  render or export a conversation.
- ``request_messages`` / ``split_system`` assemble the vendor message list for
  a ``SessionRequest``.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..models import Message, SessionRequest

T = TypeVar("T")


def truncate_history(history: Sequence[T], max_messages: Optional[float] = None) -> List[T]:
    """Return the last ``max_messages`` items of ``history``.

    ``None``, NaN and infinite limits disable truncation; negative limits
    behave like zero; fractional limits are floored.
    """
    items = list(history)
    if max_messages is None or isinstance(max_messages, bool):
        return items
    if not isinstance(max_messages, (int, float)) or not math.isfinite(max_messages):
        return items
    limit = max(0, math.floor(max_messages))
    if limit == 0:
        return []
    if len(items) <= limit:
        return items
    return items[-limit:]


def build_messages(history: Sequence[Message], max_messages: Optional[float] = None) -> List[Dict[str, str]]:
    """Convert the (truncated) history into ``{"role", "content"}`` mappings."""
    return [message.to_dict() for message in truncate_history(history, max_messages)]


def _prompt_line(message: Message) -> str:
    label = "Assistant" if message.role == "assistant" else "User"
    return f"{label}: {message.content}"


def build_prompt(history: Sequence[Message], max_messages: Optional[float] = None) -> str:
    """Render the history as a ``User:`` / ``Assistant:`` transcript.

    System turns are dropped before truncation. The transcript always ends
    with an open ``Assistant:`` line for the model to complete.
    """
    conversation = [m for m in history if m.role != "system"]
    lines = [_prompt_line(m) for m in truncate_history(conversation, max_messages)]
    lines.append("Assistant:")
    return "\n".join(lines)


def _conversation(request: SessionRequest) -> Iterable[Message]:
    yield from request.messages
    if request.prompt:
        yield Message(role="user", content=request.prompt)


def split_system(request: SessionRequest) -> Tuple[Optional[str], List[Dict[str, str]]]:
    """Return ``(system_text, turns)`` for vendors with a separate system field.

    ``system_text`` joins the request's system prompt with any system turns in
    the history; ``turns`` holds only user/assistant messages.
    """
    system_parts: List[str] = []
    if request.system_prompt:
        system_parts.append(request.system_prompt)
    turns: List[Dict[str, str]] = []
    for message in _conversation(request):
        if message.role == "system":
            if message.content.strip():
                system_parts.append(message.content)
            continue
        turns.append(message.to_dict())
    system_text = "\n\n".join(system_parts) if system_parts else None
    return system_text, turns


def request_messages(request: SessionRequest) -> List[Dict[str, str]]:
    """Chat-completions style list: system prompt first, then the conversation."""
    messages: List[Dict[str, str]] = []
    if request.system_prompt:
        messages.append({"role": "system", "content": request.system_prompt})
    messages.extend(m.to_dict() for m in _conversation(request))
    return messages


__all__ = [
    "truncate_history",
    "build_messages",
    "build_prompt",
    "split_system",
    "request_messages",
]
