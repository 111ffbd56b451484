"""
Message DTO used across providers.

Defines the `Message` dataclass and the `Role` literal for the sender role.
Content is plain text; structured content parts are not modelled here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Union, get_args

from ..errors import ConfigurationError

# Message roles used across providers.
Role = Literal["system", "user", "assistant"]

_ROLES = frozenset(get_args(Role))


@dataclass(frozen=True)
class Message:
    """A chat message in the conversation history.

    Attributes:
        role: The role of the message author (``"system"``, ``"user"`` or
            ``"assistant"``).
        content: The message text.
    """

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise ConfigurationError(f"Unsupported message role: {self.role!r}")

    def to_dict(self) -> Dict[str, str]:
        """Return the ``{"role", "content"}`` mapping vendor SDKs accept."""
        return {"role": self.role, "content": self.content}

    @classmethod
    def coerce(cls, value: Union["Message", Mapping[str, Any]]) -> "Message":
        """Build a message from a mapping with ``role`` and ``content``/``text``."""
        if isinstance(value, Message):
            return value
        if not isinstance(value, Mapping) or "role" not in value:
            raise ConfigurationError(f"Malformed message history entry: {value!r}")
        content = value.get("content")
        if content is None:
            content = value.get("text", "")
        return cls(role=value["role"], content=str(content))


__all__ = ["Message", "Role"]
