"""
Canonical provider error exception type.

Every fault that leaves the provider layer (as an ``error`` chunk payload or
as a raised configuration error) is either a :class:`ProviderError` or an
exception already in canonical shape. ``str(error)`` is the final,
user-visible message; ``code`` keeps the machine-readable vendor code when
one was observed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class ProviderError(Exception):
    """Represents a normalized provider error.

    Attributes:
        message: Final message, already formatted as ``"<code>: <message>"``
            when a code was present.
        code: Optional machine-readable code reported by the vendor.
        provider: Provider key where the error originated (e.g., ``"openai"``).
        model: Optional model name associated with the failure.
        name: Category name of the original fault when this error wraps one.
    """

    message: str
    code: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


__all__ = ["ProviderError"]
