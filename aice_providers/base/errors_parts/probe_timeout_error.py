"""
Connectivity probe timeout error.

Carries a single fixed message so setup flows can tell a timeout apart from
any vendor-reported failure.
"""
from __future__ import annotations

from dataclasses import dataclass

from .provider_error import ProviderError

CONNECTIVITY_TIMEOUT_MESSAGE = (
    "Connectivity check timed out. Verify the API key and base URL, then try again."
)


@dataclass(eq=False)
class ProbeTimeoutError(ProviderError):
    """Raised when the connectivity probe exceeds its deadline."""

    message: str = CONNECTIVITY_TIMEOUT_MESSAGE


__all__ = ["ProbeTimeoutError", "CONNECTIVITY_TIMEOUT_MESSAGE"]
