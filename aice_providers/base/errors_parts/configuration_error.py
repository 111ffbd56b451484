"""
Configuration error type.

Raised synchronously, before any network attempt, for missing credentials,
unresolved models, provider identity mismatches, and unsupported providers.
Never delivered as an ``error`` chunk; callers catch it around session
construction.
"""
from __future__ import annotations

from dataclasses import dataclass

from .provider_error import ProviderError


@dataclass(eq=False)
class ConfigurationError(ProviderError, ValueError):
    """Caller or configuration bug detected before streaming starts."""


__all__ = ["ConfigurationError"]
