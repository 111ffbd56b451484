"""aice_providers.config.env
=========================

Centralized environment variable mapping and helpers for provider credentials.

Purpose
-------
- Provide a single source of truth for mapping provider identifiers to their
  API key environment variable names (canonical and aliases).
- Offer small utilities to look up those keys consistently across the package.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Every provider also accepts an
  ``AICE_``-prefixed alias; ``ENV_ALIASES`` lists the accepted names with the
  canonical one first to establish precedence.
- ``openai-agents`` talks to the OpenAI API and therefore reuses the OpenAI
  key names.

Failure Modes
-------------
- Functions return ``None`` when a provider is unknown or no value is present.
  Callers decide how to proceed (``load_provider_env`` raises a
  ``ConfigurationError``).
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider → env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "openai-agents": "OPENAI_API_KEY",
}


# Provider → ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY", "AICE_OPENAI_API_KEY"),
    "anthropic": ("ANTHROPIC_API_KEY", "AICE_ANTHROPIC_API_KEY"),
    "deepseek": ("DEEPSEEK_API_KEY", "AICE_DEEPSEEK_API_KEY"),
    "openai-agents": ("OPENAI_API_KEY", "AICE_OPENAI_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def env_prefix(provider: str) -> str:
    """Return the env var prefix for a provider (``openai-agents`` → ``OPENAI_AGENTS``)."""
    return (provider or "").strip().upper().replace("-", "_")


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider.

    The canonical name is yielded first, followed by any aliases.
    """
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):  # pragma: no branch - small tuples
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        (value, env_var_used) for the first non-empty candidate, or
        (None, None) when nothing is set.
    """
    for name in get_env_var_candidates(provider):
        if val := os.environ.get(name, "").strip():
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "env_prefix",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
