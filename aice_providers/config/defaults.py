"""aice_providers.config.defaults
==============================

Central place for small, stable default values used across the provider
package. These defaults can be overridden via environment variables or an
external configuration file, but provide sensible fallbacks for local
development and tests.

This module intentionally avoids importing from other provider packages
besides the protocol enum, to prevent circular dependencies. Only plain
constants and lightweight lookups live here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..base.protocol import ProviderId


@dataclass(frozen=True)
class ProviderDefaults:
    """Presentation and connection defaults for one provider."""

    label: str
    description: str
    default_model: str
    default_base_url: Optional[str] = None


@dataclass(frozen=True)
class ModelOption:
    """One selectable model in a provider's catalogue."""

    id: str
    label: str
    description: str


# Provider selected when AICE_PROVIDER is unset.
DEFAULT_PROVIDER_ID = ProviderId.OPENAI

# ---- Provider-specific sane defaults ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"

ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-20250514"
# Anthropic requires an explicit output cap on every request.
ANTHROPIC_DEFAULT_MAX_TOKENS = 1024

DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com"

OPENAI_AGENTS_DEFAULT_MODEL = "gpt-4.1"
OPENAI_AGENTS_DEFAULT_INSTRUCTIONS = "You are a helpful assistant."


PROVIDER_DEFAULTS: Dict[ProviderId, ProviderDefaults] = {
    ProviderId.OPENAI: ProviderDefaults(
        label="OpenAI",
        description="Responses API (default)",
        default_model=OPENAI_DEFAULT_MODEL,
    ),
    ProviderId.ANTHROPIC: ProviderDefaults(
        label="Anthropic",
        description="Claude Messages API",
        default_model=ANTHROPIC_DEFAULT_MODEL,
    ),
    ProviderId.DEEPSEEK: ProviderDefaults(
        label="DeepSeek",
        description="DeepSeek chat + reasoning",
        default_model=DEEPSEEK_DEFAULT_MODEL,
        default_base_url=DEEPSEEK_DEFAULT_BASE_URL,
    ),
    ProviderId.OPENAI_AGENTS: ProviderDefaults(
        label="OpenAI Agents",
        description="Agents SDK with workspace tools",
        default_model=OPENAI_AGENTS_DEFAULT_MODEL,
    ),
}


PROVIDER_MODELS: Dict[ProviderId, Tuple[ModelOption, ...]] = {
    ProviderId.OPENAI: (
        ModelOption("gpt-4o-mini", "GPT-4o mini", "Fast, inexpensive default."),
        ModelOption("gpt-4o", "GPT-4o", "General purpose flagship."),
        ModelOption("gpt-4.1", "GPT-4.1", "Long context, strong coding."),
    ),
    ProviderId.ANTHROPIC: (
        ModelOption("claude-sonnet-4-20250514", "Claude Sonnet 4", "Balanced quality and speed."),
        ModelOption("claude-3-5-haiku-latest", "Claude 3.5 Haiku", "Fastest Claude model."),
    ),
    ProviderId.DEEPSEEK: (
        ModelOption("deepseek-chat", "DeepSeek Chat", "General chat + coding."),
        ModelOption("deepseek-reasoner", "DeepSeek Reasoner", "Reasoning-heavy responses."),
    ),
    ProviderId.OPENAI_AGENTS: (
        ModelOption("gpt-4.1", "GPT-4.1", "Tool-using agent default."),
        ModelOption("gpt-4o-mini", "GPT-4o mini", "Cheaper agent runs."),
    ),
}


def get_provider_defaults(provider_id: ProviderId) -> ProviderDefaults:
    return PROVIDER_DEFAULTS[ProviderId(provider_id)]


def get_provider_model_options(provider_id: ProviderId) -> Tuple[ModelOption, ...]:
    """Return the model catalogue for a provider (empty for unknown ids)."""
    return PROVIDER_MODELS.get(provider_id, ())


def resolve_default_model(provider_id: ProviderId, model: Optional[str] = None) -> str:
    """Return ``model`` when set, otherwise the provider's default model."""
    return model or get_provider_defaults(provider_id).default_model


def resolve_default_base_url(provider_id: ProviderId, base_url: Optional[str] = None) -> Optional[str]:
    """Return ``base_url`` when set, otherwise the provider's default (may be None)."""
    return base_url or get_provider_defaults(provider_id).default_base_url


__all__ = [
    "ProviderDefaults",
    "ModelOption",
    "DEFAULT_PROVIDER_ID",
    "OPENAI_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "DEEPSEEK_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "OPENAI_AGENTS_DEFAULT_MODEL",
    "OPENAI_AGENTS_DEFAULT_INSTRUCTIONS",
    "PROVIDER_DEFAULTS",
    "PROVIDER_MODELS",
    "get_provider_defaults",
    "get_provider_model_options",
    "resolve_default_model",
    "resolve_default_base_url",
]
