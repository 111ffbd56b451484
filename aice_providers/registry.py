"""Provider registry and binding factory.

Purpose
-------
Map each :class:`~aice_providers.base.protocol.ProviderId` to its adapter
class and build a :class:`ProviderBinding`: a configured adapter paired with
the function that turns caller input into a ``SessionRequest`` for it.

Adapters are imported lazily with ``importlib`` when a binding needs their
class, and the Agents SDK is only loaded when the agent adapter is selected.

Failure modes
-------------
Unknown provider ids, adapter import failures and adapter constructor
configuration errors all surface as :class:`ConfigurationError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from typing import Any, Dict, Optional, Union

from .base.errors import ConfigurationError
from .base.interfaces import LLMProvider
from .base.models import ProviderRequestInput, SessionRequest
from .base.protocol import ProviderId, parse_provider_id
from .base.utils.messages import truncate_history
from .config import ProviderEnv
from .config.defaults import (
    ProviderDefaults,
    get_provider_defaults,
    resolve_default_base_url,
    resolve_default_model,
)


@dataclass(frozen=True)
class ProviderBinding:
    """A configured adapter and the request builder that targets it."""

    provider: LLMProvider
    env: ProviderEnv

    def create_request(self, request_input: ProviderRequestInput) -> SessionRequest:
        """Build a ``SessionRequest`` for this binding's adapter.

        The model resolves from the input, then the environment, then the
        provider's default model. History is cut to the last
        ``max_messages`` turns when a limit is given.
        """
        provider_id = self.provider.id
        return SessionRequest(
            provider_id=provider_id,
            model=resolve_default_model(provider_id, request_input.model or self.env.model),
            prompt=request_input.prompt,
            messages=tuple(truncate_history(request_input.messages, request_input.max_messages)),
            system_prompt=request_input.system_prompt,
            temperature=request_input.temperature,
            max_tokens=request_input.max_tokens,
            cancellation_token=request_input.cancellation_token,
        )


@dataclass(frozen=True)
class ProviderRegistryEntry:
    """Where an adapter lives and how to construct it from a ``ProviderEnv``."""

    provider_id: ProviderId
    module: str
    class_name: str

    @property
    def defaults(self) -> ProviderDefaults:
        return get_provider_defaults(self.provider_id)

    def load_class(self) -> type:
        try:
            module = import_module(self.module)
        except ImportError as exc:
            raise ConfigurationError(
                f"Failed to import adapter for '{self.provider_id.value}': {exc}",
                provider=self.provider_id.value,
            ) from exc
        try:
            return getattr(module, self.class_name)
        except AttributeError as exc:
            raise ConfigurationError(
                f"Adapter class '{self.class_name}' not found in '{self.module}'",
                provider=self.provider_id.value,
            ) from exc

    def create_provider(self, env: ProviderEnv, **adapter_kwargs: Any) -> LLMProvider:
        cls = self.load_class()
        return cls(
            env.api_key,
            base_url=resolve_default_base_url(self.provider_id, env.base_url),
            model=env.model,
            **adapter_kwargs,
        )

    def create_binding(self, env: ProviderEnv, **adapter_kwargs: Any) -> ProviderBinding:
        return ProviderBinding(provider=self.create_provider(env, **adapter_kwargs), env=env)

    def probe_model(self, env: ProviderEnv) -> str:
        """Model used by the connectivity probe."""
        return env.model or self.defaults.default_model


PROVIDER_REGISTRY: Dict[ProviderId, ProviderRegistryEntry] = {
    ProviderId.OPENAI: ProviderRegistryEntry(ProviderId.OPENAI, "aice_providers.openai.client", "OpenAIProvider"),
    ProviderId.ANTHROPIC: ProviderRegistryEntry(
        ProviderId.ANTHROPIC, "aice_providers.anthropic.client", "AnthropicProvider"
    ),
    ProviderId.DEEPSEEK: ProviderRegistryEntry(ProviderId.DEEPSEEK, "aice_providers.deepseek.client", "DeepSeekProvider"),
    ProviderId.OPENAI_AGENTS: ProviderRegistryEntry(
        ProviderId.OPENAI_AGENTS, "aice_providers.openai_agents.client", "OpenAIAgentsProvider"
    ),
}

PROVIDER_IDS = tuple(PROVIDER_REGISTRY)


def get_registry_entry(provider_id: Union[ProviderId, str]) -> ProviderRegistryEntry:
    parsed = parse_provider_id(provider_id)
    if parsed is None or parsed not in PROVIDER_REGISTRY:
        raise ConfigurationError(f"Unsupported provider: {provider_id}")
    return PROVIDER_REGISTRY[parsed]


def create_provider_binding(
    env: ProviderEnv,
    provider_id: Optional[Union[ProviderId, str]] = None,
    **adapter_kwargs: Any,
) -> ProviderBinding:
    """Create the binding for ``provider_id`` (defaults to ``env.provider_id``).

    ``adapter_kwargs`` are forwarded to the adapter constructor (an injected
    SDK ``client``, ``workspace_root`` for the agent adapter, ...).
    """
    return get_registry_entry(provider_id or env.provider_id).create_binding(env, **adapter_kwargs)


__all__ = [
    "ProviderBinding",
    "ProviderRegistryEntry",
    "PROVIDER_REGISTRY",
    "PROVIDER_IDS",
    "get_registry_entry",
    "create_provider_binding",
]
