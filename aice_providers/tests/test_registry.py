"""Tests for the provider registry and bindings."""
from __future__ import annotations

from types import SimpleNamespace as NS

import pytest

from aice_providers.anthropic import AnthropicProvider
from aice_providers.base.cancellation import CancellationToken
from aice_providers.base.errors import ConfigurationError
from aice_providers.base.interfaces import LLMProvider
from aice_providers.base.models import Message, ProviderRequestInput
from aice_providers.base.protocol import ProviderId
from aice_providers.config import ProviderEnv
from aice_providers.deepseek import DeepSeekProvider
from aice_providers.openai import OpenAIProvider
from aice_providers.registry import (
    PROVIDER_IDS,
    PROVIDER_REGISTRY,
    ProviderRegistryEntry,
    create_provider_binding,
    get_registry_entry,
)


def test_every_provider_is_registered():
    assert set(PROVIDER_IDS) == set(ProviderId)  # nosec B101
    assert get_registry_entry("openai-agents").class_name == "OpenAIAgentsProvider"  # nosec B101


def test_unknown_provider_rejected():
    with pytest.raises(ConfigurationError, match="Unsupported provider: mistral"):
        get_registry_entry("mistral")


@pytest.mark.parametrize(
    "provider_id, cls",
    [
        (ProviderId.OPENAI, OpenAIProvider),
        (ProviderId.ANTHROPIC, AnthropicProvider),
        (ProviderId.DEEPSEEK, DeepSeekProvider),
    ],
)
def test_binding_builds_adapter_with_injected_client(provider_id, cls):
    env = ProviderEnv(provider_id=provider_id, api_key="sk-test")
    binding = create_provider_binding(env, client=NS())
    assert isinstance(binding.provider, cls)  # nosec B101
    assert isinstance(binding.provider, LLMProvider)  # nosec B101
    assert binding.provider.id is provider_id  # nosec B101


def test_agents_binding_accepts_adapter_kwargs(tmp_path):
    env = ProviderEnv(provider_id=ProviderId.OPENAI_AGENTS, api_key="sk-test")
    binding = create_provider_binding(env, workspace_root=tmp_path, runner=NS())
    assert binding.provider.id is ProviderId.OPENAI_AGENTS  # nosec B101


def test_create_request_resolves_model_in_order():
    token = CancellationToken()
    env = ProviderEnv(provider_id=ProviderId.DEEPSEEK, api_key="sk-test", model="deepseek-reasoner")
    binding = create_provider_binding(env, client=NS())

    request = binding.create_request(
        ProviderRequestInput(prompt="hi", messages=[Message("user", "earlier")], cancellation_token=token)
    )
    assert request.provider_id is ProviderId.DEEPSEEK  # nosec B101
    assert request.model == "deepseek-reasoner"  # nosec B101
    assert request.cancellation_token is token  # nosec B101
    assert request.messages == (Message("user", "earlier"),)  # nosec B101

    explicit = binding.create_request(ProviderRequestInput(prompt="hi", model="deepseek-chat"))
    assert explicit.model == "deepseek-chat"  # nosec B101

    bare = create_provider_binding(ProviderEnv(provider_id=ProviderId.DEEPSEEK, api_key="k"), client=NS())
    assert bare.create_request(ProviderRequestInput(prompt="hi")).model == "deepseek-chat"  # nosec B101


def test_create_request_keeps_recent_history():
    binding = create_provider_binding(ProviderEnv(provider_id=ProviderId.DEEPSEEK, api_key="k"), client=NS())
    history = [Message("user", "one"), Message("assistant", "two"), Message("user", "three")]

    recent = binding.create_request(ProviderRequestInput(prompt="four", messages=history, max_messages=2))
    assert recent.messages == (Message("assistant", "two"), Message("user", "three"))  # nosec B101
    assert recent.prompt == "four"  # nosec B101

    full = binding.create_request(ProviderRequestInput(prompt="four", messages=history))
    assert full.messages == tuple(history)  # nosec B101


def test_binding_for_other_provider_than_env():
    env = ProviderEnv(provider_id=ProviderId.OPENAI, api_key="sk-test")
    binding = create_provider_binding(env, "anthropic", client=NS())
    assert binding.provider.id is ProviderId.ANTHROPIC  # nosec B101


def test_adapter_import_failure_is_configuration_error():
    entry = ProviderRegistryEntry(ProviderId.OPENAI, "aice_providers.not_a_module", "Nope")
    with pytest.raises(ConfigurationError, match="Failed to import adapter"):
        entry.load_class()
    missing_class = ProviderRegistryEntry(ProviderId.OPENAI, "aice_providers.openai.client", "Nope")
    with pytest.raises(ConfigurationError, match="not found"):
        missing_class.load_class()


def test_probe_model_defaults():
    entry = PROVIDER_REGISTRY[ProviderId.ANTHROPIC]
    assert entry.probe_model(ProviderEnv(provider_id=ProviderId.ANTHROPIC, api_key="k")) == "claude-sonnet-4-20250514"  # nosec B101
