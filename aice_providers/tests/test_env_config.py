"""Tests for provider configuration and environment resolution."""
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from aice_providers.base.errors import ConfigurationError
from aice_providers.base.protocol import ProviderId
from aice_providers.config import (
    ProviderEnv,
    get_model,
    get_provider_config,
    load_provider_env,
    reset_config_cache,
    try_load_provider_env,
)
from aice_providers.config.defaults import (
    get_provider_model_options,
    resolve_default_base_url,
    resolve_default_model,
)
from aice_providers.config.env import (
    env_prefix,
    get_env_var_candidates,
    get_env_var_name,
    is_placeholder,
    resolve_provider_key,
)


def test_defaults_without_env():
    cfg = get_provider_config("deepseek")
    assert cfg == {"model": "deepseek-chat", "base_url": "https://api.deepseek.com"}  # nosec B101
    assert get_model("openai") == "gpt-4o-mini"  # nosec B101


def test_env_overrides_and_alias(monkeypatch):
    monkeypatch.setenv("AICE_ANTHROPIC_API_KEY", "sk-ant-alias")
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-custom")
    cfg = get_provider_config("anthropic")
    assert cfg["api_key"] == "sk-ant-alias"  # nosec B101
    assert cfg["model"] == "claude-custom"  # nosec B101


def test_canonical_key_wins_over_alias(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-canonical")
    monkeypatch.setenv("AICE_OPENAI_API_KEY", "sk-alias")
    assert resolve_provider_key("openai") == ("sk-canonical", "OPENAI_API_KEY")  # nosec B101


def test_agents_provider_reuses_openai_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
    env = load_provider_env("openai-agents")
    assert env.provider_id is ProviderId.OPENAI_AGENTS  # nosec B101
    assert env.api_key == "sk-openai"  # nosec B101
    assert env.model == "gpt-4.1"  # nosec B101


def test_load_provider_env_from_selection(monkeypatch):
    monkeypatch.setenv("AICE_PROVIDER", "deepseek")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-ds")
    monkeypatch.setenv("AICE_MODEL", "deepseek-reasoner")
    env = load_provider_env()
    assert env.provider_id is ProviderId.DEEPSEEK  # nosec B101
    assert env.model == "deepseek-reasoner"  # nosec B101
    assert env.base_url == "https://api.deepseek.com"  # nosec B101
    assert "sk-ds" not in repr(env)  # nosec B101


def test_missing_key_is_configuration_error():
    with pytest.raises(ConfigurationError, match="Missing API key for anthropic; set ANTHROPIC_API_KEY"):
        load_provider_env(ProviderId.ANTHROPIC)
    env, error = try_load_provider_env("anthropic")
    assert env is None and isinstance(error, ConfigurationError)  # nosec B101


def test_unknown_provider_is_configuration_error(monkeypatch):
    monkeypatch.setenv("AICE_PROVIDER", "gemini")
    with pytest.raises(ConfigurationError, match="Unsupported provider: gemini"):
        load_provider_env()


def test_yaml_config_file(monkeypatch, tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text("openai:\n  model: gpt-from-yaml\n  base_url: https://proxy.local/v1\n", encoding="utf-8")
    monkeypatch.setenv("AICE_CONFIG_FILE", str(path))
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    reset_config_cache()
    env = load_provider_env("openai")
    assert env.model == "gpt-from-yaml"  # nosec B101
    assert env.base_url == "https://proxy.local/v1"  # nosec B101


def test_json_config_file_loses_to_env(monkeypatch, tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"anthropic": {"model": "claude-file"}}), encoding="utf-8")
    monkeypatch.setenv("AICE_CONFIG_FILE", str(path))
    reset_config_cache()
    assert get_model("anthropic") == "claude-file"  # nosec B101
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-env")
    assert get_model("anthropic") == "claude-env"  # nosec B101


def test_invalid_yaml_raises(monkeypatch, tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("openai: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("AICE_CONFIG_FILE", str(path))
    reset_config_cache()
    with pytest.raises(ConfigurationError, match="Invalid config file"):
        get_provider_config("openai")


def test_dotenv_file_is_loaded(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text("# local keys\nexport DEEPSEEK_API_KEY='sk-from-dotenv'\n", encoding="utf-8")
    monkeypatch.setenv("AICE_DOTENV_FILE", str(dotenv))
    monkeypatch.setenv("DEEPSEEK_API_KEY", "placeholder")
    reset_config_cache()
    env = load_provider_env("deepseek")
    assert env.api_key == "sk-from-dotenv"  # nosec B101


def test_overrides_argument_wins():
    cfg = get_provider_config("openai", overrides={"model": "gpt-override", "base_url": None})
    assert cfg["model"] == "gpt-override"  # nosec B101
    assert "base_url" not in cfg  # nosec B101


def test_provider_env_validation():
    with pytest.raises(ValidationError):
        ProviderEnv(provider_id="openai", api_key="")
    env = ProviderEnv(provider_id="anthropic", api_key="k")
    assert env.provider_id is ProviderId.ANTHROPIC  # nosec B101


def test_env_helpers():
    assert env_prefix("openai-agents") == "OPENAI_AGENTS"  # nosec B101
    assert get_env_var_name("DeepSeek") == "DEEPSEEK_API_KEY"  # nosec B101
    assert list(get_env_var_candidates("openai")) == ["OPENAI_API_KEY", "AICE_OPENAI_API_KEY"]  # nosec B101
    assert is_placeholder("your-key-placeholder")  # nosec B101
    assert not is_placeholder("sk-live")  # nosec B101


def test_default_resolution_helpers():
    assert resolve_default_model(ProviderId.ANTHROPIC) == "claude-sonnet-4-20250514"  # nosec B101
    assert resolve_default_model(ProviderId.ANTHROPIC, "claude-x") == "claude-x"  # nosec B101
    assert resolve_default_base_url(ProviderId.OPENAI) is None  # nosec B101
    assert resolve_default_base_url(ProviderId.DEEPSEEK) == "https://api.deepseek.com"  # nosec B101
    assert get_provider_model_options(ProviderId.OPENAI)  # nosec B101
