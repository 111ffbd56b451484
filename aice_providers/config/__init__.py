"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (models, base URLs).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by AICE_CONFIG_FILE
    3. Environment variables (e.g. OPENAI_MODEL, OPENAI_API_KEY)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider)``.
* Resolve the active provider environment (``load_provider_env``) for the
  chat surface and the connectivity probe.

Environment Variable Conventions
--------------------------------
<PREFIX>_MODEL, <PREFIX>_API_KEY, <PREFIX>_BASE_URL where PREFIX is the
upper-cased provider id with dashes replaced (``OPENAI_AGENTS``). Each also
accepts an ``AICE_`` prefixed form. ``AICE_PROVIDER`` selects the active
provider and ``AICE_MODEL`` overrides its model.

External Config File (Optional)
-------------------------------
If AICE_CONFIG_FILE is set to a path, JSON is attempted first, then YAML.
Structure example:

```
openai:
  model: gpt-4o-mini
deepseek:
  model: deepseek-reasoner
  base_url: https://api.deepseek.com
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
* load_provider_env(provider_id=None) -> ProviderEnv
* try_load_provider_env(provider_id=None) -> (ProviderEnv | None, Exception | None)
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

from ..base.errors import ConfigurationError
from ..base.protocol import ProviderId, parse_provider_id
from .defaults import DEFAULT_PROVIDER_ID, PROVIDER_DEFAULTS
from .env import env_prefix, is_placeholder, resolve_provider_key

# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    provider.value: {
        k: v
        for k, v in {"model": d.default_model, "base_url": d.default_base_url}.items()
        if v is not None
    }
    for provider, d in PROVIDER_DEFAULTS.items()
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader (no external dependency).

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders (e.g., contain 'placeholder').
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("AICE_DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):]
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("AICE_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = data
    return data


def reset_config_cache() -> None:
    """Forget the cached config file and .env state (tests, config reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = env_prefix(provider)
    for field, suffix in ENV_FIELD_MAP.items():
        for name in (f"{prefix}_{suffix}", f"AICE_{prefix}_{suffix}"):
            val = os.getenv(name)
            if val is not None and val.strip():
                out[field] = val.strip()
                break
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> key aliases -> overrides
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    # 1. Defaults
    cfg |= DEFAULTS.get(name, {})

    # 2. External config file section
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    # 3. Env overrides
    cfg |= _env_overrides(name)

    # 4. API key via canonical/alias env names (only if not already set)
    if not cfg.get("api_key"):
        key, _ = resolve_provider_key(name)
        if key:
            cfg["api_key"] = key

    # 5. Explicit overrides arg
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


class ProviderEnv(BaseModel):
    """Resolved connection settings for the active provider.

    ``model`` and ``base_url`` are optional; bindings fall back to provider
    defaults when they are absent.
    """

    model_config = ConfigDict(frozen=True)

    provider_id: ProviderId
    api_key: str = Field(min_length=1, repr=False)
    base_url: Optional[str] = None
    model: Optional[str] = None


def _selected_provider(provider_id: Union[ProviderId, str, None]) -> ProviderId:
    raw = provider_id if provider_id is not None else os.getenv("AICE_PROVIDER") or DEFAULT_PROVIDER_ID
    parsed = parse_provider_id(raw.strip() if isinstance(raw, str) else raw)
    if parsed is None:
        raise ConfigurationError(f"Unsupported provider: {raw}")
    return parsed


def load_provider_env(provider_id: Union[ProviderId, str, None] = None) -> ProviderEnv:
    """Resolve the :class:`ProviderEnv` for ``provider_id`` (or ``AICE_PROVIDER``).

    Raises:
        ConfigurationError: unknown provider id or no API key configured.
    """
    _load_dotenv_once()
    provider = _selected_provider(provider_id)
    cfg = get_provider_config(provider.value)
    api_key = cfg.get("api_key")
    if not api_key:
        raise ConfigurationError(
            f"Missing API key for {provider.value}; set {env_prefix(provider.value)}_API_KEY",
            provider=provider.value,
        )
    model = os.getenv("AICE_MODEL", "").strip() or cfg.get("model")
    return ProviderEnv(
        provider_id=provider,
        api_key=api_key,
        base_url=cfg.get("base_url"),
        model=model,
    )


def try_load_provider_env(
    provider_id: Union[ProviderId, str, None] = None,
) -> Tuple[Optional[ProviderEnv], Optional[Exception]]:
    """Like :func:`load_provider_env` but returns ``(env, error)`` instead of raising."""
    try:
        return load_provider_env(provider_id), None
    except ConfigurationError as exc:
        return None, exc


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
    "ProviderEnv",
    "load_provider_env",
    "try_load_provider_env",
]
