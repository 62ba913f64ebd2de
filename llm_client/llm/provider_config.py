"""Provider registry and configuration loading for the LLM layer.

Architectural role:
    Centralizes mode selection and credential lookup for `llm_client.llm.service`
    and `llm_client.llm.client`. Maps a mode name to an immutable
    `ProviderProfile` built from an already-loaded configuration mapping.

Model call flow integration:
    - `engine.run` loads nothing itself; it receives the mapping produced by
      `load_config` and calls `resolve_profile`.
    - `service.build_payload` consumes `profile.payload_shape` and `profile.model`.
    - `client.send_request` consumes `profile.api_url`, `profile.api_key` and
      `profile.auth_header`.

Determinism:
    `resolve_profile` is pure: it reads only the mapping it is given and performs
    no I/O. `load_config` reads one file plus the process environment.

Failure behavior:
    Missing key or URL is fatal (`MissingCredentialError`). A missing model is
    tolerated. A missing extraction path only sets `extraction_disabled`.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import dotenv_values

from llm_client.core.errors import (
    ConfigNotFoundError,
    ConfigUnreadableError,
    MissingCredentialError,
    MissingModeError,
    UnsupportedModeError,
)
from llm_client.core.types import AuthHeader, PayloadShape, ProviderProfile


DEFAULT_CONFIG_FILE = os.path.join(os.path.expanduser("~"), ".config", "llm_client.conf")
DEFAULT_LOG_FILE = os.path.join(os.path.expanduser("~"), "logs", "llm_client.log")

# Global configuration keys.
DEFAULT_MODE_KEY = "DEFAULT_LLM_MODE"
DEFAULT_MAX_TOKEN_KEY = "DEFAULT_MAX_TOKEN"
LOG_FILE_KEY = "LOG_FILE"

# Keys whose values still start with this prefix were never filled in.
PLACEHOLDER_PREFIX = "YOUR_"


@dataclass(frozen=True)
class ProviderSpec:
    """Static request dialect and auth layout of one mode."""

    payload_shape: PayloadShape
    auth_header: AuthHeader


# Mode -> request dialect. OpenAI-compatible endpoints share one entry shape.
PROVIDERS = {
    "openai": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "groq": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "mistral": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "openrouter": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "together": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "deepinfra": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "fireworks": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "local": ProviderSpec(PayloadShape.OPENAI, AuthHeader.BEARER),
    "gemini": ProviderSpec(PayloadShape.GEMINI, AuthHeader.GOOG_API_KEY),
    "anthropic": ProviderSpec(PayloadShape.ANTHROPIC, AuthHeader.X_API_KEY),
}


@dataclass(frozen=True)
class ModeKeys:
    """Configuration key names holding one mode's settings."""

    api_key: str
    api_url: str
    model: str
    json_path: str

    @classmethod
    def for_mode(cls, mode: str) -> "ModeKeys":
        prefix = mode.upper()
        return cls(
            api_key=f"{prefix}_API_KEY",
            api_url=f"{prefix}_API_URL",
            model=f"{prefix}_MODEL",
            json_path=f"{prefix}_JSON_PATH",
        )


MODE_KEYS = {mode: ModeKeys.for_mode(mode) for mode in PROVIDERS}


def supported_modes():
    """Return known mode names in sorted order."""
    return sorted(PROVIDERS)


def _lookup(config: Mapping[str, str], key: str) -> str | None:
    value = config.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def resolve_mode(mode: str | None, config: Mapping[str, str]) -> str:
    """Return the effective mode: explicit value first, then `DEFAULT_LLM_MODE`.

    Raises:
        MissingModeError: Neither source provides a mode.
    """
    effective = (mode or "").strip() or _lookup(config, DEFAULT_MODE_KEY)
    if not effective:
        raise MissingModeError()
    return effective


def resolve_profile(mode: str | None, config: Mapping[str, str], extract: bool = False) -> ProviderProfile:
    """Map a mode name to a provider profile.

    Args:
        mode: Mode name from the command line, or `None` to use
            `DEFAULT_LLM_MODE` from config. Matched case-insensitively.
        config: Already-loaded configuration mapping.
        extract: Whether the caller asked for response extraction.

    Returns:
        Immutable `ProviderProfile`.

    Raises:
        MissingModeError: No mode given and no default configured.
        UnsupportedModeError: Mode is not a known provider.
        MissingCredentialError: API key missing or placeholder, or URL missing.

    Edge cases:
        - Empty config values count as missing.
        - Missing model yields `profile.model is None`.
        - `extract=True` without a json path yields `extraction_disabled=True`.
    """
    name = resolve_mode(mode, config).lower()
    spec = PROVIDERS.get(name)
    if spec is None:
        raise UnsupportedModeError(name)

    keys = MODE_KEYS[name]

    api_key = _lookup(config, keys.api_key)
    if not api_key or api_key.startswith(PLACEHOLDER_PREFIX):
        raise MissingCredentialError(name, keys.api_key, "API key")

    api_url = _lookup(config, keys.api_url)
    if not api_url:
        raise MissingCredentialError(name, keys.api_url, "API URL")

    json_path = _lookup(config, keys.json_path)

    return ProviderProfile(
        mode=name,
        api_url=api_url,
        api_key=api_key,
        payload_shape=spec.payload_shape,
        auth_header=spec.auth_header,
        model=_lookup(config, keys.model),
        json_path=json_path,
        extraction_disabled=bool(extract and not json_path),
    )


def load_config(path: str | None = None) -> dict[str, str]:
    """Load a `KEY=VALUE` configuration file.

    Resolution order:
        1. Non-empty values from the file at `path`.
        2. Process environment for keys the file does not set.

    Args:
        path: Config file path, or `None` for `DEFAULT_CONFIG_FILE`.

    Returns:
        Merged mapping of configuration keys to string values.

    Raises:
        ConfigNotFoundError: The file does not exist.
        ConfigUnreadableError: The file cannot be read or is not valid UTF-8.

    Values are taken literally; `${VAR}` references are not expanded.
    """
    config_path = os.path.expanduser(path or DEFAULT_CONFIG_FILE)
    if not os.path.isfile(config_path):
        raise ConfigNotFoundError(config_path)

    try:
        raw_values = dotenv_values(config_path, interpolate=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigUnreadableError(config_path, str(exc)) from exc

    file_values = {
        key: value.strip()
        for key, value in raw_values.items()
        if value is not None and value.strip()
    }

    merged = {key: value for key, value in os.environ.items() if value}
    merged.update(file_values)
    return merged
