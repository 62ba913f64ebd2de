from __future__ import annotations

import pytest

from llm_client.core.errors import (
    ConfigNotFoundError,
    ConfigUnreadableError,
    MissingCredentialError,
    MissingModeError,
    UnsupportedModeError,
)
from llm_client.core.types import AuthHeader, PayloadShape
from llm_client.llm.provider_config import load_config, resolve_profile, supported_modes


def test_resolve_openai_profile(base_config) -> None:
    profile = resolve_profile("openai", base_config)
    assert profile.mode == "openai"
    assert profile.api_url == "https://api.example.test/v1/chat/completions"
    assert profile.api_key == "sk-test"
    assert profile.model == "gpt-test"
    assert profile.payload_shape is PayloadShape.OPENAI
    assert profile.auth_header is AuthHeader.BEARER
    assert profile.extraction_disabled is False


def test_mode_is_case_insensitive(base_config) -> None:
    profile = resolve_profile("GeMiNi", base_config)
    assert profile.mode == "gemini"
    assert profile.payload_shape is PayloadShape.GEMINI
    assert profile.auth_header is AuthHeader.GOOG_API_KEY


def test_default_mode_comes_from_config(base_config) -> None:
    base_config["DEFAULT_LLM_MODE"] = "gemini"
    assert resolve_profile(None, base_config).mode == "gemini"


def test_missing_mode_is_fatal(base_config) -> None:
    del base_config["DEFAULT_LLM_MODE"]
    with pytest.raises(MissingModeError):
        resolve_profile(None, base_config)


def test_unknown_mode_is_rejected(base_config) -> None:
    with pytest.raises(UnsupportedModeError) as excinfo:
        resolve_profile("cohere", base_config)
    assert excinfo.value.mode == "cohere"


@pytest.mark.parametrize("key", [None, "", "YOUR_OPENAI_API_KEY"])
def test_missing_or_placeholder_key_is_fatal(base_config, key) -> None:
    if key is None:
        del base_config["OPENAI_API_KEY"]
    else:
        base_config["OPENAI_API_KEY"] = key
    with pytest.raises(MissingCredentialError) as excinfo:
        resolve_profile("openai", base_config)
    assert excinfo.value.config_key == "OPENAI_API_KEY"


def test_missing_url_is_fatal(base_config) -> None:
    del base_config["OPENAI_API_URL"]
    with pytest.raises(MissingCredentialError) as excinfo:
        resolve_profile("openai", base_config)
    assert excinfo.value.config_key == "OPENAI_API_URL"


def test_missing_model_is_tolerated(base_config) -> None:
    del base_config["OPENAI_MODEL"]
    assert resolve_profile("openai", base_config).model is None


def test_extraction_without_path_is_disabled_not_fatal(base_config) -> None:
    del base_config["OPENAI_JSON_PATH"]
    profile = resolve_profile("openai", base_config, extract=True)
    assert profile.extraction_disabled is True
    assert profile.json_path is None


def test_extraction_not_requested_is_never_disabled(base_config) -> None:
    del base_config["OPENAI_JSON_PATH"]
    assert resolve_profile("openai", base_config, extract=False).extraction_disabled is False


def test_repr_hides_api_key(base_config) -> None:
    assert "sk-test" not in repr(resolve_profile("openai", base_config))


def test_supported_modes_include_known_dialects() -> None:
    modes = supported_modes()
    assert {"openai", "gemini", "anthropic"} <= set(modes)
    assert modes == sorted(modes)


def test_load_config_parses_file_and_skips_empty_values(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    config_file = tmp_path / "llm_client.conf"
    config_file.write_text(
        "# comment line\n"
        "\n"
        "DEFAULT_LLM_MODE=openai\n"
        "OPENAI_API_KEY=sk-file  # inline comment\n"
        "OPENAI_JSON_PATH=.choices[0].message.content\n"
        "OPENAI_MODEL=\n",
        encoding="utf-8",
    )
    config = load_config(str(config_file))
    assert config["DEFAULT_LLM_MODE"] == "openai"
    assert config["OPENAI_API_KEY"] == "sk-file"
    assert config["OPENAI_JSON_PATH"] == ".choices[0].message.content"
    assert "OPENAI_MODEL" not in config


def test_load_config_file_overrides_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_API_URL", "https://env.example.test")
    config_file = tmp_path / "llm_client.conf"
    config_file.write_text("OPENAI_API_KEY=sk-file\n", encoding="utf-8")
    config = load_config(str(config_file))
    assert config["OPENAI_API_KEY"] == "sk-file"
    assert config["OPENAI_API_URL"] == "https://env.example.test"


def test_load_config_missing_file(tmp_path) -> None:
    missing = tmp_path / "nope.conf"
    with pytest.raises(ConfigNotFoundError) as excinfo:
        load_config(str(missing))
    assert excinfo.value.path == str(missing)


def test_load_config_non_utf8_file(tmp_path) -> None:
    config_file = tmp_path / "llm_client.conf"
    config_file.write_bytes(b"# caf\xe9 settings\nDEFAULT_LLM_MODE=openai\n")
    with pytest.raises(ConfigUnreadableError) as excinfo:
        load_config(str(config_file))
    assert excinfo.value.path == str(config_file)


def test_load_config_keeps_variable_references_literal(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("OTHER", "expanded")
    config_file = tmp_path / "llm_client.conf"
    config_file.write_text("OPENAI_API_KEY=sk-${OTHER}\n", encoding="utf-8")
    assert load_config(str(config_file))["OPENAI_API_KEY"] == "sk-${OTHER}"
