"""Prompt-to-payload adapter for LLM invocation.

Architectural role:
    Builds the provider-specific JSON request body for one prompt. This module
    bridges the orchestrator (`llm_client.core.engine`) to transport
    (`llm_client.llm.client`).

Model call flow:
    profile + prompt + token limit -> shape-specific builder -> payload dict ->
    `serialize_payload` -> `client.send_request(...)`.

Token behavior:
    The token limit comes from the command line, then `DEFAULT_MAX_TOKEN`, then
    `DEFAULT_MAX_TOKENS`. It must be a positive integer and is emitted as a JSON
    number.

Parameter semantics:
    `DEFAULT_TEMPERATURE` is a fixed sampling default applied to every shape. It
    is not user-configurable.

Determinism:
    Payload construction is deterministic for fixed inputs.
"""

import json
import re
from collections.abc import Mapping

from llm_client.core.errors import EmptyPromptError, InvalidTokenLimitError, UnsupportedShapeError
from llm_client.core.types import PayloadShape, ProviderProfile
from llm_client.llm.provider_config import DEFAULT_MAX_TOKEN_KEY


DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1024


def parse_token_limit(value) -> int:
    """Validate a token limit given as an int or a base-10 string.

    Raises:
        InvalidTokenLimitError: Value is not a positive integer.
    """
    if isinstance(value, bool):
        raise InvalidTokenLimitError(value)
    if isinstance(value, int):
        limit = value
    else:
        text = str(value).strip()
        if not re.fullmatch(r"[0-9]+", text):
            raise InvalidTokenLimitError(value)
        limit = int(text)
    if limit <= 0:
        raise InvalidTokenLimitError(value)
    return limit


def resolve_max_tokens(max_tokens, config: Mapping[str, str]) -> int:
    """Return the effective token limit: explicit value, config default, built-in default."""
    if max_tokens is not None:
        return parse_token_limit(max_tokens)
    configured = config.get(DEFAULT_MAX_TOKEN_KEY)
    if configured is not None and str(configured).strip():
        return parse_token_limit(configured)
    return DEFAULT_MAX_TOKENS


def _user_messages(prompt: str) -> list[dict]:
    return [{"role": "user", "content": prompt}]


def _build_openai(profile: ProviderProfile, prompt: str, max_tokens: int) -> dict:
    payload = {}
    # Without a model the key is left out so the endpoint applies its default.
    if profile.model:
        payload["model"] = profile.model
    payload["messages"] = _user_messages(prompt)
    payload["max_tokens"] = max_tokens
    payload["temperature"] = DEFAULT_TEMPERATURE
    return payload


def _build_gemini(profile: ProviderProfile, prompt: str, max_tokens: int) -> dict:
    return {
        "contents": [
            {"parts": [{"text": prompt}]},
        ],
        "generationConfig": {
            "temperature": DEFAULT_TEMPERATURE,
            "maxOutputTokens": max_tokens,
        },
    }


def _build_anthropic(profile: ProviderProfile, prompt: str, max_tokens: int) -> dict:
    payload = {}
    if profile.model:
        payload["model"] = profile.model
    payload["max_tokens"] = max_tokens
    payload["messages"] = _user_messages(prompt)
    payload["temperature"] = DEFAULT_TEMPERATURE
    return payload


PAYLOAD_BUILDERS = {
    PayloadShape.OPENAI: _build_openai,
    PayloadShape.GEMINI: _build_gemini,
    PayloadShape.ANTHROPIC: _build_anthropic,
}


def build_payload(profile: ProviderProfile, prompt: str, max_tokens) -> dict:
    """Build the request body for `profile.payload_shape`.

    Args:
        profile: Resolved provider profile.
        prompt: Non-empty prompt text, embedded verbatim.
        max_tokens: Positive integer (or digit string) token limit.

    Returns:
        JSON-serializable payload dict.

    Raises:
        EmptyPromptError: Prompt is empty.
        InvalidTokenLimitError: Token limit is not a positive integer.
        UnsupportedShapeError: No builder is registered for the shape.
    """
    if not prompt:
        raise EmptyPromptError()
    limit = parse_token_limit(max_tokens)

    builder = PAYLOAD_BUILDERS.get(profile.payload_shape)
    if builder is None:
        raise UnsupportedShapeError(profile.payload_shape)
    return builder(profile, prompt, limit)


def serialize_payload(payload: dict) -> str:
    """Return the JSON request body."""
    return json.dumps(payload, ensure_ascii=False)
