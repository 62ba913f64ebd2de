from __future__ import annotations

import logging

import pytest

from llm_client.core.types import AuthHeader, PayloadShape, ProviderProfile


class FakeResponse:
    def __init__(self, status_code, text: str = "") -> None:
        self.status_code = status_code
        self.text = text
        self.closed = False

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.closed = True


class FakePost:
    """Stands in for `requests.post`, recording every call."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def __call__(self, url, headers=None, data=None, **kwargs):
        self.calls.append({"url": url, "headers": headers, "data": data, "kwargs": kwargs})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_post(monkeypatch):
    def install(response: FakeResponse | None = None, error: Exception | None = None) -> FakePost:
        post = FakePost(response=response, error=error)
        monkeypatch.setattr("llm_client.llm.client.requests.post", post)
        return post

    return install


@pytest.fixture
def openai_profile() -> ProviderProfile:
    return ProviderProfile(
        mode="openai",
        api_url="https://api.example.test/v1/chat/completions",
        api_key="sk-test",
        payload_shape=PayloadShape.OPENAI,
        auth_header=AuthHeader.BEARER,
        model="gpt-test",
        json_path=".choices[0].message.content",
    )


@pytest.fixture
def gemini_profile() -> ProviderProfile:
    return ProviderProfile(
        mode="gemini",
        api_url="https://gemini.example.test/v1beta/models/g:generateContent",
        api_key="g-test",
        payload_shape=PayloadShape.GEMINI,
        auth_header=AuthHeader.GOOG_API_KEY,
        model="g",
        json_path="candidates[0].content.parts[0].text",
    )


@pytest.fixture
def base_config() -> dict[str, str]:
    return {
        "DEFAULT_LLM_MODE": "openai",
        "DEFAULT_MAX_TOKEN": "256",
        "OPENAI_API_KEY": "sk-test",
        "OPENAI_API_URL": "https://api.example.test/v1/chat/completions",
        "OPENAI_MODEL": "gpt-test",
        "OPENAI_JSON_PATH": ".choices[0].message.content",
        "GEMINI_API_KEY": "g-test",
        "GEMINI_API_URL": "https://gemini.example.test/v1beta/models/g:generateContent",
        "GEMINI_MODEL": "g",
        "GEMINI_JSON_PATH": "candidates[0].content.parts[0].text",
    }


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("llm_client")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
