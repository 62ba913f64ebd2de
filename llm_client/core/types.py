"""Data contracts shared by the request pipeline.

Architectural role:
    Defines the immutable records passed between pipeline stages in
    `llm_client.core.engine`: provider profile, call outcome, extraction result,
    and prompt source. Enumerations describe the closed set of request-body
    dialects and authentication header layouts.

Control-flow interaction:
    `provider_config.resolve_profile` builds a `ProviderProfile`,
    `client.send_request` returns a `CallOutcome`, and
    `extractor.extract_text` returns an `ExtractionResult`. Each stage receives
    the previous stage's value; none of these records are mutated after creation.

Extensibility:
    A new request dialect is added as a `PayloadShape` member plus a builder
    function registered in `llm_client.llm.service`.

Determinism:
    The data classes are purely structural and state-free.
"""

from dataclasses import dataclass
from enum import Enum


class PayloadShape(str, Enum):
    """Provider-specific JSON request dialects."""

    OPENAI = "openai-compatible"
    GEMINI = "gemini-compatible"
    ANTHROPIC = "anthropic-compatible"


class AuthHeader(str, Enum):
    """HTTP header layouts that carry the API key."""

    BEARER = "bearer"
    GOOG_API_KEY = "x-goog-api-key"
    X_API_KEY = "x-api-key"


class CallStatus(str, Enum):
    """Classification of one HTTP attempt."""

    SUCCESS = "success"
    TRANSPORT_ERROR = "transport_error"
    HTTP_ERROR = "http_error"
    EMPTY_STATUS = "empty_status"


@dataclass(frozen=True)
class ProviderProfile:
    """Resolved provider settings for one invocation.

    Attributes:
        mode: Lower-cased mode name the profile was resolved from.
        api_url: Absolute endpoint URL receiving the POST.
        api_key: Secret placed in the auth header. Never logged.
        payload_shape: Request-body dialect used by the payload builder.
        auth_header: Header layout used by the request executor.
        model: Model name, or `None` to let the provider pick its default.
        json_path: Field-path used for extraction, or `None`.
        extraction_disabled: Extraction was requested but no field-path is
            configured; callers must warn and emit raw output.
    """

    mode: str
    api_url: str
    api_key: str
    payload_shape: PayloadShape
    auth_header: AuthHeader
    model: str | None = None
    json_path: str | None = None
    extraction_disabled: bool = False

    def __repr__(self) -> str:
        return (
            f"ProviderProfile(mode={self.mode!r}, api_url={self.api_url!r}, "
            f"api_key='***', payload_shape={self.payload_shape.value!r}, "
            f"auth_header={self.auth_header.value!r}, model={self.model!r}, "
            f"json_path={self.json_path!r}, "
            f"extraction_disabled={self.extraction_disabled!r})"
        )


@dataclass(frozen=True)
class CallOutcome:
    """Result of one HTTP attempt.

    Attributes:
        status: Outcome classification.
        body: Raw response body (empty for transport errors).
        status_code: Numeric HTTP status when one was received.
        detail: Diagnostic text for failures.
    """

    status: CallStatus
    body: str = ""
    status_code: int | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is CallStatus.SUCCESS


@dataclass(frozen=True)
class ExtractionResult:
    """Final response text plus how it was derived.

    `text` is the extracted value when `extracted` is true, otherwise the raw
    response body. `reason` is `None` on success.
    """

    text: str
    extracted: bool
    reason: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class PromptSource:
    """Where the prompt text comes from: literal string, file path, or stdin."""

    kind: str
    value: str | None = None

    STRING = "string"
    FILE = "file"
    STDIN = "stdin"

    @classmethod
    def from_string(cls, text: str) -> "PromptSource":
        return cls(kind=cls.STRING, value=text)

    @classmethod
    def from_file(cls, path: str) -> "PromptSource":
        return cls(kind=cls.FILE, value=path)

    @classmethod
    def from_stdin(cls) -> "PromptSource":
        return cls(kind=cls.STDIN)
