"""Provider-specific transport client for LLM requests.

Architectural role:
    Executes one HTTP POST against the configured provider and classifies the
    result into a `CallOutcome`.

Model invocation flow:
    `engine.run` -> `send_request(profile, payload)` -> auth headers per
    `profile.auth_header` -> `requests.post` -> `classify_status`.

Retry behavior:
    No retry loop is implemented. Each call is attempted once with the transport's
    default timeout and redirect handling.

Resource handling:
    The response is consumed inside a `with` block, so the connection and its
    buffers are released on success and on every failure path.

Failure handling model:
    Transport exceptions and HTTP error statuses are converted into `CallOutcome`
    values instead of being raised, so the orchestrator decides how to report
    them. The API key is never logged.
"""

import logging

import requests

from llm_client.core.types import AuthHeader, CallOutcome, CallStatus, ProviderProfile
from llm_client.llm.service import serialize_payload


logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


def build_headers(profile: ProviderProfile) -> dict[str, str]:
    """Return request headers for the profile's auth layout.

    Args:
        profile: Resolved provider profile.

    Returns:
        Header mapping with `Content-Type` plus the authentication header(s).
    """
    headers = {"Content-Type": "application/json"}

    if profile.auth_header is AuthHeader.BEARER:
        headers["Authorization"] = f"Bearer {profile.api_key}"
    elif profile.auth_header is AuthHeader.GOOG_API_KEY:
        headers["X-Goog-Api-Key"] = profile.api_key
    elif profile.auth_header is AuthHeader.X_API_KEY:
        headers["x-api-key"] = profile.api_key
        headers["anthropic-version"] = ANTHROPIC_VERSION
    else:
        raise ValueError(f"Unsupported auth header layout: {profile.auth_header!r}")

    return headers


def classify_status(status_code) -> CallStatus:
    """Map a raw status code to a call status.

    Edge cases:
        - `None`, non-integers and codes below 200 carry no usable final status
          and map to `EMPTY_STATUS`.
        - 200-399 is success; redirects the transport did not follow count here.
    """
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        return CallStatus.EMPTY_STATUS
    if status_code >= 400:
        return CallStatus.HTTP_ERROR
    if status_code >= 200:
        return CallStatus.SUCCESS
    return CallStatus.EMPTY_STATUS


def send_request(profile: ProviderProfile, payload: dict) -> CallOutcome:
    """Send one request to the configured provider.

    Args:
        profile: Resolved provider profile.
        payload: Request body produced by `service.build_payload`.

    Returns:
        `CallOutcome` classified as success, HTTP error, empty status, or
        transport error.
    """
    headers = build_headers(profile)
    data = serialize_payload(payload).encode("utf-8")

    logger.info("Sending request to %s", profile.api_url)
    logger.debug("Request payload: %s", data.decode("utf-8"))

    try:
        with requests.post(profile.api_url, headers=headers, data=data) as response:
            status_code = response.status_code
            body = response.text
    except requests.exceptions.RequestException as err:
        logger.error("Request to %s failed: %s", profile.api_url, err)
        return CallOutcome(status=CallStatus.TRANSPORT_ERROR, detail=str(err))

    status = classify_status(status_code)
    logger.debug("HTTP status: %s", status_code)

    if status is CallStatus.HTTP_ERROR:
        logger.error("API returned an error HTTP Status: %s. Response: %s", status_code, body)
        return CallOutcome(
            status=status,
            body=body,
            status_code=status_code,
            detail=f"HTTP Status: {status_code}",
        )

    if status is CallStatus.EMPTY_STATUS:
        logger.error("Request did not return a usable HTTP status code (got %r)", status_code)
        return CallOutcome(
            status=status,
            body=body,
            detail="No HTTP status code received. Likely connection issue.",
        )

    return CallOutcome(status=status, body=body, status_code=status_code)
