"""Core request orchestration: config resolution through output.

Architectural role:
    Provides the single execution pipeline used by the CLI adapter to turn one
    prompt into one provider response written to stdout or a file.

Control-flow model:
    1. Resolve the provider profile from the loaded configuration.
    2. Decide whether extraction stays enabled (warn and demote otherwise).
    3. Acquire the prompt from a literal, a file, or stdin.
    4. Build the provider-specific payload.
    5. Invoke the provider once via `client.send_request`.
    6. Optionally extract plain text from the response body.
    7. Write the final text to exactly one destination.

Interaction surface:
    - Registry: `provider_config.resolve_profile`.
    - Payload: `service.resolve_max_tokens`, `service.build_payload`.
    - Transport: `client.send_request`.
    - Extraction: `extractor.extract_text` (or an injected replacement).

Error handling strategy:
    `ConfigError` and `BuildError` raised by any stage, and failed `CallOutcome`
    values, are fatal: they are logged, reported on stderr as `Error: ...`, and
    mapped to exit code 1. Extraction problems are never fatal; they are
    reported as `Warning: ...` and the raw body is emitted instead.

Side effects:
    - Reads the prompt file or stdin.
    - Performs one HTTP request.
    - Writes the response to stdout or overwrites the output file.
"""

import logging
import sys
from collections.abc import Callable, Mapping

from llm_client.core.errors import (
    BuildError,
    ConfigError,
    EmptyPromptError,
    PromptDecodeError,
    PromptFileNotFoundError,
)
from llm_client.core.types import CallOutcome, CallStatus, ExtractionResult, PromptSource, ProviderProfile
from llm_client.llm import client
from llm_client.llm.extractor import extract_text
from llm_client.llm.provider_config import resolve_profile
from llm_client.llm.service import build_payload, resolve_max_tokens


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

Extractor = Callable[[str, str | None], ExtractionResult]


def _warn(message: str) -> None:
    logger.warning(message)
    print(f"Warning: {message}", file=sys.stderr)


def _fail(message: str, *details: str) -> int:
    logger.error(message)
    print(f"Error: {message}", file=sys.stderr)
    for detail in details:
        print(detail, file=sys.stderr)
    return EXIT_FAILURE


# =========================================================
# PROMPT ACQUISITION
# =========================================================

def read_prompt(source: PromptSource, stdin=None) -> str:
    """Read prompt text from the given source.

    Args:
        source: Literal string, file path, or stdin marker.
        stdin: Stream used for the stdin source. Defaults to `sys.stdin`.

    Returns:
        Prompt text with trailing newlines removed.

    Raises:
        PromptFileNotFoundError: File source cannot be read.
        PromptDecodeError: File or stdin bytes are not valid UTF-8.
        EmptyPromptError: Resulting prompt is empty or whitespace-only.
    """
    if source.kind == PromptSource.STRING:
        logger.info("Reading prompt from command line argument.")
        text = source.value or ""
    elif source.kind == PromptSource.FILE:
        logger.info("Reading prompt from file: %s", source.value)
        try:
            with open(source.value, "r", encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError as exc:
            logger.error("Prompt file is not valid UTF-8: %s (%s)", source.value, exc)
            raise PromptDecodeError(f"file '{source.value}'") from exc
        except (OSError, TypeError) as exc:
            logger.error("Prompt file not readable: %s (%s)", source.value, exc)
            raise PromptFileNotFoundError(str(source.value)) from exc
    else:
        stream = stdin if stdin is not None else sys.stdin
        # A closed stdin (`<&-`) leaves sys.stdin as None.
        if stream is None:
            logger.info("No stdin available for prompt.")
            text = ""
        else:
            if stream.isatty():
                logger.info("Reading prompt from stdin. Press Ctrl+D to finish input.")
            else:
                logger.info("Reading prompt from stdin.")
            try:
                text = stream.read()
            except UnicodeDecodeError as exc:
                logger.error("Prompt from stdin is not valid UTF-8 (%s)", exc)
                raise PromptDecodeError("stdin") from exc

    text = text.rstrip("\r\n")
    if not text.strip():
        raise EmptyPromptError()
    return text


# =========================================================
# OUTPUT
# =========================================================

def write_output(text: str, output_target: str | None = None) -> None:
    """Write the final text to `output_target` (overwritten) or stdout."""
    if output_target:
        with open(output_target, "w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
        logger.info("Response saved to: %s", output_target)
    else:
        print(text)


# =========================================================
# PIPELINE
# =========================================================

def _report_call_failure(outcome: CallOutcome) -> int:
    if outcome.status is CallStatus.TRANSPORT_ERROR:
        return _fail(
            "Failed to connect to LLM provider or API request failed.",
            f"Details: {outcome.detail}",
        )
    if outcome.status is CallStatus.HTTP_ERROR:
        return _fail(
            f"LLM API returned an error (HTTP Status: {outcome.status_code}).",
            f"Response: {outcome.body}",
        )
    return _fail(outcome.detail or "No HTTP status code received.")


def _log_profile(profile: ProviderProfile) -> None:
    logger.info("Mode: %s", profile.mode)
    logger.info("API URL: %s", profile.api_url)
    logger.info("Model: %s", profile.model or "N/A (provider default)")
    logger.info("JSON Path for extraction: %s", profile.json_path or "N/A (raw output)")


def _finalize_text(body: str, profile: ProviderProfile, extractor: Extractor) -> str:
    result = extractor(body, profile.json_path)
    if result.extracted:
        return result.text
    logger.debug("Extraction fallback: %s (%s)", result.reason, result.detail)
    _warn(f"Failed to extract text using path '{profile.json_path}'. Outputting raw JSON.")
    return result.text


def run(
    mode: str | None,
    prompt_source: PromptSource,
    max_tokens,
    extract: bool,
    output_target: str | None,
    *,
    config: Mapping[str, str],
    extractor: Extractor | None = extract_text,
    on_usage_error: Callable[[], None] | None = None,
    stdin=None,
) -> int:
    """Run one prompt through the provider pipeline.

    Args:
        mode: Mode name, or `None` for `DEFAULT_LLM_MODE`.
        prompt_source: Where to read the prompt from.
        max_tokens: Token limit override, or `None` for config/built-in default.
        extract: Whether to extract text using the mode's json path.
        output_target: File path to overwrite, or `None` for stdout.
        config: Already-loaded configuration mapping.
        extractor: Extraction function; `None` means the capability is not
            available and output falls back to the raw body.
        on_usage_error: Called after reporting a `ConfigError`, typically to
            print CLI usage.
        stdin: Stream for the stdin prompt source.

    Returns:
        `EXIT_OK` on success, `EXIT_FAILURE` on any fatal error.
    """
    try:
        profile = resolve_profile(mode, config, extract=extract)
        _log_profile(profile)

        if not profile.model:
            _warn(
                f"Model for mode '{profile.mode}' is not explicitly set in config. "
                "Using the provider default, which might fail."
            )

        should_extract = extract
        if extract and profile.extraction_disabled:
            _warn("JSON path for extraction not found. Outputting raw JSON.")
            should_extract = False
        if should_extract and extractor is None:
            _warn("Response extraction is not available. Outputting raw JSON.")
            should_extract = False

        prompt = read_prompt(prompt_source, stdin=stdin)
        limit = resolve_max_tokens(max_tokens, config)
        payload = build_payload(profile, prompt, limit)
    except ConfigError as exc:
        code = _fail(str(exc))
        if on_usage_error is not None:
            on_usage_error()
        return code
    except BuildError as exc:
        return _fail(str(exc))

    outcome = client.send_request(profile, payload)
    if not outcome.ok:
        return _report_call_failure(outcome)

    logger.info("API Call Successful. Processing response.")

    final_text = outcome.body
    if should_extract:
        final_text = _finalize_text(outcome.body, profile, extractor)

    try:
        write_output(final_text, output_target)
    except OSError as exc:
        return _fail(f"Could not write output to '{output_target}': {exc}")

    logger.info("Finished successfully.")
    return EXIT_OK
