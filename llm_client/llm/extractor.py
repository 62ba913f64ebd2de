"""Field-path extraction of plain text from JSON response bodies.

A field-path is a fixed sequence of object keys and array indices, written as
`.choices[0].message.content` or `candidates[0].content.parts[0].text` (the
leading dot is optional). Extraction never raises: anything that prevents
reaching a string value falls back to the raw body.
"""

import json
import re

from llm_client.core.types import ExtractionResult


REASON_NOT_CONFIGURED = "extraction not configured"
REASON_FAILED = "extraction failed"

_SEGMENT_RE = re.compile(r"([A-Za-z_][A-Za-z0-9_\-]*)((?:\[\d+\])*)")
_INDEX_RE = re.compile(r"\[(\d+)\]")


class FieldPathError(ValueError):
    """Field-path text does not follow the key/index grammar."""


def parse_field_path(path: str) -> list[str | int]:
    """Split a field-path into object-key (str) and array-index (int) steps.

    Raises:
        FieldPathError: Empty path or invalid segment.
    """
    text = (path or "").strip()
    if text.startswith("."):
        text = text[1:]
    if not text:
        raise FieldPathError(f"Empty field path: {path!r}")

    steps: list[str | int] = []
    for segment in text.split("."):
        match = _SEGMENT_RE.fullmatch(segment)
        if match is None:
            raise FieldPathError(f"Invalid field path segment {segment!r} in {path!r}")
        steps.append(match.group(1))
        steps.extend(int(index) for index in _INDEX_RE.findall(match.group(2)))
    return steps


def _walk(document, steps):
    value = document
    for step in steps:
        if isinstance(step, int):
            if not isinstance(value, list):
                raise TypeError(f"expected array before [{step}], got {type(value).__name__}")
            if step >= len(value):
                raise IndexError(f"index [{step}] out of range (length {len(value)})")
            value = value[step]
        else:
            if not isinstance(value, dict):
                raise TypeError(f"expected object before {step!r}, got {type(value).__name__}")
            if step not in value:
                raise KeyError(step)
            value = value[step]
    return value


def extract_text(body: str, field_path: str | None) -> ExtractionResult:
    """Apply `field_path` to a JSON body.

    Args:
        body: Raw response body. Not modified.
        field_path: Field-path to a string value, or `None` when extraction is
            not configured.

    Returns:
        Extracted text, or the raw body with `reason` set.
    """
    if not field_path:
        return ExtractionResult(text=body, extracted=False, reason=REASON_NOT_CONFIGURED)

    try:
        steps = parse_field_path(field_path)
        document = json.loads(body)
        value = _walk(document, steps)
    except (ValueError, TypeError, KeyError, IndexError) as exc:
        return ExtractionResult(
            text=body,
            extracted=False,
            reason=REASON_FAILED,
            detail=f"{type(exc).__name__}: {exc}",
        )

    if not isinstance(value, str):
        return ExtractionResult(
            text=body,
            extracted=False,
            reason=REASON_FAILED,
            detail=f"value at {field_path!r} is {type(value).__name__}, not a string",
        )

    return ExtractionResult(text=value, extracted=True)
