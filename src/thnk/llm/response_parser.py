"""Extract the structured analysis from free-text model output.

Models often wrap the requested JSON object in prose or code fences. The
parser first looks for balanced top-level objects (tracking string literals
and escapes so braces inside values don't confuse it), then falls back to the
span between the first "{" and the last "}". Once a response has been
received the caller always gets something displayable: output with braces
that still can't be parsed yields a generic fallback result.
"""

import json
from typing import Iterator, Optional

from pydantic import ValidationError

from thnk.llm.client import InvalidJSONResponse
from thnk.models.analysis import AnalysisPayload, AnalysisResult
from thnk.utils.logging import get_logger


logger = get_logger(__name__)

FALLBACK_EMOTION = "reflective"
FALLBACK_SUMMARY = "Processing your thoughts"
FALLBACK_SUGGESTIONS = [
    "Take a moment to breathe",
    "Consider what you're feeling",
    "Be gentle with yourself",
]
FALLBACK_ANALYSIS_LENGTH = 500


def iter_balanced_objects(text: str) -> Iterator[str]:
    """
    Yield each balanced top-level ``{...}`` span in text, in order.

    Braces inside JSON string literals are ignored. An unterminated object at
    the end of the text is not yielded.

    Example:
        >>> list(iter_balanced_objects('a {"x": "}"} b {"y": 1}'))
        ['{"x": "}"}', '{"y": 1}']
    """
    depth = 0
    start = -1
    in_string = False
    escaped = False

    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            # Quotes only delimit strings inside an object
            if depth > 0:
                in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                yield text[start:i + 1]


def naive_span(text: str) -> str:
    """
    Return the span from the first "{" to the last "}" inclusive.

    Raises:
        InvalidJSONResponse: If either brace is missing or the first "{"
            comes after the last "}"
    """
    start = text.find("{")
    end = text.rfind("}")

    if start == -1 or end == -1:
        raise InvalidJSONResponse("No JSON braces found in response")
    if start > end:
        raise InvalidJSONResponse("Invalid JSON range in response")

    return text[start:end + 1]


def _decode_payload(candidate: str) -> Optional[AnalysisPayload]:
    try:
        return AnalysisPayload.model_validate(json.loads(candidate))
    except (ValueError, ValidationError, RecursionError):
        return None


def fallback_result(raw_text: str) -> AnalysisResult:
    """Build the generic result used when output can't be parsed."""
    if len(raw_text) > FALLBACK_ANALYSIS_LENGTH:
        analysis = raw_text[:FALLBACK_ANALYSIS_LENGTH] + "..."
    else:
        analysis = raw_text

    return AnalysisResult(
        primary_emotion=FALLBACK_EMOTION,
        summary=FALLBACK_SUMMARY,
        analysis=analysis,
        suggestions=list(FALLBACK_SUGGESTIONS),
    )


def parse_analysis_response(raw_text: str) -> AnalysisResult:
    """Convert raw model output into an AnalysisResult.

    Args:
        raw_text: Text produced by the model

    Returns:
        The parsed result, or the fallback result when the output has
        braces but no object of the expected shape

    Raises:
        InvalidJSONResponse: If the output has no "{", no "}", or the first
            "{" follows the last "}"
    """
    span = naive_span(raw_text)

    for candidate in iter_balanced_objects(raw_text):
        payload = _decode_payload(candidate)
        if payload is not None:
            logger.debug("analysis_json_extracted", method="balanced", length=len(candidate))
            return AnalysisResult.from_payload(payload)

    payload = _decode_payload(span)
    if payload is not None:
        logger.debug("analysis_json_extracted", method="first_last_brace", length=len(span))
        return AnalysisResult.from_payload(payload)

    logger.warning("analysis_fallback_used", response_length=len(raw_text))
    logger.debug("analysis_unparsed_span", span=span)
    return fallback_result(raw_text)
