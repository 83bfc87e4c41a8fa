"""
Upstream response normalization.

Turns the reply of a ``generateContent`` call into one inline image. The
upstream may answer with a single JSON document or with an event stream of
``data:`` lines. Every level of the document is optional: a wrong shape means
"no image here", never an exception.
"""

import json
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from app.core.exceptions import NoImageInResponseError, UpstreamError
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

STREAM_CONTENT_TYPES = ("text/event-stream", "text/plain")
DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


@dataclass(frozen=True)
class InlineImage:
    """A base64 encoded image as returned by the upstream."""

    mime_type: str
    data: str


def extract_inline_image(payload: Any) -> Optional[InlineImage]:
    """
    Find the first inline image of the first candidate.

    Expected shape::

        {"candidates": [{"content": {"parts": [..., {"inlineData": {"mimeType": str, "data": str}}]}}]}

    Returns:
        The image, or None when the payload does not carry one
    """
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    if not isinstance(first, dict):
        return None
    content = first.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list):
        return None

    for part in parts:
        if not isinstance(part, dict):
            continue
        inline_data = part.get("inlineData")
        if not isinstance(inline_data, dict):
            continue
        mime_type = inline_data.get("mimeType")
        data = inline_data.get("data")
        if isinstance(mime_type, str) and isinstance(data, str):
            return InlineImage(mime_type=mime_type, data=data)
    return None


def iter_event_payloads(body: str) -> Iterator[Any]:
    """Yield the decoded JSON of every well-formed ``data:`` line."""
    for line in body.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith(DATA_PREFIX):
            continue
        raw = trimmed[len(DATA_PREFIX):].strip()
        if not raw or raw == DONE_SENTINEL:
            continue
        try:
            yield json.loads(raw)
        except ValueError:
            logger.debug("Skipping malformed event-stream line")
            continue


def is_event_stream(content_type: Optional[str]) -> bool:
    content_type = (content_type or "").lower()
    return any(kind in content_type for kind in STREAM_CONTENT_TYPES)


def extract_error_message(status_code: int, body: str) -> str:
    """
    Best-effort message of an upstream error reply.

    Uses ``error.message`` of a JSON body when present.
    """
    fallback = f"Upstream error: status {status_code}"
    try:
        parsed = json.loads(body)
    except (ValueError, TypeError):
        return fallback
    if isinstance(parsed, dict):
        error = parsed.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
    return fallback


def parse_generation_response(status_code: int, content_type: Optional[str], body: str) -> InlineImage:
    """
    Normalize an upstream reply into an inline image.

    Args:
        status_code: HTTP status of the upstream reply
        content_type: Declared Content-Type of the reply
        body: Decoded reply body

    Returns:
        The first image found

    Raises:
        UpstreamError: The upstream answered with a non-success status
        NoImageInResponseError: The reply carries no image
    """
    if not 200 <= status_code < 300:
        # Redirects and other non-error statuses are reported as a bad gateway.
        passthrough = status_code if status_code >= 400 else 502
        raise UpstreamError(extract_error_message(status_code, body), status_code=passthrough)

    if is_event_stream(content_type):
        for payload in iter_event_payloads(body):
            image = extract_inline_image(payload)
            if image is not None:
                return image
        raise NoImageInResponseError("No image found in SSE response")

    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    image = extract_inline_image(payload)
    if image is None:
        raise NoImageInResponseError("No image found in JSON response")
    return image
