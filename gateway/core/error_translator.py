"""Translate core failures into a small, stable set of user-facing errors.

Classification works on the structured status code carried by UpstreamError.
Detail text is scrubbed so the upstream credential never reaches the caller.
"""

import re
from enum import Enum
from urllib.parse import urlsplit, urlunsplit

import structlog

from gateway.core.errors import (
    ChatRequestError,
    ConfigurationError,
    GatewayError,
    MalformedResponseError,
    UpstreamError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

REDACTED = "***"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    INVALID_CREDENTIAL = "invalid_credential"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    REQUEST_FAILED = "request_failed"


INVALID_CREDENTIAL_MESSAGE = "Invalid API credential for the upstream service"
RATE_LIMITED_MESSAGE = "Upstream rate limit reached, please retry later"
UNAVAILABLE_MESSAGE = "Upstream service is temporarily unavailable"

# Secret-looking fragments scrubbed from any detail text
_SECRET_PATTERNS = [
    re.compile(r"Bearer\s+\S+", re.IGNORECASE),
    re.compile(r"(?:api[_-]?key|secret|token|password)\s*[:=]\s*\S+", re.IGNORECASE),
]


def redact(text: str, api_key: str | None = None) -> str:
    """Remove the credential and bearer/secret fragments from text."""
    if api_key and api_key.strip():
        text = text.replace(api_key, REDACTED)
        stripped = api_key.strip()
        if stripped != api_key:
            text = text.replace(stripped, REDACTED)
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(REDACTED, text)
    return text


def redact_url(url: str, api_key: str | None = None) -> str:
    """Drop userinfo from a URL and scrub secrets from the rest."""
    parts = urlsplit(url)
    if "@" in parts.netloc:
        parts = parts._replace(netloc=parts.netloc.rsplit("@", 1)[1])
    return redact(urlunsplit(parts), api_key)


def translate_error(exc: GatewayError, api_key: str | None = None) -> ChatRequestError:
    """Map a core failure onto a ChatRequestError.

    Args:
        exc: Any GatewayError raised while normalizing, calling upstream,
            or mapping the response.
        api_key: Credential used for the call, redacted from all output.

    Returns:
        ChatRequestError with a stable kind and a safe message.
    """
    if isinstance(exc, ValidationError):
        return ChatRequestError(ErrorKind.VALIDATION.value, redact(str(exc), api_key))

    if isinstance(exc, ConfigurationError):
        return ChatRequestError(ErrorKind.CONFIGURATION.value, redact(str(exc), api_key))

    if isinstance(exc, UpstreamError) and exc.status_code is not None:
        status = exc.status_code
        if status == 401:
            return ChatRequestError(ErrorKind.INVALID_CREDENTIAL.value, INVALID_CREDENTIAL_MESSAGE, status)
        if status == 429:
            return ChatRequestError(ErrorKind.RATE_LIMITED.value, RATE_LIMITED_MESSAGE, status)
        if status >= 500:
            return ChatRequestError(ErrorKind.UPSTREAM_UNAVAILABLE.value, UNAVAILABLE_MESSAGE, status)

    if not isinstance(exc, (UpstreamError, MalformedResponseError)):
        logger.warning("translate.unexpected_error_type", error=type(exc).__name__)

    detail = redact(str(exc), api_key)
    return ChatRequestError(
        ErrorKind.REQUEST_FAILED.value,
        f"Chat request failed: {detail}",
        getattr(exc, "status_code", None),
    )
