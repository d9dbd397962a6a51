"""Failure taxonomy for the chat gateway.

Every failure raised inside the core is a GatewayError. The error translator
turns any of them into a single ChatRequestError for the caller.
"""


class GatewayError(Exception):
    """Base class for all core failures."""
    pass


class ValidationError(GatewayError):
    """Caller input defect. Raised before any network activity."""
    pass


class ConfigurationError(GatewayError):
    """Missing credential or other hosting misconfiguration."""
    pass


class UpstreamError(GatewayError):
    """Non-2xx response or network failure talking to the upstream service.

    Attributes:
        status_code: HTTP status of the upstream response, or None for
            network-level failures.
        body: Upstream response body as text (empty for network failures).
        cause: The underlying transport exception, if any.
    """

    def __init__(self, status_code: int | None = None, body: str = "", cause: Exception | None = None):
        self.status_code = status_code
        self.body = body
        self.cause = cause
        if status_code is not None:
            message = f"DeepSeek API error: {status_code} - {body}"
        else:
            message = f"DeepSeek API request failed: {cause}"
        super().__init__(message)


class MalformedResponseError(GatewayError):
    """2xx response whose body is structurally unusable."""
    pass


class ChatRequestError(Exception):
    """User-facing failure produced by the error translator.

    Attributes:
        kind: Stable error category (see error_translator.ErrorKind).
        message: Safe message with secrets redacted.
        status_code: Upstream HTTP status when the failure came from upstream.
    """

    def __init__(self, kind: str, message: str, status_code: int | None = None):
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(message)
