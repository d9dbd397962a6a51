"""Map a raw chat-completions payload to the public ChatResult."""

from datetime import datetime, timezone

import structlog
from pydantic import ValidationError as PydanticValidationError

from gateway.api.schemas import ChatResult, UpstreamResponse, Usage
from gateway.core.errors import MalformedResponseError

logger = structlog.get_logger(__name__)


def map_response(payload: dict, conversation_id: str | None = None) -> ChatResult:
    """Build a ChatResult from the first completion choice.

    Args:
        payload: Decoded JSON body of a successful upstream response.
        conversation_id: Id supplied by the caller, echoed when non-empty.

    Returns:
        ChatResult stamped with the current UTC time.

    Raises:
        MalformedResponseError: If choices are missing/empty, the first choice
            has no message, or the payload fails structural validation.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("Upstream response is not a JSON object")

    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponseError("No response from DeepSeek API: choices are empty")

    first = choices[0]
    if not isinstance(first, dict) or first.get("message") is None:
        raise MalformedResponseError("First choice in DeepSeek response has no message")

    try:
        response = UpstreamResponse.model_validate(payload)
    except PydanticValidationError as e:
        logger.error("mapper.invalid_payload", errors=e.error_count())
        raise MalformedResponseError(f"Invalid DeepSeek response: {e.error_count()} field error(s)") from e

    choice = response.choices[0]
    usage = response.usage
    # Absent or null usage counts are reported as zeros
    mapped_usage = Usage(
        prompt_tokens=(usage and usage.prompt_tokens) or 0,
        completion_tokens=(usage and usage.completion_tokens) or 0,
        total_tokens=(usage and usage.total_tokens) or 0,
    )

    return ChatResult(
        id=response.id,
        message=choice.message.content or "",
        model=response.model,
        usage=mapped_usage,
        conversation_id=conversation_id or response.id,
        timestamp=datetime.now(timezone.utc).isoformat(),
        finish_reason=choice.finish_reason,
    )
