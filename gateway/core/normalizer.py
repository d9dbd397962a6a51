"""Turn a public ChatInput into an upstream request.

Applies defaults, clamps sampling parameters, and assembles the single-turn
message list. Pure: no I/O and no environment lookups.
"""

import structlog

from gateway.api.schemas import DEFAULT_MODEL, ChatInput, ConversationMessage, UpstreamRequest
from gateway.core.errors import ValidationError

logger = structlog.get_logger(__name__)

TEMPERATURE_RANGE = (0.0, 1.0)
MAX_TOKENS_RANGE = (1, 4000)


def clamp(value, low, high):
    """Saturating clamp: out-of-range values snap to the nearest bound."""
    return max(low, min(high, value))


def build_messages(message: str, system_prompt: str | None = None) -> list[ConversationMessage]:
    """Assemble [system?, user] for a single-turn exchange.

    Args:
        message: User message (already known to be non-blank).
        system_prompt: Optional system instruction; dropped if blank.

    Returns:
        Ordered message list with at most one system message first.
    """
    messages = []
    if system_prompt and system_prompt.strip():
        messages.append(ConversationMessage(role="system", content=system_prompt.strip()))
    messages.append(ConversationMessage(role="user", content=message.strip()))
    return messages


def normalize_chat_input(chat_input: ChatInput) -> UpstreamRequest:
    """Validate and normalize a chat input.

    Args:
        chat_input: Request as received from the client.

    Returns:
        UpstreamRequest ready to send.

    Raises:
        ValidationError: If the message is missing or blank.
    """
    if chat_input.message is None or not chat_input.message.strip():
        raise ValidationError("Message content must not be empty")

    temperature = clamp(chat_input.temperature, *TEMPERATURE_RANGE)
    max_tokens = clamp(chat_input.max_tokens, *MAX_TOKENS_RANGE)

    if temperature != chat_input.temperature or max_tokens != chat_input.max_tokens:
        logger.debug("normalize.clamped", temperature=temperature, max_tokens=max_tokens)

    return UpstreamRequest(
        model=chat_input.model or DEFAULT_MODEL,
        messages=build_messages(chat_input.message, chat_input.system_prompt),
        temperature=float(temperature),
        max_tokens=int(max_tokens),
    )
