"""Chat request gateway: normalize -> call upstream -> map -> translate errors.

Every entry point takes the credential and base URL explicitly and builds its
own DeepSeekClient, so calls share no state and the transport can be swapped
out in tests.
"""

from collections.abc import Iterator

import httpx
import structlog

from gateway.api.schemas import ChatInput, ChatResult, ModelList
from gateway.core.config import DEFAULT_TIMEOUT
from gateway.core.deepseek_client import DEFAULT_MODELS, DeepSeekClient
from gateway.core.error_translator import translate_error
from gateway.core.errors import ConfigurationError, GatewayError
from gateway.core.normalizer import normalize_chat_input
from gateway.core.response_mapper import map_response

logger = structlog.get_logger(__name__)


def _require_credential(api_key: str | None) -> None:
    if not api_key or not api_key.strip():
        raise ConfigurationError("DeepSeek API key is not configured")


def process_chat(
    chat_input: ChatInput,
    api_key: str | None,
    base_url: str | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> ChatResult:
    """Run one single-turn chat exchange against the upstream service.

    Args:
        chat_input: Client request.
        api_key: Upstream bearer credential.
        base_url: Upstream base URL override; None uses the DeepSeek default.
        timeout: Upstream request timeout in seconds.
        transport: Optional httpx transport (tests pass a MockTransport).

    Returns:
        Normalized ChatResult.

    Raises:
        ChatRequestError: For any validation, configuration, upstream, or
            response-shape failure. Never retried.
    """
    try:
        request = normalize_chat_input(chat_input)
        _require_credential(api_key)

        logger.info("chat.request", model=request.model, msg_len=len(request.messages[-1].content),
                    has_system=len(request.messages) > 1)

        with DeepSeekClient(api_key, base_url, timeout=timeout, transport=transport) as client:
            payload = client.chat(request)

        result = map_response(payload, chat_input.conversation_id)

    except GatewayError as e:
        error = translate_error(e, api_key)
        logger.error("chat.failed", kind=error.kind, status=error.status_code)
        raise error from e

    logger.info("chat.response", model=result.model, total_tokens=result.usage.total_tokens,
                finish_reason=result.finish_reason)
    return result


def stream_chat(
    chat_input: ChatInput,
    api_key: str | None,
    base_url: str | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> Iterator[bytes]:
    """Start a streaming chat and return the raw upstream body.

    Validation, configuration, and status errors are raised before this
    returns. The body is relayed untouched; no response mapping is applied.

    Raises:
        ChatRequestError: If the request cannot be started.
    """
    client = None
    try:
        request = normalize_chat_input(chat_input)
        _require_credential(api_key)

        logger.info("chat_stream.request", model=request.model)

        client = DeepSeekClient(api_key, base_url, timeout=timeout, transport=transport)
        chunks = client.stream_chat(request)

    except Exception as e:
        if client is not None:
            client.close()
        if not isinstance(e, GatewayError):
            raise
        error = translate_error(e, api_key)
        logger.error("chat_stream.failed", kind=error.kind, status=error.status_code)
        raise error from e

    return _relay(chunks, client, api_key)


def _relay(chunks: Iterator[bytes], client: DeepSeekClient, api_key: str) -> Iterator[bytes]:
    try:
        yield from chunks
    except GatewayError as e:
        error = translate_error(e, api_key)
        logger.error("chat_stream.interrupted", kind=error.kind)
        raise error from e
    finally:
        client.close()


def available_models(
    api_key: str | None,
    base_url: str | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> ModelList:
    """List upstream models, degrading to the static default list.

    Without a credential there is nothing to ask, so the static list is
    returned directly.
    """
    if not api_key or not api_key.strip():
        return ModelList(models=list(DEFAULT_MODELS), fallback=True)

    with DeepSeekClient(api_key, base_url, timeout=timeout, transport=transport) as client:
        return client.list_models()


def check_credential(
    api_key: str | None,
    base_url: str | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> bool:
    """Return True if the upstream accepts the credential."""
    if not api_key or not api_key.strip():
        return False

    with DeepSeekClient(api_key, base_url, timeout=timeout, transport=transport) as client:
        return client.validate_api_key()
