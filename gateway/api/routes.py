"""FastAPI endpoints for the chat gateway.

POST /chat - single-turn chat, normalized response
POST /chat/stream - raw upstream event stream
GET /models - available upstream models (static fallback)
GET /health - configuration and optional upstream credential probe
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from gateway.api.schemas import ChatInput, ChatResult, HealthResponse, ModelList
from gateway.core.chat_gateway import available_models, check_credential, process_chat, stream_chat
from gateway.core.config import GatewaySettings, load_settings
from gateway.core.error_translator import ErrorKind, redact_url
from gateway.core.errors import ChatRequestError

logger = structlog.get_logger(__name__)

router = APIRouter()

SERVICE_NAME = "deepseek-gateway"

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION.value: 400,
    ErrorKind.CONFIGURATION.value: 500,
    ErrorKind.INVALID_CREDENTIAL.value: 502,
    ErrorKind.RATE_LIMITED.value: 429,
    ErrorKind.UPSTREAM_UNAVAILABLE.value: 503,
    ErrorKind.REQUEST_FAILED.value: 502,
}


def get_settings() -> GatewaySettings:
    return load_settings()


def _http_error(error: ChatRequestError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_KIND.get(error.kind, 502),
        detail={"kind": error.kind, "message": error.message},
    )


@router.post("/chat", response_model=ChatResult, response_model_by_alias=True)
def chat(chat_input: ChatInput, settings: GatewaySettings = Depends(get_settings)):
    """Forward one chat message upstream and return the normalized result."""
    try:
        return process_chat(
            chat_input,
            settings.api_key,
            settings.base_url,
            timeout=settings.timeout,
        )
    except ChatRequestError as e:
        raise _http_error(e)


@router.post("/chat/stream")
def chat_stream(chat_input: ChatInput, settings: GatewaySettings = Depends(get_settings)):
    """Relay the upstream event stream without normalization."""
    try:
        chunks = stream_chat(
            chat_input,
            settings.api_key,
            settings.base_url,
            timeout=settings.timeout,
        )
    except ChatRequestError as e:
        raise _http_error(e)

    return StreamingResponse(chunks, media_type="text/event-stream")


@router.get("/models", response_model=ModelList, response_model_by_alias=True)
def models(settings: GatewaySettings = Depends(get_settings)):
    """List models, falling back to the static default list."""
    result = available_models(settings.api_key, settings.base_url, timeout=settings.timeout)
    logger.info("models.listed", count=len(result.models), fallback=result.fallback)
    return result


@router.get("/health", response_model=HealthResponse, response_model_by_alias=True)
def health(probe: bool = False, settings: GatewaySettings = Depends(get_settings)):
    """Report configuration state; with probe=true, validate the credential upstream."""
    configured = settings.credential_configured
    status = "ok" if configured else "degraded"

    if probe and configured:
        valid = check_credential(settings.api_key, settings.base_url, timeout=settings.timeout)
        status = "ok" if valid else "error"
        logger.info("health.probe", valid=valid)

    return HealthResponse(
        status=status,
        service=SERVICE_NAME,
        credential_configured=configured,
        base_url=redact_url(settings.base_url, settings.api_key),
    )


@router.get("/")
@router.head("/")
def root_health():
    """Basic root health check for deployment platforms."""
    return {"status": "ok", "service": SERVICE_NAME}
