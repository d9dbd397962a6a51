"""Pydantic models for the gateway.

Public request/response schemas use camelCase on the wire; the upstream
models mirror the DeepSeek chat-completions payload as-is.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_MODEL = "deepseek-chat"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatInput(_CamelModel):
    """Incoming chat request from a client."""
    message: str | None = Field(None, description="User message, must be non-blank")
    model: str = DEFAULT_MODEL
    temperature: float = Field(DEFAULT_TEMPERATURE, allow_inf_nan=False)
    max_tokens: int = DEFAULT_MAX_TOKENS
    conversation_id: str | None = Field(None, description="Opaque id, echoed back")
    system_prompt: str | None = None


class ConversationMessage(BaseModel):
    """Single message in the upstream conversation."""
    role: Literal["system", "user", "assistant"]
    content: str


class UpstreamRequest(BaseModel):
    """Body sent to POST /chat/completions."""
    model: str
    messages: list[ConversationMessage]
    temperature: float
    max_tokens: int
    stream: bool | None = None


class UpstreamMessage(BaseModel):
    role: str = "assistant"
    content: str | None = None


class UpstreamChoice(BaseModel):
    index: int = 0
    message: UpstreamMessage
    finish_reason: str | None = None


class UpstreamUsage(BaseModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class UpstreamResponse(BaseModel):
    """Success body of POST /chat/completions."""
    id: str
    object: str | None = None
    created: int | None = None
    model: str
    choices: list[UpstreamChoice] = Field(default_factory=list)
    usage: UpstreamUsage | None = None


class Usage(_CamelModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResult(_CamelModel):
    """Normalized response returned to the client."""
    id: str
    message: str
    model: str
    usage: Usage
    conversation_id: str
    timestamp: str
    finish_reason: str | None = None


class ModelList(_CamelModel):
    models: list[str]
    fallback: bool = False


class HealthResponse(_CamelModel):
    status: Literal["ok", "degraded", "error"]
    service: str
    credential_configured: bool
    base_url: str
