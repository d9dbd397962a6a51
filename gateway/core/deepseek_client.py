"""HTTP client for the DeepSeek chat-completions API.

One instance per gateway call. Exactly one outbound request per operation:
no retries, no caching. Non-2xx responses and transport failures surface as
UpstreamError carrying the numeric status code when there is one.
"""

from collections.abc import Iterator

import httpx
import structlog

from gateway.api.schemas import ConversationMessage, ModelList, UpstreamRequest
from gateway.core.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from gateway.core.errors import GatewayError, MalformedResponseError, UpstreamError

logger = structlog.get_logger(__name__)

DEFAULT_MODELS = ["deepseek-chat", "deepseek-coder"]


class DeepSeekClient:
    """Thin wrapper around httpx.Client bound to one credential and base URL.

    Use as a context manager so the underlying connection pool is closed
    when the call is done.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._client = httpx.Client(
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        self._client.close()

    def chat(self, request: UpstreamRequest) -> dict:
        """Send a non-streaming chat completion request.

        Args:
            request: Normalized upstream request.

        Returns:
            Decoded JSON body of the upstream response.

        Raises:
            UpstreamError: On non-2xx status or network failure.
            MalformedResponseError: If a 2xx body is not valid JSON.
        """
        payload = request.model_dump(exclude_none=True)
        logger.debug("upstream.chat", model=request.model, messages=len(request.messages))

        try:
            response = self._client.post(f"{self.base_url}/chat/completions", json=payload)
        except httpx.HTTPError as e:
            logger.error("upstream.network_error", error=type(e).__name__)
            raise UpstreamError(cause=e) from e

        if not response.is_success:
            logger.error("upstream.error", status=response.status_code)
            raise UpstreamError(status_code=response.status_code, body=response.text)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Upstream returned a non-JSON body: {e}") from e

    def stream_chat(self, request: UpstreamRequest) -> Iterator[bytes]:
        """Send a streaming chat request and hand back the raw body.

        The status is checked before returning, so errors surface eagerly.
        The returned iterator yields the upstream bytes untouched.

        Raises:
            UpstreamError: On non-2xx status or network failure.
        """
        payload = request.model_copy(update={"stream": True}).model_dump(exclude_none=True)
        http_request = self._client.build_request(
            "POST", f"{self.base_url}/chat/completions", json=payload
        )
        logger.debug("upstream.stream", model=request.model)

        try:
            response = self._client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            logger.error("upstream.network_error", error=type(e).__name__, stream=True)
            raise UpstreamError(cause=e) from e

        if not response.is_success:
            logger.error("upstream.error", status=response.status_code, stream=True)
            try:
                response.read()
            except httpx.HTTPError as e:
                raise UpstreamError(status_code=response.status_code, cause=e) from e
            finally:
                response.close()
            raise UpstreamError(status_code=response.status_code, body=response.text)

        return self._iter_body(response)

    def _iter_body(self, response: httpx.Response) -> Iterator[bytes]:
        try:
            yield from response.iter_bytes()
        except httpx.HTTPError as e:
            raise UpstreamError(cause=e) from e
        finally:
            response.close()

    def list_models(self) -> ModelList:
        """Fetch model ids from GET /models.

        Falls back to DEFAULT_MODELS when the upstream call fails. This is the
        only operation that degrades instead of raising.
        """
        try:
            models = self._fetch_models()
        except GatewayError as e:
            logger.warning("models.fallback", error=type(e).__name__,
                           status=getattr(e, "status_code", None))
            return ModelList(models=list(DEFAULT_MODELS), fallback=True)

        if not models:
            return ModelList(models=list(DEFAULT_MODELS), fallback=True)
        return ModelList(models=models)

    def _fetch_models(self) -> list[str]:
        try:
            response = self._client.get(f"{self.base_url}/models")
        except httpx.HTTPError as e:
            raise UpstreamError(cause=e) from e

        if not response.is_success:
            raise UpstreamError(status_code=response.status_code, body=response.text)

        try:
            return [item["id"] for item in response.json()["data"]]
        except (ValueError, KeyError, TypeError) as e:
            raise MalformedResponseError(f"Unexpected /models body: {e}") from e

    def validate_api_key(self) -> bool:
        """Check the credential with a one-token completion.

        Returns:
            True if the upstream accepted the probe, False on any failure.
        """
        probe = UpstreamRequest(
            model="deepseek-chat",
            messages=[ConversationMessage(role="user", content="test")],
            temperature=0.0,
            max_tokens=1,
        )
        try:
            self.chat(probe)
            return True
        except GatewayError as e:
            logger.warning("upstream.credential_check_failed",
                           status=getattr(e, "status_code", None))
            return False
