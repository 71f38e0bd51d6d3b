"""
Caller-side client for the LLM gateway.

Sends the uniform request to the gateway. When the gateway fails and the
caller opted in, requests for the local provider are rerouted straight to
the caller-supplied OpenAI-compatible endpoint.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..adapters.openai_compat_adapter import parse_openai_response
from ..core.errors import (
    GatewayConnectionError,
    GatewayDecodeError,
    GatewayError,
    GatewayUnreachableError,
    GatewayUpstreamError,
)
from ..models.request import ChatRequest, EdgeChatRequest
from ..models.response import ChatResponse, EdgeChatResponse, HealthReport
from .settings import ClientSettings

logger = logging.getLogger(__name__)


CHAT_PATH = "/chat"
EDGE_CHAT_PATH = "/functions/v1/llm-gateway"
HEALTH_PATH = "/health"

NO_FALLBACK_MESSAGE = "Gateway request failed and no fallback available."


def should_fallback(request: ChatRequest, settings: ClientSettings) -> bool:
    """Direct calls are only allowed for an opted-in local provider with a URL."""
    return bool(settings.local_fallback and request.is_local and request.base_url)


def _decode_json(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError as e:
        raise GatewayDecodeError(
            f"Failed to parse response from {response.request.url}: {response.text}",
            body=response.text,
        ) from e
    if not isinstance(data, dict):
        raise GatewayDecodeError(
            f"Unexpected response shape from {response.request.url}: {response.text}",
            body=response.text,
        )
    return data


class GatewayClient:
    """
    Async client for the gateway's uniform chat contract.

    Settings are fixed at construction, so the fallback decision depends
    only on the request, the settings and the gateway outcome.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize gateway client.

        Args:
            settings: Client settings, environment defaults if None
            http_client: HTTP client to use; one rooted at ``settings.origin``
                is created if None
        """
        self.settings = settings or ClientSettings()
        self._owns_client = http_client is None
        self._client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.origin,
                headers={"Content-Type": "application/json"},
                timeout=None,
            )
        return self._client

    async def close(self):
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def gateway_url(self, path: str) -> str:
        """Gateway URL for a path; relative to the origin when no base URL is set."""
        return f"{self.settings.gateway_base_url}{path}"

    async def call_gateway(self, request: ChatRequest) -> ChatResponse:
        """
        Complete a chat through the gateway, degrading to a local call.

        Args:
            request: Uniform chat request

        Returns:
            Normalized chat response

        Raises:
            GatewayUnreachableError: gateway failed and no fallback succeeded
        """
        try:
            return await self._call_primary(request)
        except GatewayError as e:
            logger.warning(f"Gateway request failed, checking for fallback: {e.message}")
            cause: Exception = e

        if should_fallback(request, self.settings):
            logger.info(f"Falling back to direct local call at {request.base_url}")
            try:
                return await self._call_local(request)
            except GatewayError as e:
                logger.warning(f"Local fallback failed: {e.message}")
                cause = e

        raise GatewayUnreachableError(NO_FALLBACK_MESSAGE, gateway=request.provider) from cause

    async def _call_primary(self, request: ChatRequest) -> ChatResponse:
        client = await self._get_client()

        if self.settings.edge_gateway:
            url = self.gateway_url(EDGE_CHAT_PATH)
            body = EdgeChatRequest.from_chat_request(request).to_wire()
        else:
            url = self.gateway_url(CHAT_PATH)
            body = request.to_wire()
        # Credentials are resolved by the gateway
        body.pop("apiKey", None)

        try:
            response = await client.post(url, json=body)
        except httpx.RequestError as e:
            raise GatewayConnectionError(f"Gateway unreachable: {e}") from e

        if not response.is_success:
            raise GatewayUpstreamError(
                f"Gateway returned {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        data = _decode_json(response)
        try:
            if self.settings.edge_gateway:
                return EdgeChatResponse.model_validate(data).to_chat_response()
            return ChatResponse.from_wire(data)
        except ValidationError as e:
            raise GatewayDecodeError(
                f"Unexpected gateway response: {response.text}",
                body=response.text,
            ) from e

    async def _call_local(self, request: ChatRequest) -> ChatResponse:
        """POST straight to the local OpenAI-compatible endpoint, no credential."""
        client = await self._get_client()
        url = f"{request.base_url.rstrip('/')}/chat/completions"

        try:
            response = await client.post(
                url,
                json={
                    "model": request.model,
                    "messages": [m.model_dump() for m in request.messages],
                },
            )
        except httpx.RequestError as e:
            raise GatewayConnectionError(f"Local endpoint unreachable: {e}", gateway=request.provider) from e

        if not response.is_success:
            raise GatewayUpstreamError(
                f"Local endpoint returned {response.status_code}: {response.text}",
                gateway=request.provider,
                status_code=response.status_code,
                body=response.text,
            )

        return parse_openai_response(_decode_json(response))

    async def ping_health(self) -> HealthReport:
        """Ping the gateway health endpoint; ``ok=False`` on any failure."""
        client = await self._get_client()
        try:
            response = await client.get(
                self.gateway_url(HEALTH_PATH),
                headers={"Accept": "application/json"},
            )
            if not response.is_success:
                raise GatewayUpstreamError(
                    f"HTTP error! status: {response.status_code}",
                    status_code=response.status_code,
                )
            return HealthReport.model_validate(_decode_json(response))
        except (httpx.RequestError, GatewayError, ValueError) as e:
            logger.error(f"Gateway health check failed: {e}")
            return HealthReport(ok=False)
