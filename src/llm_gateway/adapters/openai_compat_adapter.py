"""
Generic OpenAI-compatible adapter.

Speaks the ``/chat/completions`` wire shape. Used directly for local and
bring-your-own endpoints, and as the base of the vendor presets.
"""

import logging
from typing import Any, Dict

from ..core.interface import AbstractAdapter, ProviderFamily
from ..core.errors import GatewayAuthenticationError, GatewayUpstreamError
from ..models.request import ChatRequest
from ..models.response import ChatResponse, Usage

logger = logging.getLogger(__name__)


OPENAI_BASE_URL = "https://api.openai.com/v1"


def parse_openai_response(data: Dict[str, Any]) -> ChatResponse:
    """Normalize an OpenAI-style completion body."""
    text = ""
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message") or {}
        text = message.get("content") or ""

    return ChatResponse(
        text=text,
        usage=Usage.from_openai(data.get("usage")),
        raw=data,
    )


class OpenAICompatAdapter(AbstractAdapter):
    """
    Adapter for any upstream wire-compatible with OpenAI chat completions.

    The bearer header is attached only when a credential was resolved, so
    local servers without auth work unchanged.
    """

    DEFAULT_BASE_URL = OPENAI_BASE_URL

    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.OPENAI_COMPATIBLE

    async def complete_chat(self, request: ChatRequest) -> ChatResponse:
        """Create a chat completion via ``{base_url}/chat/completions``."""
        url = f"{self.resolve_base_url(request)}/chat/completions"

        headers = {}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"

        logger.debug(f"{self._name}: POST {url} model={request.model}")
        response = await self._post(url, request.to_openai_format(), headers=headers)

        self._check_response_errors(response)
        return parse_openai_response(self._decode(response))

    def _check_response_errors(self, response) -> None:
        """Check response for errors and raise appropriate exceptions."""
        if response.is_success:
            return

        if response.status_code == 401:
            raise GatewayAuthenticationError(
                "Authentication failed (401): Invalid or missing API key.",
                gateway=self._name,
                status_code=401,
                body=response.text,
            )

        raise GatewayUpstreamError(
            f"OpenAI Compat error: {response.status_code} {response.text}",
            gateway=self._name,
            status_code=response.status_code,
            body=response.text,
        )
