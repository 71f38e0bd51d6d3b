"""
Google Gemini adapter.

Gemini diverges from the OpenAI shape: the system prompt travels in a
separate ``systemInstruction`` field, turns are ``contents`` made of
``parts``, and the key goes in the query string rather than a header.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..core.interface import AbstractAdapter, ProviderFamily
from ..core.errors import GatewayUpstreamError
from ..models.request import ChatMessage, ChatRequest
from ..models.response import ChatResponse, Usage

logger = logging.getLogger(__name__)


GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def split_system_message(
    messages: List[ChatMessage],
) -> Tuple[Optional[ChatMessage], List[ChatMessage]]:
    """
    Separate the first system message from the rest of the conversation.

    The lifted message is dropped by position, so another message with the
    same text is kept. Any later system messages stay in the conversation.
    """
    system_index = next(
        (i for i, m in enumerate(messages) if m.role == "system"), None
    )
    if system_index is None:
        return None, list(messages)

    rest = [m for i, m in enumerate(messages) if i != system_index]
    return messages[system_index], rest


def build_gemini_payload(request: ChatRequest) -> Dict[str, Any]:
    """Build the ``generateContent`` body."""
    system_message, conversation = split_system_message(request.messages)

    payload: Dict[str, Any] = {
        "contents": [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in conversation
        ],
    }

    if system_message is not None:
        payload["systemInstruction"] = {"parts": [{"text": system_message.content}]}

    return payload


def parse_gemini_response(data: Dict[str, Any]) -> ChatResponse:
    """Normalize a candidate/part style body."""
    text = ""
    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        if parts and isinstance(parts[0], dict):
            text = parts[0].get("text") or ""

    return ChatResponse(
        text=text,
        usage=Usage.from_gemini(data.get("usageMetadata")),
        raw=data,
    )


class GeminiAdapter(AbstractAdapter):
    """
    Gemini ``generateContent`` adapter.

    Non-success statuses all surface as ``GatewayUpstreamError``; unlike the
    OpenAI family there is no separate authentication failure.
    """

    DEFAULT_BASE_URL = GEMINI_BASE_URL

    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.CANDIDATE_PARTS

    def build_url(self, request: ChatRequest) -> str:
        # The key travels in the query string; the host comes from config only.
        return f"{self.default_base_url}/models/{request.model}:generateContent"

    async def complete_chat(self, request: ChatRequest) -> ChatResponse:
        """Execute chat completion request."""
        url = self.build_url(request)
        payload = build_gemini_payload(request)

        logger.debug(f"{self._name}: POST {url} model={request.model}")
        response = await self._post(url, payload, params={"key": request.api_key or ""})

        if not response.is_success:
            raise GatewayUpstreamError(
                f"Gemini error: {response.status_code} {response.text}",
                gateway=self._name,
                status_code=response.status_code,
                body=response.text,
            )

        return parse_gemini_response(self._decode(response))
