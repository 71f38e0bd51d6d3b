"""
Unified response models for the LLM gateway.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field


class Usage(BaseModel):
    """Token usage information."""
    model_config = ConfigDict(populate_by_name=True)

    prompt_tokens: int = Field(default=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, alias="completionTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")

    @classmethod
    def from_openai(cls, data: Any) -> Optional["Usage"]:
        """Map an OpenAI ``usage`` block, ``None`` if there is none."""
        if not isinstance(data, dict):
            return None
        return cls(
            prompt_tokens=data.get("prompt_tokens") or 0,
            completion_tokens=data.get("completion_tokens") or 0,
            total_tokens=data.get("total_tokens") or 0,
        )

    @classmethod
    def from_gemini(cls, data: Any) -> Optional["Usage"]:
        """Map a Gemini ``usageMetadata`` block, ``None`` if there is none."""
        if not isinstance(data, dict):
            return None
        return cls(
            prompt_tokens=data.get("promptTokenCount") or 0,
            completion_tokens=data.get("candidatesTokenCount") or 0,
            total_tokens=data.get("totalTokenCount") or 0,
        )


class ChatResponse(BaseModel):
    """
    Unified chat completion response.

    ``text`` is always present (possibly empty). ``usage`` is set only when
    the upstream reported a usage block. ``raw`` keeps the decoded upstream
    body for diagnostics.
    """
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    usage: Optional[Usage] = None
    raw: Any = None

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the JSON body returned by the gateway."""
        data: Dict[str, Any] = {"text": self.text}
        if self.usage is not None:
            data["usage"] = self.usage.model_dump(by_alias=True)
        data["raw"] = self.raw
        return data

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "ChatResponse":
        """Rebuild a response from the gateway's JSON body."""
        return cls(
            text=data.get("text") or "",
            usage=Usage.model_validate(data["usage"]) if data.get("usage") else None,
            raw=data.get("raw"),
        )


class EdgeChatResponse(BaseModel):
    """Response body of the edge variant: ``message`` instead of ``text``."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    usage: Optional[Usage] = None
    provider_meta: Dict[str, str] = Field(default_factory=dict, alias="providerMeta")

    @classmethod
    def from_chat_response(
        cls, response: ChatResponse, provider: str, model: str
    ) -> "EdgeChatResponse":
        return cls(
            message=response.text,
            usage=response.usage,
            provider_meta={"model": model, "provider": provider},
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_chat_response(self) -> ChatResponse:
        return ChatResponse(
            text=self.message,
            usage=self.usage,
            raw=self.to_wire(),
        )


class HealthReport(BaseModel):
    """Body of ``GET /health``."""
    ok: bool
    providers: List[str] = Field(default_factory=list)
    timestamp: Optional[str] = None

    @classmethod
    def now(cls, providers: List[str]) -> "HealthReport":
        return cls(
            ok=True,
            providers=list(providers),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
