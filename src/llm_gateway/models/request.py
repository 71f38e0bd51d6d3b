"""
Unified request models for the LLM gateway.
"""

from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


LOCAL_PROVIDERS = ("local", "openaicompat")


def is_local_provider(provider: Optional[str]) -> bool:
    """Local/offline providers need no secret credential."""
    return bool(provider) and provider.lower() in LOCAL_PROVIDERS


class ChatMessage(BaseModel):
    """A single message in the conversation, in caller order."""
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """
    Unified chat completion request.

    The same shape is sent by callers to the gateway and handed by the
    gateway to an adapter. ``api_key`` is only ever set by the gateway
    itself; callers' values are discarded before dispatch.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Required
    provider: str = Field(..., description="Provider identifier")
    model: str = Field(..., description="Model identifier")
    messages: List[ChatMessage] = Field(default_factory=list)

    # Optional overrides
    base_url: Optional[str] = Field(default=None, alias="baseURL")
    api_key: Optional[str] = Field(default=None, alias="apiKey")

    # Accepted for compatibility, completions are never streamed
    stream: bool = False

    @field_validator("provider", "model")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @property
    def is_local(self) -> bool:
        return is_local_provider(self.provider)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the camel-cased JSON body callers send."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_openai_format(self) -> Dict[str, Any]:
        """Body for an OpenAI-compatible ``/chat/completions`` call."""
        return {
            "model": self.model,
            "messages": [m.model_dump() for m in self.messages],
            "stream": False,
        }


class EdgePeer(BaseModel):
    """Peer descriptor carried by the edge envelope."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    provider: str
    model: str
    base_url: Optional[str] = Field(default=None, alias="baseURL")


class EdgeChatRequest(BaseModel):
    """
    Envelope used by the lightweight edge variant of the gateway.

    Provider details travel inside ``peer``; session and artifact ids are
    accepted for correlation but not interpreted.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    peer: EdgePeer
    messages: List[ChatMessage] = Field(default_factory=list)
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    artifact_id: Optional[str] = Field(default=None, alias="artifactId")

    @classmethod
    def from_chat_request(cls, request: ChatRequest) -> "EdgeChatRequest":
        return cls(
            peer=EdgePeer(
                provider=request.provider,
                model=request.model,
                base_url=request.base_url,
            ),
            messages=request.messages,
        )

    def to_chat_request(self) -> ChatRequest:
        return ChatRequest(
            provider=self.peer.provider,
            model=self.peer.model,
            base_url=self.peer.base_url,
            messages=self.messages,
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
