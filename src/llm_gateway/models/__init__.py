"""
LLM gateway data models.
"""

from .request import ChatRequest, ChatMessage, EdgeChatRequest, EdgePeer, is_local_provider
from .response import ChatResponse, EdgeChatResponse, HealthReport, Usage

__all__ = [
    "ChatRequest",
    "ChatMessage",
    "EdgeChatRequest",
    "EdgePeer",
    "is_local_provider",
    "ChatResponse",
    "EdgeChatResponse",
    "HealthReport",
    "Usage",
]
