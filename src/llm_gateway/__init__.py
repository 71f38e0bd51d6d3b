"""
LLM Gateway

A credential-holding gateway in front of LLM providers:
- One uniform chat request/response contract
- Provider adapters for OpenAI-compatible and Gemini-style upstreams
- Server-side credential resolution
- Caller-side client with opt-in local fallback and health monitoring
"""

from .core.interface import AbstractAdapter, ProviderFamily
from .core.registry import AdapterRegistry, build_registry, get_adapter
from .core.config import GatewayConfig, load_config
from .models.request import ChatRequest, ChatMessage
from .models.response import ChatResponse, Usage

__all__ = [
    "AbstractAdapter",
    "ProviderFamily",
    "AdapterRegistry",
    "build_registry",
    "get_adapter",
    "GatewayConfig",
    "load_config",
    "ChatRequest",
    "ChatMessage",
    "ChatResponse",
    "Usage",
]
