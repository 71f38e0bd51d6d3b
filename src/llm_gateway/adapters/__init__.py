"""
Provider adapters for the LLM gateway.
"""

from .openai_compat_adapter import OpenAICompatAdapter, parse_openai_response
from .openai_adapter import OpenAIAdapter
from .xai_adapter import XAIAdapter
from .gemini_adapter import GeminiAdapter, parse_gemini_response

__all__ = [
    "OpenAICompatAdapter",
    "OpenAIAdapter",
    "XAIAdapter",
    "GeminiAdapter",
    "parse_openai_response",
    "parse_gemini_response",
]
