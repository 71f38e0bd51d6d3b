"""
xAI (Grok) preset of the OpenAI-compatible adapter.
"""

from .openai_compat_adapter import OpenAICompatAdapter

XAI_BASE_URL = "https://api.x.ai/v1"


class XAIAdapter(OpenAICompatAdapter):
    """xAI speaks the OpenAI chat-completions shape at its own endpoint."""

    DEFAULT_BASE_URL = XAI_BASE_URL
