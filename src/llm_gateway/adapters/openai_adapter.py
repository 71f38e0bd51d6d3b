"""
OpenAI preset of the OpenAI-compatible adapter.
"""

from .openai_compat_adapter import OpenAICompatAdapter, OPENAI_BASE_URL


class OpenAIAdapter(OpenAICompatAdapter):
    """Direct OpenAI API access; only the default endpoint differs."""

    DEFAULT_BASE_URL = OPENAI_BASE_URL
