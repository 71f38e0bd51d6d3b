"""
Adapter registry: maps provider identifiers to adapter instances.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Type

import httpx

from .interface import AbstractAdapter, ProviderFamily
from .config import GatewayConfig, ProviderConfig, load_config

logger = logging.getLogger(__name__)


def _adapter_classes() -> Dict[str, Type[AbstractAdapter]]:
    # Imported lazily, adapters depend on core
    from ..adapters import GeminiAdapter, OpenAIAdapter, OpenAICompatAdapter, XAIAdapter

    return {
        "gemini": GeminiAdapter,
        "openai": OpenAIAdapter,
        "xai": XAIAdapter,
        "grok": XAIAdapter,
        "local": OpenAICompatAdapter,
        "openaicompat": OpenAICompatAdapter,
    }


class AdapterRegistry:
    """
    Registry of provider adapters.

    Built once and read-only afterwards, so it can be shared by any number
    of concurrent requests. Lookups never fail: unknown identifiers get
    the generic OpenAI-compatible adapter.
    """

    def __init__(self, adapters: Mapping[str, AbstractAdapter], fallback: AbstractAdapter):
        """
        Initialize the registry.

        Args:
            adapters: Identifier to adapter mapping
            fallback: Adapter returned for unrecognized identifiers
        """
        self._adapters = MappingProxyType({k.lower(): v for k, v in adapters.items()})
        self._fallback = fallback

    @property
    def fallback(self) -> AbstractAdapter:
        return self._fallback

    def resolve(self, provider: Optional[str]) -> AbstractAdapter:
        """
        Get the adapter for a provider identifier (case-insensitive).

        Args:
            provider: Provider identifier

        Returns:
            Matching adapter, or the generic OpenAI-compatible one
        """
        adapter = self._adapters.get((provider or "").lower())
        if adapter is None:
            logger.debug(f"Unknown provider {provider!r}, using OpenAI-compatible adapter")
            return self._fallback
        return adapter

    def known_providers(self) -> List[str]:
        return list(self._adapters)

    def __contains__(self, provider: str) -> bool:
        return provider.lower() in self._adapters


def _create_adapter(
    provider: ProviderConfig,
    http_client: Optional[httpx.AsyncClient],
    timeout: Optional[float],
) -> AbstractAdapter:
    from ..adapters import GeminiAdapter, OpenAICompatAdapter

    adapter_class = _adapter_classes().get(provider.name)
    if adapter_class is None:
        adapter_class = (
            GeminiAdapter
            if provider.family == ProviderFamily.CANDIDATE_PARTS
            else OpenAICompatAdapter
        )
    return adapter_class(
        name=provider.name,
        base_url=provider.base_url,
        http_client=http_client,
        timeout=timeout,
    )


def build_registry(
    config: Optional[GatewayConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> AdapterRegistry:
    """
    Build a registry from provider configuration.

    Args:
        config: Gateway configuration, loaded from disk/env if None
        http_client: Shared HTTP client handed to every adapter

    Returns:
        Registry with one adapter per configured provider
    """
    from ..adapters import OpenAICompatAdapter

    if config is None:
        config = load_config()

    adapters = {
        name: _create_adapter(provider, http_client, config.upstream_timeout)
        for name, provider in config.providers.items()
    }
    fallback = OpenAICompatAdapter(
        name="openaicompat",
        http_client=http_client,
        timeout=config.upstream_timeout,
    )

    logger.info(f"Built adapter registry: {', '.join(sorted(adapters))}")
    return AdapterRegistry(adapters, fallback)


# Global registry instance
_registry: Optional[AdapterRegistry] = None


def get_registry() -> AdapterRegistry:
    """Get the global adapter registry."""
    global _registry
    if _registry is None:
        _registry = build_registry()
    return _registry


def get_adapter(provider: str) -> AbstractAdapter:
    """Resolve a provider identifier against the global registry."""
    return get_registry().resolve(provider)
