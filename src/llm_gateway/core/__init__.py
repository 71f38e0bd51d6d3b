"""
Core gateway components.
"""

from .interface import AbstractAdapter, ProviderFamily
from .registry import AdapterRegistry, build_registry, get_adapter, get_registry
from .config import GatewayConfig, ProviderConfig, load_config
from .errors import (
    GatewayError,
    GatewayInvalidRequestError,
    GatewayCredentialError,
    GatewayUpstreamError,
    GatewayAuthenticationError,
    GatewayConnectionError,
    GatewayDecodeError,
    GatewayUnreachableError,
)

__all__ = [
    "AbstractAdapter",
    "ProviderFamily",
    "AdapterRegistry",
    "build_registry",
    "get_adapter",
    "get_registry",
    "GatewayConfig",
    "ProviderConfig",
    "load_config",
    "GatewayError",
    "GatewayInvalidRequestError",
    "GatewayCredentialError",
    "GatewayUpstreamError",
    "GatewayAuthenticationError",
    "GatewayConnectionError",
    "GatewayDecodeError",
    "GatewayUnreachableError",
]
