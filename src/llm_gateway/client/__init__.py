"""
Caller-side components: gateway client, health monitor, settings.
"""

from .settings import ClientSettings, load_settings, save_settings
from .gateway_client import GatewayClient, should_fallback
from .health_monitor import HealthMonitor, HealthState, HealthStatus

__all__ = [
    "ClientSettings",
    "load_settings",
    "save_settings",
    "GatewayClient",
    "should_fallback",
    "HealthMonitor",
    "HealthState",
    "HealthStatus",
]
