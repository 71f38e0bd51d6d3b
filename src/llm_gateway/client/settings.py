"""
Caller-side settings for the gateway client and health monitor.
"""

import os
import logging
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS_PATH = Path.home() / ".config/llm-gateway/client.yaml"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientSettings:
    """
    Configuration handed to the client at construction.

    ``gateway_base_url`` empty means same origin: requests go to paths
    relative to ``origin``.
    """

    gateway_base_url: str = os.getenv("GATEWAY_BASE_URL", "")
    origin: str = os.getenv("GATEWAY_ORIGIN", "http://localhost:8787")

    # Post the edge-variant envelope instead of the uniform request
    edge_gateway: bool = _env_flag("USE_EDGE_GATEWAY")

    # Opt-in direct call to a local provider when the gateway fails
    local_fallback: bool = False

    health_poll_interval: float = float(os.getenv("HEALTH_POLL_INTERVAL", "30"))

    def __post_init__(self):
        self.gateway_base_url = (self.gateway_base_url or "").rstrip("/")

    def with_local_fallback(self, enabled: bool) -> "ClientSettings":
        return replace(self, local_fallback=enabled)


def load_settings(path: Optional[Path] = None) -> ClientSettings:
    """
    Load persisted client settings.

    Args:
        path: Settings file, defaults to ~/.config/llm-gateway/client.yaml

    Returns:
        Settings with persisted values applied over the defaults
    """
    path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    if not path.exists():
        return ClientSettings()

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read client settings from {path}: {e}")
        return ClientSettings()

    if not isinstance(data, dict):
        logger.warning(f"Ignoring client settings in {path}: expected a mapping")
        return ClientSettings()

    defaults = asdict(ClientSettings())
    known = {k: v for k, v in data.items() if k in defaults}
    return ClientSettings(**{**defaults, **known})


def save_settings(settings: ClientSettings, path: Optional[Path] = None) -> None:
    """Persist client settings so they survive restarts."""
    path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump(asdict(settings), f, default_flow_style=False)
    logger.debug(f"Saved client settings to {path}")
