"""
Configuration loading for the LLM gateway.
"""

import os
import logging
from typing import Dict, List, Any, Mapping, Optional
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .interface import ProviderFamily
from ..models.request import is_local_provider

logger = logging.getLogger(__name__)


# Providers reported by GET /health
HEALTH_PROVIDERS = ["openai", "gemini", "xai", "local"]


@dataclass
class ProviderConfig:
    """Configuration for a single known provider."""
    name: str
    family: ProviderFamily = ProviderFamily.OPENAI_COMPATIBLE
    base_url: Optional[str] = None
    api_key_env: Optional[str] = None
    requires_credential: bool = True

    @property
    def credential_env(self) -> str:
        return self.api_key_env or credential_env_for(self.name)


@dataclass
class GatewayConfig:
    """Complete gateway configuration, read-only after startup."""
    providers: Dict[str, ProviderConfig] = field(default_factory=dict)
    host: str = "0.0.0.0"
    port: int = 8787
    upstream_timeout: Optional[float] = None
    log_level: str = "INFO"
    health_providers: List[str] = field(default_factory=lambda: list(HEALTH_PROVIDERS))

    def provider(self, name: str) -> Optional[ProviderConfig]:
        return self.providers.get(name.lower())

    def requires_credential(self, provider: str) -> bool:
        """Only local providers may run without a credential."""
        if is_local_provider(provider):
            return False
        known = self.provider(provider)
        return known.requires_credential if known else True

    def resolve_credential(
        self,
        provider: str,
        environ: Optional[Mapping[str, str]] = None,
    ) -> Optional[str]:
        """
        Look up the server-held key for a provider.

        Args:
            provider: Provider identifier as sent by the caller
            environ: Environment mapping, defaults to ``os.environ``

        Returns:
            The key, or None when unset or empty
        """
        env = os.environ if environ is None else environ
        known = self.provider(provider)
        env_var = known.credential_env if known else credential_env_for(provider)
        return env.get(env_var) or None


def credential_env_for(provider: str) -> str:
    """``<PROVIDER>_API_KEY`` naming convention."""
    return f"{provider.upper()}_API_KEY"


def load_config(config_path: Optional[str] = None) -> GatewayConfig:
    """
    Load gateway configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses LLM_GATEWAY_CONFIG
            or the default locations.

    Returns:
        Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get("LLM_GATEWAY_CONFIG")

    if config_path is None:
        # Try common locations
        paths = [
            Path("config/llm-gateway/gateway.yaml"),
            Path("/etc/llm-gateway/gateway.yaml"),
            Path.home() / ".config/llm-gateway/gateway.yaml",
        ]
        for p in paths:
            if p.exists():
                config_path = str(p)
                break

    if config_path is None or not Path(config_path).exists():
        logger.warning("No gateway config file found, using defaults")
        return _default_config()

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return _parse_config(data)

    except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return _default_config()


def _expand(value: Optional[str]) -> Optional[str]:
    """Expand a ``${VAR}`` reference from the environment."""
    if value and value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1], "")
    return value


def _parse_config(data: Dict[str, Any]) -> GatewayConfig:
    """Parse configuration dictionary on top of the defaults."""
    config = _default_config()

    for p_data in data.get("providers", []):
        name = str(p_data["name"]).lower()
        base = config.providers.get(name, ProviderConfig(name=name))
        config.providers[name] = ProviderConfig(
            name=name,
            family=ProviderFamily(p_data.get("family", base.family.value)),
            base_url=_expand(p_data.get("base_url")) or base.base_url,
            api_key_env=_expand(p_data.get("api_key_env")) or base.api_key_env,
            requires_credential=p_data.get("requires_credential", base.requires_credential),
        )

    server = data.get("server", {})
    config.host = server.get("host", config.host)
    config.port = int(server.get("port", config.port))
    config.log_level = server.get("log_level", config.log_level)

    timeout = data.get("upstream_timeout", config.upstream_timeout)
    config.upstream_timeout = float(timeout) if timeout is not None else None

    if "health_providers" in data:
        config.health_providers = list(data["health_providers"])

    return config


def _default_config() -> GatewayConfig:
    """Return default configuration."""
    timeout = os.environ.get("UPSTREAM_TIMEOUT")
    return GatewayConfig(
        providers={
            "openai": ProviderConfig(name="openai"),
            "gemini": ProviderConfig(name="gemini", family=ProviderFamily.CANDIDATE_PARTS),
            "xai": ProviderConfig(name="xai"),
            "grok": ProviderConfig(name="grok"),
            "local": ProviderConfig(name="local", requires_credential=False),
            "openaicompat": ProviderConfig(name="openaicompat", requires_credential=False),
        },
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8787")),
        upstream_timeout=float(timeout) if timeout else None,
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )
