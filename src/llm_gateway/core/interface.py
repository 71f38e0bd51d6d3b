"""
Abstract adapter interface definition.

Defines the contract that every provider adapter must implement.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from enum import Enum

import httpx

from ..models.request import ChatRequest
from ..models.response import ChatResponse
from .errors import GatewayConnectionError, GatewayDecodeError

logger = logging.getLogger(__name__)


class ProviderFamily(str, Enum):
    """Wire-shape families spoken by upstream providers."""
    OPENAI_COMPATIBLE = "openai_compatible"
    CANDIDATE_PARTS = "candidate_parts"


class AbstractAdapter(ABC):
    """
    Abstract base class for provider adapters.

    An adapter translates a ``ChatRequest`` into one upstream call and the
    upstream reply back into a ``ChatResponse``. It never retries.
    """

    DEFAULT_BASE_URL: str = ""

    def __init__(
        self,
        name: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize adapter.

        Args:
            name: Provider identifier this adapter answers for
            base_url: Default upstream URL when the request carries none
            http_client: Shared client; a short-lived one is opened per call if None
            timeout: Upstream timeout in seconds, None for no timeout
        """
        self._name = name
        self._default_base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._http_client = http_client
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self._name

    @property
    def default_base_url(self) -> str:
        return self._default_base_url

    @property
    @abstractmethod
    def family(self) -> ProviderFamily:
        """Wire-shape family of the upstream."""
        pass

    def resolve_base_url(self, request: ChatRequest) -> str:
        """Caller override wins, otherwise the adapter default."""
        return (request.base_url or self._default_base_url).rstrip("/")

    @abstractmethod
    async def complete_chat(self, request: ChatRequest) -> ChatResponse:
        """
        Create a chat completion.

        Args:
            request: Unified chat request, ``api_key`` already resolved

        Returns:
            Unified chat response
        """
        pass

    async def _post(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Perform the single upstream POST, mapping transport failures."""
        request_headers = {"Content-Type": "application/json", **(headers or {})}
        try:
            if self._http_client is not None:
                return await self._http_client.post(
                    url, json=payload, headers=request_headers, params=params,
                    timeout=self._timeout,
                )
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.post(
                    url, json=payload, headers=request_headers, params=params,
                )
        except httpx.RequestError as e:
            raise GatewayConnectionError(
                f"Upstream unreachable: {type(e).__name__}: {e}",
                gateway=self._name,
            ) from e

    def _decode(self, response: httpx.Response) -> Dict[str, Any]:
        """Decode an upstream JSON object, keeping the raw text on failure."""
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GatewayDecodeError(
                f"Failed to parse response from {response.request.url}: {response.text}",
                gateway=self._name,
                body=response.text,
            ) from e

        if not isinstance(data, dict):
            raise GatewayDecodeError(
                f"Unexpected response shape from {response.request.url}: {response.text}",
                gateway=self._name,
                body=response.text,
            )
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r}, base_url={self._default_base_url!r})"
