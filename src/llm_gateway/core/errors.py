"""
Gateway error types.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for gateway errors."""

    def __init__(self, message: str, gateway: Optional[str] = None):
        self.message = message
        self.gateway = gateway
        super().__init__(message)


class GatewayInvalidRequestError(GatewayError):
    """Raised when the request body is malformed or misses provider/model."""
    pass


class GatewayCredentialError(GatewayError):
    """Raised when a provider that needs a credential has none configured."""
    pass


class GatewayUpstreamError(GatewayError):
    """Raised when the upstream provider answers with a non-success status."""

    def __init__(
        self,
        message: str,
        gateway: Optional[str] = None,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        super().__init__(message, gateway)
        self.status_code = status_code
        self.body = body


class GatewayAuthenticationError(GatewayUpstreamError):
    """Raised when an OpenAI-compatible upstream rejects the credential (401)."""
    pass


class GatewayConnectionError(GatewayError):
    """Raised when the upstream or the gateway cannot be reached."""
    pass


class GatewayDecodeError(GatewayError):
    """Raised when a response body is not in the expected format."""

    def __init__(self, message: str, gateway: Optional[str] = None, body: str = ""):
        super().__init__(message, gateway)
        self.body = body


class GatewayUnreachableError(GatewayError):
    """Raised by the client when the gateway failed and no fallback applied."""
    pass
