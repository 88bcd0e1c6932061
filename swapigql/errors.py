"""
Errors raised while talking to the upstream Star Wars API.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    code = 'GATEWAY_ERROR'


class UpstreamError(GatewayError):
    """Raised when an upstream request fails or returns a non-success status."""

    code = 'UPSTREAM_ERROR'

    def __init__(self, url: str, status_code: Optional[int], message: str) -> None:
        self.url = url
        self.status_code = status_code
        if status_code:
            super().__init__(f"Upstream '{url}' returned {status_code}: {message}")
        else:
            super().__init__(f"Upstream '{url}' failed: {message}")


class NotFoundError(UpstreamError):
    """Raised when the upstream resource does not exist."""

    code = 'NOT_FOUND'

    def __init__(self, url: str) -> None:
        super().__init__(url, 404, 'resource not found')


class DecodeError(GatewayError):
    """Raised when an upstream body is not a JSON object."""

    code = 'DECODE_ERROR'

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"Upstream '{url}' sent invalid JSON: {message}")
