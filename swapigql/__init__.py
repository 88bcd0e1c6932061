from .applications import GraphQL
from .client import ResourceClient
from .errors import DecodeError, GatewayError, NotFoundError, UpstreamError
from .main import create_app

__all__ = [
    'GraphQL',
    'ResourceClient',
    'create_app',
    'GatewayError',
    'UpstreamError',
    'NotFoundError',
    'DecodeError',
]
