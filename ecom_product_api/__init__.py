"""Signed client for the Product Advertising API (onca/xml REST interface)."""
from .client import (
    SignedRequestClient,
    item_search_query,
    item_lookup_query,
    similarity_lookup_query,
)
from .config import ClientConfig, MARKETPLACE_HOSTS
from .responses import ApiResponse, ApiResult, Failure, ParseFailure, TransportFailure
from .signing import Credentials
from .version import __version__

__all__ = [
    'SignedRequestClient',
    'item_search_query',
    'item_lookup_query',
    'similarity_lookup_query',
    'ClientConfig',
    'MARKETPLACE_HOSTS',
    'ApiResponse',
    'ApiResult',
    'Failure',
    'ParseFailure',
    'TransportFailure',
    'Credentials',
    '__version__',
]
