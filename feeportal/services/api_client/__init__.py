"""
Backend API Client Package

HTTP access to the fee-management backend:
- Bearer-token attachment and one-shot refresh on 401
- Normalized ApiError hierarchy
- Injectable token stores
"""

from .client import ApiClient, get_api_client, log_notifier
from .errors import (
    ApiError,
    AuthenticationExpired,
    ClientError,
    NetworkError,
    ResponseDecodeError,
    ServerError,
    UnauthorizedError,
    error_message,
    is_client_error,
    is_network_error,
    is_server_error,
    to_api_error,
)
from .normalizer import decode_list, extract_list
from .token_store import FileTokenStore, InMemoryTokenStore, TokenStore

__all__ = [
    # Client
    "ApiClient",
    "get_api_client",
    "log_notifier",

    # Errors
    "ApiError",
    "AuthenticationExpired",
    "ClientError",
    "NetworkError",
    "ResponseDecodeError",
    "ServerError",
    "UnauthorizedError",
    "error_message",
    "is_client_error",
    "is_network_error",
    "is_server_error",
    "to_api_error",

    # Response normalization
    "decode_list",
    "extract_list",

    # Token storage
    "FileTokenStore",
    "InMemoryTokenStore",
    "TokenStore",
]
