"""
Error types raised by the backend API client.

Every failed request surfaces as an ``ApiError`` carrying the normalized
shape ``{message, code, details, statusCode}``.
"""

from typing import Any, Dict, Optional

import requests

DEFAULT_ERROR_MESSAGE = "An error occurred"


class ApiError(Exception):
    """Normalized API failure."""

    def __init__(
        self,
        message: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message, "statusCode": self.status_code}
        if self.code is not None:
            payload["code"] = self.code
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code})"

    @classmethod
    def from_response(cls, response: requests.Response) -> "ApiError":
        """Build the matching subclass from a non-2xx response."""
        body: Dict[str, Any] = {}
        try:
            decoded = response.json()
            if isinstance(decoded, dict):
                body = decoded
        except ValueError:
            pass

        message = body.get("message") or body.get("error") or response.reason or DEFAULT_ERROR_MESSAGE
        details = body.get("details")
        kwargs = dict(
            message=str(message),
            status_code=response.status_code,
            code=body.get("code"),
            details=details if isinstance(details, dict) else None,
        )

        status = response.status_code
        if status == 401:
            return UnauthorizedError(**kwargs)
        if 400 <= status < 500:
            return ClientError(**kwargs)
        if status >= 500:
            return ServerError(**kwargs)
        return cls(**kwargs)


class NetworkError(ApiError):
    """No response was received (connection refused, DNS, timeout)."""


class ClientError(ApiError):
    """4xx: validation or permission failure."""


class ServerError(ApiError):
    """5xx from the backend."""


class UnauthorizedError(ClientError):
    """401 that was not (or could not be) recovered by a token refresh."""


class AuthenticationExpired(UnauthorizedError):
    """The refresh token was rejected; the session is gone."""


class ResponseDecodeError(ApiError):
    """A response did not match the declared envelope or record schema."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=200, code="decode_error", details=details)


def is_network_error(error: BaseException) -> bool:
    return isinstance(error, NetworkError)


def is_client_error(error: BaseException) -> bool:
    return isinstance(error, ClientError)


def is_server_error(error: BaseException) -> bool:
    return isinstance(error, ServerError)


def error_message(error: BaseException) -> str:
    """Best human-readable message for any exception."""
    if isinstance(error, ApiError):
        return error.message
    return str(error) or "An unexpected error occurred"


def to_api_error(error: BaseException) -> ApiError:
    """Coerce an arbitrary exception into an ApiError (status 500 unless known)."""
    if isinstance(error, ApiError):
        return error
    return ApiError(
        message=str(error) or DEFAULT_ERROR_MESSAGE,
        status_code=getattr(error, "status_code", None) or 500,
        code=getattr(error, "code", None),
        details=getattr(error, "details", None),
    )
