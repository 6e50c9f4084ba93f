"""
Tests for ApiError construction and the classification helpers.
"""

import requests

from feeportal.services.api_client import (
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


def _response(status: int, body: bytes, reason: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = body
    return response


class TestFromResponse:
    def test_maps_status_to_subclass(self):
        assert type(ApiError.from_response(_response(401, b"{}"))) is UnauthorizedError
        assert type(ApiError.from_response(_response(403, b"{}"))) is ClientError
        assert type(ApiError.from_response(_response(503, b"{}"))) is ServerError

    def test_reads_body_fields(self):
        error = ApiError.from_response(
            _response(422, b'{"error": "Invalid amount", "code": "BAD_AMOUNT", "details": {"amount": "must be positive"}}')
        )

        assert error.message == "Invalid amount"
        assert error.to_dict() == {
            "message": "Invalid amount",
            "statusCode": 422,
            "code": "BAD_AMOUNT",
            "details": {"amount": "must be positive"},
        }

    def test_fallback_message(self):
        assert ApiError.from_response(_response(500, b"")).message == "An error occurred"


class TestHelpers:
    def test_classification(self):
        assert is_network_error(NetworkError("offline"))
        assert is_client_error(AuthenticationExpired("expired", status_code=401))
        assert is_server_error(ServerError("down", status_code=503))
        assert not is_client_error(ServerError("down", status_code=503))
        assert not is_server_error(ValueError("x"))

    def test_error_message(self):
        assert error_message(ClientError("Not allowed", status_code=403)) == "Not allowed"
        assert error_message(RuntimeError("boom")) == "boom"
        assert error_message(RuntimeError()) == "An unexpected error occurred"

    def test_to_api_error(self):
        original = ClientError("Not allowed", status_code=403)
        assert to_api_error(original) is original

        wrapped = to_api_error(KeyError("token"))
        assert wrapped.status_code == 500
        assert "token" in wrapped.message

    def test_decode_error_shape(self):
        error = ResponseDecodeError("Expected a 'students' list", details={"shape": "str"})

        assert error.code == "decode_error"
        assert error.status_code == 200
