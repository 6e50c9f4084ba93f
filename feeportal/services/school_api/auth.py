"""
Authentication endpoints (/auth/*).
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from feeportal.schemas.api.auth import AuthUser, TokenPair
from feeportal.schemas.api.common import ApiResponse
from feeportal.services.api_client import ApiError, ResponseDecodeError
from feeportal.utils.logger import get_logger
from .base import ResourceApi

logger = get_logger(__name__)


class AuthApi(ResourceApi):
    """Login/logout plus profile and password endpoints.

    ``login`` and ``logout`` are the only writers of the token pair apart
    from the client's own refresh.
    """

    path = "/auth"

    def login(self, email: str, password: str) -> ApiResponse:
        response = self.client.post(self._path("login"), {"email": email, "password": password})
        if not response.success or not isinstance(response.data, dict):
            raise ApiError(message=response.message or "Login failed", status_code=400)

        try:
            pair = TokenPair.model_validate(response.data)
        except ValidationError as e:
            raise ApiError(message="Login response did not include a token", status_code=502) from e

        # Backends that do not issue refresh tokens get the access token reused.
        refresh_token = pair.refresh_token or pair.token
        self.client.token_store.set_tokens(pair.token, refresh_token)
        response.data["refreshToken"] = refresh_token

        user = response.data.get("user") or {}
        logger.info(f"Logged in as {user.get('email', email)}")
        return response

    def logout(self) -> Optional[ApiResponse]:
        """Tell the backend, then drop the tokens whatever it answered."""
        try:
            return self.client.post(self._path("logout"))
        finally:
            self.client.token_store.clear()
            logger.info("Logged out, tokens cleared")

    def register(self, user_data: Dict[str, Any]) -> ApiResponse:
        return self.client.post(self._path("register"), user_data)

    def refresh_token(self, refresh_token: str) -> ApiResponse:
        return self.client.post(self._path("refresh"), {"refreshToken": refresh_token})

    def forgot_password(self, email: str) -> ApiResponse:
        return self.client.post(self._path("forgot-password"), {"email": email})

    def reset_password(self, token: str, password: str) -> ApiResponse:
        return self.client.post(self._path("reset-password"), {"token": token, "password": password})

    def change_password(self, current_password: str, new_password: str) -> ApiResponse:
        return self.client.post(
            self._path("change-password"),
            {"currentPassword": current_password, "newPassword": new_password},
        )

    def get_profile(self) -> ApiResponse:
        return self.client.get(self._path("profile"))

    def get_current_user(self) -> AuthUser:
        """``get_profile`` validated into an ``AuthUser``."""
        profile = self.get_profile().data or {}
        if isinstance(profile, dict) and isinstance(profile.get("user"), dict):
            profile = profile["user"]
        try:
            return AuthUser.model_validate(profile)
        except ValidationError as e:
            raise ResponseDecodeError(
                "Invalid user profile in response",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def update_profile(self, data: Dict[str, Any]) -> ApiResponse:
        return self.client.put(self._path("profile"), data)
