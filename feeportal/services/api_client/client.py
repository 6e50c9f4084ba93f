"""
HTTP client for the school fee-management backend.

Single point of outbound request configuration: base URL and timeout,
bearer-token attachment, one-shot token refresh on 401 and normalized
errors for every failure.
"""

import io
import mimetypes
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import requests
from urllib3 import encode_multipart_formdata

from feeportal.schemas.api.common import ApiResponse
from feeportal.utils.logger import get_logger
from feeportal.utils.settings import get_settings
from .errors import ApiError, AuthenticationExpired, NetworkError
from .token_store import FileTokenStore, InMemoryTokenStore, TokenStore

logger = get_logger(__name__)

Notifier = Callable[[ApiError], None]
AuthFailureHandler = Callable[[str], None]
ProgressCallback = Callable[[int], None]

REFRESH_PATH = "/auth/refresh"
DOWNLOAD_CHUNK_SIZE = 8192

_DISPOSITION_FILENAME = re.compile(r"filename\*?=(?:UTF-8'')?\"?([^\";]+)\"?", re.IGNORECASE)


def log_notifier(error: ApiError) -> None:
    """Default user-facing notification: an error log line."""
    logger.error(f"API error ({error.status_code}): {error.message}")


def log_auth_failure(login_route: str) -> None:
    logger.warning(f"Session expired; sign in again at {login_route}")


class _ProgressReader(io.BytesIO):
    """Request body that reports upload progress as it is read."""

    def __init__(self, payload: bytes, on_progress: Optional[ProgressCallback] = None):
        super().__init__(payload)
        self._total = len(payload)
        self._on_progress = on_progress

    def read(self, size: Optional[int] = -1) -> bytes:
        chunk = super().read(size)
        if chunk and self._on_progress and self._total:
            self._on_progress(round(self.tell() * 100 / self._total))
        return chunk


class ApiClient:
    """Client for interacting with the fee-management REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        token_store: Optional[TokenStore] = None,
        notifier: Optional[Notifier] = None,
        on_auth_failure: Optional[AuthFailureHandler] = None,
        session: Optional[requests.Session] = None,
        login_route: Optional[str] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.token_store = token_store if token_store is not None else InMemoryTokenStore()
        self.notifier = notifier or log_notifier
        self.on_auth_failure = on_auth_failure or log_auth_failure
        self.login_route = login_route or settings.LOGIN_ROUTE
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    # ------------------------------------------------------------------
    # Core request path
    # ------------------------------------------------------------------

    def _url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def _send(self, method: str, url: str, headers: Dict[str, str], **kwargs) -> requests.Response:
        token = self.token_store.get_access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            return self.session.request(method, self._url(url), headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            error = NetworkError(message=str(e) or "Network error")
            self.notifier(error)
            raise error from e

    def _refresh_tokens(self) -> bool:
        """Exchange the stored refresh token for a new pair.

        Returns False when there is no refresh token to use. Raises
        AuthenticationExpired after clearing the store if the backend
        rejects the refresh.
        """
        refresh_token = self.token_store.get_refresh_token()
        if not refresh_token:
            return False

        logger.info("Access token rejected, refreshing")
        try:
            response = self.session.post(
                self._url(REFRESH_PATH),
                json={"refreshToken": refresh_token},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json().get("data") or {}
            new_token = payload["token"]
        except (requests.RequestException, ValueError, KeyError, AttributeError, TypeError) as e:
            logger.error(f"Token refresh failed: {e}")
            self.token_store.clear()
            self.on_auth_failure(self.login_route)
            raise AuthenticationExpired(
                message="Session expired, please sign in again",
                status_code=401,
            ) from e

        self.token_store.set_tokens(new_token, payload.get("refreshToken") or refresh_token)
        logger.info("Token refreshed successfully")
        return True

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> requests.Response:
        """Send a request, refreshing the access token at most once on 401."""
        retried = False
        while True:
            response = self._send(method, url, dict(headers or {}), **kwargs)
            if response.status_code == 401 and not retried and self._refresh_tokens():
                retried = True
                body = kwargs.get("data")
                if hasattr(body, "seek"):
                    body.seek(0)
                continue
            break

        if not response.ok:
            error = ApiError.from_response(response)
            if error.status_code != 401:
                self.notifier(error)
            logger.debug(f"{method} {url} failed: {error!r}")
            raise error

        return response

    @staticmethod
    def _parse(response: requests.Response) -> ApiResponse:
        if response.status_code == 204 or not response.content:
            return ApiResponse(success=True, data=None)
        try:
            payload = response.json()
        except ValueError:
            return ApiResponse(success=True, data=response.text)
        return ApiResponse.from_payload(payload)

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> ApiResponse:
        return self._parse(self.request("GET", url, params=params, **kwargs))

    def post(self, url: str, data: Any = None, **kwargs) -> ApiResponse:
        return self._parse(self.request("POST", url, json=data, **kwargs))

    def put(self, url: str, data: Any = None, **kwargs) -> ApiResponse:
        return self._parse(self.request("PUT", url, json=data, **kwargs))

    def patch(self, url: str, data: Any = None, **kwargs) -> ApiResponse:
        return self._parse(self.request("PATCH", url, json=data, **kwargs))

    def delete(self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> ApiResponse:
        return self._parse(self.request("DELETE", url, params=params, **kwargs))

    # ------------------------------------------------------------------
    # File transfer
    # ------------------------------------------------------------------

    def upload(
        self,
        url: str,
        file_path: str | Path,
        field: str = "file",
        on_progress: Optional[ProgressCallback] = None,
        fields: Optional[Dict[str, str]] = None,
    ) -> ApiResponse:
        """Upload a file as multipart/form-data, reporting percent progress."""
        path = Path(file_path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        form: Dict[str, Any] = dict(fields or {})
        form[field] = (path.name, path.read_bytes(), content_type)

        body, multipart_type = encode_multipart_formdata(form)
        logger.info(f"Uploading {path.name} ({len(body)} bytes) to {url}")
        response = self.request(
            "POST",
            url,
            data=_ProgressReader(body, on_progress),
            headers={"Content-Type": multipart_type},
        )
        return self._parse(response)

    def download(
        self,
        url: str,
        destination: str | Path = ".",
        filename: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Path:
        """Stream a binary response to disk and return the saved path."""
        response = self.request("GET", url, params=params, stream=True)

        target = Path(destination)
        if target.is_dir():
            name = filename or self._filename_from_headers(response) or "download"
            target = target / name
        target.parent.mkdir(parents=True, exist_ok=True)

        with open(target, "wb") as f:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    f.write(chunk)

        logger.info(f"Downloaded {url} to {target}")
        return target

    @staticmethod
    def _filename_from_headers(response: requests.Response) -> Optional[str]:
        disposition = response.headers.get("Content-Disposition", "")
        match = _DISPOSITION_FILENAME.search(disposition)
        if match:
            return Path(match.group(1)).name
        return None

    def check_connection(self) -> bool:
        """Ping the backend root; True when it answers 200."""
        settings = get_settings()
        root = self.base_url[: -len("/api")] if self.base_url.endswith("/api") else self.base_url
        try:
            response = self.session.get(root, timeout=settings.CONNECTION_CHECK_TIMEOUT)
            return response.status_code == 200
        except requests.RequestException as e:
            logger.error(f"Backend connection failed: {e}")
            return False


@lru_cache(maxsize=1)
def get_api_client() -> ApiClient:
    """Process-wide client with tokens persisted to TOKEN_STORE_PATH."""
    settings = get_settings()
    return ApiClient(token_store=FileTokenStore(settings.TOKEN_STORE_PATH))
