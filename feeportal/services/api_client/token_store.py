"""
Token storage for the backend API client.

The access/refresh pair is the only client-side state that outlives a
request. Stores are injected into ``ApiClient`` so tests and the CLI can pick
their own persistence.
"""

import json
import os
import threading
from pathlib import Path
from typing import Optional, Protocol

from feeportal.utils.logger import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_KEY = "authToken"
REFRESH_TOKEN_KEY = "refreshToken"
# Owner read/write only.
TOKEN_FILE_MODE = 0o600


class TokenStore(Protocol):
    def get_access_token(self) -> Optional[str]: ...

    def get_refresh_token(self) -> Optional[str]: ...

    def set_tokens(self, access_token: str, refresh_token: Optional[str]) -> None: ...

    def clear(self) -> None: ...


class InMemoryTokenStore:
    """Process-local token pair guarded by a lock."""

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self._lock = threading.Lock()
        self._access_token = access_token
        self._refresh_token = refresh_token

    def get_access_token(self) -> Optional[str]:
        with self._lock:
            return self._access_token

    def get_refresh_token(self) -> Optional[str]:
        with self._lock:
            return self._refresh_token

    def set_tokens(self, access_token: str, refresh_token: Optional[str]) -> None:
        with self._lock:
            self._access_token = access_token
            self._refresh_token = refresh_token

    def clear(self) -> None:
        with self._lock:
            self._access_token = None
            self._refresh_token = None


class FileTokenStore:
    """Token pair persisted as JSON under the ``authToken``/``refreshToken`` keys."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return {}

    def get_access_token(self) -> Optional[str]:
        with self._lock:
            return self._read().get(ACCESS_TOKEN_KEY)

    def get_refresh_token(self) -> Optional[str]:
        with self._lock:
            return self._read().get(REFRESH_TOKEN_KEY)

    def set_tokens(self, access_token: str, refresh_token: Optional[str]) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = {ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token}
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, TOKEN_FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            # os.open only applies the mode when it creates the file
            tmp_path.chmod(TOKEN_FILE_MODE)
            tmp_path.replace(self.path)
            logger.debug(f"Saved tokens to {self.path}")

    def clear(self) -> None:
        with self._lock:
            if self.path.exists():
                self.path.unlink()
                logger.debug(f"Removed token file {self.path}")
