"""
Shared plumbing for the resource API classes.
"""

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from feeportal.schemas.api.common import ApiResponse, PaginatedList
from feeportal.services.api_client import ApiClient, decode_list
from feeportal.utils.logger import get_logger

logger = get_logger(__name__)

Params = Optional[Dict[str, Any]]


def clean_params(params: Params) -> Optional[Dict[str, Any]]:
    """Drop unset query parameters so they are not sent as empty strings."""
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None and v != ""}


class ResourceApi:
    """One backend resource: a path prefix plus the list envelope key."""

    path: str = ""
    resource_key: str = ""
    record_model: Optional[Type[BaseModel]] = None

    def __init__(self, client: ApiClient):
        self.client = client

    def _path(self, *parts: Any) -> str:
        return "/".join([self.path.rstrip("/")] + [str(p).strip("/") for p in parts])

    def _decode(self, response: ApiResponse, key: Optional[str] = None, model: Optional[Type[BaseModel]] = None) -> PaginatedList:
        return decode_list(response, key or self.resource_key, model or self.record_model)


class CrudResourceApi(ResourceApi):
    """List/get/create/update/delete over ``path``."""

    def get_all(self, params: Params = None) -> ApiResponse:
        return self.client.get(self.path, params=clean_params(params))

    def get_by_id(self, record_id: str | int) -> ApiResponse:
        return self.client.get(self._path(record_id))

    def create(self, data: Dict[str, Any]) -> ApiResponse:
        return self.client.post(self.path, data)

    def update(self, record_id: str | int, data: Dict[str, Any]) -> ApiResponse:
        return self.client.put(self._path(record_id), data)

    def delete(self, record_id: str | int) -> ApiResponse:
        return self.client.delete(self._path(record_id))

    def list_records(self, params: Params = None) -> PaginatedList:
        """``get_all`` decoded strictly into ``record_model`` instances."""
        return self._decode(self.get_all(params))
