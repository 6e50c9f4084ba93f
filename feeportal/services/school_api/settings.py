"""
Settings and notification endpoints.
"""

from typing import Any, Dict

from feeportal.schemas.api.common import ApiResponse
from .base import Params, ResourceApi, clean_params


class SettingsApi(ResourceApi):
    path = "/settings"

    def get_app_settings(self) -> ApiResponse:
        return self.client.get(self._path("app"))

    def update_app_settings(self, data: Dict[str, Any]) -> ApiResponse:
        return self.client.put(self._path("app"), data)

    def get_user_settings(self) -> ApiResponse:
        return self.client.get(self._path("user"))

    def update_user_settings(self, data: Dict[str, Any]) -> ApiResponse:
        return self.client.put(self._path("user"), data)


class NotificationsApi(ResourceApi):
    path = "/notifications"
    resource_key = "notifications"

    def get_all(self, params: Params = None) -> ApiResponse:
        return self.client.get(self.path, params=clean_params(params))

    def mark_as_read(self, notification_id: str | int) -> ApiResponse:
        return self.client.put(self._path(notification_id, "read"))

    def mark_all_as_read(self) -> ApiResponse:
        return self.client.put(self._path("read-all"))

    def delete(self, notification_id: str | int) -> ApiResponse:
        return self.client.delete(self._path(notification_id))
