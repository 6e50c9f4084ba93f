"""
Parent portal endpoints (/parent/*), scoped to the signed-in parent.
"""

from feeportal.schemas.api.common import ApiResponse
from .base import Params, ResourceApi, clean_params


class ParentPortalApi(ResourceApi):
    path = "/parent"

    def get_summary(self) -> ApiResponse:
        return self.client.get(self._path("summary"))

    def get_children(self) -> ApiResponse:
        return self.client.get(self._path("children"))

    def get_child_profile(self, child_id: str | int) -> ApiResponse:
        return self.client.get(self._path("children", child_id))

    def get_child_fees(self, child_id: str | int, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("children", child_id, "fees"), params=clean_params(params))

    def get_child_payments(self, child_id: str | int, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("children", child_id, "payments"), params=clean_params(params))

    def get_child_balance(self, child_id: str | int, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("children", child_id, "balance"), params=clean_params(params))

    def get_child_stats(self, child_id: str | int) -> ApiResponse:
        return self.client.get(self._path("children", child_id, "stats"))

    def get_child_receipt(self, child_id: str | int, payment_id: str | int) -> ApiResponse:
        return self.client.get(self._path("children", child_id, "receipt", payment_id))
