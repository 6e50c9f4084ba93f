"""
Report and dashboard endpoints.
"""

from pathlib import Path
from typing import Optional

from feeportal.schemas.api.common import ApiResponse
from .base import Params, ResourceApi, clean_params


class ReportsApi(ResourceApi):
    path = "/reports"

    def get_fee_collection(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("fee-collection"), params=clean_params(params))

    def get_outstanding_fees(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("outstanding-fees"), params=clean_params(params))

    def get_payment_history(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("payment-history"), params=clean_params(params))

    def get_defaulters(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("defaulters"), params=clean_params(params))

    def export_report(
        self,
        report_type: str,
        params: Params = None,
        export_format: str = "csv",
        destination: str | Path = ".",
    ) -> Path:
        query = dict(clean_params(params) or {})
        query["format"] = export_format
        return self.client.download(
            self._path(report_type, "export"),
            destination,
            filename=f"{report_type}-report.{export_format}",
            params=query,
        )


class DashboardApi(ResourceApi):
    path = "/dashboard"

    def get_stats(self) -> ApiResponse:
        return self.client.get(self._path("stats"))

    def get_recent_payments(self) -> ApiResponse:
        return self.client.get(self._path("recent-payments"))

    def get_upcoming_dues(self) -> ApiResponse:
        return self.client.get(self._path("upcoming-dues"))

    def get_collection_trends(self) -> ApiResponse:
        return self.client.get(self._path("collection-trends"))

    def get_alerts(self) -> ApiResponse:
        return self.client.get(self._path("alerts"))
