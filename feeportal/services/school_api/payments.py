"""
Payment endpoints, including void and receipts.
"""

from pathlib import Path
from typing import Optional

from feeportal.schemas.api.common import ApiResponse, PaginatedList
from feeportal.schemas.api.payments import Payment
from feeportal.services.api_client.client import ProgressCallback
from .base import CrudResourceApi, Params, clean_params


class PaymentsApi(CrudResourceApi):
    path = "/payments"
    resource_key = "payments"
    record_model = Payment

    def download_receipt(
        self,
        payment_id: str | int,
        destination: str | Path = ".",
        filename: Optional[str] = None,
    ) -> Path:
        return self.client.download(self._path("receipt", payment_id), destination, filename=filename)

    def generate_receipt(self, payment_id: str | int) -> ApiResponse:
        return self.client.get(self._path("receipt", payment_id))

    def void_payment(self, payment_id: str | int, reason: Optional[str] = None) -> ApiResponse:
        return self.client.put(self._path(payment_id, "void"), {"reason": reason})

    def get_stats(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("stats"), params=clean_params(params))

    def bulk_import(self, csv_path: str | Path, on_progress: Optional[ProgressCallback] = None) -> ApiResponse:
        return self.client.upload(self._path("bulk-import"), csv_path, on_progress=on_progress)

    def list_payments(self, params: Params = None) -> PaginatedList:
        return self.list_records(params)
