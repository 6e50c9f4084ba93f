"""
Student and parent endpoints.
"""

from pathlib import Path
from typing import List, Optional

from feeportal.schemas.api.common import ApiResponse, PaginatedList
from feeportal.schemas.api.students import Parent, Student, StudentDocument
from feeportal.services.api_client.client import ProgressCallback
from .base import CrudResourceApi, Params, clean_params


class StudentsApi(CrudResourceApi):
    path = "/students"
    resource_key = "students"
    record_model = Student

    def bulk_delete(self, ids: List[str | int]) -> ApiResponse:
        return self.client.post(self._path("bulk-delete"), {"ids": list(ids)})

    def search(self, query: str) -> ApiResponse:
        return self.client.get(self._path("search"), params={"q": query})

    def get_fees(self, student_id: str | int) -> ApiResponse:
        return self.client.get(self._path(student_id, "fees"))

    def get_payments(self, student_id: str | int) -> ApiResponse:
        return self.client.get(self._path(student_id, "payments"))

    def upload_document(
        self,
        student_id: str | int,
        file_path: str | Path,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ApiResponse:
        return self.client.upload(self._path(student_id, "documents"), file_path, on_progress=on_progress)

    def get_documents(self, student_id: str | int) -> ApiResponse:
        return self.client.get(self._path(student_id, "documents"))

    def list_documents(self, student_id: str | int) -> PaginatedList:
        return self._decode(self.get_documents(student_id), key="documents", model=StudentDocument)

    def bulk_import(self, csv_path: str | Path, on_progress: Optional[ProgressCallback] = None) -> ApiResponse:
        """Upload a CSV of students; parsing happens on the backend."""
        return self.client.upload(self._path("bulk-import"), csv_path, on_progress=on_progress)

    def list_students(self, params: Params = None) -> PaginatedList:
        return self.list_records(params)


class ParentsApi(CrudResourceApi):
    path = "/parents"
    resource_key = "parents"
    record_model = Parent

    def get_children(self, parent_id: str | int) -> ApiResponse:
        return self.client.get(self._path(parent_id, "children"))

    def get_children_fees(self, parent_id: str | int, params: Params = None) -> ApiResponse:
        return self.client.get(self._path(parent_id, "children", "fees"), params=clean_params(params))
