"""
Fee structure, assignment and fee endpoints.
"""

from typing import Any, Dict, Optional

from feeportal.schemas.api.common import ApiResponse, PaginatedList
from feeportal.schemas.api.fees import Fee, FeeAssignment, FeeStructure
from .base import CrudResourceApi, Params, ResourceApi, clean_params


class FeeStructuresApi(CrudResourceApi):
    path = "/fee-structures"
    resource_key = "feeStructures"
    record_model = FeeStructure

    def assign_to_students(self, structure_id: str | int, **assignment: Any) -> ApiResponse:
        """POST the assignment payload (student_ids, class_id, due_date, ...) as-is."""
        return self.client.post(self._path(structure_id, "assign"), assignment)

    def get_assignments(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("assignments"), params=clean_params(params))

    def waive_assignment(self, assignment_id: str | int, reason: Optional[str] = None) -> ApiResponse:
        return self.client.put(self._path("assignments", assignment_id, "waive"), {"reason": reason})

    def list_fee_structures(self, params: Params = None) -> PaginatedList:
        return self.list_records(params)

    def list_assignments(self, params: Params = None) -> PaginatedList:
        return self._decode(self.get_assignments(params), key="assignments", model=FeeAssignment)


class FeesApi(ResourceApi):
    """Fees are created by assigning a fee structure, so there is no create."""

    path = "/fees"
    resource_key = "fees"
    record_model = Fee

    def get_all(self, params: Params = None) -> ApiResponse:
        return self.client.get(self.path, params=clean_params(params))

    def get_by_id(self, fee_id: str | int) -> ApiResponse:
        return self.client.get(self._path(fee_id))

    def update(self, fee_id: str | int, data: Dict[str, Any]) -> ApiResponse:
        return self.client.put(self._path(fee_id), data)

    def delete(self, fee_id: str | int) -> ApiResponse:
        return self.client.delete(self._path(fee_id))

    def get_by_student(self, student_id: str | int) -> ApiResponse:
        return self.client.get(self._path("student", student_id))

    def get_outstanding(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("outstanding"), params=clean_params(params))

    def get_overdue(self, params: Params = None) -> ApiResponse:
        return self.client.get(self._path("overdue"), params=clean_params(params))
