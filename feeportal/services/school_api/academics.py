"""
Class and academic-year endpoints.
"""

from feeportal.schemas.api.academics import AcademicYear, SchoolClass
from feeportal.schemas.api.common import ApiResponse, PaginatedList
from .base import CrudResourceApi, Params


class ClassesApi(CrudResourceApi):
    path = "/classes"
    resource_key = "classes"
    record_model = SchoolClass

    def get_students(self, class_id: str | int) -> ApiResponse:
        return self.client.get(self._path(class_id, "students"))

    def list_classes(self, params: Params = None) -> PaginatedList:
        return self.list_records(params)


class AcademicYearsApi(CrudResourceApi):
    path = "/academic-years"
    resource_key = "academicYears"
    record_model = AcademicYear

    def get_active(self) -> ApiResponse:
        return self.client.get(self._path("active"))
