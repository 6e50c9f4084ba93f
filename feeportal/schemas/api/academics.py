"""
API schemas for classes and academic years.
"""

from datetime import date
from typing import Optional

from pydantic import Field

from feeportal.schemas.api.students import RecordBase


class AcademicYear(RecordBase):
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = False


class SchoolClass(RecordBase):
    """Schema for a class (grade + section)"""
    name: str
    grade: Optional[int] = None
    section: Optional[str] = None
    academic_year: Optional[str] = Field(None, description="Academic year label, e.g. 2024-2025")
    student_count: Optional[int] = None
