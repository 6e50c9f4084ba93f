"""
API schemas for student and parent records.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordBase(BaseModel):
    """Backend records keep their snake_case fields; unknown fields are kept."""

    id: str | int = Field(..., description="Backend identifier")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="allow")


class StudentDocument(BaseModel):
    id: str | int
    name: str
    type: Optional[str] = None
    url: Optional[str] = None
    uploaded_at: Optional[datetime] = None

    model_config = ConfigDict(extra="allow")


class Student(RecordBase):
    """Schema for a student as returned by /students"""
    student_id: Optional[str] = Field(None, description="School-issued student identifier")
    first_name: str = Field(..., min_length=1)
    last_name: str = ""
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    roll_number: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    class_id: Optional[str | int] = None
    class_name: Optional[str] = None
    parent_id: Optional[str | int] = None
    admission_date: Optional[date] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Parent(RecordBase):
    """Schema for a parent/guardian"""
    first_name: str
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    occupation: Optional[str] = None
    relationship: Optional[str] = None
    students: List[Student] = Field(default_factory=list)
