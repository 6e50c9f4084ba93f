"""
API schemas for fee structures, assignments and fees.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from feeportal.schemas.api.students import RecordBase, Student


class FeeStructure(RecordBase):
    """Schema for a fee structure"""
    name: str
    description: Optional[str] = None
    amount: Decimal = Field(..., ge=0, description="Fee amount")
    fee_type: Optional[str] = Field(None, description="tuition, transport, library, sports, exam or other")
    class_id: Optional[str | int] = None
    academic_year: Optional[str] = None
    due_date: Optional[date] = None
    late_fee_amount: Optional[Decimal] = None
    late_fee_days: Optional[int] = None
    is_recurring: bool = False
    recurring_interval: Optional[str] = None
    is_active: bool = True


class FeeAssignment(RecordBase):
    """Schema for a fee structure assigned to a student"""
    student_id: str | int
    fee_structure_id: Optional[str | int] = None
    student: Optional[Student] = None
    fee_structure: Optional[FeeStructure] = None
    status: str = "assigned"
    assigned_date: Optional[date] = None
    due_date: Optional[date] = None
    discount_applied: Optional[Decimal] = None
    waived_reason: Optional[str] = None
    waived_date: Optional[date] = None


class Fee(RecordBase):
    """Schema for a student fee with balance information"""
    student_id: str | int
    fee_structure_id: Optional[str | int] = None
    fee_structure: Optional[FeeStructure] = None
    amount: Optional[Decimal] = None
    paid_amount: Decimal = Decimal("0")
    balance_amount: Optional[Decimal] = None
    late_fee_amount: Optional[Decimal] = None
    status: str = "assigned"
    due_date: Optional[date] = None
    is_overdue: bool = False
