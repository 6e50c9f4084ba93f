"""
API schemas for payments and receipts.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from feeportal.schemas.api.students import RecordBase


class Payment(RecordBase):
    """Schema for a recorded payment"""
    student_id: Optional[str | int] = None
    fee_id: Optional[str | int] = None
    amount_paid: Decimal = Field(..., ge=0, description="Amount received")
    payment_method: Optional[str] = Field(None, description="cash, bank_transfer, cheque, online or card")
    payment_date: Optional[date] = None
    receipt_number: Optional[str] = None
    transaction_id: Optional[str] = None
    bank_name: Optional[str] = None
    bank_reference: Optional[str] = None
    cheque_number: Optional[str] = None
    cheque_date: Optional[date] = None
    late_fee_paid: Optional[Decimal] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_voided(self) -> bool:
        return (self.status or "").lower() in ("void", "voided", "cancelled")
