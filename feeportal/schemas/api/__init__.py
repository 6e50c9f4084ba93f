"""
API Schemas Package

This package contains Pydantic models for backend responses and records.
"""

from feeportal.schemas.api.common import ApiResponse, Pagination, PaginatedList
from feeportal.schemas.api.auth import AuthUser, TokenPair
from feeportal.schemas.api.students import Student, Parent, StudentDocument
from feeportal.schemas.api.academics import AcademicYear, SchoolClass
from feeportal.schemas.api.fees import Fee, FeeAssignment, FeeStructure
from feeportal.schemas.api.payments import Payment
from feeportal.schemas.api.reports import CollectionSummary, DashboardStats, FeeSummary

__all__ = [
    "ApiResponse",
    "Pagination",
    "PaginatedList",
    "AuthUser",
    "TokenPair",
    "Student",
    "Parent",
    "StudentDocument",
    "AcademicYear",
    "SchoolClass",
    "Fee",
    "FeeAssignment",
    "FeeStructure",
    "Payment",
    "CollectionSummary",
    "DashboardStats",
    "FeeSummary",
]
