"""
School API Package

One class per backend resource, each mapping 1:1 to REST endpoints.
``SchoolApi`` bundles them around a single ``ApiClient``.
"""

from typing import Optional

from feeportal.services.api_client import ApiClient, get_api_client
from .academics import AcademicYearsApi, ClassesApi
from .auth import AuthApi
from .fees import FeesApi, FeeStructuresApi
from .payments import PaymentsApi
from .portal import ParentPortalApi
from .reports import DashboardApi, ReportsApi
from .settings import NotificationsApi, SettingsApi
from .students import ParentsApi, StudentsApi


class SchoolApi:
    """All resource APIs sharing one client (and so one token pair)."""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or get_api_client()
        self.auth = AuthApi(self.client)
        self.students = StudentsApi(self.client)
        self.parents = ParentsApi(self.client)
        self.classes = ClassesApi(self.client)
        self.academic_years = AcademicYearsApi(self.client)
        self.fee_structures = FeeStructuresApi(self.client)
        self.fees = FeesApi(self.client)
        self.payments = PaymentsApi(self.client)
        self.reports = ReportsApi(self.client)
        self.dashboard = DashboardApi(self.client)
        self.parent_portal = ParentPortalApi(self.client)
        self.settings = SettingsApi(self.client)
        self.notifications = NotificationsApi(self.client)


__all__ = [
    "SchoolApi",
    "AuthApi",
    "StudentsApi",
    "ParentsApi",
    "ClassesApi",
    "AcademicYearsApi",
    "FeeStructuresApi",
    "FeesApi",
    "PaymentsApi",
    "ReportsApi",
    "DashboardApi",
    "ParentPortalApi",
    "SettingsApi",
    "NotificationsApi",
]
