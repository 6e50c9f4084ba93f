"""
Shared fixtures: a stub backend and an ApiClient wired to it.
"""

from typing import List

import pytest

from feeportal.services.api_client import ApiClient, ApiError, InMemoryTokenStore
from feeportal.services.school_api import SchoolApi
from tests.stub_backend import BASE_URL, BackendState, stub_session


class Recorder:
    """Collects notifier and auth-failure calls."""

    def __init__(self):
        self.errors: List[ApiError] = []
        self.redirects: List[str] = []

    def notify(self, error: ApiError) -> None:
        self.errors.append(error)

    def redirect(self, login_route: str) -> None:
        self.redirects.append(login_route)


@pytest.fixture
def backend() -> BackendState:
    return BackendState()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def client(backend, recorder, token_store) -> ApiClient:
    return ApiClient(
        base_url=BASE_URL,
        timeout=5,
        token_store=token_store,
        notifier=recorder.notify,
        on_auth_failure=recorder.redirect,
        session=stub_session(backend),
        login_route="/login",
    )


@pytest.fixture
def api(client) -> SchoolApi:
    return SchoolApi(client)


@pytest.fixture
def logged_in(api, backend) -> SchoolApi:
    api.auth.login("admin@school.test", "secret")
    return api
