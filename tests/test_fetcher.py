"""
Tests for DataFetcher, PaginatedFetcher and FormSubmitter.
"""

import asyncio
from typing import Dict, List

import pytest

from feeportal.schemas.api.common import ApiResponse
from feeportal.services.api_client import ApiError, ClientError
from feeportal.services.data_fetcher import DataFetcher, FormSubmitter, PaginatedFetcher


class GatedBackend:
    """Async API function whose calls resolve only when their gate opens."""

    def __init__(self):
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []

    def gate(self, name: str) -> asyncio.Event:
        return self.gates.setdefault(name, asyncio.Event())

    async def fetch(self, name: str) -> ApiResponse:
        self.calls.append(name)
        await self.gate(name).wait()
        if name.startswith("fail"):
            raise ClientError(message=f"{name} rejected", status_code=422)
        return ApiResponse(success=True, data=name)


def paged_students(params: dict) -> ApiResponse:
    page, limit = params["page"], params["limit"]
    start = (page - 1) * limit
    records = [{"id": str(i)} for i in range(start + 1, min(start + limit, 42) + 1)]
    return ApiResponse(
        success=True,
        data={"students": records, "pagination": {"page": page, "limit": limit, "total": 42}},
    )


class TestDataFetcher:
    @pytest.mark.asyncio
    async def test_immediate_fetch_on_enter(self):
        calls = []

        def get_stats():
            calls.append(1)
            return ApiResponse(success=True, data={"total_students": 3})

        async with DataFetcher(get_stats) as fetcher:
            assert fetcher.loading
            await fetcher.wait()

        assert calls == [1]
        assert fetcher.data == {"total_students": 3}
        assert fetcher.error is None
        assert not fetcher.loading

    @pytest.mark.asyncio
    async def test_not_immediate(self):
        calls = []
        fetcher = DataFetcher(lambda: calls.append(1), immediate=False)

        assert fetcher.start() is None
        await fetcher.wait()

        assert calls == []
        assert fetcher.data is None

    @pytest.mark.asyncio
    async def test_execute_passes_arguments_and_returns_payload(self):
        fetcher = DataFetcher(lambda student_id, **kw: ApiResponse(data={"id": student_id, **kw}), immediate=False)

        payload = await fetcher.execute("7", include="fees")

        assert payload == {"id": "7", "include": "fees"}
        assert fetcher.data == payload

    @pytest.mark.asyncio
    async def test_callbacks(self):
        successes, errors = [], []
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False, on_success=successes.append, on_error=errors.append)

        backend.gate("ok").set()
        backend.gate("fail-1").set()
        await fetcher.execute("ok")
        with pytest.raises(ClientError):
            await fetcher.execute("fail-1")

        assert successes == ["ok"]
        assert [e.message for e in errors] == ["fail-1 rejected"]
        assert fetcher.error is errors[0]
        # data from the earlier success is kept
        assert fetcher.data == "ok"

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_becomes_error(self):
        fetcher = DataFetcher(lambda: ApiResponse(success=False, message="Fee structure is locked"), immediate=False)

        with pytest.raises(ApiError) as exc_info:
            await fetcher.execute()

        assert exc_info.value.message == "Fee structure is locked"
        assert fetcher.error.message == "Fee structure is locked"

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_default_message(self):
        fetcher = DataFetcher(lambda: ApiResponse(success=False), immediate=False)

        with pytest.raises(ApiError):
            await fetcher.execute()

        assert fetcher.error.message == "API call failed"

    @pytest.mark.asyncio
    async def test_plain_exception_is_normalized(self):
        def broken():
            raise RuntimeError("socket closed")

        fetcher = DataFetcher(broken, immediate=False)

        with pytest.raises(ApiError) as exc_info:
            await fetcher.execute()

        assert exc_info.value.message == "socket closed"
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_fire_and_forget_failure_only_sets_state(self):
        def broken():
            raise ClientError(message="nope", status_code=400)

        fetcher = DataFetcher(broken, immediate=False)
        fetcher.execute()
        await fetcher.wait()

        assert fetcher.error.message == "nope"
        assert not fetcher.loading

    @pytest.mark.asyncio
    async def test_new_call_clears_error(self):
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False)
        backend.gate("fail-1").set()
        fetcher.execute("fail-1")
        await fetcher.wait()
        assert fetcher.error is not None

        fetcher.execute("slow")

        assert fetcher.error is None
        assert fetcher.loading
        backend.gate("slow").set()
        await fetcher.wait()
        assert fetcher.data == "slow"

    @pytest.mark.asyncio
    async def test_last_settled_wins_by_default(self):
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False)

        first = fetcher.execute("first")
        second = fetcher.execute("second")
        backend.gate("second").set()
        await second
        assert fetcher.data == "second"

        backend.gate("first").set()
        await first
        assert fetcher.data == "first"

    @pytest.mark.asyncio
    async def test_each_overlapping_call_fires_one_callback(self):
        successes, errors = [], []
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False, on_success=successes.append, on_error=errors.append)

        fetcher.execute("first")
        fetcher.execute("fail-second")
        fetcher.execute("third")
        backend.gate("third").set()
        await asyncio.sleep(0)
        backend.gate("fail-second").set()
        await asyncio.sleep(0)
        backend.gate("first").set()
        await fetcher.wait()

        assert sorted(successes) == ["first", "third"]
        assert [e.message for e in errors] == ["fail-second rejected"]
        assert backend.calls == ["first", "fail-second", "third"]
        # the last call to settle owns the state
        assert fetcher.data == "first"

    @pytest.mark.asyncio
    async def test_drop_stale_keeps_newest_call(self):
        successes = []
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False, on_success=successes.append, drop_stale=True)

        first = fetcher.execute("first")
        second = fetcher.execute("second")
        backend.gate("second").set()
        await second
        backend.gate("first").set()

        # the stale call still resolves for whoever awaits it
        assert await first == "first"
        assert fetcher.data == "second"
        assert successes == ["second"]

    @pytest.mark.asyncio
    async def test_drop_stale_ignores_stale_error(self):
        errors = []
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False, on_error=errors.append, drop_stale=True)

        stale = fetcher.execute("fail-old")
        fetcher.execute("fresh")
        backend.gate("fresh").set()
        backend.gate("fail-old").set()
        await fetcher.wait()

        assert stale.exception().message == "fail-old rejected"
        assert fetcher.error is None
        assert fetcher.data == "fresh"
        assert errors == []

    @pytest.mark.asyncio
    async def test_reset_discards_in_flight_result_when_dropping_stale(self):
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False, drop_stale=True)

        fetcher.execute("slow")
        fetcher.reset()
        backend.gate("slow").set()
        await fetcher.wait()

        assert fetcher.data is None
        assert fetcher.error is None

    @pytest.mark.asyncio
    async def test_close_cancels_in_flight(self):
        backend = GatedBackend()
        fetcher = DataFetcher(backend.fetch, immediate=False)

        task = fetcher.execute("never")
        await asyncio.sleep(0)
        await fetcher.close()

        assert task.cancelled()
        assert not fetcher.loading
        assert fetcher.data is None


class TestPaginatedFetcher:
    @pytest.mark.asyncio
    async def test_first_page_on_start(self):
        async with PaginatedFetcher(paged_students, "students", page_size=10) as fetcher:
            await fetcher.wait()

        assert [s["id"] for s in fetcher.items] == [str(i) for i in range(1, 11)]
        assert fetcher.pagination.total == 42
        assert fetcher.pagination.total_pages == 5

    @pytest.mark.asyncio
    async def test_set_page(self):
        fetcher = PaginatedFetcher(paged_students, "students", page_size=10, immediate=False)

        await fetcher.set_page(5)

        assert [s["id"] for s in fetcher.items] == ["41", "42"]
        assert fetcher.pagination.page == 5
        assert not fetcher.pagination.has_next

    @pytest.mark.asyncio
    async def test_set_page_clamps_to_one(self):
        fetcher = PaginatedFetcher(paged_students, "students", page_size=10, immediate=False)

        await fetcher.set_page(0)

        assert fetcher.page == 1

    @pytest.mark.asyncio
    async def test_set_limit_resets_page(self):
        seen = []

        def list_students(params):
            seen.append(dict(params))
            return paged_students(params)

        fetcher = PaginatedFetcher(list_students, "students", page_size=10, immediate=False)
        await fetcher.set_page(3)
        await fetcher.set_limit(25)

        assert seen[-1] == {"page": 1, "limit": 25}
        assert fetcher.pagination.total_pages == 2
        assert len(fetcher.items) == 25

    @pytest.mark.asyncio
    async def test_refresh_keeps_filters(self):
        seen = []

        def list_students(params):
            seen.append(dict(params))
            return paged_students(params)

        fetcher = PaginatedFetcher(list_students, "students", page_size=5, immediate=False)
        await fetcher.refresh({"search": "ada", "page": 9})

        assert seen == [{"search": "ada", "page": 1, "limit": 5}]

    @pytest.mark.asyncio
    async def test_unknown_shape_gives_empty_page(self):
        fetcher = PaginatedFetcher(lambda params: ApiResponse(data={"unexpected": True}), "students", page_size=5, immediate=False)

        await fetcher.refresh()

        assert fetcher.items == []
        assert fetcher.pagination.total == 0

    @pytest.mark.asyncio
    async def test_against_stub_backend(self, logged_in):
        fetcher = PaginatedFetcher(logged_in.students.get_all, "students", page_size=5, immediate=False)

        await fetcher.set_page(5)

        assert [s["id"] for s in fetcher.items] == ["21", "22", "23"]
        assert fetcher.pagination.total_pages == 5
        assert fetcher.pagination.is_consistent


class TestFormSubmitter:
    @pytest.mark.asyncio
    async def test_successful_submit(self):
        submitted, announced = [], []

        def create(payload):
            submitted.append(payload)
            return ApiResponse(success=True, data={"id": "s1", **payload})

        submitter = FormSubmitter(create, success_message="Student created", announce=announced.append)

        assert await submitter.submit({"first_name": "Ada"}) is True
        assert submitted == [{"first_name": "Ada"}]
        assert announced == ["Student created"]
        assert submitter.error is None
        assert not submitter.loading

    @pytest.mark.asyncio
    async def test_failed_submit(self):
        errors, announced = [], []

        def create(payload):
            raise ClientError(message="Validation failed", status_code=400, details={"first_name": "required"})

        submitter = FormSubmitter(create, on_error=errors.append, success_message="Created", announce=announced.append)

        assert await submitter.submit({}) is False
        assert submitter.error.details == {"first_name": "required"}
        assert errors == [submitter.error]
        assert announced == []

        submitter.reset()
        assert submitter.error is None

    @pytest.mark.asyncio
    async def test_delete_against_stub_backend(self, logged_in, backend):
        submitter = FormSubmitter(logged_in.students.delete)

        assert await submitter.submit("3") is True
        assert "3" not in backend.students
