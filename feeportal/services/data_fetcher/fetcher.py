"""
Async state holders around resource API calls.

``DataFetcher`` drives one API function and exposes ``data``, ``loading``,
``error`` and ``execute``. Synchronous API functions (the requests-based
client) run in a worker thread so the event loop never blocks on I/O.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, List, Optional, Set, Union

from feeportal.schemas.api.common import ApiResponse, Pagination
from feeportal.services.api_client import ApiError, extract_list, to_api_error
from feeportal.utils.logger import get_logger
from feeportal.utils.settings import get_settings

logger = get_logger(__name__)

ApiFunction = Callable[..., Union[ApiResponse, Awaitable[ApiResponse]]]
SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[ApiError], None]


class DataFetcher:
    """Loading/error/data state for one API function.

    Calls are neither deduplicated nor queued: every ``execute`` starts a new
    request, and by default whichever call settles last wins the state. Each
    call fires exactly one of ``on_success``/``on_error``. With
    ``drop_stale=True`` each call takes a generation number and only the
    newest call may write state or fire callbacks.
    """

    def __init__(
        self,
        api_function: ApiFunction,
        immediate: bool = True,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        drop_stale: bool = False,
    ):
        self.api_function = api_function
        self.immediate = immediate
        self.on_success = on_success
        self.on_error = on_error
        self.drop_stale = drop_stale

        self.data: Any = None
        self.error: Optional[ApiError] = None
        self._generation = 0
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def loading(self) -> bool:
        return bool(self._in_flight)

    async def __aenter__(self) -> "DataFetcher":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def start(self) -> Optional[asyncio.Task]:
        """Run the no-argument call if ``immediate`` is set."""
        if self.immediate:
            return self.execute()
        return None

    async def close(self) -> None:
        """Cancel anything still in flight."""
        tasks = list(self._in_flight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def wait(self) -> None:
        """Wait for every in-flight call to settle, ignoring failures."""
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def execute(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        """Start a call and return its task.

        Awaiting the task gives the payload or raises the ApiError. A task
        that is never awaited never surfaces its exception.
        """
        self._generation += 1
        generation = self._generation
        self.error = None

        task = asyncio.get_running_loop().create_task(self._run(generation, args, kwargs))
        self._in_flight.add(task)
        task.add_done_callback(self._settle)
        return task

    def reset(self) -> None:
        self._generation += 1
        self.data = None
        self.error = None

    def _settle(self, task: asyncio.Task) -> None:
        self._in_flight.discard(task)
        if not task.cancelled():
            # Retrieve the exception so fire-and-forget calls stay quiet.
            task.exception()

    def _is_current(self, generation: int) -> bool:
        return not self.drop_stale or generation == self._generation

    async def _call(self, *args: Any, **kwargs: Any) -> Any:
        if inspect.iscoroutinefunction(self.api_function):
            return await self.api_function(*args, **kwargs)
        result = await asyncio.to_thread(self.api_function, *args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _run(self, generation: int, args: tuple, kwargs: dict) -> Any:
        try:
            response = await self._call(*args, **kwargs)
            if isinstance(response, ApiResponse):
                if not response.success:
                    raise ApiError(message=response.message or response.error or "API call failed")
                payload = response.data
            else:
                payload = response
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = to_api_error(e)
            if self._is_current(generation):
                self.error = error
                if self.on_error:
                    self.on_error(error)
            else:
                logger.debug(f"Dropping stale error from call #{generation}: {error.message}")
            if error is e:
                raise
            raise error from e

        if self._is_current(generation):
            self._apply(payload, response)
            if self.on_success:
                self.on_success(payload)
        else:
            logger.debug(f"Dropping stale result from call #{generation}")
        return payload

    def _apply(self, payload: Any, response: Any) -> None:
        self.data = payload
        self.error = None


class PaginatedFetcher(DataFetcher):
    """``DataFetcher`` for list endpoints taking ``page``/``limit`` params."""

    def __init__(
        self,
        api_function: Callable[[dict], Any],
        resource_key: str,
        page_size: Optional[int] = None,
        **options: Any,
    ):
        self.list_function = api_function
        self.resource_key = resource_key
        self.page = 1
        self.limit = page_size or get_settings().DEFAULT_PAGE_SIZE
        self.items: List[Any] = []
        self.pagination = Pagination(page=1, limit=self.limit, total=0, total_pages=0)
        super().__init__(self._fetch_page, **options)

    def _fetch_page(self, params: Optional[dict] = None) -> Any:
        query = dict(params or {})
        query.update(page=self.page, limit=self.limit)
        return self.list_function(query)

    def _apply(self, payload: Any, response: Any) -> None:
        super()._apply(payload, response)
        self.items, pagination = extract_list(response, self.resource_key)
        if pagination is not None:
            self.pagination = pagination

    def set_page(self, page: int) -> asyncio.Task:
        self.page = max(1, page)
        return self.refresh()

    def set_limit(self, limit: int) -> asyncio.Task:
        self.limit = limit
        self.page = 1
        return self.refresh()

    def refresh(self, params: Optional[dict] = None) -> asyncio.Task:
        return self.execute(params)


class FormSubmitter:
    """Submit one payload to a create/update function and report success."""

    def __init__(
        self,
        api_function: ApiFunction,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        success_message: Optional[str] = None,
        announce: Optional[Callable[[str], None]] = None,
    ):
        self._fetcher = DataFetcher(
            api_function,
            immediate=False,
            on_success=on_success,
            on_error=on_error,
        )
        self.success_message = success_message
        self.announce = announce or logger.info

    @property
    def loading(self) -> bool:
        return self._fetcher.loading

    @property
    def error(self) -> Optional[ApiError]:
        return self._fetcher.error

    async def submit(self, payload: Any) -> bool:
        try:
            await self._fetcher.execute(payload)
        except ApiError as e:
            logger.warning(f"Form submission failed: {e.message}")
            return False
        if self.success_message:
            self.announce(self.success_message)
        return True

    def reset(self) -> None:
        self._fetcher.reset()
