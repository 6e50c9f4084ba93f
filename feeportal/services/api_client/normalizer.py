"""
List envelope normalization.

Backend list endpoints do not agree on an envelope. All of these carry the
same list:

    [...]
    {"students": [...], "pagination": {...}}
    {"data": [...]}
    {"data": {"students": [...], "pagination": {...}}}
    {"data": {"data": [...], "pagination": {...}}}

``extract_list`` is lenient and never raises. ``decode_list`` applies the
same rules but raises ``ResponseDecodeError`` when no list is found or an
item fails validation.
"""

from typing import Any, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from feeportal.schemas.api.common import ApiResponse, PaginatedList, Pagination
from feeportal.utils.logger import get_logger
from .errors import ResponseDecodeError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DATA_KEY = "data"
PAGINATION_KEY = "pagination"
# An ApiResponse adds one wrapping level on top of the raw body.
MAX_DEPTH = 2

_NOT_FOUND = object()


def _as_payload(response: Any) -> Any:
    if isinstance(response, ApiResponse):
        payload = {DATA_KEY: response.data}
        if response.pagination is not None:
            payload[PAGINATION_KEY] = response.pagination
        return payload
    return response


def _find(payload: Any, key: str, depth: int = 0) -> Any:
    """Return (items, raw_pagination) for the first matching rule, else _NOT_FOUND."""
    if isinstance(payload, dict):
        value = payload.get(key)
        if isinstance(value, list):
            return value, payload.get(PAGINATION_KEY)

        if DATA_KEY in payload:
            nested = payload[DATA_KEY]
            if isinstance(nested, list):
                return nested, payload.get(PAGINATION_KEY)
            if depth < MAX_DEPTH:
                return _find(nested, key, depth + 1)
        return _NOT_FOUND

    if isinstance(payload, list):
        return payload, None

    return _NOT_FOUND


def extract_list(response: Any, key: str) -> Tuple[List[Any], Optional[Pagination]]:
    """Pull the record list and pagination out of any known envelope.

    Unknown shapes give an empty list.
    """
    found = _find(_as_payload(response), key)
    if found is _NOT_FOUND:
        logger.debug(f"No '{key}' list in response of type {type(response).__name__}")
        return [], None

    items, raw_pagination = found
    return list(items), Pagination.from_payload(raw_pagination)


def decode_list(
    response: Any,
    key: str,
    model: Optional[Type[ModelT]] = None,
) -> PaginatedList:
    """Strict variant of ``extract_list`` that validates every item."""
    found = _find(_as_payload(response), key)
    if found is _NOT_FOUND:
        raise ResponseDecodeError(
            f"Expected a '{key}' list in the response",
            details={"shape": type(response).__name__},
        )

    items, raw_pagination = found
    pagination = None
    if raw_pagination is not None:
        pagination = Pagination.from_payload(raw_pagination)
        if pagination is None:
            raise ResponseDecodeError(
                f"Malformed pagination in '{key}' response",
                details={"pagination": raw_pagination},
            )

    if model is None:
        return PaginatedList(items=list(items), pagination=pagination)

    decoded = []
    for index, item in enumerate(items):
        try:
            decoded.append(model.model_validate(item))
        except ValidationError as e:
            raise ResponseDecodeError(
                f"Invalid {model.__name__} at index {index} in '{key}' response",
                details={"index": index, "errors": e.errors(include_url=False)},
            ) from e

    return PaginatedList[model](items=decoded, pagination=pagination)
