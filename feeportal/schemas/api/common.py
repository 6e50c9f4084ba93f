from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError


T = TypeVar("T")

# Wire spellings seen across backend list endpoints, in lookup order.
_PAGE_KEYS = ("page", "currentPage", "current_page")
_LIMIT_KEYS = ("limit", "itemsPerPage", "items_per_page", "per_page", "pageSize", "page_size")
_TOTAL_KEYS = ("total", "totalItems", "total_items", "count")
_TOTAL_PAGES_KEYS = ("totalPages", "total_pages", "pages")


def _first_present(raw: Dict[str, Any], keys: tuple) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


class ApiResponse(BaseModel):
    """Standard API response envelope."""

    success: bool = True
    data: Any = None
    message: Optional[str] = None
    error: Optional[str] = None
    pagination: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_payload(cls, payload: Any) -> "ApiResponse":
        """Wrap a decoded JSON body, enveloped or not."""
        if isinstance(payload, dict) and "success" in payload:
            return cls.model_validate(payload)
        return cls(success=True, data=payload)


class Pagination(BaseModel):
    """Pagination metadata attached to a list response."""

    page: int = Field(1, ge=1, description="Current page, 1-based")
    limit: int = Field(..., gt=0, description="Page size")
    total: int = Field(0, ge=0, description="Total records across all pages")
    total_pages: int = Field(0, ge=0, alias="totalPages", description="Number of pages")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_payload(cls, raw: Any) -> Optional["Pagination"]:
        """Build pagination from any known wire spelling; None if unusable."""
        if not isinstance(raw, dict):
            return None

        limit = _first_present(raw, _LIMIT_KEYS)
        if limit is None:
            return None

        page = _first_present(raw, _PAGE_KEYS)
        total = _first_present(raw, _TOTAL_KEYS)
        total_pages = _first_present(raw, _TOTAL_PAGES_KEYS)

        try:
            limit = int(limit)
            total = int(total) if total is not None else 0
            if total_pages is None and limit > 0:
                total_pages = -(-total // limit)
            return cls(
                page=int(page) if page is not None else 1,
                limit=limit,
                total=total,
                total_pages=int(total_pages) if total_pages is not None else 0,
            )
        except (TypeError, ValueError, OverflowError, ValidationError):
            return None

    @property
    def is_consistent(self) -> bool:
        return self.total_pages == -(-self.total // self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


class PaginatedList(BaseModel, Generic[T]):
    """Items extracted from a list endpoint plus optional pagination."""

    items: List[T] = Field(default_factory=list)
    pagination: Optional[Pagination] = None

    @property
    def total(self) -> int:
        if self.pagination is not None:
            return self.pagination.total
        return len(self.items)
