"""
Client-side aggregation over already-aggregated API responses.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Union

from feeportal.schemas.api.reports import CollectionSummary, DashboardStats, FeeSummary
from feeportal.utils.logger import get_logger

logger = get_logger(__name__)

PAID_STATUSES = ("paid",)
PENDING_STATUSES = ("assigned", "pending", "partial")
OVERDUE_STATUSES = ("overdue",)


def to_decimal(value: Any) -> Decimal:
    """Lenient amount parsing: None, blanks, junk and NaN/Infinity count as zero."""
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning(f"Ignoring unparseable amount {value!r}")
        return Decimal("0")
    if not amount.is_finite():
        logger.warning(f"Ignoring non-finite amount {value!r}")
        return Decimal("0")
    return amount


def _get(record: Any, key: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(key, default)
    return getattr(record, key, default)


def fee_amount(fee: Any) -> Decimal:
    """Amount of a fee record, preferring its fee structure's amount."""
    structure = _get(fee, "fee_structure") or _get(fee, "feeStructure")
    if structure is not None and _get(structure, "amount") is not None:
        return to_decimal(_get(structure, "amount"))
    return to_decimal(_get(fee, "amount"))


def summarize_fees(fees: Iterable[Any]) -> FeeSummary:
    """Per-status totals and counts over fee records."""
    summary = FeeSummary()
    for fee in fees:
        amount = fee_amount(fee)
        status = str(_get(fee, "status", "") or "").lower()

        summary.total_amount += amount
        summary.total_count += 1
        if status in PAID_STATUSES:
            summary.paid_amount += amount
            summary.paid_count += 1
        elif status in PENDING_STATUSES:
            summary.pending_amount += amount
            summary.pending_count += 1
        elif status in OVERDUE_STATUSES:
            summary.overdue_amount += amount
            summary.overdue_count += 1
    return summary


def collection_rate(collected: Union[Decimal, float, int], total: Union[Decimal, float, int]) -> float:
    """Collected as a percentage of total, two decimals; 0 when total is 0."""
    total = to_decimal(total)
    if total <= 0:
        return 0.0
    rate = to_decimal(collected) * 100 / total
    return float(rate.quantize(Decimal("0.01")))


def summarize_dashboard(stats: Union[DashboardStats, Dict[str, Any]]) -> CollectionSummary:
    """Headline figures for the admin dashboard."""
    if not isinstance(stats, DashboardStats):
        stats = DashboardStats.model_validate(stats or {})

    return CollectionSummary(
        total_fees=stats.total_fees,
        collected_amount=stats.collected_amount,
        pending_amount=stats.pending_amount,
        # TODO: /dashboard/stats has no overdue figure; take it from /fees/overdue once the backend aggregates it.
        overdue_amount=Decimal("0"),
        collection_rate=collection_rate(stats.collected_amount, stats.total_fees),
        defaulters_count=stats.defaulters_count,
    )
