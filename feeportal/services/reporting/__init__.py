from .summary import collection_rate, fee_amount, summarize_dashboard, summarize_fees, to_decimal

__all__ = [
    "collection_rate",
    "fee_amount",
    "summarize_dashboard",
    "summarize_fees",
    "to_decimal",
]
