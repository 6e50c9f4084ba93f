"""
Tests for client-side fee aggregation.
"""

from decimal import Decimal

from feeportal.schemas.api import DashboardStats, Fee, FeeStructure
from feeportal.services.reporting import collection_rate, fee_amount, summarize_dashboard, summarize_fees, to_decimal


class TestToDecimal:
    def test_parses_numbers_and_strings(self):
        assert to_decimal("1500.50") == Decimal("1500.50")
        assert to_decimal(200) == Decimal("200")

    def test_blank_and_junk_are_zero(self):
        assert to_decimal(None) == Decimal("0")
        assert to_decimal("") == Decimal("0")
        assert to_decimal("n/a") == Decimal("0")

    def test_non_finite_values_are_zero(self):
        assert to_decimal("NaN") == Decimal("0")
        assert to_decimal("Infinity") == Decimal("0")
        assert to_decimal(Decimal("-Infinity")) == Decimal("0")
        assert to_decimal(float("nan")) == Decimal("0")


class TestFeeAmount:
    def test_prefers_fee_structure_amount(self):
        fee = {"amount": "100", "fee_structure": {"amount": "250"}}

        assert fee_amount(fee) == Decimal("250")

    def test_camel_case_structure(self):
        assert fee_amount({"feeStructure": {"amount": 75}}) == Decimal("75")

    def test_falls_back_to_own_amount(self):
        assert fee_amount({"amount": "100", "fee_structure": {"name": "Library"}}) == Decimal("100")

    def test_model_instances(self):
        fee = Fee(
            id="f1",
            student_id="1",
            amount=Decimal("10"),
            fee_structure=FeeStructure(id="s1", name="Tuition", amount=Decimal("1200")),
        )

        assert fee_amount(fee) == Decimal("1200")


class TestSummarizeFees:
    def test_groups_by_status(self):
        fees = [
            {"status": "paid", "amount": "1000"},
            {"status": "assigned", "amount": "500"},
            {"status": "partial", "fee_structure": {"amount": "300"}},
            {"status": "overdue", "amount": "200"},
            {"status": "OVERDUE", "amount": "50"},
            {"status": "waived", "amount": "70"},
        ]

        summary = summarize_fees(fees)

        assert summary.total_amount == Decimal("2120")
        assert summary.total_count == 6
        assert (summary.paid_amount, summary.paid_count) == (Decimal("1000"), 1)
        assert (summary.pending_amount, summary.pending_count) == (Decimal("800"), 2)
        assert (summary.overdue_amount, summary.overdue_count) == (Decimal("250"), 2)

    def test_empty(self):
        summary = summarize_fees([])

        assert summary.total_amount == Decimal("0")
        assert summary.total_count == 0


class TestCollectionRate:
    def test_rounds_to_two_decimals(self):
        assert collection_rate(Decimal("32000"), Decimal("45000")) == 71.11

    def test_zero_total(self):
        assert collection_rate(100, 0) == 0.0
        assert collection_rate(0, -5) == 0.0

    def test_non_finite_inputs(self):
        assert collection_rate("NaN", "45000") == 0.0
        assert collection_rate("32000", "NaN") == 0.0
        assert collection_rate("Infinity", "100") == 0.0


class TestSummarizeDashboard:
    def test_from_stats_payload(self):
        summary = summarize_dashboard(
            {
                "total_students": 23,
                "total_fees": "45000",
                "collected_amount": "32000",
                "pending_amount": "13000",
                "defaulters_count": 4,
            }
        )

        assert summary.total_fees == Decimal("45000")
        assert summary.collection_rate == 71.11
        assert summary.overdue_amount == Decimal("0")
        assert summary.defaulters_count == 4

    def test_from_model_and_empty(self):
        assert summarize_dashboard(DashboardStats(total_fees=Decimal("10"), collected_amount=Decimal("10"))).collection_rate == 100.0
        assert summarize_dashboard({}).collection_rate == 0.0
