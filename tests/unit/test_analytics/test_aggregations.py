"""Unit tests for dashboard aggregations."""

import math

import pytest

from acutrace.analytics.aggregations import (
    category_breakdown,
    enhanced_stats,
    ledger_totals,
    monthly_trend,
    split_recurring,
    top_parties,
    trend_summary,
)
from acutrace.schemas.analytics import EnhancedStats
from acutrace.schemas.transaction import PartyLedgerEntry, Transaction


@pytest.fixture
def transactions(sample_transactions):
    return [Transaction.model_validate(row) for row in sample_transactions]


class TestCategoryBreakdown:
    def test_groups_debits_by_inferred_category(self, transactions):
        records = category_breakdown(transactions)
        assert [(r.name, r.value, r.count) for r in records] == [
            ("UPI", 15000, 1),
            ("Shopping", 1200, 1),
            ("Food", 300, 1),
        ]

    def test_credits_are_not_spend(self):
        records = category_breakdown([Transaction(description="SALARY", credit=90000)])
        assert records == []

    def test_total_equals_sum_of_debits(self, transactions):
        records = category_breakdown(transactions)
        expected = sum(txn.debit for txn in transactions if txn.debit > 0)
        assert math.isclose(sum(r.value for r in records), expected)
        assert sum(r.count for r in records) == 3

    def test_precomputed_spend_category_is_used(self):
        txn = Transaction(description="Amazon", debit=100, spend_category="Gifts")
        assert category_breakdown([txn])[0].name == "Gifts"

    def test_ties_keep_first_seen_order(self):
        records = category_breakdown(
            [
                Transaction(description="Uber ride", debit=500),
                Transaction(description="Netflix", debit=500),
                Transaction(description="Electricity bill", debit=500),
            ]
        )
        assert [r.name for r in records] == ["Travel", "Subscription", "Bills"]

    def test_empty(self):
        assert category_breakdown([]) == []


class TestMonthlyTrend:
    def test_buckets_in_calendar_order_across_years(self):
        buckets = monthly_trend(
            [
                Transaction(date="03/01/2025", debit=100),
                Transaction(date="15/12/2024", credit=400),
                Transaction(date="20/01/2025", debit=50),
            ]
        )
        assert [(b.month_key, b.label, b.total, b.count) for b in buckets] == [
            ("2024-12", "Dec 24", 400, 1),
            ("2025-01", "Jan 25", 150, 2),
        ]

    def test_unknown_bucket_sorts_last(self):
        buckets = monthly_trend(
            [
                Transaction(date="not a date", debit=70),
                Transaction(date="2025-03-02", debit=30),
                Transaction(date="", debit=5),
            ]
        )
        assert [b.month_key for b in buckets] == ["2025-03", "Unknown"]
        assert buckets[-1].total == 75
        assert buckets[-1].count == 2

    def test_totals_conserve_flow(self, transactions):
        buckets = monthly_trend(transactions)
        assert math.isclose(
            sum(b.total for b in buckets),
            sum(txn.flow_amount for txn in transactions),
        )

    def test_partial_date_uses_part_fallback(self):
        buckets = monthly_trend([Transaction(date="31/02/2025", debit=10)])
        assert buckets[0].month_key == "2025-02"

    def test_empty(self):
        assert monthly_trend([]) == []


class TestEnhancedStats:
    def test_sample_statistics(self, transactions):
        stats = enhanced_stats(transactions)
        assert stats.has_data
        assert stats.transaction_count == 4
        assert stats.min_amount == 300
        assert stats.max_amount == 50000
        assert stats.average_amount == pytest.approx(16625)
        assert stats.total_credit == 50000
        assert stats.total_debit == 16500
        assert stats.credit_count == 1
        assert stats.debit_count == 3
        assert stats.credit_share == pytest.approx(0.25)
        assert stats.debit_share == pytest.approx(0.75)
        assert stats.start_date == "01/01/2025"
        assert stats.end_date == "15/03/2025"

    def test_channel_counts_cover_every_transaction(self):
        stats = enhanced_stats(
            [
                Transaction(debit=10, is_upi=True, is_transfer=True),
                Transaction(debit=20, is_transfer=True),
                Transaction(debit=30),
                Transaction(),
            ]
        )
        assert stats.upi_count == 1
        assert stats.transfer_count == 1
        assert stats.direct_count == 2
        assert stats.upi_count + stats.transfer_count + stats.direct_count == stats.transaction_count

    def test_empty_has_no_data(self):
        stats = enhanced_stats([])
        assert stats == EnhancedStats()
        assert not stats.has_data
        assert stats.average_amount is None
        assert stats.credit_share is None
        assert stats.debit_share is None

    def test_zero_amounts_produce_no_nan(self):
        stats = enhanced_stats([Transaction(date="01/01/2025")])
        assert stats.has_data
        assert stats.min_amount is None
        assert stats.average_amount is None
        assert stats.credit_share is None
        for value in stats.model_dump().values():
            assert not (isinstance(value, float) and math.isnan(value))

    def test_date_range_uses_calendar_order(self):
        stats = enhanced_stats(
            [
                Transaction(date="02/01/2025", debit=1),
                Transaction(date="30/12/2024", debit=1),
                Transaction(date="10/01/2025", debit=1),
            ]
        )
        assert stats.start_date == "30/12/2024"
        assert stats.end_date == "10/01/2025"

    def test_date_range_falls_back_to_raw_strings(self):
        stats = enhanced_stats(
            [Transaction(date="b-day", debit=1), Transaction(date="a-day", debit=1)]
        )
        assert (stats.start_date, stats.end_date) == ("a-day", "b-day")


class TestTopParties:
    def test_rankings(self, sample_party_ledger):
        ledger = [PartyLedgerEntry.model_validate(row) for row in sample_party_ledger]
        leaders = top_parties(ledger, limit=2)
        assert [p.party_name for p in leaders.by_credit] == ["ACME Corp", "Ravi Kumar"]
        assert [p.party_name for p in leaders.by_debit] == ["Ravi Kumar", "Amazon"]
        assert [p.party_name for p in leaders.by_frequency] == ["Ravi Kumar", "Amazon"]
        assert leaders.by_debit[0].net_flow == -15000

    def test_empty_ledger(self):
        leaders = top_parties([])
        assert leaders.by_credit == []
        assert leaders.by_frequency == []

    def test_camel_case_ledger_rows(self):
        ledger = [
            PartyLedgerEntry.model_validate(
                {"partyName": "Zed", "totalCredit": "1,500", "transactionCount": "7"}
            )
        ]
        leaders = top_parties(ledger)
        assert leaders.by_credit[0].total_credit == 1500
        assert leaders.by_frequency[0].transaction_count == 7


class TestTrendSummary:
    def test_peak_and_average(self):
        buckets = monthly_trend(
            [
                Transaction(date="05/01/2025", debit=300),
                Transaction(date="05/02/2025", credit=900),
                Transaction(date="05/03/2025", debit=300),
            ]
        )
        summary = trend_summary(buckets)
        assert summary.month_count == 3
        assert summary.average_per_month == 500
        assert (summary.peak_month, summary.peak_total) == ("Feb 25", 900)

    def test_first_month_wins_a_tie(self):
        buckets = monthly_trend(
            [Transaction(date="05/01/2025", debit=200), Transaction(date="05/02/2025", debit=200)]
        )
        assert trend_summary(buckets).peak_month == "Jan 25"

    def test_empty(self):
        summary = trend_summary([])
        assert summary.month_count == 0
        assert summary.average_per_month is None
        assert summary.peak_month is None


class TestLedgerTotals:
    def test_sums_whole_ledger(self, sample_party_ledger):
        ledger = [PartyLedgerEntry.model_validate(row) for row in sample_party_ledger]
        totals = ledger_totals(ledger)
        assert totals.party_count == 3
        assert totals.total_credit == 50000
        assert totals.total_debit == 16200
        assert totals.net_flow == 33800

    @pytest.mark.parametrize("ledger", [[], None])
    def test_empty(self, ledger):
        totals = ledger_totals(ledger)
        assert (totals.party_count, totals.total_credit, totals.total_debit) == (0, 0, 0)


class TestSplitRecurring:
    def test_salaries_and_subscriptions(self):
        patterns = [
            {"description": "ACME PAYROLL", "type": "CREDIT", "category": "Potential Salary"},
            {"description": "NETFLIX", "type": "DEBIT", "category": "Subscription"},
            {"description": "RENT", "type": "debit"},
            {"description": "INTEREST", "type": "CREDIT", "category": "Interest"},
        ]
        split = split_recurring(patterns)
        assert [p["description"] for p in split.salaries] == ["ACME PAYROLL"]
        assert [p["description"] for p in split.subscriptions] == ["NETFLIX", "RENT"]

    def test_empty(self):
        split = split_recurring(None)
        assert split.salaries == []
        assert split.subscriptions == []
