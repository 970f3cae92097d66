"""Reductions of a transaction list into dashboard tables and series."""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from acutrace.analytics.dates import month_key, parse_date
from acutrace.categorization.rules import categorize
from acutrace.schemas.analytics import (
    CategoryRecord,
    EnhancedStats,
    LedgerTotals,
    MonthBucket,
    PartySummary,
    RecurringSplit,
    TopParties,
    TrendSummary,
)
from acutrace.schemas.transaction import PartyLedgerEntry, Transaction


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryRecord]:
    """Debit spend per category, largest first.

    Only transactions with a positive debit contribute; credits are not
    spend. Ties keep the order in which categories were first seen.
    """
    totals: dict[str, list[float]] = {}
    for txn in transactions:
        if txn.debit <= 0:
            continue
        category = txn.spend_category or categorize(txn)
        bucket = totals.setdefault(category, [0.0, 0])
        bucket[0] += txn.debit
        bucket[1] += 1

    records = [
        CategoryRecord(name=name, value=value, count=count)
        for name, (value, count) in totals.items()
    ]
    records.sort(key=lambda record: record.value, reverse=True)
    return records


def monthly_trend(transactions: Iterable[Transaction]) -> list[MonthBucket]:
    """Flow totals per calendar month, in calendar order.

    Each transaction adds its credit if positive, else its debit. Dates that
    cannot be placed in a month land in the trailing "Unknown" bucket so
    their amounts stay visible.
    """
    buckets: dict[str, MonthBucket] = {}
    for txn in transactions:
        key, label = month_key(txn.date)
        amount = txn.credit if txn.credit > 0 else txn.debit
        bucket = buckets.get(key)
        if bucket is None:
            buckets[key] = MonthBucket(month_key=key, label=label, total=amount, count=1)
        else:
            bucket.total += amount
            bucket.count += 1

    # "Unknown" sorts after every "YYYY-MM" key.
    return [buckets[key] for key in sorted(buckets)]


def trend_summary(buckets: Sequence[MonthBucket]) -> TrendSummary:
    """Month count, average total per month and the peak month.

    The first month reaching the largest total is the peak.
    """
    if not buckets:
        return TrendSummary()

    peak = buckets[0]
    for bucket in buckets[1:]:
        if bucket.total > peak.total:
            peak = bucket

    return TrendSummary(
        month_count=len(buckets),
        average_per_month=sum(bucket.total for bucket in buckets) / len(buckets),
        peak_month=peak.label,
        peak_total=peak.total,
    )


def _date_range(transactions: Sequence[Transaction]) -> tuple[str | None, str | None]:
    dated: list[tuple[date, str]] = []
    for txn in transactions:
        parsed = parse_date(txn.date)
        if parsed is not None:
            dated.append((parsed, txn.date))

    if dated:
        earliest = min(dated, key=lambda item: item[0])
        latest = max(dated, key=lambda item: item[0])
        return earliest[1], latest[1]

    raw = [txn.date for txn in transactions if txn.date]
    if raw:
        return min(raw), max(raw)
    return None, None


def enhanced_stats(transactions: Sequence[Transaction]) -> EnhancedStats:
    """Summary statistics for the stats panel.

    Amount statistics pool positive credits and positive debits. Channel
    counts (UPI / transfer / direct) cover every transaction. An empty input
    returns the "no data" state instead of dividing by zero.
    """
    if not transactions:
        return EnhancedStats()

    credits = [txn.credit for txn in transactions if txn.credit > 0]
    debits = [txn.debit for txn in transactions if txn.debit > 0]
    amounts = credits + debits

    upi_count = sum(1 for txn in transactions if txn.is_upi)
    transfer_count = sum(1 for txn in transactions if txn.is_transfer and not txn.is_upi)
    flow_count = len(credits) + len(debits)
    start_date, end_date = _date_range(transactions)

    return EnhancedStats(
        has_data=True,
        transaction_count=len(transactions),
        min_amount=min(amounts) if amounts else None,
        max_amount=max(amounts) if amounts else None,
        average_amount=sum(amounts) / len(amounts) if amounts else None,
        total_credit=sum(credits),
        total_debit=sum(debits),
        upi_count=upi_count,
        transfer_count=transfer_count,
        direct_count=len(transactions) - upi_count - transfer_count,
        credit_count=len(credits),
        debit_count=len(debits),
        credit_share=len(credits) / flow_count if flow_count else None,
        start_date=start_date,
        end_date=end_date,
    )


def _summarize(party: PartyLedgerEntry) -> PartySummary:
    return PartySummary(
        party_name=party.party_name,
        entity_type=party.entity_type,
        total_credit=party.total_credit,
        total_debit=party.total_debit,
        transaction_count=party.transaction_count,
        net_flow=party.net_flow,
    )


def top_parties(party_ledger: Sequence[PartyLedgerEntry] | None, limit: int = 3) -> TopParties:
    """Leading counterparties by money received, money paid and frequency."""
    if not party_ledger or limit <= 0:
        return TopParties()

    def leaders(attribute: str) -> list[PartySummary]:
        ranked = sorted(party_ledger, key=lambda party: getattr(party, attribute), reverse=True)
        return [_summarize(party) for party in ranked[:limit]]

    return TopParties(
        by_credit=leaders("total_credit"),
        by_debit=leaders("total_debit"),
        by_frequency=leaders("transaction_count"),
    )


def ledger_totals(party_ledger: Sequence[PartyLedgerEntry] | None) -> LedgerTotals:
    if not party_ledger:
        return LedgerTotals()
    return LedgerTotals(
        party_count=len(party_ledger),
        total_credit=sum(party.total_credit for party in party_ledger),
        total_debit=sum(party.total_debit for party in party_ledger),
    )


SALARY_PATTERN_CATEGORY = "Potential Salary"


def split_recurring(recurring: Iterable[Mapping[str, Any]] | None) -> RecurringSplit:
    """Split recurring patterns into salaries and outgoing subscriptions.

    Salaries carry the ``Potential Salary`` category. Subscriptions are the
    other debit patterns; recurring credits that are not salaries are left
    out of both lists.
    """
    salaries: list[dict[str, Any]] = []
    subscriptions: list[dict[str, Any]] = []
    for pattern in recurring or []:
        if pattern.get("category") == SALARY_PATTERN_CATEGORY:
            salaries.append(dict(pattern))
        elif str(pattern.get("type") or "").upper() == "DEBIT":
            subscriptions.append(dict(pattern))
    return RecurringSplit(salaries=salaries, subscriptions=subscriptions)
