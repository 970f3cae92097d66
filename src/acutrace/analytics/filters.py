"""Multi-criteria transaction filtering.

``filter_transactions`` turns a ``FilterCriteria`` into a list of predicates,
one per active dimension, and keeps the entries that satisfy all of them.
Inactive dimensions contribute no predicate, so an empty criteria object
returns the input unchanged. Output order is always input order.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from acutrace.analytics.dates import parse_date
from acutrace.schemas.analytics import (
    AmountRange,
    CategoryIntent,
    FilterCriteria,
    FraudConfidence,
    TransactionType,
)
from acutrace.schemas.transaction import FraudAnnotation, Transaction, TransactionEntry

logger = logging.getLogger(__name__)

Predicate = Callable[[TransactionEntry], bool]

UNKNOWN_CATEGORY = "Unknown"

TRANSFER_CATEGORIES = frozenset({"UPI Transfer", "Bank Transfer"})

# Category sets accepted by each transaction type. Credit and Debit test the
# amount columns instead and are handled separately.
TRANSACTION_TYPE_CATEGORIES: dict[TransactionType, frozenset[str]] = {
    TransactionType.TRANSFERS: TRANSFER_CATEGORIES,
    TransactionType.UPI: frozenset({"UPI Transfer"}),
    TransactionType.BANK_TRANSFER: frozenset({"Bank Transfer"}),
    TransactionType.CASH_FLOW: frozenset({"Cash Flow"}),
    TransactionType.EMI: frozenset({"EMI"}),
    TransactionType.LOAN: frozenset({"Loan"}),
    TransactionType.INVESTMENT: frozenset({"Investment"}),
    TransactionType.REFUND: frozenset({"Refund"}),
    TransactionType.REWARD: frozenset({"Reward/Cashback", "Reward"}),
    TransactionType.BILLS: frozenset({"Bill Payment"}),
    TransactionType.SUBSCRIPTION: frozenset({"Subscription"}),
    TransactionType.UNKNOWN: frozenset({UNKNOWN_CATEGORY}),
}

CATEGORY_INTENTS: dict[CategoryIntent, frozenset[str]] = {
    CategoryIntent.INCOME: frozenset({"Income"}),
    CategoryIntent.EXPENSE: frozenset({"Expense"}),
    CategoryIntent.TRANSFER: TRANSFER_CATEGORIES,
    CategoryIntent.EMI: frozenset({"EMI"}),
    CategoryIntent.LOAN: frozenset({"Loan"}),
    CategoryIntent.INVESTMENT: frozenset({"Investment"}),
    CategoryIntent.REFUND: frozenset({"Refund"}),
    CategoryIntent.REWARD: frozenset({"Reward/Cashback"}),
    CategoryIntent.BILLS: frozenset({"Bill Payment"}),
    CategoryIntent.SUBSCRIPTION: frozenset({"Subscription"}),
    CategoryIntent.UNKNOWN: frozenset({UNKNOWN_CATEGORY}),
}

# Inclusive on both ends; the top bucket has no upper bound.
AMOUNT_RANGES: dict[AmountRange, tuple[float, float]] = {
    AmountRange.UP_TO_1K: (0, 1_000),
    AmountRange.FROM_1K_TO_10K: (1_000, 10_000),
    AmountRange.FROM_10K_TO_50K: (10_000, 50_000),
    AmountRange.ABOVE_50K: (50_000, math.inf),
}

# Half-open [low, high) probability bands.
FRAUD_BANDS: dict[FraudConfidence, tuple[float, float]] = {
    FraudConfidence.SAFE: (-math.inf, 0.30),
    FraudConfidence.MEDIUM: (0.30, 0.60),
    FraudConfidence.HIGH: (0.60, 0.80),
    FraudConfidence.CRITICAL: (0.80, math.inf),
}


def pair_with_annotations(
    transactions: Sequence[Transaction],
    annotations: Sequence[FraudAnnotation] | None = None,
) -> list[TransactionEntry]:
    """Zip transactions with fraud annotations by list position.

    Transactions past the end of ``annotations`` get no annotation; surplus
    annotations are dropped.
    """
    annotations = annotations or []
    if annotations and len(annotations) != len(transactions):
        logger.warning(
            "Fraud annotations are not aligned with transactions: %d annotations for %d transactions",
            len(annotations),
            len(transactions),
        )
    return [
        TransactionEntry(txn=txn, fraud=annotations[i] if i < len(annotations) else None)
        for i, txn in enumerate(transactions)
    ]


def _category_of(entry: TransactionEntry) -> str:
    return entry.txn.category or UNKNOWN_CATEGORY


def _is_flagged(entry: TransactionEntry) -> bool:
    return entry.is_flagged


def _transaction_type_predicate(transaction_type: TransactionType) -> Predicate:
    if transaction_type is TransactionType.CREDIT:
        return lambda entry: entry.txn.credit > 0
    if transaction_type is TransactionType.DEBIT:
        return lambda entry: entry.txn.debit > 0
    accepted = TRANSACTION_TYPE_CATEGORIES[transaction_type]
    return lambda entry: _category_of(entry) in accepted


def _amount_between(low: float, high: float) -> Predicate:
    return lambda entry: low <= entry.txn.flow_amount <= high


def _fraud_band(low: float, high: float) -> Predicate:
    return lambda entry: low <= entry.fraud_probability < high


def _category_in(accepted: frozenset[str]) -> Predicate:
    return lambda entry: _category_of(entry) in accepted


def _date_between(start: date | None, end: date | None) -> Predicate:
    def predicate(entry: TransactionEntry) -> bool:
        parsed = parse_date(entry.txn.date)
        if parsed is None:
            # Unparseable dates never satisfy an active date bound.
            return False
        if start is not None and parsed < start:
            return False
        if end is not None and parsed > end:
            return False
        return True

    return predicate


def _text_search(term: str) -> Predicate:
    needle = term.lower()

    def predicate(entry: TransactionEntry) -> bool:
        txn = entry.txn
        return needle in txn.description.lower() or needle in (txn.detected_party or "").lower()

    return predicate


def build_predicates(criteria: FilterCriteria) -> list[Predicate]:
    """One predicate per active filter dimension, in a fixed order."""
    predicates: list[Predicate] = []

    if criteria.flagged_only:
        predicates.append(_is_flagged)

    if criteria.transaction_type is not TransactionType.ALL:
        predicates.append(_transaction_type_predicate(criteria.transaction_type))

    if criteria.amount_range is not AmountRange.ALL:
        predicates.append(_amount_between(*AMOUNT_RANGES[criteria.amount_range]))

    if criteria.fraud_confidence is not FraudConfidence.ALL:
        predicates.append(_fraud_band(*FRAUD_BANDS[criteria.fraud_confidence]))

    if criteria.category_intent is not CategoryIntent.ALL:
        predicates.append(_category_in(CATEGORY_INTENTS[criteria.category_intent]))

    if criteria.category_filter is not None:
        predicates.append(_category_in(frozenset({criteria.category_filter})))

    if criteria.min_amount is not None or criteria.max_amount is not None:
        low = criteria.min_amount if criteria.min_amount is not None else -math.inf
        high = criteria.max_amount if criteria.max_amount is not None else math.inf
        predicates.append(_amount_between(low, high))

    if criteria.date_from is not None or criteria.date_to is not None:
        predicates.append(_date_between(criteria.date_from, criteria.date_to))

    if criteria.search is not None:
        predicates.append(_text_search(criteria.search))

    return predicates


def resolve_criteria(
    criteria: FilterCriteria | Mapping[str, Any] | None = None, **overrides: Any
) -> FilterCriteria:
    """Build a ``FilterCriteria`` from an instance, a mapping or nothing.

    Keyword overrides replace individual fields of the base criteria.
    """
    if isinstance(criteria, FilterCriteria):
        resolved = criteria
    else:
        resolved = FilterCriteria.model_validate(dict(criteria or {}))
    if overrides:
        resolved = FilterCriteria.model_validate({**resolved.model_dump(), **overrides})
    return resolved


def filter_transactions(
    entries: Iterable[TransactionEntry] | None,
    criteria: FilterCriteria | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> list[TransactionEntry]:
    """Return the entries that satisfy every active criterion.

    Args:
        entries: Transactions paired with their fraud annotations.
        criteria: Filter configuration; missing fields mean "no restriction".
        **overrides: Individual criteria fields, e.g. ``flagged_only=True``.

    Returns:
        A new list holding the matching entries in input order.
    """
    if not entries:
        return []

    resolved = resolve_criteria(criteria, **overrides)
    predicates = build_predicates(resolved)
    if not predicates:
        return list(entries)

    return [entry for entry in entries if all(predicate(entry) for predicate in predicates)]
