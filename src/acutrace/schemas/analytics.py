"""Filter criteria and derived analytics structures.

Filter enums accept both their canonical values and the display labels the
dashboard controls emit ("Credit Only", "Bank Transfer", "Medium (0.30–0.60)").
Anything unrecognized collapses to ``All`` rather than failing validation.
"""

import math
import re
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from acutrace.analytics.dates import parse_date

_PARENTHETICAL = re.compile(r"\(.*?\)")
_ONLY_SUFFIX = re.compile(r"\s+only$", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^0-9a-z]")


def _lookup_key(value: str) -> str:
    text = _PARENTHETICAL.sub("", value).strip()
    text = _ONLY_SUFFIX.sub("", text)
    return _NON_ALNUM.sub("", text.lower())


class FilterOption(str, Enum):
    """Base for filter enums that tolerate display labels and junk input."""

    @classmethod
    def coerce(cls, value: Any) -> "FilterOption":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip():
            key = _lookup_key(value)
            for member in cls:
                if key in (_lookup_key(member.value), _lookup_key(member.name)):
                    return member
        return cls["ALL"]


class TransactionType(FilterOption):
    ALL = "All"
    CREDIT = "Credit"
    DEBIT = "Debit"
    TRANSFERS = "Transfers"
    UPI = "UPI"
    BANK_TRANSFER = "BankTransfer"
    CASH_FLOW = "CashFlow"
    EMI = "EMI"
    LOAN = "Loan"
    INVESTMENT = "Investment"
    REFUND = "Refund"
    REWARD = "Reward"
    BILLS = "Bills"
    SUBSCRIPTION = "Subscription"
    UNKNOWN = "Unknown"


class AmountRange(FilterOption):
    ALL = "All"
    UP_TO_1K = "0-1,000"
    FROM_1K_TO_10K = "1,000-10,000"
    FROM_10K_TO_50K = "10,000-50,000"
    ABOVE_50K = "50,000+"


class FraudConfidence(FilterOption):
    ALL = "All"
    SAFE = "Safe"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class CategoryIntent(FilterOption):
    ALL = "All"
    INCOME = "Income"
    EXPENSE = "Expense"
    TRANSFER = "Transfer"
    EMI = "EMI"
    LOAN = "Loan"
    INVESTMENT = "Investment"
    REFUND = "Refund"
    REWARD = "Reward"
    BILLS = "Bills"
    SUBSCRIPTION = "Subscription"
    UNKNOWN = "Unknown"


class FilterCriteria(BaseModel):
    """Filter configuration; every field defaults to "no restriction".

    Field names are accepted in snake_case or camelCase (``flaggedOnly``,
    ``dateFrom``) so the dashboard can post its filter state unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    flagged_only: bool = False
    transaction_type: TransactionType = TransactionType.ALL
    amount_range: AmountRange = AmountRange.ALL
    fraud_confidence: FraudConfidence = FraudConfidence.ALL
    category_intent: CategoryIntent = CategoryIntent.ALL
    category_filter: str | None = Field(None, description="Exact category name match")
    min_amount: float | None = Field(None, description="Inclusive lower bound on flow amount")
    max_amount: float | None = Field(None, description="Inclusive upper bound on flow amount")
    date_from: date | None = Field(None, description="Inclusive start date")
    date_to: date | None = Field(None, description="Inclusive end date")
    search: str | None = Field(None, description="Substring of description or party")

    @field_validator("flagged_only", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes")
        return bool(value)

    @field_validator("transaction_type", mode="before")
    @classmethod
    def _transaction_type(cls, value: Any) -> TransactionType:
        return TransactionType.coerce(value)

    @field_validator("amount_range", mode="before")
    @classmethod
    def _amount_range(cls, value: Any) -> AmountRange:
        return AmountRange.coerce(value)

    @field_validator("fraud_confidence", mode="before")
    @classmethod
    def _fraud_confidence(cls, value: Any) -> FraudConfidence:
        return FraudConfidence.coerce(value)

    @field_validator("category_intent", mode="before")
    @classmethod
    def _category_intent(cls, value: Any) -> CategoryIntent:
        return CategoryIntent.coerce(value)

    @field_validator("category_filter", "search", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        if not text or text == "All":
            return None
        return text

    @field_validator("min_amount", "max_amount", mode="before")
    @classmethod
    def _bound(cls, value: Any) -> float | None:
        if value is None or value == "" or isinstance(value, bool):
            return None
        try:
            number = float(str(value).replace(",", "").strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _date(cls, value: Any) -> date | None:
        if value is None or value == "":
            return None
        if isinstance(value, date):
            return value
        return parse_date(str(value))

    def active_dimensions(self) -> list[str]:
        """Names of the fields that restrict the result."""
        defaults = FilterCriteria()
        return [
            name
            for name in type(self).model_fields
            if getattr(self, name) != getattr(defaults, name)
        ]


class CategoryRecord(BaseModel):
    """Spend total for one category."""

    name: str
    value: float = Field(description="Total debit amount")
    count: int


class MonthBucket(BaseModel):
    """Flow total for one calendar month."""

    month_key: str = Field(description="Sortable YYYY-MM key, or 'Unknown'")
    label: str = Field(description="Display label, e.g. 'Jan 25'")
    total: float
    count: int


class EnhancedStats(BaseModel):
    """Summary statistics over a transaction list.

    When ``has_data`` is false the optional fields are ``None`` and counts are
    zero; no field is ever NaN.
    """

    has_data: bool = False
    transaction_count: int = 0
    min_amount: float | None = None
    max_amount: float | None = None
    average_amount: float | None = None
    total_credit: float = 0.0
    total_debit: float = 0.0
    upi_count: int = 0
    transfer_count: int = Field(0, description="Transfer-flagged, excluding UPI")
    direct_count: int = Field(0, description="Neither UPI nor transfer")
    credit_count: int = 0
    debit_count: int = 0
    credit_share: float | None = Field(None, description="credit_count / (credit_count + debit_count)")
    start_date: str | None = None
    end_date: str | None = None

    @property
    def debit_share(self) -> float | None:
        return None if self.credit_share is None else 1.0 - self.credit_share


class PartySummary(BaseModel):
    party_name: str
    entity_type: str
    total_credit: float
    total_debit: float
    transaction_count: int
    net_flow: float


class TopParties(BaseModel):
    by_credit: list[PartySummary] = Field(default_factory=list)
    by_debit: list[PartySummary] = Field(default_factory=list)
    by_frequency: list[PartySummary] = Field(default_factory=list)


class NodeColor(str, Enum):
    """Categorical node color; the theme maps these to concrete colors."""

    SELF = "self"
    MERCHANT = "merchant"
    INDIVIDUAL = "individual"


class GraphNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    x: float
    y: float
    radius: float
    color: NodeColor
    label: str
    weight: int | None = Field(None, description="Transaction count (satellites only)")


class GraphEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    width: int


class TrendSummary(BaseModel):
    """Headline figures under the monthly trend chart."""

    month_count: int = 0
    average_per_month: float | None = None
    peak_month: str | None = Field(None, description="Label of the month with the largest total")
    peak_total: float | None = None


class LedgerTotals(BaseModel):
    """Credit and debit totals across the whole party ledger."""

    party_count: int = 0
    total_credit: float = 0.0
    total_debit: float = 0.0

    @property
    def net_flow(self) -> float:
        return self.total_credit - self.total_debit


class RecurringSplit(BaseModel):
    """Recurring patterns split into income and outgoing payments."""

    salaries: list[dict[str, Any]] = Field(default_factory=list)
    subscriptions: list[dict[str, Any]] = Field(default_factory=list)
