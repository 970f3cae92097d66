"""Request/response schemas for the dashboard service and API."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from acutrace.core.theme import Theme
from acutrace.schemas.analytics import (
    CategoryRecord,
    EnhancedStats,
    FilterCriteria,
    GraphEdge,
    GraphNode,
    LedgerTotals,
    MonthBucket,
    RecurringSplit,
    TopParties,
    TrendSummary,
)
from acutrace.schemas.transaction import (
    AnalysisPayload,
    PartyLedgerEntry,
    TransactionEntry,
    validate_rows,
)


# Shared schemas


class MoneyMeta(BaseModel):
    """Metadata describing how monetary amounts are represented."""

    currency: str = Field(description="ISO currency code (e.g., INR)")
    minor_unit: int = Field(description="Number of decimal places shown for the currency")


# Request schemas


class DashboardRequest(BaseModel):
    """Analysis payload plus the dashboard's current filter state."""

    payload: AnalysisPayload
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)


class NetworkRequest(BaseModel):
    party_ledger: list[PartyLedgerEntry] = Field(default_factory=list)

    @field_validator("party_ledger", mode="before")
    @classmethod
    def _valid_rows(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value or []
        rows, _ = validate_rows(value, PartyLedgerEntry, "party ledger")
        return rows


# Response schemas


class FilteredTransactions(BaseModel):
    """The filtered transaction view."""

    entries: list[TransactionEntry]
    filtered_count: int = Field(description="Entries left after filtering")
    total_count: int = Field(description="Entries before filtering")
    active_filters: list[str] = Field(default_factory=list)


class ThemedGraphNode(GraphNode):
    fill: str = Field(description="Concrete fill color resolved from the theme")


class NetworkResult(BaseModel):
    nodes: list[ThemedGraphNode]
    edges: list[GraphEdge]


class DashboardView(BaseModel):
    """Every derived structure the results page renders.

    Aggregations cover the filtered transactions; the network, top parties
    and ledger totals cover the whole party ledger.
    """

    transactions: FilteredTransactions
    flagged_count: int
    category_breakdown: list[CategoryRecord]
    monthly_trend: list[MonthBucket]
    trend_summary: TrendSummary
    stats: EnhancedStats
    top_parties: TopParties
    ledger_totals: LedgerTotals
    recurring: RecurringSplit
    network_nodes: list[GraphNode]
    network_edges: list[GraphEdge]

    # Passed through verbatim for display
    entity_relations: list[dict[str, Any]] = Field(default_factory=list)
    risk_analysis: dict[str, Any] | None = None
    investigation_summary: Any = None
    account_profile: dict[str, Any] | None = None
    recurring_transactions: list[dict[str, Any]] = Field(default_factory=list)

    money: MoneyMeta
    processing_time_ms: int = Field(description="Time spent building the view")


class FilterOptions(BaseModel):
    """Choices for the dashboard's filter controls."""

    categories: list[str]
    category_colors: dict[str, str] = Field(description="Chart color for each category")
    transaction_types: list[str]
    amount_ranges: list[str]
    fraud_confidence: list[str]
    category_intents: list[str]
    theme: Theme
