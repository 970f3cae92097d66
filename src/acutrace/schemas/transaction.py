"""Input-boundary schemas for analysis results.

The upstream analysis service is loose about field names (``date`` vs
``transaction_date``, ``description`` vs ``narration``, snake_case vs
camelCase) and about amount types. Everything is folded into one canonical
shape here so the analytics code never branches on field-name variants.

Rows are validated one at a time: a malformed row is dropped with a warning
instead of rejecting the whole payload.
"""

import logging
import math
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


def coerce_amount(value: Any) -> float:
    """Best-effort conversion of an amount to a finite float.

    Accepts numbers and numeric strings with currency symbols or thousands
    separators ("₹1,200.50"). Anything else becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.replace(",", "").replace("₹", "").strip()
        if not cleaned:
            return 0.0
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y")
    return bool(value)


def validate_rows(
    rows: list[Any], model: type[BaseModel], section: str
) -> tuple[list[Any], list[int]]:
    """Validate each row of a payload section on its own.

    Args:
        rows: Raw rows from the payload
        model: Schema for one row
        section: Section name used in log messages

    Returns:
        The rows that validated and the positions of the rows that were dropped
    """
    valid: list[Any] = []
    dropped: list[int] = []
    for index, row in enumerate(rows):
        try:
            valid.append(model.model_validate(row))
        except ValidationError as e:
            dropped.append(index)
            first = e.errors(include_url=False)[0]
            logger.warning(
                "Dropping invalid %s row %d: %s (%s)",
                section,
                index,
                first["msg"],
                ".".join(str(part) for part in first["loc"]) or "row",
            )
    return valid, dropped


def _object_rows(rows: list[Any], section: str) -> list[dict[str, Any]]:
    kept = []
    for index, row in enumerate(rows):
        if isinstance(row, dict):
            kept.append(row)
        else:
            logger.warning("Dropping %s row %d: not an object", section, index)
    return kept


class Transaction(BaseModel):
    """A single statement line as produced by the analysis service."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    date: str = Field(
        "",
        validation_alias=AliasChoices("date", "transaction_date", "txn_date", "transactionDate"),
        description="Day-precision date (DD/MM/YYYY or ISO)",
    )
    description: str = Field(
        "",
        validation_alias=AliasChoices("description", "narration", "particulars", "remarks"),
        description="Narration text from the statement",
    )
    credit: float = Field(0.0, description="Money in; 0 when the line is a debit")
    debit: float = Field(0.0, description="Money out; 0 when the line is a credit")
    category: str | None = Field(None, description="Category assigned upstream")
    is_upi: bool = Field(False, validation_alias=AliasChoices("is_upi", "isUpi"))
    is_transfer: bool = Field(False, validation_alias=AliasChoices("is_transfer", "isTransfer"))
    detected_party: str | None = Field(
        None, validation_alias=AliasChoices("detected_party", "detectedParty", "party")
    )
    spend_category: str | None = Field(
        None,
        validation_alias=AliasChoices("spend_category", "spendCategory"),
        description="Category derived locally by the rule-based categorizer",
    )

    @field_validator("date", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("credit", "debit", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("category", "detected_party", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("is_upi", "is_transfer", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return coerce_flag(value)

    @property
    def flow_amount(self) -> float:
        """The single non-zero value between credit and debit."""
        return self.credit if self.credit > 0 else self.debit


class FraudAnnotation(BaseModel):
    """Fraud-scoring result paired with a transaction by list position."""

    model_config = ConfigDict(frozen=True, extra="allow")

    fraud_probability: float = Field(
        0.0,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("fraud_probability", "fraudProbability", "probability"),
    )
    is_flagged: bool = Field(
        False, validation_alias=AliasChoices("is_flagged", "isFlagged", "flagged")
    )

    @field_validator("fraud_probability", mode="before")
    @classmethod
    def _probability(cls, value: Any) -> float:
        return min(max(coerce_amount(value), 0.0), 1.0)

    @field_validator("is_flagged", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return coerce_flag(value)


class PartyLedgerEntry(BaseModel):
    """Per-party totals produced by the upstream party-detection step."""

    model_config = ConfigDict(frozen=True, extra="allow")

    party_name: str = Field(validation_alias=AliasChoices("party_name", "partyName", "name"))
    total_credit: float = Field(0.0, validation_alias=AliasChoices("total_credit", "totalCredit"))
    total_debit: float = Field(0.0, validation_alias=AliasChoices("total_debit", "totalDebit"))
    transaction_count: int = Field(
        0, validation_alias=AliasChoices("transaction_count", "transactionCount", "count")
    )
    entity_type: str = Field(
        "Unknown", validation_alias=AliasChoices("entity_type", "entityType")
    )

    @field_validator("total_credit", "total_debit", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> float:
        return coerce_amount(value)

    @field_validator("transaction_count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        return max(int(coerce_amount(value)), 0)

    @field_validator("entity_type", mode="before")
    @classmethod
    def _entity_type(cls, value: Any) -> str:
        return str(value).strip() if value else "Unknown"

    @property
    def net_flow(self) -> float:
        return self.total_credit - self.total_debit


class FraudAnalysis(BaseModel):
    """The ``fraud_analysis`` section of the payload."""

    model_config = ConfigDict(extra="allow")

    all_transactions: list[FraudAnnotation] = Field(default_factory=list)

    @field_validator("all_transactions", mode="before")
    @classmethod
    def _list(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value or []
        # Annotations pair by position, so a bad one becomes an empty
        # annotation instead of shifting the rest.
        valid, dropped = validate_rows(value, FraudAnnotation, "fraud annotation")
        rows = iter(valid)
        skip = set(dropped)
        return [FraudAnnotation() if i in skip else next(rows) for i in range(len(value))]


def _drop_positions(fraud_analysis: Any, positions: list[int]) -> Any:
    """Remove the annotations paired with dropped transactions."""
    if not isinstance(fraud_analysis, dict):
        return fraud_analysis
    annotations = fraud_analysis.get("all_transactions")
    if not isinstance(annotations, list):
        return fraud_analysis
    skip = set(positions)
    return {
        **fraud_analysis,
        "all_transactions": [row for i, row in enumerate(annotations) if i not in skip],
    }


class AnalysisPayload(BaseModel):
    """Full result set returned by the analysis service.

    Narrative and risk sections are carried verbatim for display; only
    transactions, fraud annotations, the party ledger and recurring patterns
    are interpreted.
    """

    model_config = ConfigDict(extra="allow")

    transactions: list[Transaction] = Field(default_factory=list)
    fraud_analysis: FraudAnalysis | None = None
    party_ledger: list[PartyLedgerEntry] = Field(default_factory=list)
    entity_relations: list[dict[str, Any]] = Field(default_factory=list)
    risk_analysis: dict[str, Any] | None = None
    investigation_summary: Any = None
    account_profile: dict[str, Any] | None = None
    recurring_transactions: list[dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _drop_invalid_rows(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        transactions = data.get("transactions")
        if isinstance(transactions, list):
            data["transactions"], dropped = validate_rows(transactions, Transaction, "transaction")
            if dropped:
                data["fraud_analysis"] = _drop_positions(data.get("fraud_analysis"), dropped)

        ledger = data.get("party_ledger")
        if isinstance(ledger, list):
            data["party_ledger"], _ = validate_rows(ledger, PartyLedgerEntry, "party ledger")

        for section in ("entity_relations", "recurring_transactions"):
            rows = data.get(section)
            if isinstance(rows, list):
                data[section] = _object_rows(rows, section.replace("_", " "))

        return data

    @field_validator(
        "transactions",
        "party_ledger",
        "entity_relations",
        "recurring_transactions",
        mode="before",
    )
    @classmethod
    def _list(cls, value: Any) -> list:
        return value or []

    @property
    def fraud_annotations(self) -> list[FraudAnnotation]:
        if self.fraud_analysis is None:
            return []
        return self.fraud_analysis.all_transactions


class TransactionEntry(BaseModel):
    """A transaction together with its (optional) fraud annotation."""

    model_config = ConfigDict(frozen=True)

    txn: Transaction
    fraud: FraudAnnotation | None = None

    @property
    def is_flagged(self) -> bool:
        return self.fraud is not None and self.fraud.is_flagged

    @property
    def fraud_probability(self) -> float:
        return self.fraud.fraud_probability if self.fraud is not None else 0.0
