import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

sys.path.append(str(Path(__file__).parents[1] / "src"))

from acutrace.main import app
from acutrace.schemas.transaction import (
    FraudAnnotation,
    PartyLedgerEntry,
    Transaction,
    TransactionEntry,
)


def _make_entry(fraud: dict | None = None, **txn_fields) -> TransactionEntry:
    """Build a TransactionEntry from keyword fields, with sensible defaults."""
    fields = {
        "date": "10/12/2025",
        "description": "Test",
        "credit": 0,
        "debit": 1000,
        "category": "Groceries",
    }
    fields.update(txn_fields)
    return TransactionEntry(
        txn=Transaction.model_validate(fields),
        fraud=FraudAnnotation.model_validate(fraud) if fraud is not None else None,
    )


@pytest.fixture
def make_entry():
    return _make_entry


@pytest.fixture
def sample_transactions() -> list[dict]:
    """Raw transaction rows as the analysis service emits them."""
    return [
        {
            "date": "01/01/2025",
            "description": "Amazon Store order",
            "credit": 0,
            "debit": 1200,
            "category": "Expense",
        },
        {
            "date": "05/02/2025",
            "description": "Cafe Coffee Day",
            "credit": 0,
            "debit": 300,
            "category": "Expense",
        },
        {
            "date": "10/03/2025",
            "description": "SALARY ACME CORP",
            "credit": 50000,
            "debit": 0,
            "category": "Income",
        },
        {
            "date": "15/03/2025",
            "description": "UPI/ravi@okaxis/rent",
            "credit": 0,
            "debit": 15000,
            "category": "UPI Transfer",
            "is_upi": True,
            "detected_party": "Ravi Kumar",
        },
    ]


@pytest.fixture
def sample_fraud() -> list[dict]:
    return [
        {"fraud_probability": 0.01, "is_flagged": False},
        {"fraud_probability": 0.02, "is_flagged": False},
        {"fraud_probability": 0.0, "is_flagged": False},
        {"fraud_probability": 0.95, "is_flagged": True},
    ]


@pytest.fixture
def sample_party_ledger() -> list[dict]:
    return [
        {
            "party_name": "Ravi Kumar",
            "total_credit": 0,
            "total_debit": 15000,
            "transaction_count": 12,
            "entity_type": "Individual",
        },
        {
            "party_name": "Amazon",
            "total_credit": 0,
            "total_debit": 1200,
            "transaction_count": 4,
            "entity_type": "Merchant",
        },
        {
            "party_name": "ACME Corp",
            "total_credit": 50000,
            "total_debit": 0,
            "transaction_count": 1,
            "entity_type": "Individual",
        },
    ]


@pytest.fixture
def sample_payload(sample_transactions, sample_fraud, sample_party_ledger) -> dict:
    return {
        "transactions": sample_transactions,
        "fraud_analysis": {"all_transactions": sample_fraud, "flagged_count": 1},
        "party_ledger": sample_party_ledger,
        "risk_analysis": {"account_risk_score": 72, "risk_level": "HIGH"},
        "investigation_summary": "One high-value UPI transfer flagged.",
    }


@pytest.fixture
def party_ledger_factory():
    def build(counts: list[int], entity_type: str = "Individual") -> list[PartyLedgerEntry]:
        return [
            PartyLedgerEntry(
                party_name=f"Party {i}",
                transaction_count=count,
                entity_type=entity_type,
            )
            for i, count in enumerate(counts)
        ]

    return build


@pytest.fixture
async def client():
    """Provide an HTTP client bound to the ASGI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
