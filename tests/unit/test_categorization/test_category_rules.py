import pytest

from acutrace.categorization.rules import (
    CATEGORIES,
    CATEGORY_RULES,
    annotate_categories,
    categorize,
    categorize_description,
)
from acutrace.schemas.transaction import Transaction


def test_categorize_upi_handle() -> None:
    assert categorize_description("ravi@okaxis") == "UPI"


def test_categorize_upi_is_case_insensitive() -> None:
    assert categorize_description("upi-PAYTM-9876") == "UPI"


def test_categorize_neft_transfer() -> None:
    assert categorize_description("NEFT-HDFC0001-ACME PAYROLL") == "Transfer"


def test_categorize_amazon_shopping() -> None:
    assert categorize_description("Amazon order 1234") == "Shopping"


def test_categorize_electricity_bill() -> None:
    assert categorize_description("Electricity bill BESCOM") == "Bills"


def test_categorize_atm_withdrawal() -> None:
    assert categorize_description("ATM WDL 12345") == "ATM"


def test_categorize_salary() -> None:
    assert categorize_description("SALARY ACME CORP") == "Salary"


def test_categorize_cafe_to_food() -> None:
    assert categorize_description("Cafe Coffee Day") == "Food"


def test_categorize_uber_to_travel() -> None:
    assert categorize_description("Uber trip") == "Travel"


def test_categorize_premium_to_insurance() -> None:
    assert categorize_description("LIC premium") == "Insurance"


def test_categorize_netflix_subscription() -> None:
    assert categorize_description("Netflix.com") == "Subscription"


def test_upi_wins_over_shopping() -> None:
    assert categorize_description("UPI/amazon purchase") == "UPI"


def test_shopping_wins_over_subscription() -> None:
    assert categorize_description("Amazon Prime membership") == "Shopping"


@pytest.mark.parametrize("description", ["", None, "XYZ 123", "   "])
def test_unmatched_descriptions_fall_back_to_other(description) -> None:
    assert categorize_description(description) == "Other"


def test_catch_all_rule_is_last() -> None:
    assert CATEGORY_RULES[-1].label == "Other"
    assert CATEGORY_RULES[-1].matches("")
    assert all(rule.pattern is not None for rule in CATEGORY_RULES[:-1])


def test_rule_order_is_the_documented_precedence() -> None:
    assert CATEGORIES == (
        "UPI",
        "Transfer",
        "Shopping",
        "Bills",
        "ATM",
        "Salary",
        "Food",
        "Travel",
        "Insurance",
        "Subscription",
        "Other",
    )


def test_every_description_gets_exactly_one_known_label() -> None:
    descriptions = ["IMPS/P2A/99", "recharge jio", "dividend credit", "misc", "fuel hp"]
    for description in descriptions:
        label = categorize_description(description)
        assert label in CATEGORIES
        assert label


def test_categorize_reads_transaction_description() -> None:
    txn = Transaction(description="UPI amazon", debit=499)
    assert categorize(txn) == "UPI"


def test_annotate_categories_returns_new_transactions() -> None:
    original = [
        Transaction(description="Swiggy order", debit=350, category="Expense"),
        Transaction(description="Random credit", credit=100),
    ]

    annotated = annotate_categories(original)

    assert [txn.spend_category for txn in annotated] == ["Shopping", "Other"]
    assert annotated[0].category == "Expense"
    assert all(txn.spend_category is None for txn in original)
