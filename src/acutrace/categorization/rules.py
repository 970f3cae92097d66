"""Deterministic transaction categorization.

Statements rarely carry a usable spend category, so the dashboard infers one
from the narration text. Rules are an explicit ordered tuple: the first rule
whose pattern matches wins, which is how overlapping descriptions are settled
(e.g. "UPI/amazon" is UPI, not Shopping). The last rule is a catch-all, so
every transaction gets exactly one label.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from acutrace.schemas.transaction import Transaction

FALLBACK_CATEGORY = "Other"


@dataclass(frozen=True)
class CategoryRule:
    """A label plus the pattern that selects it.

    ``pattern=None`` marks the catch-all rule, which matches any text,
    including an empty description.
    """

    label: str
    pattern: re.Pattern[str] | None = None

    def matches(self, text: str) -> bool:
        if self.pattern is None:
            return True
        return self.pattern.search(text) is not None


def _rule(label: str, pattern: str) -> CategoryRule:
    return CategoryRule(label, re.compile(pattern, re.IGNORECASE))


# Ordering matters: earlier matches win.
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    # Payment rails first; "@" catches VPAs such as name@okaxis.
    _rule("UPI", r"upi|@"),
    _rule("Transfer", r"neft|imps|rtgs|transfer|bank"),
    _rule("Shopping", r"amazon|flipkart|swiggy|zomato|myntra|nykaa|shop"),
    _rule("Bills", r"electricity|water|gas|phone|mobile|bill|recharge"),
    _rule("ATM", r"atm|cash"),
    _rule("Salary", r"salary|income|interest|dividend"),
    _rule("Food", r"restaurant|food|cafe|coffee|hotel"),
    _rule("Travel", r"flight|train|bus|taxi|uber|ola|petrol|diesel|fuel"),
    _rule("Insurance", r"insurance|premium|policy"),
    # "amazon prime" never reaches this rule; Shopping claims it first.
    _rule("Subscription", r"netflix|spotify|amazon prime|subscription|membership"),
    CategoryRule(FALLBACK_CATEGORY),
)

# Public taxonomy, in rule order.
CATEGORIES: tuple[str, ...] = tuple(dict.fromkeys(rule.label for rule in CATEGORY_RULES))


def categorize_description(description: str | None) -> str:
    """Infer a category from raw description text.

    Args:
        description: Statement narration; ``None`` is treated as empty.

    Returns:
        The label of the first matching rule in ``CATEGORY_RULES``.
    """
    text = description or ""
    for rule in CATEGORY_RULES:
        if rule.matches(text):
            return rule.label
    # Unreachable while the catch-all rule is last.
    return FALLBACK_CATEGORY


def categorize(transaction: Transaction) -> str:
    """Infer the spend category of a transaction from its description."""
    return categorize_description(transaction.description)


def annotate_categories(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return copies of ``transactions`` with ``spend_category`` filled in.

    The upstream ``category`` field is left untouched; the inputs are not
    modified.
    """
    return [
        txn.model_copy(update={"spend_category": categorize(txn)})
        for txn in transactions
    ]
