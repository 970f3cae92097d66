"""Transaction categorization utilities.

Deterministic, local categorization of transactions based on their
descriptions. Rule-based (no network calls) so it can run on every filter
change without noticeable cost.
"""

from .rules import CATEGORIES, CATEGORY_RULES, annotate_categories, categorize, categorize_description

__all__ = [
    "CATEGORIES",
    "CATEGORY_RULES",
    "annotate_categories",
    "categorize",
    "categorize_description",
]
