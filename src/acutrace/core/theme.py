"""Dashboard color theme.

The theme is an immutable value handed to the HTTP layer through a FastAPI
dependency. The analytics code only emits categorical colors (``NodeColor``)
and never imports this module.
"""

from pydantic import BaseModel, ConfigDict

from acutrace.schemas.analytics import NodeColor


class Theme(BaseModel):
    """Emerald dashboard palette."""

    model_config = ConfigDict(frozen=True)

    primary: str = "#10b981"
    secondary: str = "#059669"

    # Flow colors
    credit: str = "#10b981"
    debit: str = "#f43f5e"
    transfer: str = "#6366f1"
    upi: str = "#a855f7"

    # Network graph
    self_node: str = "#10b981"
    merchant_node: str = "#3b82f6"
    individual_node: str = "#a855f7"

    # Category chart, cycled in breakdown order
    category_palette: tuple[str, ...] = (
        "#10b981", "#059669", "#047857", "#065f46",
        "#f59e0b", "#d97706", "#b45309", "#92400e",
        "#ef4444", "#dc2626", "#b91c1c", "#991b1b",
        "#8b5cf6", "#7c3aed", "#6d28d9", "#5b21b6",
        "#3b82f6", "#2563eb", "#1d4ed8", "#1e40af",
    )

    def node_fill(self, color: NodeColor) -> str:
        return {
            NodeColor.SELF: self.self_node,
            NodeColor.MERCHANT: self.merchant_node,
            NodeColor.INDIVIDUAL: self.individual_node,
        }[color]

    def category_color(self, index: int) -> str:
        return self.category_palette[index % len(self.category_palette)]


DEFAULT_THEME = Theme()
