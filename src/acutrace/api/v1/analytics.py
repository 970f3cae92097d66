"""Dashboard analytics endpoints.

The endpoints are stateless: each request carries the analysis payload (or
party ledger) it wants analyzed, and nothing is stored between requests.
"""

from fastapi import APIRouter, Depends

from acutrace.api.deps import get_dashboard_service, get_theme
from acutrace.categorization.rules import CATEGORIES
from acutrace.core.theme import Theme
from acutrace.schemas.analytics import (
    AmountRange,
    CategoryIntent,
    FraudConfidence,
    TransactionType,
)
from acutrace.schemas.dashboard import (
    DashboardRequest,
    DashboardView,
    FilteredTransactions,
    FilterOptions,
    NetworkRequest,
    NetworkResult,
    ThemedGraphNode,
)
from acutrace.services.dashboard import DashboardService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post(
    "/dashboard",
    response_model=DashboardView,
    summary="Build the full dashboard view",
    description="""
    Filter the payload's transactions and compute every derived view.

    ## Returns
    - Filtered transactions with their fraud annotations
    - Category breakdown, monthly trend and statistics over the filtered set
    - Top parties and the party network over the full party ledger
    - Narrative/risk sections of the payload, unchanged

    Filter fields may be sent in snake_case or camelCase. Unknown filter
    values are ignored rather than rejected.
    """,
)
async def build_dashboard(
    request: DashboardRequest,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardView:
    return service.build(request.payload, request.criteria)


@router.post(
    "/transactions",
    response_model=FilteredTransactions,
    summary="Filter transactions",
    description="""
    Apply the filter criteria to the payload's transactions.

    ## Filters
    - **flagged_only**: only fraud-flagged transactions
    - **transaction_type**, **amount_range**, **fraud_confidence**, **category_intent**
    - **category_filter**: exact category name
    - **min_amount**, **max_amount**: inclusive bounds on the flow amount
    - **date_from**, **date_to**: inclusive date bounds (unparseable dates are excluded)
    - **search**: substring of the description or detected party

    Results keep the input order.
    """,
)
async def filter_transactions(
    request: DashboardRequest,
    service: DashboardService = Depends(get_dashboard_service),
) -> FilteredTransactions:
    return service.filter(request.payload, request.criteria)


@router.post(
    "/network",
    response_model=NetworkResult,
    summary="Lay out the party network",
)
async def build_network(
    request: NetworkRequest,
    service: DashboardService = Depends(get_dashboard_service),
    theme: Theme = Depends(get_theme),
) -> NetworkResult:
    """Radial layout of the top parties, with fill colors from the theme."""
    nodes, edges = service.network(request.party_ledger)
    themed = [
        ThemedGraphNode(**node.model_dump(), fill=theme.node_fill(node.color))
        for node in nodes
    ]
    return NetworkResult(nodes=themed, edges=edges)


@router.get(
    "/options",
    response_model=FilterOptions,
    summary="List filter choices and theme",
)
async def get_filter_options(theme: Theme = Depends(get_theme)) -> FilterOptions:
    return FilterOptions(
        categories=list(CATEGORIES),
        category_colors={
            category: theme.category_color(index) for index, category in enumerate(CATEGORIES)
        },
        transaction_types=[option.value for option in TransactionType],
        amount_ranges=[option.value for option in AmountRange],
        fraud_confidence=[option.value for option in FraudConfidence],
        category_intents=[option.value for option in CategoryIntent],
        theme=theme,
    )
