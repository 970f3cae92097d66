"""Dashboard view service.

This module composes the analytics pipeline for one analysis result:
1. Validate the payload and enforce size limits
2. Derive spend categories
3. Pair transactions with fraud annotations
4. Filter
5. Aggregate the filtered view and lay out the party network
"""

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from acutrace.analytics.aggregations import (
    category_breakdown,
    enhanced_stats,
    ledger_totals,
    monthly_trend,
    split_recurring,
    top_parties,
    trend_summary,
)
from acutrace.analytics.filters import filter_transactions, pair_with_annotations, resolve_criteria
from acutrace.analytics.network import DEFAULT_LAYOUT, NetworkLayoutConfig, layout_edges, layout_network
from acutrace.categorization.rules import annotate_categories
from acutrace.config import settings
from acutrace.core.exceptions import PayloadError
from acutrace.schemas.analytics import FilterCriteria, GraphEdge, GraphNode
from acutrace.schemas.dashboard import DashboardView, FilteredTransactions, MoneyMeta
from acutrace.schemas.transaction import AnalysisPayload, PartyLedgerEntry, TransactionEntry

logger = logging.getLogger(__name__)


class DashboardService:
    """Builds dashboard views from analysis payloads.

    The service holds configuration only; every call works on the payload it
    is given and returns new data.
    """

    def __init__(
        self,
        layout: NetworkLayoutConfig = DEFAULT_LAYOUT,
        max_transactions: int | None = None,
    ):
        """Initialize the service.

        Args:
            layout: Geometry for the party network
            max_transactions: Largest payload accepted (defaults to settings)
        """
        self.layout = layout
        self.max_transactions = (
            max_transactions if max_transactions is not None else settings.max_transactions
        )

    def load_payload(self, raw: AnalysisPayload | Mapping[str, Any] | None) -> AnalysisPayload:
        """Validate a raw payload into an ``AnalysisPayload``.

        Raises:
            PayloadError: If the payload is not an object, fails validation,
                or holds more transactions than allowed
        """
        if isinstance(raw, AnalysisPayload):
            payload = raw
        elif isinstance(raw, Mapping):
            try:
                payload = AnalysisPayload.model_validate(dict(raw))
            except PydanticValidationError as e:
                raise PayloadError(
                    "PAYLOAD_001", details={"errors": e.errors(include_url=False)}
                ) from e
        else:
            raise PayloadError("PAYLOAD_001", details={"type": type(raw).__name__})

        if len(payload.transactions) > self.max_transactions:
            raise PayloadError(
                "PAYLOAD_002",
                details={
                    "transactions": len(payload.transactions),
                    "limit": self.max_transactions,
                },
            )
        return payload

    def prepare_entries(self, payload: AnalysisPayload) -> list[TransactionEntry]:
        """Categorize transactions and pair them with fraud annotations."""
        transactions = annotate_categories(payload.transactions)
        return pair_with_annotations(transactions, payload.fraud_annotations)

    def filter(
        self,
        payload: AnalysisPayload | Mapping[str, Any],
        criteria: FilterCriteria | Mapping[str, Any] | None = None,
    ) -> FilteredTransactions:
        """Return the filtered transaction view for a payload."""
        payload = self.load_payload(payload)
        resolved = resolve_criteria(criteria)
        entries = self.prepare_entries(payload)
        return self._filtered_view(entries, resolved)

    def network(
        self, party_ledger: Sequence[PartyLedgerEntry] | None
    ) -> tuple[list[GraphNode], list[GraphEdge]]:
        """Nodes and edges for the party network."""
        nodes = layout_network(party_ledger, self.layout)
        return nodes, layout_edges(nodes, self.layout)

    def build(
        self,
        payload: AnalysisPayload | Mapping[str, Any],
        criteria: FilterCriteria | Mapping[str, Any] | None = None,
    ) -> DashboardView:
        """Build every dashboard structure for one payload and filter state.

        Args:
            payload: Analysis result from the upstream service
            criteria: Current filter state; ``None`` means unfiltered

        Returns:
            DashboardView with the filtered list, aggregations and network

        Raises:
            PayloadError: If the payload cannot be used
        """
        start_time = time.time()

        payload = self.load_payload(payload)
        resolved = resolve_criteria(criteria)
        entries = self.prepare_entries(payload)
        view = self._filtered_view(entries, resolved)
        filtered_txns = [entry.txn for entry in view.entries]
        trend = monthly_trend(filtered_txns)
        nodes, edges = self.network(payload.party_ledger)

        processing_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "Dashboard view built",
            extra={
                "transactions": view.total_count,
                "filtered": view.filtered_count,
                "duration_ms": processing_time_ms,
            },
        )

        return DashboardView(
            transactions=view,
            flagged_count=sum(1 for entry in entries if entry.is_flagged),
            category_breakdown=category_breakdown(filtered_txns),
            monthly_trend=trend,
            trend_summary=trend_summary(trend),
            stats=enhanced_stats(filtered_txns),
            top_parties=top_parties(payload.party_ledger),
            ledger_totals=ledger_totals(payload.party_ledger),
            recurring=split_recurring(payload.recurring_transactions),
            network_nodes=nodes,
            network_edges=edges,
            entity_relations=payload.entity_relations,
            risk_analysis=payload.risk_analysis,
            investigation_summary=payload.investigation_summary,
            account_profile=payload.account_profile,
            recurring_transactions=payload.recurring_transactions,
            money=MoneyMeta(currency=settings.currency, minor_unit=settings.currency_minor_unit),
            processing_time_ms=processing_time_ms,
        )

    def _filtered_view(
        self, entries: list[TransactionEntry], criteria: FilterCriteria
    ) -> FilteredTransactions:
        active = criteria.active_dimensions()
        filtered = filter_transactions(entries, criteria)
        logger.debug(
            "Filtered %d of %d transactions (active: %s)",
            len(filtered),
            len(entries),
            ", ".join(active) or "none",
        )
        return FilteredTransactions(
            entries=filtered,
            filtered_count=len(filtered),
            total_count=len(entries),
            active_filters=active,
        )
