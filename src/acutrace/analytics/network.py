"""Radial layout for the party-interaction graph.

The account holder sits at the center; the most frequent counterparties are
spaced evenly on a circle around it. The layout is static and recomputed
from scratch on each call.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from acutrace.schemas.analytics import GraphEdge, GraphNode, NodeColor
from acutrace.schemas.transaction import PartyLedgerEntry

CENTER_NODE_ID = "ME"
MERCHANT_ENTITY_TYPE = "Merchant"


@dataclass(frozen=True)
class NetworkLayoutConfig:
    """Geometry of the radial layout, in canvas units."""

    center_x: float = 300.0
    center_y: float = 300.0
    orbit_radius: float = 180.0
    center_radius: float = 40.0
    max_satellites: int = 8
    radius_per_transaction: float = 2.0
    min_node_radius: float = 20.0
    max_node_radius: float = 35.0
    heavy_edge_threshold: int = 10
    heavy_edge_width: int = 3
    light_edge_width: int = 1

    def __post_init__(self):
        if self.max_satellites < 1:
            raise ValueError(f"max_satellites must be at least 1, got {self.max_satellites}")


DEFAULT_LAYOUT = NetworkLayoutConfig()


def _node_radius(transaction_count: int, config: NetworkLayoutConfig) -> float:
    scaled = transaction_count * config.radius_per_transaction
    return max(config.min_node_radius, min(scaled, config.max_node_radius))


def _entity_color(entity_type: str) -> NodeColor:
    if entity_type == MERCHANT_ENTITY_TYPE:
        return NodeColor.MERCHANT
    return NodeColor.INDIVIDUAL


def layout_network(
    party_ledger: Sequence[PartyLedgerEntry] | None,
    config: NetworkLayoutConfig = DEFAULT_LAYOUT,
) -> list[GraphNode]:
    """Position the central node and up to ``config.max_satellites`` parties.

    Parties are ranked by transaction count (ties keep ledger order). The
    i-th of N satellites sits at ``i * 360 / N`` degrees around the center.

    Returns:
        The central node followed by the satellites, or ``[]`` for an empty
        ledger.
    """
    if not party_ledger:
        return []

    ranked = sorted(party_ledger, key=lambda party: party.transaction_count, reverse=True)
    selected = ranked[: config.max_satellites]

    nodes = [
        GraphNode(
            id=CENTER_NODE_ID,
            x=config.center_x,
            y=config.center_y,
            radius=config.center_radius,
            color=NodeColor.SELF,
            label=CENTER_NODE_ID,
        )
    ]

    step = 360.0 / len(selected)
    for i, party in enumerate(selected):
        angle = math.radians(i * step)
        nodes.append(
            GraphNode(
                id=party.party_name,
                x=config.center_x + math.cos(angle) * config.orbit_radius,
                y=config.center_y + math.sin(angle) * config.orbit_radius,
                radius=_node_radius(party.transaction_count, config),
                color=_entity_color(party.entity_type),
                label=party.party_name,
                weight=party.transaction_count,
            )
        )

    return nodes


def layout_edges(
    nodes: Sequence[GraphNode],
    config: NetworkLayoutConfig = DEFAULT_LAYOUT,
) -> list[GraphEdge]:
    """Spokes from the central node to every satellite.

    Parties with more than ``heavy_edge_threshold`` transactions get a
    thicker spoke.
    """
    if len(nodes) < 2:
        return []

    center, satellites = nodes[0], nodes[1:]
    return [
        GraphEdge(
            source=center.id,
            target=node.id,
            width=(
                config.heavy_edge_width
                if (node.weight or 0) > config.heavy_edge_threshold
                else config.light_edge_width
            ),
        )
        for node in satellites
    ]
