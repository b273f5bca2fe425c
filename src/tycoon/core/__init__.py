"""
Core domain layer for the Tycoon companion.

Exposes board tables, game records and the AI heuristics.
"""

from tycoon.core.game import (
    Board,
    OwnershipRecord,
    Player,
    PropertyRecord,
    TradeOffer,
    standard_properties,
)
from tycoon.core.agents import Agent, HeuristicAgent, calculate_buy_score

__all__ = [
    "Board",
    "OwnershipRecord",
    "Player",
    "PropertyRecord",
    "TradeOffer",
    "standard_properties",
    "Agent",
    "HeuristicAgent",
    "calculate_buy_score",
]
