from tycoon.core.agents.base import Agent, PurchaseDecision, TradeDecision
from tycoon.core.agents.heuristic import HeuristicAgent
from tycoon.core.agents.planning import (
    MissingProperty,
    Opportunity,
    complete_monopolies,
    near_complete_opportunities,
)
from tycoon.core.agents.scoring import calculate_buy_score

__all__ = [
    "Agent",
    "PurchaseDecision",
    "TradeDecision",
    "HeuristicAgent",
    "MissingProperty",
    "Opportunity",
    "complete_monopolies",
    "near_complete_opportunities",
    "calculate_buy_score",
]
