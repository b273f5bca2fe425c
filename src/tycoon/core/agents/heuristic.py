"""Heuristic agent that buys by desirability score and trades by favorability."""

import logging
import random
from typing import List, Optional

from tycoon.core.agents.base import Agent, PurchaseDecision, TradeDecision
from tycoon.core.agents.scoring import calculate_buy_score
from tycoon.core.game.board import Board
from tycoon.core.game.player import Player
from tycoon.core.game.property import OwnershipRecord, PropertyRecord
from tycoon.core.game.trading import TradeOffer, calculate_ai_favorability
from tycoon.settings import get_agent_settings

logger = logging.getLogger(__name__)


class HeuristicAgent(Agent):
    """
    Rule-based AI player.

    Buys a property when its buy score clears a threshold and the purchase
    leaves a cash cushion. Accepts trades by favorability band; the middle
    bands are decided by a coin flip from a per-agent RNG seeded with the
    player id, so a given agent is reproducible.
    """

    def __init__(
        self,
        player_id: int,
        name: str,
        buy_threshold: Optional[int] = None,
        buy_cash_multiplier: Optional[float] = None,
        board: Optional[Board] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize the heuristic agent.

        Args:
            player_id: The player's user id in the game.
            name: The player's display name.
            buy_threshold: Minimum buy score (default from AI settings).
            buy_cash_multiplier: Cash must exceed price times this (default from AI settings).
            board: Board tables for scoring (standard board by default).
            seed: RNG seed for trade coin flips (defaults to player_id).
        """
        super().__init__(player_id, name)
        settings = get_agent_settings()
        self.buy_threshold = settings.buy_threshold if buy_threshold is None else buy_threshold
        self.buy_cash_multiplier = (
            settings.buy_cash_multiplier if buy_cash_multiplier is None else buy_cash_multiplier
        )
        self.board = board
        self.rng = random.Random(player_id if seed is None else seed)

    def decide_purchase(
        self,
        prop: PropertyRecord,
        player: Player,
        ownerships: List[OwnershipRecord],
        properties: List[PropertyRecord],
    ) -> PurchaseDecision:
        score = calculate_buy_score(prop, player, ownerships, properties, board=self.board)
        buy = (
            score >= self.buy_threshold
            and (player.balance or 0) > prop.price * self.buy_cash_multiplier
        )
        logger.info(
            f"{self.name} {'buys' if buy else 'passes on'} {prop.name or prop.id} "
            f"(score: {score}%)"
        )
        return PurchaseDecision(property_id=prop.id, score=score, buy=buy)

    def respond_to_trade(
        self,
        trade: TradeOffer,
        properties: List[PropertyRecord],
    ) -> Optional[TradeDecision]:
        if not trade.is_pending:
            return None

        favorability = calculate_ai_favorability(trade, properties)

        if favorability >= 30:
            accepted, remark = True, "This is a fantastic deal!"
        elif favorability >= 10:
            accepted = self.rng.random() < 0.7
            remark = "Fair enough, I'll take it." if accepted else "Not quite good enough."
        elif favorability >= 0:
            accepted = self.rng.random() < 0.3
            remark = "Okay, deal." if accepted else "Nah, too weak."
        else:
            accepted, remark = False, "This deal is terrible for me!"

        logger.info(f"{self.name} reviewed trade #{trade.id}: favorability={favorability}, accepted={accepted}")
        return TradeDecision(
            trade_id=trade.id,
            favorability=favorability,
            accepted=accepted,
            remark=remark,
        )
