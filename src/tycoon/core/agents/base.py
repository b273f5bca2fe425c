"""Base class for all automated players."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from tycoon.core.game.player import Player
from tycoon.core.game.property import OwnershipRecord, PropertyRecord
from tycoon.core.game.trading import TradeOffer


@dataclass(frozen=True)
class PurchaseDecision:
    """Outcome of a buy/pass decision for a landed-on property."""

    property_id: int
    score: int
    buy: bool


@dataclass(frozen=True)
class TradeDecision:
    """Outcome of an AI player's review of an incoming trade offer."""

    trade_id: int
    favorability: int
    accepted: bool
    remark: str

    @property
    def decision(self) -> str:
        return "accepted" if self.accepted else "declined"


class Agent(ABC):
    """
    Abstract base class for AI players.

    All agents must decide whether to buy a property they landed on and
    whether to accept a trade offered to them.

    Attributes:
        player_id: The player's user id in the game.
        name: The player's display name.
    """

    def __init__(self, player_id: int, name: str):
        """
        Initialize the agent.

        Args:
            player_id: The player's user id in the game.
            name: The player's display name.
        """
        self.player_id = player_id
        self.name = name

    @abstractmethod
    def decide_purchase(
        self,
        prop: PropertyRecord,
        player: Player,
        ownerships: List[OwnershipRecord],
        properties: List[PropertyRecord],
    ) -> PurchaseDecision:
        """
        Decide whether to buy the property the player just landed on.

        Args:
            prop: The landed-on property.
            player: Current state of the deciding player.
            ownerships: All ownership records of the game.
            properties: The full static property list.

        Returns:
            The decision, including the desirability score behind it.
        """
        pass

    @abstractmethod
    def respond_to_trade(
        self,
        trade: TradeOffer,
        properties: List[PropertyRecord],
    ) -> Optional[TradeDecision]:
        """
        Review a trade offered to this agent.

        Args:
            trade: The incoming offer.
            properties: The full static property list (for valuation).

        Returns:
            The decision, or None if the offer is not actionable.
        """
        pass
