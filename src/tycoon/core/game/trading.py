"""
Trade offers as exchanged with the remote trade service.
Offers are read-only here: they are created and resolved by the game server.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from tycoon.core.exceptions import MalformedResponseError
from tycoon.core.game.property import PropertyRecord


class TradeStatus(str, Enum):
    """Statuses reported by the trade service."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DECLINED = "declined"
    COUNTER = "counter"


@dataclass(frozen=True)
class TradeOffer:
    """
    A proposed trade between two players.

    - player_id offers offer_properties + offer_amount
    - in exchange for requested_properties + requested_amount from target_player_id
    - status is any string; only "pending" offers are actionable
    """

    # Unique ID assigned by the trade service
    id: int

    # Player proposing the trade
    player_id: int

    # Player receiving the trade offer
    target_player_id: Optional[int] = None

    status: str = TradeStatus.PENDING.value

    offer_properties: List[int] = field(default_factory=list)
    offer_amount: int = 0
    requested_properties: List[int] = field(default_factory=list)
    requested_amount: int = 0

    # Raw JSON object, passed through untouched
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_pending(self) -> bool:
        return self.status == TradeStatus.PENDING.value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TradeOffer":
        """Build an offer from a trade service JSON object."""
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Trade offer must be an object, got {type(data).__name__}")
        try:
            target = data.get("target_player_id")
            return cls(
                id=int(data["id"]),
                player_id=int(data["player_id"]),
                target_player_id=int(target) if target is not None else None,
                status=str(data.get("status", "")),
                offer_properties=[int(p) for p in data.get("offer_properties") or []],
                offer_amount=int(data.get("offer_amount") or 0),
                requested_properties=[int(p) for p in data.get("requested_properties") or []],
                requested_amount=int(data.get("requested_amount") or 0),
                raw=dict(data),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid trade offer {data!r}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.raw)
        payload.update(
            id=self.id,
            player_id=self.player_id,
            target_player_id=self.target_player_id,
            status=self.status,
            offer_properties=list(self.offer_properties),
            offer_amount=self.offer_amount,
            requested_properties=list(self.requested_properties),
            requested_amount=self.requested_amount,
        )
        return payload

    def __repr__(self) -> str:
        return (f"Trade #{self.id}: Player {self.player_id} → Player {self.target_player_id} "
                f"[{self.status}] offers {self.offer_properties} + ${self.offer_amount} "
                f"for {self.requested_properties} + ${self.requested_amount}")


def _property_value(ids: Iterable[int], properties: Iterable[PropertyRecord]) -> int:
    prices = {p.id: p.price for p in properties}
    return sum(prices.get(pid, 0) for pid in ids)


def _ratio_percent(gets: int, gives: int) -> int:
    if gives == 0:
        return 100
    ratio = (gets - gives) / gives * 100
    # round half up, not banker's rounding
    rounded = math.floor(ratio + 0.5)
    return min(100, max(-100, rounded))


def calculate_ai_favorability(trade: TradeOffer, properties: List[PropertyRecord]) -> int:
    """
    How good a trade is for the AI receiving it, in [-100, 100].

    The AI receives what the proposer offers and gives what the proposer
    requests; both sides are valued at list price plus cash.
    """
    gets = trade.offer_amount + _property_value(trade.offer_properties, properties)
    gives = trade.requested_amount + _property_value(trade.requested_properties, properties)
    return _ratio_percent(gets, gives)
