"""
Player view as reported by the game API.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

AI_NAME_MARKERS = ("ai_", "bot", "computer")
_AI_SLOT_RE = re.compile(r"ai_(\d+)", re.IGNORECASE)

MIN_AI_SLOT = 2
MAX_AI_SLOT = 8


@dataclass(frozen=True)
class Player:
    """
    A participant in a game.

    Attributes:
        user_id: Player identifier used by the trade API.
        address: Wallet address; ownership records reference it.
        balance: Cash on hand.
        username: Display name.
        turn_order: Seat in the turn rotation, if assigned.
        ai: Explicit AI flag. When None the flag is derived from the username.
    """

    user_id: int
    address: Optional[str] = None
    balance: int = 0
    username: str = ""
    turn_order: Optional[int] = None
    ai: Optional[bool] = None

    @property
    def is_ai(self) -> bool:
        if self.ai is not None:
            return self.ai
        name = (self.username or "").lower()
        return any(marker in name for marker in AI_NAME_MARKERS)

    @property
    def ai_slot(self) -> Optional[int]:
        """Agent registry slot (2-8) for AI players, e.g. AI_3 -> 3."""
        match = _AI_SLOT_RE.search(self.username or "")
        if match:
            return min(MAX_AI_SLOT, max(MIN_AI_SLOT, int(match.group(1))))
        if self.is_ai and self.turn_order is not None:
            return min(MAX_AI_SLOT, max(MIN_AI_SLOT, self.turn_order))
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        turn_order = data.get("turn_order")
        ai = data.get("ai", data.get("is_ai"))
        return cls(
            user_id=int(data["user_id"]),
            address=data.get("address"),
            balance=int(data.get("balance") or 0),
            username=data.get("username") or "",
            turn_order=int(turn_order) if turn_order is not None else None,
            ai=bool(ai) if ai is not None else None,
        )

    def __repr__(self) -> str:
        return f"Player(user_id={self.user_id}, username='{self.username}', ai={self.is_ai})"
