"""
Chance and Community Chest draw notifications.

The game engine reports card draws as structured events:

    {"event_type": "card_draw", "deck": "chance", "text": "...",
     "amount": 50, "player_id": 7, "effect": "collect"}

This module maps them into CardDrawEvent objects and tracks which entries
of a growing event history have already been surfaced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from tycoon.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CARD_DRAW_EVENT = "card_draw"

# Effects that help the drawing player regardless of the amount
FAVORABLE_EFFECTS = {"advance", "get_out_of_jail", "collect"}


class CardDeck(str, Enum):
    """Decks a card can be drawn from."""

    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"


@dataclass(frozen=True)
class CardDrawEvent:
    """A card drawn by a player."""

    deck: CardDeck
    text: str
    amount: int = 0  # cash effect: positive collects, negative pays
    player_id: Optional[int] = None
    effect: Optional[str] = None  # e.g. "collect", "pay", "go_to_jail", "advance"

    @property
    def is_good(self) -> bool:
        if self.amount:
            return self.amount > 0
        return (self.effect or "") in FAVORABLE_EFFECTS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deck": self.deck.value,
            "text": self.text,
            "amount": self.amount,
            "player_id": self.player_id,
            "effect": self.effect,
            "is_good": self.is_good,
        }


def map_card_event(payload: Dict[str, Any]) -> Optional[CardDrawEvent]:
    """
    Map a single engine event to a CardDrawEvent.

    Returns None for events of other types. Raises ValidationError when a
    card_draw event is missing its deck or text.
    """
    if not isinstance(payload, dict) or payload.get("event_type") != CARD_DRAW_EVENT:
        return None

    deck_raw = payload.get("deck")
    try:
        deck = CardDeck(deck_raw)
    except ValueError:
        raise ValidationError(f"Unknown card deck: {deck_raw!r}")

    text = payload.get("text")
    if not text:
        raise ValidationError("card_draw event without text")

    player_id = payload.get("player_id")
    try:
        return CardDrawEvent(
            deck=deck,
            text=str(text),
            amount=int(payload.get("amount") or 0),
            player_id=int(player_id) if player_id is not None else None,
            effect=payload.get("effect"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid card_draw event {payload!r}: {e}") from e


def map_card_events(payloads: Iterable[Dict[str, Any]]) -> List[CardDrawEvent]:
    """Map a batch of engine events, skipping non-card and malformed entries."""
    events = []
    for payload in payloads:
        try:
            event = map_card_event(payload)
        except ValidationError as e:
            logger.warning(f"Skipping malformed card event: {e}")
            continue
        if event is not None:
            events.append(event)
    return events


class CardEventFeed:
    """
    Cursor over a game's event history that yields each card draw once.

    A history shorter than the cursor means a different game (or a reset),
    so the cursor starts over.
    """

    def __init__(self):
        self._seen = 0

    @property
    def cursor(self) -> int:
        return self._seen

    def consume(self, history: Sequence[Dict[str, Any]]) -> List[CardDrawEvent]:
        if len(history) < self._seen:
            logger.debug("Event history shrank; resetting card feed cursor")
            self._seen = 0
        fresh = history[self._seen:]
        self._seen = len(history)
        return map_card_events(fresh)
