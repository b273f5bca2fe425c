"""
Event utilities: structured card-draw notifications.

This package converts engine events into typed objects suitable for
real-time notifications.
"""

from tycoon.core.events.cards import (
    CardDeck,
    CardDrawEvent,
    CardEventFeed,
    map_card_event,
    map_card_events,
)

__all__ = [
    "CardDeck",
    "CardDrawEvent",
    "CardEventFeed",
    "map_card_event",
    "map_card_events",
]
