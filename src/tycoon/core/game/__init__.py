from tycoon.core.game.board import (
    BUILD_PRIORITY,
    COLOR_GROUPS,
    DEFAULT_BOARD,
    LANDING_RANK,
    Board,
    standard_properties,
)
from tycoon.core.game.player import Player
from tycoon.core.game.property import OwnershipRecord, PropertyRecord, PropertyType
from tycoon.core.game.trading import TradeOffer, TradeStatus, calculate_ai_favorability

__all__ = [
    "BUILD_PRIORITY",
    "COLOR_GROUPS",
    "DEFAULT_BOARD",
    "LANDING_RANK",
    "Board",
    "standard_properties",
    "Player",
    "OwnershipRecord",
    "PropertyRecord",
    "PropertyType",
    "TradeOffer",
    "TradeStatus",
    "calculate_ai_favorability",
]
