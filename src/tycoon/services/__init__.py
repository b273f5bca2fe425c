"""
Application services layer.

Glues the core heuristics to the remote game API: trade polling,
property actions and the background scheduling they rely on.
"""

from .api_client import ActionResult, GameApiClient, PropertyAction
from .property_actions import PropertyActionService
from .scheduler import CancellationToken, PeriodicTask
from .trade_sync import SyncState, TradeSynchronizer

__all__ = [
    "ActionResult",
    "GameApiClient",
    "PropertyAction",
    "PropertyActionService",
    "CancellationToken",
    "PeriodicTask",
    "SyncState",
    "TradeSynchronizer",
]
