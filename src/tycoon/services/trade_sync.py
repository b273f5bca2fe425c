"""
TradeSynchronizer keeps a near-real-time local view of a player's trade
offers by polling the game API, and surfaces each AI-originated pending
offer exactly once.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Set

from tycoon.core.exceptions import TycoonError
from tycoon.core.game.player import Player
from tycoon.core.game.trading import TradeOffer
from tycoon.services.api_client import ActionResult, GameApiClient
from tycoon.services.scheduler import PeriodicTask
from tycoon.settings import get_sync_settings

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    """Lifecycle of a synchronizer."""

    IDLE = "idle"
    POLLING = "polling"
    POPUP_PENDING = "popup_pending"


class TradeSynchronizer:
    """
    Polls "my offers" and "incoming offers" for one player in one game.

    Responsibilities:
    - Replace both local offer lists in full after every successful poll
    - Publish the first unseen pending offer from an AI player as the popup offer
    - Remember surfaced offer ids for the rest of the game session

    Each refresh is tagged with a generation number. A response is applied
    only if no later refresh has been applied yet and the game/player
    context has not changed while it was in flight.
    """

    def __init__(
        self,
        client: GameApiClient,
        *,
        poll_interval: Optional[float] = None,
        on_popup: Optional[Callable[[TradeOffer], None]] = None,
    ):
        self.client = client
        self.poll_interval = poll_interval or get_sync_settings().poll_interval_seconds
        self.on_popup = on_popup

        self.game_id: Optional[int] = None
        self.player_id: Optional[int] = None
        self.players: List[Player] = []

        self.initiated_trades: List[TradeOffer] = []
        self.incoming_trades: List[TradeOffer] = []
        self.popup_offer: Optional[TradeOffer] = None

        self._processed_ids: Set[int] = set()
        self._issued = 0
        self._applied = 0
        self._epoch = 0
        self._in_flight = 0
        self._closed = False
        self._poller: Optional[PeriodicTask] = None

    # ---- Introspection ----

    @property
    def has_context(self) -> bool:
        return self.game_id is not None and self.player_id is not None

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def polling(self) -> bool:
        return self._poller is not None and self._poller.running

    @property
    def processed_ids(self) -> FrozenSet[int]:
        return frozenset(self._processed_ids)

    @property
    def state(self) -> SyncState:
        if self._closed or not self.polling:
            return SyncState.IDLE
        if self.popup_offer is not None:
            return SyncState.POPUP_PENDING
        return SyncState.POLLING

    # ---- Lifecycle ----

    async def set_context(
        self,
        game_id: Optional[int],
        player_id: Optional[int],
        players: Optional[Sequence[Player]] = None,
    ) -> None:
        """
        Point the synchronizer at a game/player pair.

        Polling starts (with an immediate refresh) once both ids are present
        and stops when either is cleared. Switching games forgets which
        offers were already surfaced.
        """
        if self._closed:
            raise RuntimeError("TradeSynchronizer is closed")
        if players is not None:
            self.players = list(players)

        if game_id == self.game_id and player_id == self.player_id:
            if self.has_context and not self.polling:
                await self._start_polling()
            return

        if game_id != self.game_id:
            self._processed_ids.clear()
            self.popup_offer = None
            self.initiated_trades = []
            self.incoming_trades = []

        self.game_id = game_id
        self.player_id = player_id
        self._epoch += 1
        await self._stop_polling()

        if self.has_context:
            await self._start_polling()

    def update_players(self, players: Sequence[Player]) -> None:
        """Replace the player list used to recognise AI offers."""
        self.players = list(players)

    async def close(self) -> None:
        """Stop polling; responses still in flight are discarded on arrival."""
        self._closed = True
        self._epoch += 1
        await self._stop_polling()

    async def __aenter__(self) -> "TradeSynchronizer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _start_polling(self) -> None:
        epoch = self._epoch
        await self.refresh()
        if self._closed or epoch != self._epoch or self.polling:
            return
        self._poller = PeriodicTask(
            self.refresh,
            self.poll_interval,
            name=f"trade-sync-{self.game_id}-{self.player_id}",
        )
        self._poller.start()
        logger.info(f"Polling trades for game {self.game_id}, player {self.player_id} "
                    f"every {self.poll_interval}s")

    async def _stop_polling(self) -> None:
        poller, self._poller = self._poller, None
        if poller is not None:
            await poller.stop()
            logger.info("Stopped trade polling")

    # ---- Operations ----

    async def refresh(self) -> Optional[TradeOffer]:
        """
        Fetch both offer lists and publish a newly arrived AI offer.

        Returns the offer published by this refresh, if any. Failures are
        logged and leave the previous lists untouched.
        """
        if self._closed or not self.has_context:
            return None

        game_id, player_id, epoch = self.game_id, self.player_id, self._epoch
        self._issued += 1
        generation = self._issued

        self._in_flight += 1
        try:
            initiated, incoming = await asyncio.gather(
                self.client.get_initiated_trades(game_id, player_id),
                self.client.get_incoming_trades(game_id, player_id),
            )
        except TycoonError as e:
            logger.warning(f"Error loading trades for game {game_id}, player {player_id}: {e}")
            return None
        finally:
            self._in_flight -= 1

        if self._closed or epoch != self._epoch:
            logger.debug(f"Discarding trade refresh #{generation}: context changed")
            return None
        if generation < self._applied:
            logger.debug(f"Discarding trade refresh #{generation}: #{self._applied} already applied")
            return None
        self._applied = generation

        self.initiated_trades = list(initiated)
        self.incoming_trades = list(incoming)

        offer = self._next_ai_offer(self.incoming_trades)
        if offer is None:
            return None

        self.popup_offer = offer
        self._processed_ids.add(offer.id)
        logger.info(f"New AI trade offer #{offer.id} from player {offer.player_id}")
        if self.on_popup is not None:
            self.on_popup(offer)
        return offer

    async def force_refresh(self) -> Optional[TradeOffer]:
        """Refresh now instead of waiting for the next poll."""
        if self.polling:
            return await self._poller.trigger()
        return await self.refresh()

    def dismiss_popup(self) -> None:
        """Hide the popup offer; it stays processed and will not reappear."""
        self.popup_offer = None

    async def respond_to_offer(self, trade_id: int, accept: bool) -> ActionResult:
        """Accept or decline an incoming offer, then resync."""
        result = await self.client.respond_to_trade(trade_id, accept)
        if result.success:
            logger.info(f"Trade #{trade_id} {'accepted' if accept else 'declined'}")
            self.dismiss_popup()
            await self.force_refresh()
        else:
            logger.warning(f"Trade #{trade_id} response rejected: {result.message}")
        return result

    def _next_ai_offer(self, incoming: List[TradeOffer]) -> Optional[TradeOffer]:
        players_by_id: Dict[int, Player] = {}
        for player in self.players:
            players_by_id.setdefault(player.user_id, player)

        for trade in incoming:
            if not trade.is_pending or trade.id in self._processed_ids:
                continue
            sender = players_by_id.get(trade.player_id)
            if sender is not None and sender.is_ai:
                return trade
        return None
