from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tycoon.core.exceptions import SyncNotFoundError
from tycoon.core.game.player import Player
from tycoon.services import GameApiClient, TradeSynchronizer

logger = logging.getLogger(__name__)

SyncKey = Tuple[int, int]


class SyncRegistry:
    """In-memory registry of running trade synchronizers, one per (game, player)."""

    def __init__(
        self,
        client_factory: Callable[[], GameApiClient] = GameApiClient,
        poll_interval: Optional[float] = None,
    ):
        self._client_factory = client_factory
        self._client: Optional[GameApiClient] = None
        self._poll_interval = poll_interval
        self._syncs: Dict[SyncKey, TradeSynchronizer] = {}
        self._lock = asyncio.Lock()

    @property
    def client(self) -> GameApiClient:
        """Shared API client, created on first use."""
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def open(self, game_id: int, player_id: int, players: Sequence[Player]) -> TradeSynchronizer:
        """Start syncing a game/player pair, or update the players of a running one."""
        key = (game_id, player_id)
        async with self._lock:
            sync = self._syncs.get(key)
            if sync is not None:
                sync.update_players(players)
                return sync
            sync = TradeSynchronizer(self.client, poll_interval=self._poll_interval)
            self._syncs[key] = sync

        try:
            await sync.set_context(game_id, player_id, players)
        except Exception:
            async with self._lock:
                if self._syncs.get(key) is sync:
                    del self._syncs[key]
            await sync.close()
            logger.exception(f"Failed to start trade sync for game {game_id}, player {player_id}")
            raise
        logger.info(f"Opened trade sync for game {game_id}, player {player_id}")
        return sync

    async def get(self, game_id: int, player_id: int) -> TradeSynchronizer:
        sync = self._syncs.get((game_id, player_id))
        if sync is None:
            raise SyncNotFoundError(f"No trade sync for game {game_id}, player {player_id}")
        return sync

    def keys(self) -> List[SyncKey]:
        return sorted(self._syncs)

    async def close(self, game_id: int, player_id: int) -> bool:
        async with self._lock:
            sync = self._syncs.pop((game_id, player_id), None)
        if sync is None:
            return False
        await sync.close()
        logger.info(f"Closed trade sync for game {game_id}, player {player_id}")
        return True

    async def close_all(self) -> None:
        async with self._lock:
            syncs, self._syncs = list(self._syncs.values()), {}
        for sync in syncs:
            await sync.close()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
