"""
Async client for the remote game REST API.

Every endpoint answers with an envelope {"success": bool, "data": ..., "message": str}.
Transport failures and error statuses raise ApiError; list endpoints that
return anything other than a list of trade objects yield an empty list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from tycoon.core.exceptions import ApiError, MalformedResponseError
from tycoon.core.game.trading import TradeOffer, TradeStatus
from tycoon.settings import get_api_settings

logger = logging.getLogger(__name__)


class PropertyAction(str, Enum):
    """Property mutations exposed by the game API."""

    DEVELOPMENT = "development"
    DOWNGRADE = "downgrade"
    MORTGAGE = "mortgage"
    UNMORTGAGE = "unmortgage"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a fire-and-report call."""

    success: bool
    message: Optional[str] = None
    data: Any = None

    @classmethod
    def from_envelope(cls, body: Any) -> "ActionResult":
        if not isinstance(body, dict):
            return cls(success=False, message="Unexpected response from game API")
        return cls(
            success=bool(body.get("success")),
            message=body.get("message"),
            data=body.get("data"),
        )


class GameApiClient:
    """
    Thin wrapper around httpx.AsyncClient for the game service endpoints.

    Configuration defaults come from ApiSettings (see `settings.py`). An
    `httpx` transport can be injected for testing.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_api_settings()
        if auth_token is None and settings.auth_token is not None:
            auth_token = settings.auth_token.get_secret_value()

        headers = {"Accept": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        self.base_url = (base_url or settings.base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.timeout_seconds,
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GameApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=json)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiError(
                f"{method} {path} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"{method} {path} returned non-JSON body") from e

    async def _get_trades(self, path: str) -> List[TradeOffer]:
        try:
            body = await self._request("GET", path)
        except MalformedResponseError as e:
            logger.warning(f"{e}; treating as empty")
            return []

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            logger.warning(f"GET {path} returned no trade list; treating as empty")
            return []

        trades = []
        for item in data:
            try:
                trades.append(TradeOffer.from_dict(item))
            except MalformedResponseError as e:
                logger.warning(f"Skipping trade from {path}: {e}")
        return trades

    # ---- Trades ----

    async def get_initiated_trades(self, game_id: int, player_id: int) -> List[TradeOffer]:
        """Offers the player has sent in this game."""
        return await self._get_trades(f"/game-trade-requests/my/{game_id}/player/{player_id}")

    async def get_incoming_trades(self, game_id: int, player_id: int) -> List[TradeOffer]:
        """Offers addressed to the player in this game."""
        return await self._get_trades(f"/game-trade-requests/incoming/{game_id}/player/{player_id}")

    async def respond_to_trade(self, trade_id: int, accept: bool) -> ActionResult:
        """Accept or decline an incoming offer."""
        path = f"/game-trade-requests/{'accept' if accept else 'decline'}"
        body = await self._request("POST", path, json={"id": trade_id})
        return ActionResult.from_envelope(body)

    async def create_trade(
        self,
        game_id: int,
        player_id: int,
        target_player_id: int,
        *,
        offer_properties: Optional[List[int]] = None,
        offer_amount: int = 0,
        requested_properties: Optional[List[int]] = None,
        requested_amount: int = 0,
    ) -> ActionResult:
        """Propose a new trade; the game server assigns its id."""
        body = await self._request("POST", "/game-trade-requests", json={
            "game_id": game_id,
            "player_id": player_id,
            "target_player_id": target_player_id,
            "offer_properties": list(offer_properties or []),
            "offer_amount": offer_amount,
            "requested_properties": list(requested_properties or []),
            "requested_amount": requested_amount,
            "status": TradeStatus.PENDING.value,
        })
        return ActionResult.from_envelope(body)

    # ---- Properties ----

    async def property_action(
        self,
        action: PropertyAction,
        game_id: int,
        user_id: int,
        property_id: int,
    ) -> ActionResult:
        """Develop, downgrade, mortgage or unmortgage a property."""
        body = await self._request(
            "POST",
            f"/game-properties/{PropertyAction(action).value}",
            json={"game_id": game_id, "user_id": user_id, "property_id": property_id},
        )
        return ActionResult.from_envelope(body)
