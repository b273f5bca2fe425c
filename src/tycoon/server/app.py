from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException

from tycoon import __version__
from tycoon.core.agents import HeuristicAgent, calculate_buy_score, complete_monopolies, near_complete_opportunities
from tycoon.core.events import map_card_event, map_card_events
from tycoon.core.exceptions import ApiError, MalformedResponseError, SyncNotFoundError, ValidationError
from tycoon.core.game import PropertyRecord, standard_properties
from tycoon.services import PropertyAction, PropertyActionService, TradeSynchronizer
from tycoon.settings import get_server_settings
from .registry import SyncRegistry
from .schemas import (
    ActionResponse,
    BuyScoreRequest,
    BuyScoreResponse,
    CardEventDTO,
    CardEventsRequest,
    CardEventsResponse,
    MissingPropertyDTO,
    OpenSyncRequest,
    OpportunitiesRequest,
    OpportunitiesResponse,
    OpportunityDTO,
    PropertyActionRequest,
    PropertyIn,
    PurchaseDecisionResponse,
    SyncStatus,
    TradeResponseRequest,
    TradeResponseResponse,
)

logger = logging.getLogger(__name__)

registry = SyncRegistry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Stop every running trade sync on shutdown."""
    logger.info("Starting Tycoon companion server")
    yield
    logger.info("Shutting down: closing trade syncs")
    await get_registry().close_all()


app = FastAPI(
    title="Tycoon Companion",
    version=__version__,
    lifespan=lifespan,
)


# ---- Dependencies ----
def get_registry() -> SyncRegistry:
    return registry


def _properties(items: Optional[List[PropertyIn]]) -> List[PropertyRecord]:
    if items is None:
        return standard_properties()
    return [p.to_record() for p in items]


async def _get_sync(reg: SyncRegistry, game_id: int, player_id: int) -> TradeSynchronizer:
    try:
        return await reg.get(game_id, player_id)
    except SyncNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _sync_status(sync: TradeSynchronizer) -> SyncStatus:
    popup = sync.popup_offer
    return SyncStatus(
        game_id=sync.game_id,
        player_id=sync.player_id,
        state=sync.state.value,
        loading=sync.is_loading,
        initiated_trades=[t.to_dict() for t in sync.initiated_trades],
        incoming_trades=[t.to_dict() for t in sync.incoming_trades],
        popup_offer=popup.to_dict() if popup is not None else None,
        processed_ids=sorted(sync.processed_ids),
    )


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


# ---- AI decisions ----

@app.post("/ai/buy-score", response_model=BuyScoreResponse)
async def buy_score(req: BuyScoreRequest):
    prop = req.property.to_record()
    score = calculate_buy_score(
        prop,
        req.player.to_player(),
        [o.to_record() for o in req.ownerships],
        _properties(req.properties),
    )
    return BuyScoreResponse(property_id=prop.id, score=score)


@app.post("/ai/purchase-decision", response_model=PurchaseDecisionResponse)
async def purchase_decision(req: BuyScoreRequest):
    player = req.player.to_player()
    agent = HeuristicAgent(player.user_id, player.username or f"Player {player.user_id}")
    decision = agent.decide_purchase(
        req.property.to_record(),
        player,
        [o.to_record() for o in req.ownerships],
        _properties(req.properties),
    )
    return PurchaseDecisionResponse(property_id=decision.property_id, score=decision.score, buy=decision.buy)


@app.post("/ai/trade-response", response_model=TradeResponseResponse)
async def trade_response(req: TradeResponseRequest):
    try:
        trade = req.trade.to_offer()
    except MalformedResponseError as e:
        raise HTTPException(status_code=422, detail=str(e))

    agent = HeuristicAgent(req.player_id, req.name)
    decision = agent.respond_to_trade(trade, _properties(req.properties))
    if decision is None:
        raise HTTPException(status_code=422, detail=f"Trade #{trade.id} is not pending")
    return TradeResponseResponse(
        trade_id=decision.trade_id,
        favorability=decision.favorability,
        decision=decision.decision,
        remark=decision.remark,
    )


@app.post("/ai/opportunities", response_model=OpportunitiesResponse)
async def opportunities(req: OpportunitiesRequest):
    ownerships = [o.to_record() for o in req.ownerships]
    found = near_complete_opportunities(
        req.address,
        ownerships,
        _properties(req.properties),
        [p.to_player() for p in req.players],
    )
    return OpportunitiesResponse(
        monopolies=complete_monopolies(req.address, ownerships),
        opportunities=[
            OpportunityDTO(
                group=o.group,
                needs=o.needs,
                missing=[MissingPropertyDTO(**vars(m)) for m in o.missing],
            )
            for o in found
        ],
    )


# ---- Events ----

@app.post("/events/cards", response_model=CardEventsResponse)
async def card_events(req: CardEventsRequest):
    if req.strict:
        try:
            cards = [c for c in (map_card_event(e) for e in req.events) if c is not None]
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=str(e))
    else:
        cards = map_card_events(req.events)
    return CardEventsResponse(cards=[CardEventDTO(**c.to_dict()) for c in cards])


# ---- Trade sync ----

@app.post("/sync", response_model=SyncStatus)
async def open_sync(req: OpenSyncRequest, reg: SyncRegistry = Depends(get_registry)):
    sync = await reg.open(req.game_id, req.player_id, [p.to_player() for p in req.players])
    return _sync_status(sync)


@app.get("/sync/{game_id}/{player_id}", response_model=SyncStatus)
async def sync_status(game_id: int, player_id: int, reg: SyncRegistry = Depends(get_registry)):
    sync = await _get_sync(reg, game_id, player_id)
    return _sync_status(sync)


@app.post("/sync/{game_id}/{player_id}/refresh", response_model=SyncStatus)
async def refresh_sync(game_id: int, player_id: int, reg: SyncRegistry = Depends(get_registry)):
    sync = await _get_sync(reg, game_id, player_id)
    await sync.force_refresh()
    return _sync_status(sync)


@app.post("/sync/{game_id}/{player_id}/dismiss", response_model=SyncStatus)
async def dismiss_popup(game_id: int, player_id: int, reg: SyncRegistry = Depends(get_registry)):
    sync = await _get_sync(reg, game_id, player_id)
    sync.dismiss_popup()
    return _sync_status(sync)


async def _respond(reg: SyncRegistry, game_id: int, player_id: int, trade_id: int, accept: bool) -> ActionResponse:
    sync = await _get_sync(reg, game_id, player_id)
    try:
        result = await sync.respond_to_offer(trade_id, accept)
    except ApiError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ActionResponse(success=result.success, message=result.message)


@app.post("/sync/{game_id}/{player_id}/trades/{trade_id}/accept", response_model=ActionResponse)
async def accept_trade(game_id: int, player_id: int, trade_id: int, reg: SyncRegistry = Depends(get_registry)):
    return await _respond(reg, game_id, player_id, trade_id, accept=True)


@app.post("/sync/{game_id}/{player_id}/trades/{trade_id}/decline", response_model=ActionResponse)
async def decline_trade(game_id: int, player_id: int, trade_id: int, reg: SyncRegistry = Depends(get_registry)):
    return await _respond(reg, game_id, player_id, trade_id, accept=False)


@app.post("/sync/{game_id}/{player_id}/properties/{action}", response_model=ActionResponse)
async def property_action(
    game_id: int,
    player_id: int,
    action: PropertyAction,
    req: PropertyActionRequest,
    reg: SyncRegistry = Depends(get_registry),
):
    sync = await _get_sync(reg, game_id, player_id)
    service = PropertyActionService(
        reg.client,
        game_id,
        req.user_id,
        is_my_turn=req.is_my_turn,
        synchronizer=sync,
    )
    result = await service.perform(action, req.property_id)
    if result is None:
        return ActionResponse(success=False, message="Not this player's turn", skipped=True)
    return ActionResponse(success=result.success, message=result.message)


@app.delete("/sync/{game_id}/{player_id}")
async def close_sync(game_id: int, player_id: int, reg: SyncRegistry = Depends(get_registry)):
    if not await reg.close(game_id, player_id):
        raise HTTPException(status_code=404, detail="Trade sync not found")
    return {"status": "closed"}


if __name__ == "__main__":
    # Convenience entrypoint for running directly: python -m tycoon.server.app
    import uvicorn

    settings = get_server_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("tycoon.server.app:app", host=settings.host, port=settings.port)
