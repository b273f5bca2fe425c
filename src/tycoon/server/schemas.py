from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from tycoon.core.game.player import Player
from tycoon.core.game.property import OwnershipRecord, PropertyRecord
from tycoon.core.game.trading import TradeOffer


class PropertyIn(BaseModel):
    id: int
    name: str = ""
    type: str = "property"
    price: int = 0
    rent_site_only: int = 0
    color: Optional[str] = None
    cost_of_house: int = 0
    rent_hotel: int = 0

    def to_record(self) -> PropertyRecord:
        return PropertyRecord(**self.model_dump())


class OwnershipIn(BaseModel):
    property_id: int
    address: Optional[str] = None
    player_id: Optional[int] = None
    development: int = Field(0, ge=0, le=5)
    mortgaged: bool = False

    def to_record(self) -> OwnershipRecord:
        return OwnershipRecord(**self.model_dump())


class PlayerIn(BaseModel):
    user_id: int
    address: Optional[str] = None
    balance: int = 0
    username: str = ""
    turn_order: Optional[int] = None
    ai: Optional[bool] = None

    def to_player(self) -> Player:
        return Player(**self.model_dump())


class TradeIn(BaseModel):
    id: int
    player_id: int
    target_player_id: Optional[int] = None
    status: str = "pending"
    offer_properties: List[int] = Field(default_factory=list)
    offer_amount: int = 0
    requested_properties: List[int] = Field(default_factory=list)
    requested_amount: int = 0

    def to_offer(self) -> TradeOffer:
        return TradeOffer.from_dict(self.model_dump())


# ---- AI ----

class BuyScoreRequest(BaseModel):
    property: PropertyIn
    player: PlayerIn
    ownerships: List[OwnershipIn] = Field(default_factory=list)
    # Defaults to the standard board when omitted
    properties: Optional[List[PropertyIn]] = None


class BuyScoreResponse(BaseModel):
    property_id: int
    score: int


class PurchaseDecisionResponse(BaseModel):
    property_id: int
    score: int
    buy: bool


class TradeResponseRequest(BaseModel):
    trade: TradeIn
    player_id: int
    name: str = "AI"
    properties: Optional[List[PropertyIn]] = None


class TradeResponseResponse(BaseModel):
    trade_id: int
    favorability: int
    decision: str
    remark: str


class OpportunitiesRequest(BaseModel):
    address: str
    ownerships: List[OwnershipIn] = Field(default_factory=list)
    players: List[PlayerIn] = Field(default_factory=list)
    properties: Optional[List[PropertyIn]] = None


class MissingPropertyDTO(BaseModel):
    property_id: int
    name: str
    owner_address: Optional[str] = None
    owner_name: str


class OpportunityDTO(BaseModel):
    group: str
    needs: int
    missing: List[MissingPropertyDTO]


class OpportunitiesResponse(BaseModel):
    monopolies: List[str]
    opportunities: List[OpportunityDTO]


# ---- Events ----

class CardEventsRequest(BaseModel):
    events: List[Dict[str, Any]]
    # Reject the batch on a malformed card_draw instead of skipping it
    strict: bool = False


class CardEventDTO(BaseModel):
    deck: str
    text: str
    amount: int
    player_id: Optional[int] = None
    effect: Optional[str] = None
    is_good: bool


class CardEventsResponse(BaseModel):
    cards: List[CardEventDTO]


# ---- Trade sync ----

class OpenSyncRequest(BaseModel):
    game_id: int
    player_id: int
    players: List[PlayerIn] = Field(default_factory=list)


class SyncStatus(BaseModel):
    game_id: int
    player_id: int
    state: str
    loading: bool
    initiated_trades: List[Dict[str, Any]]
    incoming_trades: List[Dict[str, Any]]
    popup_offer: Optional[Dict[str, Any]] = None
    processed_ids: List[int]


class PropertyActionRequest(BaseModel):
    property_id: int
    user_id: int
    is_my_turn: bool = True


class ActionResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    skipped: bool = False
