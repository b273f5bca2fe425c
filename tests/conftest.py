"""Shared test fixtures for the Tycoon companion tests."""

import pytest
from tycoon.core.game import OwnershipRecord, Player, standard_properties

ME = "0xMeMeMeMe000000000000000000000000000001"
AI = "0xA1A1A1A1000000000000000000000000000002"
RIVAL = "0xB0B0B0B0000000000000000000000000000003"


@pytest.fixture
def properties():
    """Purchasable squares of the standard board."""
    return standard_properties()


@pytest.fixture
def props_by_id(properties):
    """Standard properties keyed by id."""
    return {p.id: p for p in properties}


@pytest.fixture
def me():
    """Human player with a comfortable balance."""
    return Player(user_id=1, address=ME, balance=1500, username="alice", turn_order=1)


@pytest.fixture
def ai_player():
    """AI player recognised by its username."""
    return Player(user_id=7, address=AI, balance=1500, username="AI_2", turn_order=2)


@pytest.fixture
def rival():
    """Second human player."""
    return Player(user_id=9, address=RIVAL, balance=1500, username="bob", turn_order=3)


@pytest.fixture
def players(me, ai_player, rival):
    """All three players of a game."""
    return [me, ai_player, rival]


@pytest.fixture
def own():
    """Factory for ownership records."""
    def _own(property_id, address, development=0, mortgaged=False):
        return OwnershipRecord(
            property_id=property_id,
            address=address,
            development=development,
            mortgaged=mortgaged,
        )
    return _own


@pytest.fixture
def trade_data():
    """Factory for trade service JSON objects."""
    def _trade(trade_id, player_id=7, target_player_id=1, status="pending", **extra):
        data = {
            "id": trade_id,
            "player_id": player_id,
            "target_player_id": target_player_id,
            "status": status,
            "offer_properties": [],
            "offer_amount": 0,
            "requested_properties": [],
            "requested_amount": 0,
        }
        data.update(extra)
        return data
    return _trade
