"""
Tests for trade offer parsing and favorability valuation.
"""

import pytest
from tycoon.core.exceptions import MalformedResponseError
from tycoon.core.game import TradeOffer, calculate_ai_favorability


class TestTradeOfferParsing:
    def test_from_dict(self, trade_data):
        offer = TradeOffer.from_dict(trade_data(42, offer_properties=[1, 3], requested_amount=150))
        assert offer.id == 42
        assert offer.player_id == 7
        assert offer.target_player_id == 1
        assert offer.offer_properties == [1, 3]
        assert offer.requested_amount == 150
        assert offer.is_pending

    def test_unknown_status_kept_verbatim(self, trade_data):
        offer = TradeOffer.from_dict(trade_data(1, status="expired"))
        assert offer.status == "expired"
        assert not offer.is_pending

    def test_extra_fields_passed_through(self, trade_data):
        offer = TradeOffer.from_dict(trade_data(1, created_at="2024-05-01T10:00:00Z"))
        assert offer.to_dict()["created_at"] == "2024-05-01T10:00:00Z"

    def test_missing_id_rejected(self, trade_data):
        data = trade_data(1)
        del data["id"]
        with pytest.raises(MalformedResponseError):
            TradeOffer.from_dict(data)

    def test_non_object_rejected(self):
        with pytest.raises(MalformedResponseError):
            TradeOffer.from_dict(["not", "a", "trade"])


class TestFavorability:
    def _offer(self, **kwargs):
        return TradeOffer(id=1, player_id=1, target_player_id=7, **kwargs)

    def test_values_properties_at_list_price(self, properties):
        # Gets Boardwalk (400), gives Park Place (350)
        offer = self._offer(offer_properties=[39], requested_properties=[37])
        assert calculate_ai_favorability(offer, properties) == 14

    def test_nothing_requested_is_maximal(self, properties):
        assert calculate_ai_favorability(self._offer(offer_amount=10), properties) == 100

    def test_clamped_to_range(self, properties):
        assert calculate_ai_favorability(self._offer(offer_amount=1000, requested_amount=100), properties) == 100
        assert calculate_ai_favorability(self._offer(requested_amount=100), properties) == -100

    def test_rounds_half_up(self, properties):
        assert calculate_ai_favorability(self._offer(offer_amount=201, requested_amount=200), properties) == 1
        assert calculate_ai_favorability(self._offer(offer_amount=199, requested_amount=200), properties) == 0

    def test_unknown_property_ids_are_worthless(self, properties):
        offer = self._offer(offer_properties=[999], requested_amount=100)
        assert calculate_ai_favorability(offer, properties) == -100
