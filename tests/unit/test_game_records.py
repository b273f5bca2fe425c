"""
Tests for board tables, players and ownership records.
"""

from tycoon.core.game import DEFAULT_BOARD, Board, OwnershipRecord, Player, PropertyRecord


class TestBoard:
    def test_find_group(self):
        assert DEFAULT_BOARD.find_group(39) == ("darkblue", [37, 39])
        assert DEFAULT_BOARD.find_group(5) == ("railroad", [5, 15, 25, 35])
        assert DEFAULT_BOARD.find_group(30) is None

    def test_landing_rank_default(self):
        assert DEFAULT_BOARD.landing_rank(5) == 1
        assert DEFAULT_BOARD.landing_rank(39) == 22
        assert DEFAULT_BOARD.landing_rank(40) == 25

    def test_street_groups_exclude_railroads_and_utilities(self):
        groups = DEFAULT_BOARD.street_groups()
        assert "railroad" not in groups
        assert "utility" not in groups
        assert len(groups) == 8

    def test_build_rank(self):
        assert DEFAULT_BOARD.build_rank("orange") == 0
        assert DEFAULT_BOARD.build_rank("darkblue") == 7
        assert DEFAULT_BOARD.build_rank("purple") == 8

    def test_custom_board_is_independent(self):
        board = Board(color_groups={"test": [1, 2]}, landing_ranks={}, default_rank=10)
        assert board.find_group(1) == ("test", [1, 2])
        assert board.landing_rank(5) == 10
        assert DEFAULT_BOARD.find_group(1) == ("brown", [1, 3])

    def test_standard_properties_match_groups(self, properties):
        grouped = {pid for ids in DEFAULT_BOARD.color_groups.values() for pid in ids}
        assert {p.id for p in properties} == grouped


class TestPlayer:
    def test_ai_detected_from_username(self):
        assert Player(user_id=1, username="AI_3").is_ai
        assert Player(user_id=1, username="RoboBot").is_ai
        assert Player(user_id=1, username="Computer 2").is_ai
        assert not Player(user_id=1, username="alice").is_ai

    def test_explicit_flag_wins(self):
        assert not Player(user_id=1, username="AI_3", ai=False).is_ai
        assert Player(user_id=1, username="alice", ai=True).is_ai

    def test_ai_slot(self):
        assert Player(user_id=1, username="AI_3").ai_slot == 3
        assert Player(user_id=1, username="AI_12").ai_slot == 8
        assert Player(user_id=1, username="bot", turn_order=1).ai_slot == 2
        assert Player(user_id=1, username="alice", turn_order=4).ai_slot is None

    def test_from_dict(self):
        player = Player.from_dict({"user_id": "4", "address": "0xabc", "balance": 900, "is_ai": True})
        assert player.user_id == 4
        assert player.balance == 900
        assert player.is_ai


class TestRecords:
    def test_ownership_compares_addresses_case_insensitively(self):
        record = OwnershipRecord(property_id=1, address="0xAbC")
        assert record.is_owned_by("0xabc")
        assert not record.is_owned_by(None)
        assert not OwnershipRecord(property_id=1).is_owned_by("0xabc")

    def test_property_from_dict(self):
        prop = PropertyRecord.from_dict({"id": 39, "name": "Boardwalk", "type": "property", "price": 400,
                                         "rent_site_only": 50, "color": "darkblue"})
        assert prop.is_street
        assert prop.price == 400
        assert prop.cost_of_house == 0
