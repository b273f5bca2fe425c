"""
Tests for the property purchase desirability score.
"""

import dataclasses

import pytest
from tycoon.core.agents import calculate_buy_score
from tycoon.core.game import Board, OwnershipRecord, Player, PropertyRecord


def _player(balance, address="0xme"):
    return Player(user_id=1, address=address, balance=balance, username="alice")


def _street(pid=101, price=200, rent=0):
    return PropertyRecord(id=pid, name=f"Test {pid}", type="property", price=price, rent_site_only=rent)


class TestNonPurchasable:
    def test_railroad_scores_zero(self, props_by_id, me, properties):
        """Railroads are not scored by this heuristic."""
        assert calculate_buy_score(props_by_id[5], me, [], properties) == 0

    def test_utility_scores_zero(self, props_by_id, me, properties):
        assert calculate_buy_score(props_by_id[12], me, [], properties) == 0

    def test_missing_price_scores_zero(self, me, properties):
        prop = PropertyRecord(id=4, name="Income Tax", type="property", price=0)
        assert calculate_buy_score(prop, me, [], properties) == 0


class TestBaseline:
    def test_neutral_street_scores_baseline(self, props_by_id, properties):
        """
        Mediterranean with modest cash: no cash band, no group, rank 30, low ROI.
        """
        player = _player(100)
        assert calculate_buy_score(props_by_id[1], player, [], properties) == 50

    def test_result_is_clamped_to_upper_bound(self, props_by_id, properties, own):
        """Completing Boardwalk/Park Place with lots of cash saturates at 98."""
        player = _player(2000)
        ownerships = [own(37, "0xme")]
        assert calculate_buy_score(props_by_id[39], player, ownerships, properties) == 98

    def test_result_is_clamped_to_lower_bound(self, properties):
        board = Board(color_groups={}, landing_ranks={101: 60})
        player = _player(10)
        assert calculate_buy_score(_street(), player, [], properties, board=board) == 5

    def test_score_always_in_range(self, properties, own):
        ownerships = [own(3, "0xother"), own(8, "0xme"), own(37, "0xme")]
        for balance in (0, 50, 100, 500, 1500, 5000):
            player = _player(balance)
            for prop in properties:
                score = calculate_buy_score(prop, player, ownerships, properties)
                assert score == 0 or 5 <= score <= 98


class TestCashBands:
    @pytest.fixture
    def board(self):
        # Rank 0 gives +30 so neither edge of the band is clamped
        return Board(color_groups={}, landing_ranks={101: 0})

    def test_cash_at_130_percent_is_not_risky(self, board, properties):
        assert calculate_buy_score(_street(), _player(260), [], properties, board=board) == 80

    def test_cash_just_below_130_percent_is_risky(self, board, properties):
        assert calculate_buy_score(_street(), _player(259), [], properties, board=board) == 10

    def test_comfortable_cash_bonus(self, board, properties):
        assert calculate_buy_score(_street(), _player(401), [], properties, board=board) == 90

    def test_rich_cash_bonus(self, board, properties):
        assert calculate_buy_score(_street(), _player(601), [], properties, board=board) == 98


class TestGroups:
    def test_partial_group_example(self, properties, own):
        """
        Group of three with one owned, unmapped rank, 10% ROI:
        50 + 35 + 5 + 12 = 102, clamped to 98.
        """
        board = Board(color_groups={"test": [101, 102, 103]}, landing_ranks={})
        prop = _street(101, price=200, rent=20)
        ownerships = [own(102, "0xme")]
        assert calculate_buy_score(prop, _player(300), ownerships, properties, board=board) == 98

    def test_partial_group_bonus(self, properties, own):
        board = Board(color_groups={"test": [101, 102, 103]}, landing_ranks={})
        ownerships = [own(102, "0xme")]
        # 50 - 70 + 35 + 5
        assert calculate_buy_score(_street(), _player(250), ownerships, properties, board=board) == 20

    def test_completing_group_bonus(self, properties, own):
        board = Board(color_groups={"test": [101, 102]}, landing_ranks={})
        ownerships = [own(102, "0xme")]
        # 50 - 70 + 90 + 5
        assert calculate_buy_score(_street(), _player(250), ownerships, properties, board=board) == 75

    def test_addresses_compare_case_insensitively(self, properties, own):
        board = Board(color_groups={"test": [101, 102]}, landing_ranks={})
        ownerships = [own(102, "0xABCDEF")]
        player = _player(250, address="0xabcdef")
        assert calculate_buy_score(_street(), player, ownerships, properties, board=board) == 75

    def test_blocking_opponent_in_small_group(self, props_by_id, properties, own):
        """Baltic with a rival holding Mediterranean: 50 + 10 + 30 + 1."""
        player = _player(150)
        assert calculate_buy_score(props_by_id[3], player, [], properties) == 61
        ownerships = [own(1, "0xrival")]
        assert calculate_buy_score(props_by_id[3], player, ownerships, properties) == 91

    def test_no_block_bonus_in_large_group(self, properties, own):
        board = Board(color_groups={"big": [101, 102, 103, 104]}, landing_ranks={})
        ownerships = [own(102, "0xrival")]
        # 50 + 10 + 5, no block bonus for a group of four
        assert calculate_buy_score(_street(), _player(600), ownerships, properties, board=board) == 65

    def test_unowned_record_is_not_an_opponent(self, properties):
        board = Board(color_groups={"test": [101, 102]}, landing_ranks={})
        ownerships = [OwnershipRecord(property_id=102, address=None)]
        assert calculate_buy_score(_street(), _player(600), ownerships, properties, board=board) == 65

    def test_first_ownership_record_wins(self, properties, own):
        board = Board(color_groups={"test": [101, 102]}, landing_ranks={})
        ownerships = [own(102, "0xrival"), own(102, "0xme")]
        # Treated as held by the rival: 50 + 10 + 30 + 5
        assert calculate_buy_score(_street(), _player(600), ownerships, properties, board=board) == 95


class TestRoi:
    @pytest.fixture
    def board(self):
        return Board(color_groups={}, landing_ranks={})

    def test_high_roi(self, board, properties):
        prop = _street(price=100, rent=13)
        # 50 + 5 + 25
        assert calculate_buy_score(prop, _player(200), [], properties, board=board) == 80

    def test_roi_at_twelve_percent_is_medium(self, board, properties):
        prop = _street(price=100, rent=12)
        assert calculate_buy_score(prop, _player(200), [], properties, board=board) == 67

    def test_roi_at_eight_percent_gets_nothing(self, board, properties):
        prop = _street(price=100, rent=8)
        assert calculate_buy_score(prop, _player(200), [], properties, board=board) == 55


class TestPurity:
    def test_deterministic(self, props_by_id, me, properties, own):
        ownerships = [own(16, me.address), own(19, "0xrival")]
        first = calculate_buy_score(props_by_id[18], me, ownerships, properties)
        second = calculate_buy_score(props_by_id[18], me, ownerships, properties)
        assert first == second

    def test_inputs_not_mutated(self, props_by_id, me, properties, own):
        ownerships = [own(16, me.address), own(19, "0xrival")]
        snapshot = [dataclasses.replace(o) for o in ownerships]
        props_before = list(properties)
        calculate_buy_score(props_by_id[18], me, ownerships, properties)
        assert ownerships == snapshot
        assert properties == props_before


class TestMonopolyCompletion:
    @pytest.mark.parametrize("pid, owned", [(9, [6, 8]), (19, [16, 18])])
    def test_owning_two_of_three_beats_owning_none(self, props_by_id, properties, own, pid, owned):
        """
        Risky cash keeps both sides below the 98 clamp:
        Connecticut scores 95 vs 5, New York 89 vs 5.
        """
        player = _player(150)
        with_two = calculate_buy_score(props_by_id[pid], player, [own(o, "0xme") for o in owned], properties)
        with_none = calculate_buy_score(props_by_id[pid], player, [], properties)
        assert with_two > with_none
        assert with_two < 98


class TestPropertyLookup:
    def test_scores_by_property_id(self, properties):
        assert calculate_buy_score(1, _player(100), [], properties) == 50

    def test_unknown_property_id_scores_zero(self, properties):
        assert calculate_buy_score(999, _player(100), [], properties) == 0
