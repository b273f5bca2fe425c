"""
Property purchase desirability heuristic.

The score drives automated buy/pass decisions. It is a pure function of its
inputs: no randomness, no hidden state, and no mutation of the arguments.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

from tycoon.core.game.board import DEFAULT_BOARD, Board
from tycoon.core.game.player import Player
from tycoon.core.game.property import OwnershipRecord, PropertyRecord

BASELINE_SCORE = 50
MIN_SCORE = 5
MAX_SCORE = 98

RISKY_CASH_PENALTY = 70
RICH_CASH_BONUS = 20
COMFORTABLE_CASH_BONUS = 10

COMPLETES_GROUP_BONUS = 90
PARTIAL_GROUP_BONUS = 35

LANDING_RANK_PIVOT = 30

HIGH_ROI_BONUS = 25
MEDIUM_ROI_BONUS = 12

BLOCK_OPPONENT_BONUS = 30
SMALL_GROUP_SIZE = 3


def _owners_by_property(ownerships: Iterable[OwnershipRecord]) -> Dict[int, OwnershipRecord]:
    """First ownership record per property id."""
    owners: Dict[int, OwnershipRecord] = {}
    for record in ownerships:
        owners.setdefault(record.property_id, record)
    return owners


def _affordability_adjustment(cash: int, price: int) -> int:
    # Integer cross-multiplication keeps the band edges exact:
    # cash < 1.3 * price  <=>  10 * cash < 13 * price
    if cash * 10 < price * 13:
        return -RISKY_CASH_PENALTY
    if cash > price * 3:
        return RICH_CASH_BONUS
    if cash > price * 2:
        return COMFORTABLE_CASH_BONUS
    return 0


def _roi_adjustment(base_rent: int, price: int) -> int:
    # base_rent / price > 0.12  <=>  100 * base_rent > 12 * price
    if base_rent * 100 > price * 12:
        return HIGH_ROI_BONUS
    if base_rent * 100 > price * 8:
        return MEDIUM_ROI_BONUS
    return 0


def _group_adjustments(
    group: Sequence[int],
    address: Optional[str],
    owners: Dict[int, OwnershipRecord],
) -> int:
    score = 0

    owned = sum(1 for pid in group if pid in owners and owners[pid].is_owned_by(address))
    if owned == len(group) - 1:
        score += COMPLETES_GROUP_BONUS
    elif owned >= 1:
        score += PARTIAL_GROUP_BONUS

    opponent_owns = any(
        pid in owners and owners[pid].address and not owners[pid].is_owned_by(address)
        for pid in group
    )
    if opponent_owns and len(group) <= SMALL_GROUP_SIZE:
        score += BLOCK_OPPONENT_BONUS

    return score


def calculate_buy_score(
    prop: Union[PropertyRecord, int],
    player: Player,
    ownerships: List[OwnershipRecord],
    properties: List[PropertyRecord],
    board: Optional[Board] = None,
) -> int:
    """
    Score how desirable buying a property is for a player.

    Args:
        prop: The property the player landed on, or its id.
        player: The deciding player (cash balance and wallet address are used).
        ownerships: All ownership records of the game.
        properties: The full static property list, used to resolve `prop`
            when only an id is given.
        board: Board tables to use (standard board by default).

    Returns:
        0 for squares that are not purchasable streets, otherwise an integer
        desirability in [5, 98].
    """
    if not isinstance(prop, PropertyRecord):
        prop = next((p for p in properties if p.id == prop), None)
        if prop is None:
            return 0
    if not prop.price or not prop.is_street:
        return 0

    board = board or DEFAULT_BOARD
    price = prop.price
    base_rent = prop.rent_site_only or 0
    cash = player.balance or 0

    score = BASELINE_SCORE
    score += _affordability_adjustment(cash, price)

    found = board.find_group(prop.id)
    if found is not None:
        _, group = found
        score += _group_adjustments(group, player.address, _owners_by_property(ownerships))

    score += LANDING_RANK_PIVOT - board.landing_rank(prop.id)
    score += _roi_adjustment(base_rent, price)

    return max(MIN_SCORE, min(MAX_SCORE, int(score)))
