"""
Monopoly planning helpers for AI players: which groups are complete and
which are within one or two purchases of completion.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tycoon.core.game.board import DEFAULT_BOARD, Board
from tycoon.core.game.player import Player
from tycoon.core.game.property import OwnershipRecord, PropertyRecord


@dataclass(frozen=True)
class MissingProperty:
    """A group member the planning player does not own yet."""

    property_id: int
    name: str
    owner_address: Optional[str]
    owner_name: str  # "Bank" when unowned


@dataclass(frozen=True)
class Opportunity:
    """A color group the player is close to completing."""

    group: str
    needs: int
    missing: List[MissingProperty] = field(default_factory=list)


def _owned_by(address: str, ownerships: List[OwnershipRecord]) -> Dict[int, OwnershipRecord]:
    return {o.property_id: o for o in ownerships if o.is_owned_by(address)}


def complete_monopolies(
    address: Optional[str],
    ownerships: List[OwnershipRecord],
    board: Optional[Board] = None,
) -> List[str]:
    """
    Street groups fully owned by `address` with nothing mortgaged,
    ordered by build priority.
    """
    if not address:
        return []
    board = board or DEFAULT_BOARD
    owned = _owned_by(address, ownerships)

    monopolies = []
    for group, ids in board.street_groups().items():
        records = [owned[pid] for pid in ids if pid in owned]
        if len(records) == len(ids) and not any(r.mortgaged for r in records):
            monopolies.append(group)
    return sorted(monopolies, key=board.build_rank)


def near_complete_opportunities(
    address: Optional[str],
    ownerships: List[OwnershipRecord],
    properties: List[PropertyRecord],
    players: List[Player],
    board: Optional[Board] = None,
) -> List[Opportunity]:
    """
    Street groups where `address` is missing one or two members.

    Sorted by fewest missing first, then by build priority.
    """
    if not address:
        return []
    board = board or DEFAULT_BOARD
    owned = _owned_by(address, ownerships)
    names = {p.id: p.name for p in properties}
    holders: Dict[int, OwnershipRecord] = {}
    for record in ownerships:
        holders.setdefault(record.property_id, record)

    opportunities = []
    for group, ids in board.street_groups().items():
        needs = len(ids) - sum(1 for pid in ids if pid in owned)
        if needs not in (1, 2):
            continue
        missing = []
        for pid in ids:
            if pid in owned:
                continue
            holder = holders.get(pid)
            owner_address = holder.address if holder else None
            missing.append(MissingProperty(
                property_id=pid,
                name=names.get(pid, f"#{pid}"),
                owner_address=owner_address,
                owner_name=_owner_name(owner_address, players),
            ))
        opportunities.append(Opportunity(group=group, needs=needs, missing=missing))

    return sorted(opportunities, key=lambda o: (o.needs, board.build_rank(o.group)))


def _owner_name(address: Optional[str], players: List[Player]) -> str:
    if not address:
        return "Bank"
    for player in players:
        if player.address and player.address.lower() == address.lower():
            return player.username or address[:8]
    return address[:8]
