"""
Authoritative static board tables: color groups, landing ranks, build
priority, and the standard 40-square property list.
"""

from typing import Dict, List, Optional, Tuple

from tycoon.core.game.property import PropertyRecord, PropertyType

# Lower rank == landed on more often by opponents.
LANDING_RANK: Dict[int, int] = {
    5: 1, 6: 2, 7: 3, 8: 4, 9: 5, 11: 6, 13: 7, 14: 8, 16: 9, 18: 10,
    19: 11, 21: 12, 23: 13, 24: 14, 26: 15, 27: 16, 29: 17, 31: 18, 32: 19, 34: 20,
    37: 21, 39: 22,
    1: 30, 2: 25, 3: 29, 4: 35, 12: 32, 17: 28, 22: 26, 28: 33, 33: 27, 36: 24, 38: 23,
}
DEFAULT_LANDING_RANK = 25

COLOR_GROUPS: Dict[str, List[int]] = {
    "brown": [1, 3],
    "lightblue": [6, 8, 9],
    "pink": [11, 13, 14],
    "orange": [16, 18, 19],
    "red": [21, 23, 24],
    "yellow": [26, 27, 29],
    "green": [31, 32, 34],
    "darkblue": [37, 39],
    "railroad": [5, 15, 25, 35],
    "utility": [12, 28],
}

# Groups that are not streets and never take part in monopoly building
NON_STREET_GROUPS = ("railroad", "utility")

# Order in which AI players develop complete groups
BUILD_PRIORITY: List[str] = [
    "orange",
    "red",
    "yellow",
    "pink",
    "lightblue",
    "green",
    "brown",
    "darkblue",
]


class Board:
    """
    Lookup tables for one board layout.

    The default instance uses the standard tables above; tests and
    alternative boards can inject their own.
    """

    def __init__(
        self,
        color_groups: Optional[Dict[str, List[int]]] = None,
        landing_ranks: Optional[Dict[int, int]] = None,
        default_rank: int = DEFAULT_LANDING_RANK,
        build_priority: Optional[List[str]] = None,
    ):
        self.color_groups: Dict[str, List[int]] = dict(color_groups if color_groups is not None else COLOR_GROUPS)
        self.landing_ranks: Dict[int, int] = dict(landing_ranks if landing_ranks is not None else LANDING_RANK)
        self.default_rank = default_rank
        self.build_priority: List[str] = list(build_priority if build_priority is not None else BUILD_PRIORITY)
        self._group_of: Dict[int, str] = {}
        for name, ids in self.color_groups.items():
            for pid in ids:
                # First table entry wins if a square is listed twice
                self._group_of.setdefault(pid, name)

    def find_group(self, property_id: int) -> Optional[Tuple[str, List[int]]]:
        """Return (group name, member ids) for a property, or None."""
        name = self._group_of.get(property_id)
        if name is None:
            return None
        return name, self.color_groups[name]

    def landing_rank(self, property_id: int) -> int:
        return self.landing_ranks.get(property_id, self.default_rank)

    def street_groups(self) -> Dict[str, List[int]]:
        """Color groups that can form a monopoly and be built on."""
        return {
            name: ids for name, ids in self.color_groups.items()
            if name not in NON_STREET_GROUPS
        }

    def build_rank(self, group: str) -> int:
        """Position of a group in the build priority; unknown groups sort last."""
        try:
            return self.build_priority.index(group)
        except ValueError:
            return len(self.build_priority)


DEFAULT_BOARD = Board()


def _street(pid: int, name: str, price: int, rent: int, color: str, house: int, hotel: int) -> PropertyRecord:
    return PropertyRecord(pid, name, PropertyType.PROPERTY.value, price, rent, color, house, hotel)


def _railroad(pid: int, name: str) -> PropertyRecord:
    return PropertyRecord(pid, name, PropertyType.RAILROAD.value, 200, 25, "railroad")


def _utility(pid: int, name: str) -> PropertyRecord:
    return PropertyRecord(pid, name, PropertyType.UTILITY.value, 150, 0, "utility")


def standard_properties() -> List[PropertyRecord]:
    """The purchasable squares of the standard board, keyed by board position."""
    return [
        _street(1, "Mediterranean Avenue", 60, 2, "brown", 50, 250),
        _street(3, "Baltic Avenue", 60, 4, "brown", 50, 450),
        _railroad(5, "Reading Railroad"),
        _street(6, "Oriental Avenue", 100, 6, "lightblue", 50, 550),
        _street(8, "Vermont Avenue", 100, 6, "lightblue", 50, 550),
        _street(9, "Connecticut Avenue", 120, 8, "lightblue", 50, 600),
        _street(11, "St. Charles Place", 140, 10, "pink", 100, 750),
        _utility(12, "Electric Company"),
        _street(13, "States Avenue", 140, 10, "pink", 100, 750),
        _street(14, "Virginia Avenue", 160, 12, "pink", 100, 900),
        _railroad(15, "Pennsylvania Railroad"),
        _street(16, "St. James Place", 180, 14, "orange", 100, 950),
        _street(18, "Tennessee Avenue", 180, 14, "orange", 100, 950),
        _street(19, "New York Avenue", 200, 16, "orange", 100, 1000),
        _street(21, "Kentucky Avenue", 220, 18, "red", 150, 1050),
        _street(23, "Indiana Avenue", 220, 18, "red", 150, 1050),
        _street(24, "Illinois Avenue", 240, 20, "red", 150, 1100),
        _railroad(25, "B. & O. Railroad"),
        _street(26, "Atlantic Avenue", 260, 22, "yellow", 150, 1150),
        _street(27, "Ventnor Avenue", 260, 22, "yellow", 150, 1150),
        _utility(28, "Water Works"),
        _street(29, "Marvin Gardens", 280, 24, "yellow", 150, 1200),
        _street(31, "Pacific Avenue", 300, 26, "green", 200, 1275),
        _street(32, "North Carolina Avenue", 300, 26, "green", 200, 1275),
        _street(34, "Pennsylvania Avenue", 320, 28, "green", 200, 1400),
        _railroad(35, "Short Line"),
        _street(37, "Park Place", 350, 35, "darkblue", 200, 1500),
        _street(39, "Boardwalk", 400, 50, "darkblue", 200, 2000),
    ]
