"""
Property reference data and per-game ownership records.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class PropertyType(str, Enum):
    """Kinds of purchasable squares reported by the game API."""

    PROPERTY = "property"
    RAILROAD = "railroad"
    UTILITY = "utility"


@dataclass(frozen=True)
class PropertyRecord:
    """Static description of a board square."""

    id: int
    name: str = ""
    type: str = PropertyType.PROPERTY.value
    price: int = 0
    rent_site_only: int = 0
    color: Optional[str] = None
    cost_of_house: int = 0
    rent_hotel: int = 0

    @property
    def is_street(self) -> bool:
        """True for colored streets (not railroads, utilities or other squares)."""
        return self.type == PropertyType.PROPERTY.value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyRecord":
        return cls(
            id=int(data["id"]),
            name=data.get("name") or "",
            type=data.get("type") or "",
            price=int(data.get("price") or 0),
            rent_site_only=int(data.get("rent_site_only") or 0),
            color=data.get("color"),
            cost_of_house=int(data.get("cost_of_house") or 0),
            rent_hotel=int(data.get("rent_hotel") or 0),
        )


@dataclass(frozen=True)
class OwnershipRecord:
    """Links a property to the wallet address of its owner in one game."""

    property_id: int
    address: Optional[str] = None
    player_id: Optional[int] = None
    development: int = 0  # 5 == hotel
    mortgaged: bool = False

    def is_owned_by(self, address: Optional[str]) -> bool:
        """Wallet addresses compare case-insensitively."""
        if not address or not self.address:
            return False
        return self.address.lower() == address.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OwnershipRecord":
        player_id = data.get("player_id")
        return cls(
            property_id=int(data["property_id"]),
            address=data.get("address"),
            player_id=int(player_id) if player_id is not None else None,
            development=int(data.get("development") or 0),
            mortgaged=bool(data.get("mortgaged", False)),
        )
