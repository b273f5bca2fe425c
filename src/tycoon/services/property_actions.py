"""
Property mutations (develop, downgrade, mortgage, unmortgage) for one player,
plus the routines AI players run before their turn: raising cash, building,
redeeming mortgages and proposing monopoly-completing trades.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Union

from tycoon.core.agents.planning import complete_monopolies
from tycoon.core.exceptions import ApiError
from tycoon.core.game.board import DEFAULT_BOARD, Board
from tycoon.core.game.player import Player
from tycoon.core.game.property import OwnershipRecord, PropertyRecord
from tycoon.services.api_client import ActionResult, GameApiClient, PropertyAction
from tycoon.services.trade_sync import TradeSynchronizer

logger = logging.getLogger(__name__)

_PAST_TENSE = {
    PropertyAction.DEVELOPMENT: "developed",
    PropertyAction.DOWNGRADE: "downgraded",
    PropertyAction.MORTGAGE: "mortgaged",
    PropertyAction.UNMORTGAGE: "unmortgaged",
}

MAX_DEVELOPMENT = 5  # hotel

BUILD_MIN_BALANCE = 600
REDEEM_MIN_BALANCE = 1000
TRADE_MIN_BALANCE = 300
TRADE_PROPOSAL_CHANCE = 0.6
TRADE_CASH_PERCENT = 70


class PropertyActionService:
    """
    Fire-and-report property actions on behalf of one player.

    Actions are skipped (None is returned) when it is not the player's turn
    or the player has no user id. Every attempted action is followed by a
    forced trade refresh on the attached synchronizer, since the server may
    have resolved trades as a side effect.
    """

    def __init__(
        self,
        client: GameApiClient,
        game_id: int,
        user_id: Optional[int],
        *,
        is_my_turn: Union[bool, Callable[[], bool]] = True,
        synchronizer: Optional[TradeSynchronizer] = None,
    ):
        self.client = client
        self.game_id = game_id
        self.user_id = user_id
        self.synchronizer = synchronizer
        self._is_my_turn = is_my_turn

    def can_act(self) -> bool:
        my_turn = self._is_my_turn() if callable(self._is_my_turn) else self._is_my_turn
        return bool(my_turn) and self.user_id is not None

    async def develop(self, property_id: int) -> Optional[ActionResult]:
        return await self.perform(PropertyAction.DEVELOPMENT, property_id)

    async def downgrade(self, property_id: int) -> Optional[ActionResult]:
        return await self.perform(PropertyAction.DOWNGRADE, property_id)

    async def mortgage(self, property_id: int) -> Optional[ActionResult]:
        return await self.perform(PropertyAction.MORTGAGE, property_id)

    async def unmortgage(self, property_id: int) -> Optional[ActionResult]:
        return await self.perform(PropertyAction.UNMORTGAGE, property_id)

    async def perform(
        self,
        action: PropertyAction,
        property_id: int,
        *,
        refresh: bool = True,
    ) -> Optional[ActionResult]:
        """Run one action; transport errors become a failed ActionResult."""
        action = PropertyAction(action)
        if not self.can_act():
            logger.debug(f"Skipping {action.value} on property {property_id}: not this player's turn")
            return None

        try:
            result = await self.client.property_action(action, self.game_id, self.user_id, property_id)
        except ApiError as e:
            result = ActionResult(success=False, message=str(e))

        if result.success:
            logger.info(f"Property {property_id} {_PAST_TENSE[action]} successfully")
        else:
            logger.warning(f"Failed to {action.value} property {property_id}: "
                           f"{result.message or 'rejected by game API'}")

        if refresh:
            await self._refresh_trades()
        return result

    async def _refresh_trades(self) -> None:
        if self.synchronizer is not None:
            await self.synchronizer.force_refresh()

    # ---- AI cash raising ----

    async def sell_houses(
        self,
        needed: int,
        address: str,
        ownerships: List[OwnershipRecord],
        properties: List[PropertyRecord],
    ) -> int:
        """
        Sell houses, most valuable streets first, until `needed` is raised.

        Each house returns half its build cost. Returns the amount raised.
        """
        props: Dict[int, PropertyRecord] = {p.id: p for p in properties}
        improved = [o for o in ownerships if o.is_owned_by(address) and o.development > 0]
        improved.sort(
            key=lambda o: props[o.property_id].rent_hotel if o.property_id in props else 0,
            reverse=True,
        )

        raised = 0
        sold_any = False
        for record in improved:
            if raised >= needed:
                break
            prop = props.get(record.property_id)
            if prop is None or not prop.cost_of_house:
                continue
            sell_value = prop.cost_of_house // 2
            for _ in range(record.development):
                if raised >= needed:
                    break
                result = await self.perform(PropertyAction.DOWNGRADE, record.property_id, refresh=False)
                if result is None or not result.success:
                    break
                sold_any = True
                raised += sell_value
                logger.info(f"AI sold a house on {prop.name} (raised ${raised})")

        if sold_any:
            await self._refresh_trades()
        return raised

    async def mortgage_properties(
        self,
        needed: int,
        address: str,
        ownerships: List[OwnershipRecord],
        properties: List[PropertyRecord],
    ) -> int:
        """
        Mortgage undeveloped properties, most expensive first, until `needed`
        is raised. Each mortgage returns half the price. Returns the amount raised.
        """
        props: Dict[int, PropertyRecord] = {p.id: p for p in properties}
        candidates = [
            (record, props[record.property_id])
            for record in ownerships
            if record.is_owned_by(address)
            and not record.mortgaged
            and record.development == 0
            and record.property_id in props
            and props[record.property_id].price
        ]
        candidates.sort(key=lambda pair: pair[1].price, reverse=True)

        raised = 0
        mortgaged_any = False
        for record, prop in candidates:
            if raised >= needed:
                break
            result = await self.perform(PropertyAction.MORTGAGE, record.property_id, refresh=False)
            if result is None or not result.success:
                continue
            mortgaged_any = True
            raised += prop.price // 2
            logger.info(f"AI mortgaged {prop.name} (raised ${raised})")

        if mortgaged_any:
            await self._refresh_trades()
        return raised

    # ---- AI pre-turn moves ----

    async def build_house(
        self,
        address: str,
        balance: int,
        ownerships: List[OwnershipRecord],
        properties: List[PropertyRecord],
        board: Optional[Board] = None,
    ) -> Optional[ActionResult]:
        """
        Build one house on a complete monopoly, evenly.

        Picks the least developed street, then the cheapest house. Needs at
        least $600 on hand and enough to pay for the house. Returns None when
        nothing was attempted.
        """
        if balance < BUILD_MIN_BALANCE:
            return None
        board = board or DEFAULT_BOARD
        props: Dict[int, PropertyRecord] = {p.id: p for p in properties}
        owned = {o.property_id: o for o in ownerships if o.is_owned_by(address)}

        candidates = []
        for group in complete_monopolies(address, ownerships, board):
            for pid in board.color_groups[group]:
                record, prop = owned[pid], props.get(pid)
                if prop is None or not prop.cost_of_house or record.development >= MAX_DEVELOPMENT:
                    continue
                candidates.append((record, prop))
        if not candidates:
            return None

        record, prop = min(candidates, key=lambda pair: (pair[0].development, pair[1].cost_of_house))
        if balance < prop.cost_of_house:
            return None

        result = await self.perform(PropertyAction.DEVELOPMENT, prop.id)
        if result is not None and result.success:
            logger.info(f"AI built a house on {prop.name}")
        return result

    async def redeem_mortgage(
        self,
        address: str,
        balance: int,
        ownerships: List[OwnershipRecord],
        properties: List[PropertyRecord],
    ) -> Optional[ActionResult]:
        """
        Unmortgage the highest-rent mortgaged property when cash is plentiful.

        Redemption costs half the price plus 10% interest and needs at least
        $1000 on hand.
        """
        if balance < REDEEM_MIN_BALANCE:
            return None
        props: Dict[int, PropertyRecord] = {p.id: p for p in properties}
        mortgaged = [
            props[o.property_id]
            for o in ownerships
            if o.is_owned_by(address)
            and o.mortgaged
            and o.property_id in props
            and props[o.property_id].rent_site_only
            and props[o.property_id].price
        ]
        if not mortgaged:
            return None

        prop = max(mortgaged, key=lambda p: p.rent_site_only)
        cost = redemption_cost(prop)
        if balance < cost:
            return None

        result = await self.perform(PropertyAction.UNMORTGAGE, prop.id)
        if result is not None and result.success:
            logger.info(f"AI redeemed {prop.name} from mortgage (${cost})")
        return result

    async def propose_monopoly_trade(
        self,
        address: str,
        balance: int,
        target: Player,
        ownerships: List[OwnershipRecord],
        properties: List[PropertyRecord],
        board: Optional[Board] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional[ActionResult]:
        """
        Offer `target` a trade for the last street of a group the AI nearly owns.

        The AI gives its cheapest property outside that group plus 70% of the
        wanted street's price in cash. With `rng`, the AI only tries 60% of
        the time. Returns None when no trade was proposed.
        """
        if not self.can_act() or balance < TRADE_MIN_BALANCE or not target.address:
            return None
        if rng is not None and rng.random() > TRADE_PROPOSAL_CHANCE:
            return None

        board = board or DEFAULT_BOARD
        props: Dict[int, PropertyRecord] = {p.id: p for p in properties}
        mine = {o.property_id for o in ownerships if o.is_owned_by(address)}
        theirs = {o.property_id for o in ownerships if o.is_owned_by(target.address)}

        wanted = group_ids = None
        for ids in board.street_groups().values():
            missing = [pid for pid in ids if pid not in mine]
            if len(missing) == 1 and missing[0] in theirs:
                wanted, group_ids = missing[0], ids
                break
        if wanted is None or not props.get(wanted) or not props[wanted].price:
            return None

        tradeable = sorted(
            (pid for pid in mine if pid not in group_ids and pid in props),
            key=lambda pid: (props[pid].price, pid),
        )
        if not tradeable:
            return None

        offered = tradeable[0]
        cash = props[wanted].price * TRADE_CASH_PERCENT // 100
        try:
            result = await self.client.create_trade(
                self.game_id,
                self.user_id,
                target.user_id,
                offer_properties=[offered],
                offer_amount=cash,
                requested_properties=[wanted],
            )
        except ApiError as e:
            result = ActionResult(success=False, message=str(e))

        if result.success:
            logger.info(f"AI offers {props[offered].name} + ${cash} for {props[wanted].name}")
        else:
            logger.warning(f"AI trade proposal failed: {result.message or 'rejected by game API'}")
        await self._refresh_trades()
        return result


def redemption_cost(prop: PropertyRecord) -> int:
    """Half the price plus 10%, rounded down."""
    return prop.price * 11 // 20
