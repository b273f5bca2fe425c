"""
Command line entry point for the Tycoon companion.

    tycoon score state.json --property 39
    tycoon watch --game 12 --player 3
    tycoon serve
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tycoon.core.agents import HeuristicAgent
from tycoon.core.game import OwnershipRecord, Player, PropertyRecord, TradeOffer, standard_properties
from tycoon.services import GameApiClient, TradeSynchronizer
from tycoon.settings import get_server_settings

logger = logging.getLogger(__name__)


def _load_state(path: Path) -> Dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def cmd_score(args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.exists():
        print(f"❌ File does not exist: {args.file}")
        return 1

    try:
        state = _load_state(path)
        properties: List[PropertyRecord] = (
            [PropertyRecord.from_dict(p) for p in state["properties"]]
            if state.get("properties")
            else standard_properties()
        )
        ownerships = [OwnershipRecord.from_dict(o) for o in state.get("ownerships", [])]
        player = Player.from_dict(state["player"])
    except json.JSONDecodeError as e:
        print(f"❌ Invalid JSON in {args.file}: {e}")
        return 1
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"❌ Invalid game state in {args.file}: {e!r}")
        return 1

    prop = next((p for p in properties if p.id == args.property), None)
    if prop is None:
        print(f"❌ Unknown property id: {args.property}")
        return 1

    agent = HeuristicAgent(player.user_id, player.username or f"Player {player.user_id}")
    decision = agent.decide_purchase(prop, player, ownerships, properties)
    verdict = "BUY" if decision.buy else "PASS"
    print(f"🏠 {prop.name or prop.id}: score {decision.score}% -> {verdict}")
    return 0


def _print_offer(offer: TradeOffer) -> None:
    print(f"🤝 {offer!r}")


async def _watch(game_id: int, player_id: int, players: List[Player], interval: Optional[float]) -> None:
    async with GameApiClient() as client:
        sync = TradeSynchronizer(client, poll_interval=interval, on_popup=_print_offer)
        async with sync:
            await sync.set_context(game_id, player_id, players)
            print(f"👀 Watching trades for game {game_id}, player {player_id} (Ctrl+C to stop)")
            while True:
                await asyncio.sleep(3600)


def cmd_watch(args: argparse.Namespace) -> int:
    players: List[Player] = []
    if args.players:
        path = Path(args.players)
        if not path.exists():
            print(f"❌ File does not exist: {args.players}")
            return 1
        players = [Player.from_dict(p) for p in _load_state(path)]

    try:
        asyncio.run(_watch(args.game, args.player, players, args.interval))
    except KeyboardInterrupt:
        print("🛑 Stopped")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_server_settings()
    uvicorn.run(
        "tycoon.server.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tycoon",
        description="AI helpers and trade watcher for Tycoon games",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Score a property purchase from a JSON game state")
    score.add_argument("file", type=str, help="JSON file with player, ownerships and optional properties")
    score.add_argument("--property", type=int, required=True, help="Id of the property landed on")
    score.set_defaults(func=cmd_score)

    watch = sub.add_parser("watch", help="Poll trade offers and print new AI offers")
    watch.add_argument("--game", type=int, required=True, help="Game id")
    watch.add_argument("--player", type=int, required=True, help="Your player id")
    watch.add_argument("--players", type=str, help="JSON file with the game's player list")
    watch.add_argument("--interval", type=float, help="Seconds between polls (default from settings)")
    watch.set_defaults(func=cmd_watch)

    serve = sub.add_parser("serve", help="Run the companion HTTP server")
    serve.add_argument("--host", type=str, help="Bind host (default: SERVER_HOST)")
    serve.add_argument("--port", type=int, help="Bind port (default: SERVER_PORT)")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=get_server_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
