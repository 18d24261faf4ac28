import random
from typing import Dict

from errors import MissingData
from handlers.base_handler import GameHandler, MoveResult
from handlers.tictactoe_handler import TicTacToeHandler
from handlers.uno_handler import UnoHandler
from handlers.go_fish_handler import GoFishHandler
from handlers.poker_handler import PokerHandler


def build_handlers(rng: random.Random = None) -> Dict[str, GameHandler]:
    """One handler per supported game type, keyed by its tag."""
    rng = rng or random.SystemRandom()
    handlers = [
        TicTacToeHandler(),
        UnoHandler(rng),
        GoFishHandler(rng),
        PokerHandler(rng),
    ]
    return {h.game_type: h for h in handlers}


HANDLERS = build_handlers()


def get_handler(game_type: str, handlers: Dict[str, GameHandler] = None) -> GameHandler:
    handlers = HANDLERS if handlers is None else handlers
    handler = handlers.get(game_type)
    if handler is None:
        raise MissingData(f"Unknown game type: {game_type}")
    return handler
