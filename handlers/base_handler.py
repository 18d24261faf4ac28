from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from errors import NotYourTurn, GameNotActive, IllegalMove


@dataclass
class MoveResult:
    state: Any
    ended: bool = False
    winner: Optional[str] = None  # participant sid, "draw", or None while ongoing


class GameHandler(ABC):
    """One game type: how a match starts, how moves change it, when it ends.

    Handlers never mutate a state in place. `apply_move` works on a copy and
    returns it; the room registry decides what to keep.
    """
    game_type: str = ""
    min_players: int = 2
    default_players: int = 2
    max_players: int = 2

    @abstractmethod
    def init_state(self, players: List[str], settings: Dict[str, Any] = None):
        pass

    @abstractmethod
    def apply_move(self, state, move, actor: str) -> MoveResult:
        pass

    def is_terminal(self, state) -> bool:
        return state.winner is not None

    def view(self, state, viewer: Optional[str] = None) -> Dict[str, Any]:
        """State as seen by `viewer` (None = spectator)."""
        return state.to_dict()

    def reveal(self, state) -> Dict[str, Any]:
        """Everything, for the end-of-game screen."""
        return state.to_dict()

    def clamp_players(self, requested) -> int:
        try:
            n = int(requested) if requested is not None else self.default_players
        except (TypeError, ValueError):
            n = self.default_players
        return max(self.min_players, min(self.max_players, n))

    # --- shared turn helpers ---

    def _check_turn(self, state, actor: str):
        if self.is_terminal(state):
            raise GameNotActive("Game is over")
        if state.players[state.current] != actor:
            raise NotYourTurn()

    @staticmethod
    def _action(move) -> str:
        if not isinstance(move, dict) or not move.get("action"):
            raise IllegalMove("Missing action")
        return str(move["action"]).lower()

    @staticmethod
    def _int_field(move, *keys) -> int:
        for key in keys:
            value = move.get(key) if isinstance(move, dict) else None
            if value is not None:
                try:
                    return int(value)
                except (TypeError, ValueError):
                    raise IllegalMove(f"Invalid {key}")
        raise IllegalMove(f"Missing {keys[0]}")
