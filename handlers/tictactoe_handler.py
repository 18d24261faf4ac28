import copy
from dataclasses import dataclass, field
from typing import List, Optional

from errors import IllegalMove
from handlers.base_handler import GameHandler, MoveResult
from models import DRAW

SYMBOLS = ["X", "O"]

LINES = [
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),  # diagonals
]


@dataclass
class TicTacToeState:
    players: List[str]
    board: List[Optional[str]] = field(default_factory=lambda: [None] * 9)
    current: int = 0
    winner: Optional[str] = None
    winning_line: List[int] = field(default_factory=list)

    def to_dict(self):
        return {
            "board": list(self.board),
            "players": list(self.players),
            "symbols": {pid: SYMBOLS[i] for i, pid in enumerate(self.players)},
            "currentPlayer": self.players[self.current],
            "winner": self.winner,
            "winningLine": list(self.winning_line),
        }


def check_winner(board):
    """Return (symbol, line) for a completed line, or (None, [])."""
    for a, b, c in LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return board[a], [a, b, c]
    return None, []


class TicTacToeHandler(GameHandler):
    game_type = "tic-tac-toe"

    def init_state(self, players, settings=None):
        return TicTacToeState(players=list(players))

    def apply_move(self, state, move, actor):
        self._check_turn(state, actor)
        position = self._position(move)
        if state.board[position] is not None:
            raise IllegalMove("Position already taken")

        new_state = copy.deepcopy(state)
        symbol = SYMBOLS[new_state.current]
        new_state.board[position] = symbol

        winner_symbol, line = check_winner(new_state.board)
        if winner_symbol is not None:
            new_state.winner = new_state.players[SYMBOLS.index(winner_symbol)]
            new_state.winning_line = line
            return MoveResult(new_state, ended=True, winner=new_state.winner)

        if all(cell is not None for cell in new_state.board):
            new_state.winner = DRAW
            return MoveResult(new_state, ended=True, winner=DRAW)

        new_state.current = (new_state.current + 1) % len(new_state.players)
        return MoveResult(new_state)

    @staticmethod
    def _position(move) -> int:
        if isinstance(move, dict):
            move = move.get("position", move.get("index"))
        # whole numbers only, never truncated floats
        if isinstance(move, str) and move.strip().isdecimal():
            move = int(move)
        if isinstance(move, bool) or not isinstance(move, int):
            raise IllegalMove("Invalid position")
        if not 0 <= move < 9:
            raise IllegalMove("Invalid position")
        return move
