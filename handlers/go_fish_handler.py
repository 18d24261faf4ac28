import copy
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from deck import Card, RANKS, build_standard_deck, shuffle, deal, draw
from errors import IllegalMove
from handlers.base_handler import GameHandler, MoveResult
from models import DRAW

HAND_SIZE = 7
BOOK_SIZE = 4


@dataclass
class GoFishState:
    players: List[str]
    deck: List[Card]
    hands: Dict[str, List[Card]]
    books: Dict[str, List[str]]  # completed ranks per player
    book_pile: List[Card] = field(default_factory=list)
    current: int = 0
    last_action: Optional[dict] = None
    winner: Optional[str] = None

    def total_cards(self) -> int:
        return len(self.deck) + sum(len(h) for h in self.hands.values()) + len(self.book_pile)

    def to_dict(self, viewer: Optional[str] = None, reveal: bool = False):
        hands = {}
        for pid, hand in self.hands.items():
            if reveal or pid == viewer:
                hands[pid] = [c.to_dict() for c in hand]
            else:
                hands[pid] = len(hand)
        return {
            "players": list(self.players),
            "hands": hands,
            "deckCount": len(self.deck),
            "books": {pid: list(ranks) for pid, ranks in self.books.items()},
            "currentPlayer": self.players[self.current],
            "lastAction": self.last_action,
            "winner": self.winner,
        }


def lay_books(state: GoFishState, pid: str) -> List[str]:
    """Move every complete set of four from a hand to the book pile."""
    hand = state.hands[pid]
    counts = Counter(c.rank for c in hand)
    completed = [rank for rank, n in counts.items() if n >= BOOK_SIZE]
    for rank in completed:
        state.book_pile.extend(c for c in hand if c.rank == rank)
        state.hands[pid] = hand = [c for c in hand if c.rank != rank]
        state.books[pid].append(rank)
    return completed


class GoFishHandler(GameHandler):
    game_type = "go-fish"
    max_players = 4

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def init_state(self, players, settings=None):
        deck = shuffle(build_standard_deck(), self.rng)
        hands = deal(deck, players, HAND_SIZE)
        state = GoFishState(
            players=list(players),
            deck=deck,
            hands=hands,
            books={pid: [] for pid in players},
        )
        for pid in players:
            lay_books(state, pid)
        return state

    def view(self, state, viewer=None):
        return state.to_dict(viewer)

    def reveal(self, state):
        return state.to_dict(reveal=True)

    def apply_move(self, state, move, actor):
        self._check_turn(state, actor)
        action = self._action(move)
        new_state = copy.deepcopy(state)
        hand = new_state.hands[actor]
        keep_turn = False

        if action == "ask":
            target = move.get("target")
            rank = str(move.get("rank", ""))
            if target == actor or target not in new_state.hands:
                raise IllegalMove("Invalid target")
            if rank not in RANKS or not any(c.rank == rank for c in hand):
                raise IllegalMove("You must hold the rank you ask for")

            taken = [c for c in new_state.hands[target] if c.rank == rank]
            if taken:
                new_state.hands[target] = [c for c in new_state.hands[target] if c.rank != rank]
                hand.extend(taken)
                keep_turn = True
            else:
                hand.extend(draw(new_state.deck))
            new_state.last_action = {
                "player": actor, "target": target, "rank": rank, "received": len(taken),
            }
        elif action == "draw":
            if hand:
                raise IllegalMove("You can only draw with an empty hand")
            hand.extend(draw(new_state.deck))
            new_state.last_action = {"player": actor, "action": "draw"}
        else:
            raise IllegalMove(f"Unknown action: {action}")

        lay_books(new_state, actor)

        if sum(len(b) for b in new_state.books.values()) == len(RANKS):
            new_state.winner = self._most_books(new_state)
            return MoveResult(new_state, ended=True, winner=new_state.winner)

        if not keep_turn:
            new_state.current = (new_state.current + 1) % len(new_state.players)
        return MoveResult(new_state)

    @staticmethod
    def _most_books(state: GoFishState) -> str:
        best = max(len(b) for b in state.books.values())
        leaders = [pid for pid, b in state.books.items() if len(b) == best]
        return leaders[0] if len(leaders) == 1 else DRAW
