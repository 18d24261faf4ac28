import copy
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from deck import Card, RANKS, build_standard_deck, shuffle, deal, draw
from errors import IllegalMove
from handlers.base_handler import GameHandler, MoveResult
from models import DRAW

HOLE_CARDS = 2
STARTING_CHIPS = 100
STREETS = ["preflop", "flop", "turn", "river"]
STREET_CARDS = {"flop": 3, "turn": 1, "river": 1}

RANK_VALUES = {rank: i for i, rank in enumerate(RANKS[1:], start=2)}
RANK_VALUES['A'] = 14


@dataclass
class PokerState:
    players: List[str]
    deck: List[Card]
    hands: Dict[str, List[Card]]
    chips: Dict[str, int]
    community: List[Card] = field(default_factory=list)
    bets: Dict[str, int] = field(default_factory=dict)  # current street only
    pot: int = 0
    current: int = 0
    dealer: int = 0
    street: str = "preflop"
    folded: List[str] = field(default_factory=list)
    acted: List[str] = field(default_factory=list)
    last_action: Optional[dict] = None
    winner: Optional[str] = None

    def total_cards(self) -> int:
        return len(self.deck) + sum(len(h) for h in self.hands.values()) + len(self.community)

    def active_players(self) -> List[str]:
        return [pid for pid in self.players if pid not in self.folded]

    def to_dict(self, viewer: Optional[str] = None, reveal: bool = False):
        return {
            "players": list(self.players),
            "hands": {
                pid: [c.to_dict() for c in hand] if (reveal or pid == viewer) else len(hand)
                for pid, hand in self.hands.items()
            },
            "communityCards": [c.to_dict() for c in self.community],
            "chips": dict(self.chips),
            "bets": dict(self.bets),
            "currentBet": max(self.bets.values()) if self.bets else 0,
            "pot": self.pot,
            "street": self.street,
            "dealer": self.dealer,
            "folded": list(self.folded),
            "currentPlayer": self.players[self.current],
            "lastAction": self.last_action,
            "winner": self.winner,
        }


def hand_strength(cards: List[Card]):
    """Rank multiplicities only (quads > full house > trips > two pair > pair > high card)."""
    counts = Counter(RANK_VALUES[c.rank] for c in cards)
    groups = sorted(counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)
    shape = [n for _, n in groups]
    if shape[0] >= 4:
        category = 5
    elif shape[0] == 3 and len(shape) > 1 and shape[1] >= 2:
        category = 4
    elif shape[0] == 3:
        category = 3
    elif shape[0] == 2 and len(shape) > 1 and shape[1] == 2:
        category = 2
    elif shape[0] == 2:
        category = 1
    else:
        category = 0
    return (category, [value for value, _ in groups][:5])


class PokerHandler(GameHandler):
    """Poker-like betting skeleton over one hand of hold'em dealing."""
    game_type = "poker"
    max_players = 6

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def init_state(self, players, settings=None):
        deck = shuffle(build_standard_deck(), self.rng)
        hands = deal(deck, players, HOLE_CARDS)
        return PokerState(
            players=list(players),
            deck=deck,
            hands=hands,
            chips={pid: STARTING_CHIPS for pid in players},
            bets={pid: 0 for pid in players},
        )

    def view(self, state, viewer=None):
        return state.to_dict(viewer)

    def reveal(self, state):
        return state.to_dict(reveal=True)

    def apply_move(self, state, move, actor):
        self._check_turn(state, actor)
        action = self._action(move)
        s = copy.deepcopy(state)
        to_call = max(s.bets.values()) - s.bets[actor]

        if action == "fold":
            s.folded.append(actor)
            s.last_action = {"player": actor, "action": "fold", "amount": 0}
            active = s.active_players()
            if len(active) == 1:
                return self._award(s, active)
        elif action == "check":
            if to_call > 0:
                raise IllegalMove("Cannot check, there is a bet to call")
            s.last_action = {"player": actor, "action": "check", "amount": 0}
        elif action == "call":
            self._put_in(s, actor, min(to_call, s.chips[actor]))
            s.last_action = {"player": actor, "action": "call", "amount": to_call}
        elif action in ("bet", "raise"):
            amount = self._int_field(move, "amount")
            if amount <= 0:
                raise IllegalMove("Bet must be positive")
            total = to_call + amount
            if total > s.chips[actor]:
                raise IllegalMove("Not enough chips")
            self._put_in(s, actor, total)
            # a raise reopens the action for everyone else
            s.acted = []
            s.last_action = {"player": actor, "action": action, "amount": total}
        else:
            raise IllegalMove(f"Unknown action: {action}")

        if actor not in s.acted:
            s.acted.append(actor)

        if self._round_closed(s):
            if s.street == STREETS[-1]:
                return self._showdown(s)
            self._next_street(s)
        else:
            self._advance(s)
        return MoveResult(s)

    @staticmethod
    def _put_in(s: PokerState, pid: str, amount: int):
        s.chips[pid] -= amount
        s.bets[pid] += amount
        s.pot += amount

    @staticmethod
    def _round_closed(s: PokerState) -> bool:
        active = s.active_players()
        if any(pid not in s.acted for pid in active):
            return False
        top = max(s.bets[pid] for pid in active)
        # all-in players cannot match
        return all(s.bets[pid] == top or s.chips[pid] == 0 for pid in active)

    def _advance(self, s: PokerState):
        n = len(s.players)
        for step in range(1, n + 1):
            idx = (s.current + step) % n
            if s.players[idx] not in s.folded:
                s.current = idx
                return

    def _next_street(self, s: PokerState):
        s.street = STREETS[STREETS.index(s.street) + 1]
        s.community.extend(draw(s.deck, STREET_CARDS[s.street]))
        s.bets = {pid: 0 for pid in s.players}
        s.acted = []
        s.current = s.dealer
        if s.players[s.current] in s.folded:
            self._advance(s)

    def _showdown(self, s: PokerState) -> MoveResult:
        scores = {pid: hand_strength(s.hands[pid] + s.community) for pid in s.active_players()}
        best = max(scores.values())
        return self._award(s, [pid for pid, score in scores.items() if score == best])

    @staticmethod
    def _award(s: PokerState, winners: List[str]) -> MoveResult:
        share, remainder = divmod(s.pot, len(winners))
        for pid in winners:
            s.chips[pid] += share
        s.chips[winners[0]] += remainder
        s.pot = 0
        s.winner = winners[0] if len(winners) == 1 else DRAW
        return MoveResult(s, ended=True, winner=s.winner)
