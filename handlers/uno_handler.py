import copy
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from deck import Card, WILD, UNO_COLORS, build_uno_deck, shuffle, deal, draw
from errors import IllegalMove
from handlers.base_handler import GameHandler, MoveResult

HAND_SIZE = 7


@dataclass
class UnoState:
    players: List[str]
    deck: List[Card]
    hands: Dict[str, List[Card]]
    discard: List[Card]
    current: int = 0
    direction: int = 1  # 1 clockwise, -1 after a reverse
    active_color: Optional[str] = None
    game_mode: str = "classic"
    winner: Optional[str] = None

    def total_cards(self) -> int:
        return len(self.deck) + sum(len(h) for h in self.hands.values()) + len(self.discard)

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
            "topCard": self.discard[-1].to_dict() if self.discard else None,
            "discardCount": len(self.discard),
            "currentPlayer": self.players[self.current],
            "direction": self.direction,
            "activeColor": self.active_color,
            "gameMode": self.game_mode,
            "winner": self.winner,
        }


class UnoHandler(GameHandler):
    """Uno-like game.

    Only turn order, the reverse direction and card conservation are
    enforced; any card in hand may be played.
    """
    game_type = "uno"
    max_players = 4

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def init_state(self, players, settings=None):
        settings = settings or {}
        deck = shuffle(build_uno_deck(), self.rng)
        hands = deal(deck, players, HAND_SIZE)
        discard = draw(deck)
        return UnoState(
            players=list(players),
            deck=deck,
            hands=hands,
            discard=discard,
            active_color=discard[0].suit if discard[0].suit != WILD else None,
            game_mode=settings.get("gameMode", "classic"),
        )

    def view(self, state, viewer=None):
        return state.to_dict(viewer)

    def reveal(self, state):
        return state.to_dict(reveal=True)

    def apply_move(self, state, move, actor):
        self._check_turn(state, actor)
        action = self._action(move)
        new_state = copy.deepcopy(state)

        if action == "draw":
            self._refill(new_state)
            new_state.hands[actor].extend(draw(new_state.deck))
        elif action == "play":
            hand = new_state.hands[actor]
            index = self._int_field(move, "cardIndex", "index")
            if not 0 <= index < len(hand):
                raise IllegalMove("Invalid card")
            card = hand.pop(index)
            new_state.discard.append(card)
            if card.suit == WILD:
                color = move.get("color")
                if color not in UNO_COLORS:
                    raise IllegalMove("Choose a color for a wild card")
                new_state.active_color = color
            else:
                new_state.active_color = card.suit
            if card.rank == "reverse":
                new_state.direction = -new_state.direction
            if not hand:
                new_state.winner = actor
                return MoveResult(new_state, ended=True, winner=actor)
        else:
            raise IllegalMove(f"Unknown action: {action}")

        new_state.current = (new_state.current + new_state.direction) % len(new_state.players)
        return MoveResult(new_state)

    def _refill(self, state: UnoState):
        """Turn the discard pile (minus its top card) into a fresh deck."""
        if state.deck or len(state.discard) <= 1:
            return
        top = state.discard.pop()
        state.deck = shuffle(state.discard, self.rng)
        state.discard = [top]
