# deck.py
import random
from dataclasses import dataclass
from typing import List, Sequence, Dict

RANKS = ['A', '2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K']
SUITS = ['♠', '♥', '♦', '♣']

UNO_COLORS = ['red', 'yellow', 'green', 'blue']
UNO_ACTIONS = ['skip', 'reverse', '+2']
WILD = 'wild'

STANDARD_DECK_SIZE = 52
UNO_DECK_SIZE = 108


@dataclass(frozen=True)
class Card:
    # For uno cards `suit` is the color and `rank` the face value
    suit: str
    rank: str

    def to_dict(self):
        return {"suit": self.suit, "rank": self.rank}


def build_standard_deck() -> List[Card]:
    return [Card(suit, rank) for rank in RANKS for suit in SUITS]


def build_uno_deck() -> List[Card]:
    deck: List[Card] = []
    for color in UNO_COLORS:
        deck.append(Card(color, '0'))  # one zero per color
        for v in range(1, 10):
            deck.append(Card(color, str(v)))
            deck.append(Card(color, str(v)))
        for special in UNO_ACTIONS:
            deck.append(Card(color, special))
            deck.append(Card(color, special))
    for _ in range(4):
        deck.append(Card(WILD, WILD))
        deck.append(Card(WILD, '+4'))
    return deck


def shuffle(cards: Sequence[Card], rng: random.Random = None) -> List[Card]:
    """Fisher-Yates shuffle into a new list."""
    rng = rng or random
    tmp = list(cards)
    for i in range(len(tmp) - 1, 0, -1):
        j = rng.randint(0, i)
        tmp[i], tmp[j] = tmp[j], tmp[i]
    return tmp


def deal(deck: List[Card], players: Sequence[str], hand_size: int) -> Dict[str, List[Card]]:
    """Deal `hand_size` cards to each player from the front of the deck (in place)."""
    if hand_size * len(players) > len(deck):
        raise ValueError(f"Cannot deal {hand_size} cards to {len(players)} players from {len(deck)}")
    hands = {}
    for pid in players:
        hands[pid] = deck[:hand_size]
        del deck[:hand_size]
    return hands


def draw(deck: List[Card], count: int = 1) -> List[Card]:
    """Take up to `count` cards from the front of the deck (in place)."""
    taken = deck[:count]
    del deck[:count]
    return taken
