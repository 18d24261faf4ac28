# models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Dict, Any, Set

RoomStatus = Literal["waiting", "playing", "finished"]

WAITING: RoomStatus = "waiting"
PLAYING: RoomStatus = "playing"
FINISHED: RoomStatus = "finished"

# Non-participant outcomes of a finished game
DRAW = "draw"
ABANDONED = "abandoned"


@dataclass
class Participant:
    sid: str
    user_id: str
    username: str
    avatar: str = "👤"
    coins: int = 1000
    ready: bool = False
    joined_at: float = 0.0

    def to_dict(self):
        return {
            "id": self.sid,
            "userId": self.user_id,
            "username": self.username,
            "avatar": self.avatar,
            "coins": self.coins,
            "ready": self.ready,
        }


@dataclass
class ChatMessage:
    player_id: str
    username: str
    message: str
    timestamp: float

    def to_dict(self):
        return {
            "playerId": self.player_id,
            "username": self.username,
            "message": self.message,
            "timestamp": self.timestamp,
        }


@dataclass
class Room:
    room_id: str
    game_type: str
    max_players: int
    created_at: float
    settings: Dict[str, Any] = field(default_factory=dict)
    participants: List[Participant] = field(default_factory=list)
    status: RoomStatus = WAITING
    game_state: Optional[Any] = None  # handler-owned, replaced on every move
    spectators: Set[str] = field(default_factory=set)
    chat: List[ChatMessage] = field(default_factory=list)
    winner: Optional[str] = None
    end_reason: Optional[str] = None
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    cleanup_task: Optional[Any] = None

    @property
    def channel(self) -> str:
        return f"room:{self.room_id}"

    @property
    def name(self) -> str:
        return self.settings.get("name") or f"{self.game_type}_{self.room_id}"

    @property
    def is_private(self) -> bool:
        return bool(self.settings.get("isPrivate"))

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= self.max_players

    def find_participant(self, sid: str) -> Optional[Participant]:
        for p in self.participants:
            if p.sid == sid:
                return p
        return None

    def has_user(self, user_id: str) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def summary(self) -> Dict[str, Any]:
        """Client-facing room data. Never includes the game state."""
        return {
            "id": self.room_id,
            "name": self.name,
            "gameType": self.game_type,
            "players": [p.to_dict() for p in self.participants],
            "maxPlayers": self.max_players,
            "status": self.status,
            "isPrivate": self.is_private,
            "spectatorCount": len(self.spectators),
            "settings": self.settings,
            "createdAt": self.created_at,
            "winner": self.winner,
        }
