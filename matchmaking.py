# matchmaking.py
from collections import deque
from typing import Deque, Dict, Optional, Tuple

from errors import AlreadyQueued
from handlers import get_handler
from models import Participant, Room
from room_registry import RoomRegistry

PAIR_SIZE = 2


class MatchmakingQueue:
    """Per game type FIFO of waiting players. The first two are paired."""

    def __init__(self, registry: RoomRegistry):
        self.registry = registry
        self.sessions = registry.sessions
        self._queues: Dict[str, Deque[Tuple[str, Participant]]] = {}

    def queue_size(self, game_type: str) -> int:
        return len(self._queues.get(game_type, ()))

    def enqueue(self, game_type: str, sid: str, participant: Participant) -> int:
        get_handler(game_type, self.registry.handlers)
        self.sessions.ensure_idle(sid)
        queue = self._queues.setdefault(game_type, deque())
        # same account from a second tab would be paired with itself
        if any(p.user_id == participant.user_id for _, p in queue):
            raise AlreadyQueued()

        participant.sid = sid
        queue.append((sid, participant))
        self.sessions.bind_queue(sid, game_type)
        print(f"-> [Match] {game_type} queue join: {participant.username} ({sid}), {len(queue)} waiting")
        return len(queue)

    def dequeue(self, sid: str) -> Optional[str]:
        game_type = self.sessions.queue_of(sid)
        if game_type is None:
            return None
        queue = self._queues.get(game_type)
        if queue:
            self._queues[game_type] = deque(e for e in queue if e[0] != sid)
        self.sessions.release(sid)
        print(f"<- [Match] {game_type} queue leave: {sid}")
        return game_type

    def try_match(self, game_type: str) -> Optional[Room]:
        queue = self._queues.get(game_type)
        if not queue or len(queue) < PAIR_SIZE:
            return None

        pair = [queue.popleft() for _ in range(PAIR_SIZE)]
        for sid, _ in pair:
            self.sessions.release(sid)

        room = self.registry.create_room(game_type, settings={
            "isPrivate": True,
            "maxPlayers": PAIR_SIZE,
        })
        for sid, participant in pair:
            self.registry.add_participant(room.room_id, sid, participant)

        print(f"🎉 [Match] {game_type} room {room.room_id}: {', '.join(p.username for _, p in pair)}")
        return room

    def clear(self):
        for queue in self._queues.values():
            for sid, _ in queue:
                self.sessions.release(sid)
        self._queues.clear()
