# sessions.py
from dataclasses import dataclass
from typing import Dict, Optional, Set, Literal

from errors import AlreadyInRoom, AlreadyQueued

MembershipKind = Literal["room", "queue"]


@dataclass(frozen=True)
class Membership:
    kind: MembershipKind
    target: str  # room id or game type


class SessionTracker:
    """Which room or queue each live connection currently occupies.

    A sid is idle, in exactly one room, or in exactly one queue.
    """

    def __init__(self):
        self._live: Set[str] = set()
        self._index: Dict[str, Membership] = {}

    def connect(self, sid: str):
        self._live.add(sid)

    def disconnect(self, sid: str) -> bool:
        """Mark a connection gone.

        False if it was already disconnected (or never seen), so the cleanup
        cascade runs once per connection.
        """
        if sid not in self._live:
            return False
        self._live.discard(sid)
        return True

    def is_connected(self, sid: str) -> bool:
        return sid in self._live

    def connection_count(self) -> int:
        return len(self._live)

    def membership(self, sid: str) -> Optional[Membership]:
        return self._index.get(sid)

    def room_of(self, sid: str) -> Optional[str]:
        m = self._index.get(sid)
        return m.target if m and m.kind == "room" else None

    def queue_of(self, sid: str) -> Optional[str]:
        m = self._index.get(sid)
        return m.target if m and m.kind == "queue" else None

    def ensure_idle(self, sid: str):
        m = self._index.get(sid)
        if m is None:
            return
        if m.kind == "room":
            raise AlreadyInRoom()
        raise AlreadyQueued()

    def bind_room(self, sid: str, room_id: str):
        self.ensure_idle(sid)
        self._index[sid] = Membership("room", room_id)

    def bind_queue(self, sid: str, game_type: str):
        self.ensure_idle(sid)
        self._index[sid] = Membership("queue", game_type)

    def release(self, sid: str):
        self._index.pop(sid, None)

    def clear(self):
        self._live.clear()
        self._index.clear()

