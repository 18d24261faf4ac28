# room_registry.py
import time
import traceback
import uuid
from typing import Any, Callable, Dict, List, Optional

from errors import RoomNotFound, RoomFull, AlreadyInRoom, GameNotActive
from handlers import HANDLERS, get_handler
from models import (
    Room, Participant, ChatMessage,
    WAITING, PLAYING, FINISHED, ABANDONED,
)
from payouts import CoinLedger
from sessions import SessionTracker

CLEANUP_DELAY_SEC = 30.0
CHAT_HISTORY_LIMIT = 100


def new_room_id() -> str:
    return str(uuid.uuid4())[:8]


class RoomRegistry:
    """Owns every room record and its waiting -> playing -> finished lifecycle.

    Callers get Room objects back for reading; all changes go through the
    methods below. Not thread-safe on its own: callers hold the core lock.
    """

    def __init__(
        self,
        transport,
        sessions: SessionTracker,
        scheduler,
        handlers=None,
        ledger: CoinLedger = None,
        id_factory: Callable[[], str] = new_room_id,
        clock: Callable[[], float] = time.time,
        cleanup_delay: float = CLEANUP_DELAY_SEC,
        chat_history_limit: int = CHAT_HISTORY_LIMIT,
    ):
        self.transport = transport
        self.sessions = sessions
        self.scheduler = scheduler
        self.handlers = HANDLERS if handlers is None else handlers
        self.ledger = ledger or CoinLedger()
        self.id_factory = id_factory
        self.clock = clock
        self.cleanup_delay = cleanup_delay
        self.chat_history_limit = chat_history_limit
        self._rooms: Dict[str, Room] = {}

    # --- lookup ---

    def get_room(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound()
        return room

    def room_of(self, sid: str) -> Optional[Room]:
        room_id = self.sessions.room_of(sid)
        return self._rooms.get(room_id) if room_id else None

    def get_public_room_list(self, game_type: str = None) -> List[Dict[str, Any]]:
        return [
            room.summary()
            for room in self._rooms.values()
            if room.status == WAITING
            and not room.is_private
            and (game_type is None or room.game_type == game_type)
        ]

    def stats(self) -> Dict[str, int]:
        return {
            "rooms": len(self._rooms),
            "playing": sum(1 for r in self._rooms.values() if r.status == PLAYING),
            "participants": sum(len(r.participants) for r in self._rooms.values()),
            "spectators": sum(len(r.spectators) for r in self._rooms.values()),
        }

    # --- lifecycle ---

    def create_room(self, game_type: str, host_sid: str = None, host: Participant = None,
                    settings: Dict[str, Any] = None) -> Room:
        handler = get_handler(game_type, self.handlers)
        settings = dict(settings or {})
        if host_sid:
            self.sessions.ensure_idle(host_sid)

        room_id = self.id_factory()
        while room_id in self._rooms:
            room_id = self.id_factory()

        room = Room(
            room_id=room_id,
            game_type=game_type,
            max_players=handler.clamp_players(settings.get("maxPlayers")),
            created_at=self.clock(),
            settings=settings,
        )
        self._rooms[room_id] = room
        print(f"🏗️ [Room] Created {room_id} ({game_type}, max {room.max_players}, private={room.is_private})")

        if host_sid and host:
            self.add_participant(room_id, host_sid, host)
        else:
            self._publish_room_list(room)
        return room

    def add_participant(self, room_id: str, sid: str, participant: Participant) -> Room:
        room = self.get_room(room_id)
        if room.status != WAITING or room.is_full:
            raise RoomFull()
        if room.has_user(participant.user_id):
            raise AlreadyInRoom("Already in this room")

        self.sessions.bind_room(sid, room_id)
        self.remove_spectator(sid)
        participant.sid = sid
        participant.joined_at = self.clock()
        room.participants.append(participant)
        self.transport.join(sid, room.channel)
        print(f"👤 [Room] {participant.username} joined {room_id} ({len(room.participants)}/{room.max_players})")

        self.transport.emit("room-updated", {"room": room.summary()}, to=room.channel)

        if room.is_full:
            self.start_game(room)
        self._publish_room_list(room)
        return room

    def remove_participant(self, sid: str, reason: str = "left") -> Optional[str]:
        room_id = self.sessions.room_of(sid)
        if room_id is None:
            return None
        room = self._rooms.get(room_id)
        if room is None:
            self.sessions.release(sid)
            return None

        participant = room.find_participant(sid)
        if room.status == PLAYING:
            self.end_game(room, ABANDONED, reason="participant_departed", departed=participant)

        if participant:
            room.participants.remove(participant)
        self.sessions.release(sid)
        self.transport.leave(sid, room.channel)
        print(f"<- [Room] {participant.username if participant else sid} {reason} {room_id}")

        if not room.participants:
            self._destroy(room)
            return room_id

        event = "player-disconnected" if reason == "disconnected" else "player-left"
        self.transport.emit(event, {"player": participant.to_dict() if participant else {"id": sid}},
                            to=room.channel)
        self.transport.emit("room-updated", {"room": room.summary()}, to=room.channel)
        self._publish_room_list(room)
        return room_id

    def start_game(self, room: Room):
        if room.status != WAITING:
            return
        handler = get_handler(room.game_type, self.handlers)
        room.game_state = handler.init_state([p.sid for p in room.participants], room.settings)
        room.status = PLAYING
        room.started_at = self.clock()
        print(f"🎮 [Room] Game started in {room.room_id} ({room.game_type})")

        self._emit_state(room, "game-started", {
            "roomId": room.room_id,
            "gameType": room.game_type,
            "players": [p.to_dict() for p in room.participants],
        })

    def apply_move(self, sid: str, move: Any, event: str = "game-move"):
        room = self.room_of(sid)
        if room is None:
            raise GameNotActive("Not in a room")
        if room.status != PLAYING:
            raise GameNotActive()

        handler = get_handler(room.game_type, self.handlers)
        result = handler.apply_move(room.game_state, move, sid)
        room.game_state = result.state

        self._emit_state(room, event, {"playerId": sid, "move": move})
        if result.ended:
            self.end_game(room, result.winner, reason="completed")
        return result

    def end_game(self, room: Room, winner: str, reason: str = "completed",
                 departed: Participant = None):
        if room.status != PLAYING:
            return
        room.status = FINISHED
        room.winner = winner
        room.end_reason = reason
        room.ended_at = self.clock()
        print(f"🏆 [Room] Game over in {room.room_id}: winner={winner} ({reason})")

        # settlement failures never block game-ended or the cleanup timer
        try:
            payouts = self.ledger.settle(room, departed)
        except Exception as e:
            print(f"❌ [Payout] Settlement failed for {room.room_id}: {e}")
            traceback.print_exc()
            payouts = []

        handler = get_handler(room.game_type, self.handlers)
        self.transport.emit("game-ended", {
            "roomId": room.room_id,
            "winner": winner,
            "reason": reason,
            "gameState": handler.reveal(room.game_state),
            "duration": room.ended_at - (room.started_at or room.ended_at),
            "payouts": payouts,
        }, to=room.channel)

        room.cleanup_task = self.scheduler.schedule(self.cleanup_delay, self._cleanup, room.room_id)

    # --- spectators and chat ---

    def add_spectator(self, room_id: str, sid: str) -> Room:
        room = self.get_room(room_id)
        # players watch their own game through their private view only
        if room.find_participant(sid) or self.sessions.room_of(sid):
            raise AlreadyInRoom()
        self.remove_spectator(sid)
        room.spectators.add(sid)
        self.transport.join(sid, room.channel)
        self.transport.emit("spectator-joined", {
            "sid": sid, "spectatorCount": len(room.spectators),
        }, to=room.channel)
        return room

    def remove_spectator(self, sid: str) -> Optional[str]:
        """Stop watching; returns the room id that was being watched, if any."""
        for room in self._rooms.values():
            if sid in room.spectators:
                room.spectators.discard(sid)
                self.transport.leave(sid, room.channel)
                self.transport.emit("spectator-left", {
                    "sid": sid, "spectatorCount": len(room.spectators),
                }, to=room.channel)
                return room.room_id
        return None

    def send_chat(self, sid: str, message: str) -> ChatMessage:
        room = self.room_of(sid)
        if room is None:
            raise GameNotActive("Not in a room")
        participant = room.find_participant(sid)
        chat = ChatMessage(
            player_id=sid,
            username=participant.username if participant else sid,
            message=message,
            timestamp=self.clock(),
        )
        room.chat.append(chat)
        del room.chat[:-self.chat_history_limit]
        self.transport.emit("chat-message", chat.to_dict(), to=room.channel)
        return chat

    def state_for(self, sid: str, room: Room = None) -> Dict[str, Any]:
        room = room or self.room_of(sid)
        if room is None:
            raise GameNotActive("Not in a room")
        game_state = None
        if room.game_state is not None:
            handler = get_handler(room.game_type, self.handlers)
            viewer = sid if room.find_participant(sid) else None
            game_state = handler.view(room.game_state, viewer)
        return {"room": room.summary(), "gameState": game_state}

    # --- internals ---

    def _emit_state(self, room: Room, event: str, payload: Dict[str, Any]):
        """Per-viewer delivery so hidden hands stay hidden."""
        handler = get_handler(room.game_type, self.handlers)
        for p in room.participants:
            self.transport.emit(event, {**payload, "gameState": handler.view(room.game_state, p.sid)},
                                to=p.sid)
        for sid in room.spectators:
            self.transport.emit(event, {**payload, "gameState": handler.view(room.game_state, None)},
                                to=sid)

    def _publish_room_list(self, room: Room):
        if room.is_private:
            return
        self.transport.broadcast("rooms-list-update", {"rooms": self.get_public_room_list()})

    def _destroy(self, room: Room):
        if room.cleanup_task is not None:
            room.cleanup_task.cancel()
            room.cleanup_task = None
        for sid in list(room.spectators):
            self.transport.leave(sid, room.channel)
        self._rooms.pop(room.room_id, None)
        print(f"🗑️ [Room] {room.room_id} deleted")
        self._publish_room_list(room)

    def _cleanup(self, room_id: str):
        room = self._rooms.get(room_id)
        if room is None:
            return
        room.cleanup_task = None
        self.transport.emit("room-closed", {"roomId": room_id}, to=room.channel)
        for p in room.participants:
            if self.sessions.room_of(p.sid) == room_id:
                self.sessions.release(p.sid)
            self.transport.leave(p.sid, room.channel)
        self._destroy(room)

    def clear(self):
        for room in list(self._rooms.values()):
            if room.cleanup_task is not None:
                room.cleanup_task.cancel()
        self._rooms.clear()
