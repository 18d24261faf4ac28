# state.py
import threading

from config import Config
from extensions import socketio
from matchmaking import MatchmakingQueue
from room_registry import RoomRegistry
from scheduler import TimerScheduler
from sessions import SessionTracker
from transport import SocketIOTransport

# Every event handler and scheduled callback runs while holding this lock,
# so room/queue reads and writes never interleave across socket threads.
lock = threading.RLock()

transport = SocketIOTransport(socketio)
sessions = SessionTracker()
registry = RoomRegistry(
    transport,
    sessions,
    TimerScheduler(lock),
    cleanup_delay=Config.CLEANUP_DELAY_SEC,
    chat_history_limit=Config.CHAT_HISTORY_LIMIT,
)
matchmaking = MatchmakingQueue(registry)


def reset():
    """Drop all rooms, queues and connections (tests, admin tooling)."""
    with lock:
        matchmaking.clear()
        registry.clear()
        sessions.clear()
