# transport.py
from typing import Any, Optional

NAMESPACE = "/"


class SocketIOTransport:
    """Delivery of core events over Flask-SocketIO.

    Safe to call outside a request context (timers, background tasks) because
    the namespace is always explicit.
    """

    def __init__(self, socketio, namespace: str = NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def emit(self, event: str, data: Any, to: Optional[str] = None):
        """Send to one sid or one channel."""
        try:
            self.socketio.emit(event, data, to=to, namespace=self.namespace)
        except Exception as e:
            print(f"⚠️ Failed to emit {event} to {to}: {e}")

    def broadcast(self, event: str, data: Any):
        """Send to every connected client."""
        try:
            self.socketio.emit(event, data, namespace=self.namespace)
        except Exception as e:
            print(f"⚠️ Failed to broadcast {event}: {e}")

    def join(self, sid: str, channel: str):
        self.socketio.server.enter_room(sid, channel, namespace=self.namespace)

    def leave(self, sid: str, channel: str):
        try:
            self.socketio.server.leave_room(sid, channel, namespace=self.namespace)
        except (KeyError, ValueError):
            # already gone (disconnected sockets are removed from all rooms)
            pass
