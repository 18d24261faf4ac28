# general_events.py
import traceback

from flask import request

from extensions import socketio
import state


@socketio.on("connect")
def on_connect(auth=None):
    print("🟢 connect:", request.sid)
    with state.lock:
        state.sessions.connect(request.sid)


@socketio.on("disconnect")
def on_disconnect(reason=None):
    print("🔴 disconnect:", request.sid, f"({reason})" if reason else "")
    handle_disconnect(request.sid)


def handle_disconnect(sid: str):
    """Implicit cancellation of whatever the connection was doing.

    Runs once per connection; repeated disconnect signals are ignored.
    """
    with state.lock:
        if not state.sessions.disconnect(sid):
            return
        try:
            if state.matchmaking.dequeue(sid):
                print(f"👋 [Disconnect] {sid} removed from matchmaking")
            room_id = state.registry.remove_participant(sid, reason="disconnected")
            if room_id:
                print(f"👋 [Disconnect] {sid} removed from room {room_id}")
            state.registry.remove_spectator(sid)
        except Exception as e:
            print(f"❌ Error in on_disconnect for {sid}: {e}")
            traceback.print_exc()
