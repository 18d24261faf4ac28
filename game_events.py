# game_events.py
from extensions import socketio
from errors import MissingData
from state import registry, transport
from utils import guarded, parse_chat_message


@socketio.on("submit-move")
@guarded
def on_submit_move(sid, data):
    """Board-style move: {move: <index or {position}>}."""
    if "move" not in data:
        raise MissingData("move is required")
    registry.apply_move(sid, data["move"], event="game-move")


@socketio.on("game-action")
@guarded
def on_game_action(sid, data):
    """Card-style action: {action, ...payload}, e.g. {action: "play", cardIndex: 2}."""
    if not data.get("action"):
        raise MissingData("action is required")
    registry.apply_move(sid, data, event="game-action")


@socketio.on("send-chat")
@guarded
def on_send_chat(sid, data):
    registry.send_chat(sid, parse_chat_message(data))


@socketio.on("get-state")
@guarded
def on_get_state(sid, data):
    """Called by the client right after (re)loading the game screen."""
    transport.emit("game-state", registry.state_for(sid), to=sid)
