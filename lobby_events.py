# lobby_events.py
from extensions import socketio
from errors import GameNotActive, MissingData
from state import registry, matchmaking, transport
from utils import guarded, require, parse_player_data

ROOM_SETTINGS = ("name", "maxPlayers", "isPrivate", "stake", "gameMode")


def parse_settings(data):
    settings = data.get("settings") or {}
    if not isinstance(settings, dict):
        raise MissingData("settings must be an object")
    parsed = {k: settings[k] for k in ROOM_SETTINGS if k in settings}
    if "stake" in parsed:
        parsed["stake"] = parse_stake(parsed["stake"])
    return parsed


def parse_stake(value) -> int:
    """Non-negative whole coin amount; None means no stake."""
    if value is None:
        return 0
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MissingData("stake must be a non-negative whole number")
    return value


@socketio.on("create-room")
@guarded
def on_create_room(sid, data):
    game_type = str(require(data, "gameType")).lower()
    host = parse_player_data(sid, data)
    room = registry.create_room(game_type, sid, host, parse_settings(data))
    transport.emit("room-created", {"room": room.summary()}, to=sid)


@socketio.on("join-room")
@guarded
def on_join_room(sid, data):
    room_id = require(data, "roomId")
    player = parse_player_data(sid, data)
    room = registry.add_participant(room_id, sid, player)
    transport.emit("room-joined", {"room": room.summary()}, to=sid)


@socketio.on("leave-room")
@guarded
def on_leave_room(sid, data):
    # spectators leave the same way players do
    room_id = registry.remove_participant(sid, reason="left") or registry.remove_spectator(sid)
    if room_id is None:
        raise GameNotActive("Not in a room")
    transport.emit("room-left", {"roomId": room_id}, to=sid)


@socketio.on("find-match")
@guarded
def on_find_match(sid, data):
    game_type = str(require(data, "gameType")).lower()
    player = parse_player_data(sid, data)
    position = matchmaking.enqueue(game_type, sid, player)
    transport.emit("matchmaking-joined", {"gameType": game_type, "position": position}, to=sid)

    room = matchmaking.try_match(game_type)
    if room is None:
        return
    for p in room.participants:
        opponent = next(o for o in room.participants if o.sid != p.sid)
        transport.emit("match-found", {
            "room": room.summary(),
            "opponent": opponent.to_dict(),
        }, to=p.sid)


@socketio.on("cancel-matchmaking")
@guarded
def on_cancel_matchmaking(sid, data):
    game_type = matchmaking.dequeue(sid)
    transport.emit("matchmaking-left", {"gameType": game_type}, to=sid)


@socketio.on("get-rooms")
@guarded
def on_get_rooms(sid, data):
    game_type = data.get("gameType")
    rooms = registry.get_public_room_list(str(game_type).lower() if game_type else None)
    transport.emit("rooms-list", {"rooms": rooms}, to=sid)


@socketio.on("spectate-room")
@guarded
def on_spectate_room(sid, data):
    room_id = require(data, "roomId")
    room = registry.add_spectator(room_id, sid)
    transport.emit("spectating", registry.state_for(sid, room), to=sid)
