# utils.py
import functools
import traceback
from typing import Any, Dict

from flask import request

from config import Config
from errors import GameError, MissingData
from models import Participant
import state

GENERIC_ERROR = "Failed to process action"


def guarded(fn):
    """Run a socket handler as fn(sid, data) under the core lock.

    Game errors go back to the sender as `error {message, code}`; anything
    else is logged and reported without internals.
    """
    @functools.wraps(fn)
    def wrapper(*args):
        sid = request.sid
        data = args[0] if args else {}
        try:
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise MissingData("Payload must be an object")
            with state.lock:
                return fn(sid, data)
        except GameError as e:
            print(f"⚠️ [{fn.__name__}] {sid}: {e.message}")
            state.transport.emit("error", e.to_dict(), to=sid)
        except Exception as e:
            print(f"❌ Error in {fn.__name__} for {sid}: {e}")
            traceback.print_exc()
            state.transport.emit("error", {"message": GENERIC_ERROR}, to=sid)
    return wrapper


def require(data: Dict[str, Any], key: str):
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingData(f"{key} is required")
    return value


def parse_player_data(sid: str, data: Dict[str, Any]) -> Participant:
    player = data.get("playerData")
    if not isinstance(player, dict):
        raise MissingData("playerData is required")
    user_id = player.get("userId")
    if not user_id:
        raise MissingData("playerData.userId is required")

    try:
        coins = int(player.get("coins", 1000))
    except (TypeError, ValueError):
        coins = 1000

    return Participant(
        sid=sid,
        user_id=str(user_id),
        username=player.get("username") or f"Player_{sid[:4]}",
        avatar=player.get("avatar") or "👤",
        coins=coins,
    )


def parse_chat_message(data: Dict[str, Any]) -> str:
    message = data.get("message")
    if not isinstance(message, str) or not message.strip():
        raise MissingData("message is required")
    return message.strip()[:Config.CHAT_MESSAGE_MAX_LEN]
