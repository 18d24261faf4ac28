# errors.py
# Recoverable game errors. They are raised by the core and reported to the
# originating connection as an `error` event (see utils.guarded).


class GameError(Exception):
    code = "GAME_ERROR"
    default_message = "Game error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"message": self.message, "code": self.code}


class RoomNotFound(GameError):
    code = "ROOM_NOT_FOUND"
    default_message = "Room not found"


class RoomFull(GameError):
    code = "ROOM_FULL"
    default_message = "Room is full"


class AlreadyInRoom(GameError):
    code = "ALREADY_IN_ROOM"
    default_message = "Already in a room"


class AlreadyQueued(GameError):
    code = "ALREADY_QUEUED"
    default_message = "Already waiting for a match"


class NotYourTurn(GameError):
    code = "NOT_YOUR_TURN"
    default_message = "Not your turn"


class IllegalMove(GameError):
    code = "ILLEGAL_MOVE"
    default_message = "Illegal move"


class GameNotActive(GameError):
    code = "GAME_NOT_ACTIVE"
    default_message = "Game not active"


class MissingData(GameError):
    code = "MISSING_DATA"
    default_message = "Missing data"
