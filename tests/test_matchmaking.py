import pytest

from errors import AlreadyInRoom, AlreadyQueued, MissingData
from models import PLAYING


def test_enqueue_reports_position(matchmaking, sessions, player):
    assert matchmaking.enqueue("tic-tac-toe", "a", player("alice")) == 1
    assert matchmaking.enqueue("tic-tac-toe", "b", player("bob")) == 2
    assert matchmaking.enqueue("uno", "c", player("carol")) == 1
    assert matchmaking.queue_size("tic-tac-toe") == 2
    assert sessions.queue_of("a") == "tic-tac-toe"


def test_unknown_game_type(matchmaking, sessions, player):
    with pytest.raises(MissingData):
        matchmaking.enqueue("chess", "a", player("alice"))
    assert sessions.membership("a") is None


def test_cannot_queue_twice(matchmaking, player):
    matchmaking.enqueue("tic-tac-toe", "a", player("alice"))
    with pytest.raises(AlreadyQueued):
        matchmaking.enqueue("uno", "a", player("alice"))
    # same account on a second connection
    with pytest.raises(AlreadyQueued):
        matchmaking.enqueue("tic-tac-toe", "a2", player("alice"))
    assert matchmaking.queue_size("tic-tac-toe") == 1


def test_cannot_queue_from_a_room(matchmaking, registry, player):
    registry.create_room("uno", "a", player("alice"))
    with pytest.raises(AlreadyInRoom):
        matchmaking.enqueue("uno", "a", player("alice"))


def test_single_player_is_not_matched(matchmaking, player):
    matchmaking.enqueue("tic-tac-toe", "a", player("alice"))
    assert matchmaking.try_match("tic-tac-toe") is None
    assert matchmaking.try_match("uno") is None
    assert matchmaking.queue_size("tic-tac-toe") == 1


def test_match_creates_playing_room(matchmaking, sessions, transport, player):
    matchmaking.enqueue("tic-tac-toe", "a", player("alice"))
    matchmaking.enqueue("tic-tac-toe", "b", player("bob"))
    room = matchmaking.try_match("tic-tac-toe")

    assert room.status == PLAYING
    assert room.is_private
    assert [p.sid for p in room.participants] == ["a", "b"]
    state = room.game_state.to_dict()
    assert state["board"] == [None] * 9
    assert state["currentPlayer"] == "a"
    assert matchmaking.queue_size("tic-tac-toe") == 0
    assert sessions.room_of("a") == room.room_id
    assert sessions.room_of("b") == room.room_id
    # private rooms never show up in the lobby
    assert not any(e == "rooms-list-update" for e, _ in transport.broadcasts)


def test_pairs_are_fifo(matchmaking, player):
    for sid in ["a", "b", "c"]:
        matchmaking.enqueue("uno", sid, player(sid))
    room = matchmaking.try_match("uno")
    assert [p.sid for p in room.participants] == ["a", "b"]
    assert room.max_players == 2
    assert matchmaking.queue_size("uno") == 1

    matchmaking.enqueue("uno", "d", player("d"))
    room = matchmaking.try_match("uno")
    assert [p.sid for p in room.participants] == ["c", "d"]


def test_dequeue(matchmaking, sessions, player):
    matchmaking.enqueue("go-fish", "a", player("alice"))
    matchmaking.enqueue("go-fish", "b", player("bob"))
    assert matchmaking.dequeue("a") == "go-fish"
    assert matchmaking.dequeue("a") is None
    assert sessions.membership("a") is None
    assert matchmaking.queue_size("go-fish") == 1

    matchmaking.enqueue("go-fish", "c", player("carol"))
    room = matchmaking.try_match("go-fish")
    assert [p.sid for p in room.participants] == ["b", "c"]


def test_dequeued_player_can_join_a_room(matchmaking, registry, player):
    matchmaking.enqueue("uno", "a", player("alice"))
    matchmaking.dequeue("a")
    room = registry.create_room("uno", "a", player("alice"))
    assert room.participants[0].sid == "a"


def test_clear_releases_everyone(matchmaking, sessions, player):
    matchmaking.enqueue("uno", "a", player("alice"))
    matchmaking.clear()
    assert matchmaking.queue_size("uno") == 0
    assert sessions.membership("a") is None
