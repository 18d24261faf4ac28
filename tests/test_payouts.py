from firebase_admin import firestore as admin_firestore

from models import Room, Participant, PLAYING, DRAW, ABANDONED
from payouts import CoinLedger


def make_room(stake, winner):
    room = Room(room_id="r1", game_type="tic-tac-toe", max_players=2, created_at=0.0,
                settings={"stake": stake}, status=PLAYING)
    room.participants = [
        Participant(sid="a", user_id="u-a", username="alice"),
        Participant(sid="b", user_id="u-b", username="bob", coins=40),
    ]
    room.winner = winner
    return room


def ledger_for(store):
    return CoinLedger(db_getter=lambda: store, spawn=lambda fn, *args: fn(*args))


def test_winner_takes_stake(store):
    room = make_room(25, "a")
    payouts = ledger_for(store).settle(room)

    assert [(p["userId"], p["netChange"], p["newTotal"]) for p in payouts] == [
        ("u-a", 25, 1025),
        ("u-b", -25, 15),
    ]
    assert [uid for uid, _ in store.updates] == ["u-a", "u-b"]
    assert all(isinstance(f["coins"], admin_firestore.Increment) for _, f in store.updates)


def test_abandoned_game_charges_departed_player(store):
    room = make_room(10, ABANDONED)
    departed = room.participants.pop(1)
    payouts = ledger_for(store).settle(room, departed)
    changes = {p["userId"]: p["netChange"] for p in payouts}
    assert changes == {"u-a": 10, "u-b": -10}
    assert departed.coins == 30


def test_draw_and_zero_stake_move_nothing(store):
    ledger = ledger_for(store)
    assert ledger.settle(make_room(10, DRAW)) == []
    assert ledger.settle(make_room(0, "a")) == []
    assert store.updates == []


def test_missing_store_is_skipped():
    ledger = CoinLedger(db_getter=lambda: None, spawn=lambda fn, *args: fn(*args))
    payouts = ledger.settle(make_room(5, "b"))
    assert payouts[1]["newTotal"] == 45


def test_store_errors_do_not_escape():
    class Broken:
        def collection(self, name):
            raise RuntimeError("offline")

    ledger = CoinLedger(db_getter=lambda: Broken(), spawn=lambda fn, *args: fn(*args))
    assert len(ledger.settle(make_room(5, "a"))) == 2


def three_player_room(winner):
    room = make_room(10, winner)
    room.game_type = "uno"
    room.max_players = 3
    room.participants.append(Participant(sid="c", user_id="u-c", username="carol"))
    return room


def test_multi_player_win_is_zero_sum(store):
    payouts = ledger_for(store).settle(three_player_room("a"))
    changes = {p["userId"]: p["netChange"] for p in payouts}
    assert changes == {"u-a": 20, "u-b": -10, "u-c": -10}
    assert sum(changes.values()) == 0


def test_multi_player_abandonment_is_zero_sum(store):
    room = three_player_room(ABANDONED)
    departed = room.participants.pop(0)
    payouts = ledger_for(store).settle(room, departed)
    changes = {p["userId"]: p["netChange"] for p in payouts}
    assert changes == {"u-a": -20, "u-b": 10, "u-c": 10}
    assert departed.coins == 980


def test_abandonment_without_departed_player_moves_nothing(store):
    assert ledger_for(store).settle(make_room(10, ABANDONED)) == []
    assert store.updates == []
