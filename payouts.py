# payouts.py
import threading
from typing import Callable, Dict, List, Optional, Any

from firebase_admin import firestore as admin_firestore

from firebase_admin_config import get_db
from models import Room, Participant, DRAW, ABANDONED


def _spawn_thread(fn, *args):
    threading.Thread(target=fn, args=args, daemon=True).start()


class CoinLedger:
    """Settles a finished room's stake against the user record store.

    Store writes are fire-and-forget: they run on their own thread and never
    hold up the game-ended broadcast.
    """

    def __init__(self, db_getter: Callable[[], Any] = get_db, spawn=_spawn_thread):
        self._db_getter = db_getter
        self._spawn = spawn

    def settle(self, room: Room, departed: Optional[Participant] = None) -> List[Dict[str, Any]]:
        stake = int(room.settings.get("stake") or 0)
        if stake <= 0 or room.winner in (None, DRAW):
            return []

        # zero-sum: one side pays `stake` to each member of the other side
        if room.winner == ABANDONED:
            if departed is None:
                return []
            payer = departed.sid
        else:
            payer = None
        players = self._everyone(room, departed)
        others = len(players) - 1

        results = []
        for p in players:
            if payer is not None:
                net_change = -stake * others if p.sid == payer else stake
            else:
                net_change = stake * others if p.sid == room.winner else -stake
            p.coins += net_change
            results.append({
                "userId": p.user_id,
                "username": p.username,
                "bet": stake,
                "netChange": net_change,
                "newTotal": p.coins,
            })
            self._spawn(self._update_coins, p.user_id, net_change, p.username)

        print(f"💸 [Payout] {room.room_id}: {results}")
        return results

    @staticmethod
    def _everyone(room: Room, departed: Optional[Participant]) -> List[Participant]:
        players = list(room.participants)
        if departed and departed not in players:
            players.append(departed)
        return players

    def _update_coins(self, user_id: str, amount: int, username: str = "Unknown"):
        try:
            db = self._db_getter()
            if db:
                db.collection('users').document(user_id).update({
                    'coins': admin_firestore.Increment(amount)
                })
                print(f"💰 Firestore updated (async): {username} {amount:+d}")
        except Exception as e:
            print(f"❌ Firestore async update error for {username} ({user_id}): {e}")
