# extensions.py
from flask_socketio import SocketIO

from config import Config

# Force threading mode: scheduled cleanup uses threading.Timer and the
# Firestore (gRPC) client does not get along with eventlet/gevent.
if Config.REDIS_URL:
    print(f"🚀 Using Redis Message Queue: {Config.REDIS_URL}")
    socketio = SocketIO(async_mode='threading', message_queue=Config.REDIS_URL)
else:
    print("⚠️ No REDIS_URL found. Using in-memory mode (Not suitable for multi-instance).")
    socketio = SocketIO(async_mode='threading')
