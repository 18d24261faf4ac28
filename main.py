# main.py
# Do NOT import gevent or eventlet: the server runs in 'threading' mode so the
# Firestore (gRPC) client and threading.Timer cleanup work unchanged.

from flask import Flask

from config import Config
from extensions import socketio

# Importing these modules registers their @socketio.on handlers
import general_events  # noqa: F401
import lobby_events  # noqa: F401
import game_events  # noqa: F401


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    socketio.init_app(app, cors_allowed_origins=app.config.get('CORS_ALLOWED_ORIGINS', '*'))

    from health_check import health_bp
    app.register_blueprint(health_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    print("🚀 Server running (http://localhost:5000)")
    # allow_unsafe_werkzeug: dev server only; use gunicorn (wsgi.py) in production
    socketio.run(app, host="0.0.0.0", port=5000, debug=True, allow_unsafe_werkzeug=True, use_reloader=False)
