"""Gunicorn configuration for Flask-SocketIO"""

# Worker class - threaded worker to match SocketIO async_mode='threading'
worker_class = 'gthread'
threads = 100

# Rooms, queues and sessions live in process memory: exactly one worker
# (scale out with REDIS_URL + sticky sessions instead)
workers = 1

# Binding
bind = '0.0.0.0:5000'

# Logging
accesslog = '-'
errorlog = '-'
loglevel = 'info'

timeout = 120
graceful_timeout = 30
keepalive = 5

reload = False
preload_app = False


def on_starting(server):
    """Called just before the master process is initialized."""
    print("🚀 Gunicorn master process starting...")


def when_ready(server):
    """Called just after the server is started."""
    print("✅ Gunicorn server ready to accept connections")


def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal (timeout)."""
    print(f"❌ WORKER TIMEOUT: Worker {worker.pid} aborted!")
    import traceback
    import sys
    traceback.print_stack(file=sys.stderr)


def on_exit(server):
    """Called just before the master process exits."""
    print("🛑 Gunicorn master process shutting down...")
