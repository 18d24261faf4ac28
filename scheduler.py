# scheduler.py
from threading import Timer


class TimerScheduler:
    """Deferred callbacks on threading.Timer, run while holding the core lock."""

    def __init__(self, lock):
        self._lock = lock

    def schedule(self, delay: float, fn, *args) -> Timer:
        def run():
            with self._lock:
                fn(*args)

        timer = Timer(delay, run)
        timer.daemon = True
        timer.start()
        return timer
