"""Cancellable delayed callbacks for match timers."""

import time


class TimerHandle:
    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False

    def cancel(self) -> None:
        # The sleeping task is not interrupted; it wakes at its deadline and
        # returns without calling back. Deadline callbacks also drop stale
        # deadlines on their own.
        self.cancelled = True


class SocketIOScheduler:
    """Runs callbacks after a delay on Flask-SocketIO background tasks.

    ``socketio.sleep`` cooperates with whichever async mode the server runs
    in (threading, eventlet or gevent).
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def time(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback, *args) -> TimerHandle:
        handle = TimerHandle(delay)

        def _worker():
            self.socketio.sleep(delay)
            if not handle.cancelled:
                callback(*args)

        self.socketio.start_background_task(_worker)
        return handle
