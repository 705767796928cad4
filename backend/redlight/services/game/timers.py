import logging
import time
from typing import Callable


class TimerHandle:
    """Cancellation flag shared between the scheduler and its worker."""

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class BackgroundTimers:
    """Timers backed by Socket.IO background tasks.

    Each timer is a worker that sleeps with ``socketio.sleep`` (cooperative
    under eventlet/gevent, a plain sleep in threading mode) and then fires its
    callback unless the handle was cancelled in the meantime.
    """

    def __init__(self, socketio, logger=None):
        self._socketio = socketio
        self._logger = logger or logging.getLogger(__name__)

    def now_ms(self) -> float:
        return time.time() * 1000.0

    def call_later(self, delay_ms: float, fn: Callable, *args) -> TimerHandle:
        handle = TimerHandle()

        def _worker():
            self._socketio.sleep(max(0.0, delay_ms) / 1000.0)
            if handle.cancelled:
                return
            try:
                fn(*args)
            except Exception:
                self._logger.exception(f"[timer-error] callback={getattr(fn, '__name__', fn)}")

        self._socketio.start_background_task(_worker)
        return handle

    def call_every(self, interval_ms: float, fn: Callable, *args) -> TimerHandle:
        handle = TimerHandle()

        def _loop():
            while True:
                self._socketio.sleep(interval_ms / 1000.0)
                if handle.cancelled:
                    return
                try:
                    fn(*args)
                except Exception:
                    self._logger.exception(f"[timer-error] loop={getattr(fn, '__name__', fn)} stopped")
                    return

        self._socketio.start_background_task(_loop)
        return handle
