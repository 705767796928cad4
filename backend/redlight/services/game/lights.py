import logging
from typing import Callable

from redlight.models import GREEN, PLAYING, RED


class LightScheduler:
    """Drives the red/green cycle while a match is playing.

    Holds at most one pending transition (next flip or grace check). Every
    callback re-checks the match epoch and phase under the shared lock, so a
    timer left over from an ended or reset match never touches the new one.
    """

    def __init__(self, match, timers, settings, lock, rng,
                 on_change: Callable[[], None],
                 on_grace_expired: Callable[[], bool],
                 logger=None):
        self._match = match
        self._timers = timers
        self._settings = settings
        self._lock = lock
        self._rng = rng
        self._on_change = on_change
        self._on_grace_expired = on_grace_expired
        self._logger = logger or logging.getLogger(__name__)
        self._pending = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and not self._pending.cancelled

    def switch_to_green(self) -> None:
        match = self._match
        if match.phase != PLAYING:
            return
        match.light = GREEN
        match.elimination_pending = False
        self._on_change()
        duration = self._rng.randint(self._settings.green_min_ms, self._settings.green_max_ms)
        self._logger.info(f"[light] green round={match.round} duration={duration}ms")
        self._schedule(duration, self.switch_to_red)

    def switch_to_red(self) -> None:
        match = self._match
        if match.phase != PLAYING:
            return
        match.light = RED
        match.elimination_pending = True
        self._on_change()
        self._logger.info(f"[light] red round={match.round} grace={self._settings.grace_period_ms}ms")
        self._schedule(self._settings.grace_period_ms, self._grace_expired)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _grace_expired(self) -> None:
        match = self._match
        if match.phase != PLAYING or match.light != RED:
            return
        # Grace is over: from here until green, a new hold is fatal on its own
        match.elimination_pending = False
        # The controller sweeps holders and reports whether the match goes on
        if not self._on_grace_expired():
            return
        duration = self._rng.randint(self._settings.red_min_ms, self._settings.red_max_ms)
        self._logger.info(f"[light] red-hold round={match.round} duration={duration}ms")
        self._schedule(duration, self.switch_to_green)

    def _schedule(self, delay_ms: int, fn: Callable[[], None]) -> None:
        self.cancel()
        self._pending = self._timers.call_later(delay_ms, self._fire, self._match.epoch, fn)

    def _fire(self, epoch: int, fn: Callable[[], None]) -> None:
        with self._lock:
            if epoch != self._match.epoch:
                self._logger.debug(f"[timer-abort] light callback from epoch={epoch} now={self._match.epoch}")
                return
            self._pending = None
            fn()
