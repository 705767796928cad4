import logging
from typing import Callable, List

from redlight.models import GREEN, PLAYING, Player


class ProgressEngine:
    """Fixed-period tick that moves holding players forward on green."""

    def __init__(self, match, registry, timers, settings, lock,
                 on_tick: Callable[[List[Player]], None], logger=None):
        self._match = match
        self._registry = registry
        self._timers = timers
        self._settings = settings
        self._lock = lock
        self._on_tick = on_tick
        self._logger = logger or logging.getLogger(__name__)
        self._handle = None

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def start(self) -> None:
        self.stop()
        self._handle = self._timers.call_every(
            self._settings.tick_interval_ms, self._fire, self._match.epoch
        )

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def advance(self, now_ms: float) -> List[Player]:
        """Apply one tick of progress and return the players who finished on it.

        Finishers are returned and recorded in registry order, which is how
        same-tick ties are broken.
        """
        settings = self._settings
        finished = []
        for player in self._registry.all():
            if not (player.alive and player.holding and not player.finished):
                continue
            player.progress = min(settings.win_threshold, player.progress + settings.progress_rate)
            if player.progress >= settings.win_threshold:
                player.finished_at = now_ms
                self._match.finishers.append(player.id)
                finished.append(player)
        return finished

    def _fire(self, epoch: int) -> None:
        with self._lock:
            match = self._match
            if epoch != match.epoch:
                return
            if match.phase != PLAYING or match.light != GREEN:
                return
            finished = self.advance(self._timers.now_ms())
            if finished:
                self._logger.info(
                    f"[finish] round={match.round} players={','.join(p.name for p in finished)}"
                )
            self._on_tick(finished)
