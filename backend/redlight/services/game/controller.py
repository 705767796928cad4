import logging
import random
import threading
import uuid
from typing import List, Optional

from redlight.broadcast import display_view, player_view, roster
from redlight.models import COUNTDOWN, GAME_OVER, LOBBY, PLAYING, RED, Match, Player
from . import elimination
from .errors import UnknownTarget, WrongPhase
from .lights import LightScheduler
from .progress import ProgressEngine
from .registry import PlayerRegistry


class MatchController:
    """Owns the match and the player registry.

    Every public operation and every timer callback runs under ``self.lock``,
    so handlers never observe each other's partial updates. State is mutated
    first and broadcast afterwards, from the same locked snapshot.
    """

    def __init__(self, settings, timers, broadcaster, rng=None, logger=None):
        self.settings = settings
        self.timers = timers
        self.broadcaster = broadcaster
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()
        self.match = Match()
        self.registry = PlayerRegistry(name_max_length=settings.name_max_length)
        self.lights = LightScheduler(
            self.match, timers, settings, self.lock, rng or random.Random(),
            on_change=self._broadcast_all,
            on_grace_expired=self._on_grace_expired,
            logger=self.logger,
        )
        self.progress = ProgressEngine(
            self.match, self.registry, timers, settings, self.lock,
            on_tick=self._on_progress_tick,
            logger=self.logger,
        )
        self._countdown_handle = None

    # ---- Views ----

    def display_view(self) -> dict:
        with self.lock:
            return display_view(self.match, self.registry.all())

    def player_view(self, player_id: str) -> Optional[dict]:
        with self.lock:
            player = self.registry.get(player_id)
            return player_view(self.match, player) if player else None

    # ---- Player actions ----

    def join_player(self, name, player_id: Optional[str] = None) -> Player:
        with self.lock:
            if self.match.phase != LOBBY:
                raise WrongPhase('Game already in progress. Wait for next round!')
            player = self.registry.add(player_id or uuid.uuid4().hex, name)
            self.logger.info(f"[player-join] id={player.id} name={player.name} players={len(self.registry)}")
            self.broadcaster.player_joined(player.summary())
            self._broadcast_display()
            return player

    def begin_hold(self, player_id: str) -> None:
        with self.lock:
            player = self.registry.get(player_id)
            if not player or not player.alive or self.match.phase != PLAYING:
                return
            player.holding = True
            if elimination.is_fatal_hold(self.match.light, self.match.elimination_pending):
                batch = elimination.eliminate([player])
                self.logger.info(f"[strike] round={self.match.round} player={player.name}")
                self.broadcaster.eliminations(batch)
                self._broadcast_all()

    def end_hold(self, player_id: str) -> None:
        with self.lock:
            player = self.registry.get(player_id)
            if not player:
                return
            player.holding = False

    def disconnect(self, player_id: str) -> None:
        with self.lock:
            player = self.registry.get(player_id)
            if not player:
                return
            if self.match.phase in (LOBBY, GAME_OVER):
                # Nothing to forfeit outside a running match
                self.registry.remove(player_id)
            else:
                # Leaving mid-match forfeits
                player.eliminate()
            self.logger.info(f"[player-disconnect] id={player_id} name={player.name} phase={self.match.phase}")
            self._broadcast_all()

    def remove_player(self, player_id: str) -> Player:
        with self.lock:
            player = self.registry.remove(player_id)
            if not player:
                raise UnknownTarget(f'No player {player_id}')
            self.logger.info(f"[player-kick] id={player_id} name={player.name} phase={self.match.phase}")
            self.broadcaster.kicked(player_id)
            self._broadcast_display()
            return player

    # ---- Match lifecycle ----

    def start_match(self) -> bool:
        """Begin the countdown. Returns False when the start was ignored."""
        with self.lock:
            match = self.match
            if match.phase not in (LOBBY, GAME_OVER) or len(self.registry) < 1:
                return False
            self.registry.reset_all()
            match.finishers.clear()
            match.epoch += 1
            match.round += 1
            match.phase = COUNTDOWN
            match.light = RED
            match.elimination_pending = False
            self.logger.info(f"[match-start] round={match.round} players={len(self.registry)}")
            self._broadcast_all()
            self._countdown_step(match.epoch, self.settings.countdown_from)
            return True

    def reset_match(self) -> None:
        with self.lock:
            self._cancel_timers()
            self.match.reinitialize()
            self.registry.reset_all()
            self.logger.info(f"[match-reset] players={len(self.registry)}")
            self._broadcast_all()

    def end_match(self, winner: Optional[Player]) -> None:
        with self.lock:
            match = self.match
            match.phase = GAME_OVER
            match.epoch += 1
            self._cancel_timers()
            match.light = RED
            self.logger.info(
                f"[match-end] round={match.round} winner={winner.name if winner else None} "
                f"alive={len(self.registry.alive())}"
            )
            self.broadcaster.game_over(winner.summary() if winner else None, roster(self.registry.all()))
            self._broadcast_players()

    # ---- Internals (called with the lock held) ----

    def _countdown_step(self, epoch: int, count: int) -> None:
        if epoch != self.match.epoch or self.match.phase != COUNTDOWN:
            return
        if count > 0:
            self.broadcaster.countdown(count, [p.id for p in self.registry.all()])
            self._countdown_handle = self.timers.call_later(
                self.settings.countdown_step_ms, self._countdown_fire, epoch, count - 1
            )
            return
        self._countdown_handle = None
        self._begin_play()

    def _countdown_fire(self, epoch: int, count: int) -> None:
        with self.lock:
            self._countdown_step(epoch, count)

    def _begin_play(self) -> None:
        self.match.phase = PLAYING
        self.logger.info(f"[match-play] round={self.match.round}")
        self.progress.start()
        self.lights.switch_to_green()

    def _on_grace_expired(self) -> bool:
        victims = elimination.sweep_victims(self.registry.all())
        batch = elimination.eliminate(victims)
        if batch:
            self.broadcaster.eliminations(batch)
        self._broadcast_all()
        alive = self.registry.alive()
        self.logger.info(f"[sweep] round={self.match.round} eliminated={len(batch)} alive={len(alive)}")
        return not self._resolve_survivors(alive)

    def _on_progress_tick(self, finished: List[Player]) -> None:
        self._broadcast_all()
        if finished:
            self._resolve_finish()

    def _resolve_finish(self) -> bool:
        finishers = [self.registry.get(pid) for pid in self.match.finishers]
        finishers = [p for p in finishers if p is not None and p.finished]
        if not finishers:
            return False
        # Stable sort keeps finish order for equal timestamps
        finishers.sort(key=lambda p: p.finished_at)
        self.end_match(finishers[0])
        return True

    def _resolve_survivors(self, alive: List[Player]) -> bool:
        if len(alive) == 0:
            self.end_match(None)
            return True
        if len(alive) == 1:
            self.end_match(alive[0])
            return True
        return False

    def _cancel_timers(self) -> None:
        self.lights.cancel()
        self.progress.stop()
        if self._countdown_handle is not None:
            self._countdown_handle.cancel()
            self._countdown_handle = None

    def _broadcast_display(self) -> None:
        self.broadcaster.game_state(display_view(self.match, self.registry.all()))

    def _broadcast_players(self) -> None:
        for player in self.registry.all():
            self.broadcaster.player_state(player.id, player_view(self.match, player))

    def _broadcast_all(self) -> None:
        self._broadcast_display()
        self._broadcast_players()
