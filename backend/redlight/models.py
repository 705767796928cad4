from dataclasses import dataclass, field
from typing import List, Optional

# Match phases
LOBBY = 'lobby'
COUNTDOWN = 'countdown'
PLAYING = 'playing'
GAME_OVER = 'gameOver'

# Light colours
RED = 'red'
GREEN = 'green'


@dataclass
class Player:
    id: str
    name: str
    progress: float = 0.0
    alive: bool = True
    holding: bool = False
    finished_at: Optional[float] = None

    @property
    def finished(self) -> bool:
        return self.finished_at is not None

    def reset(self) -> None:
        self.progress = 0.0
        self.alive = True
        self.holding = False
        self.finished_at = None

    def eliminate(self) -> None:
        self.alive = False
        self.holding = False

    def summary(self):
        return {'id': self.id, 'name': self.name}

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'progress': self.progress,
            'alive': self.alive,
            'holding': self.holding,
            'finishedAt': self.finished_at,
        }


@dataclass
class Match:
    phase: str = LOBBY
    light: str = RED
    round: int = 0
    elimination_pending: bool = False
    # Bumped on start/end/reset; scheduled callbacks compare against it
    epoch: int = 0
    # Player ids in the order they crossed the win threshold
    finishers: List[str] = field(default_factory=list)

    def reinitialize(self) -> None:
        self.phase = LOBBY
        self.light = RED
        self.round = 0
        self.elimination_pending = False
        self.finishers.clear()
        self.epoch += 1


@dataclass(frozen=True)
class MatchSettings:
    green_min_ms: int = 1500
    green_max_ms: int = 5000
    red_min_ms: int = 2000
    red_max_ms: int = 4000
    grace_period_ms: int = 350
    win_threshold: float = 100.0
    progress_rate: float = 2.5
    tick_interval_ms: int = 100
    countdown_from: int = 3
    countdown_step_ms: int = 1000
    name_max_length: int = 15

    @classmethod
    def from_config(cls, cfg) -> 'MatchSettings':
        """Build settings from a Flask config mapping."""
        return cls(
            green_min_ms=int(cfg.get('GREEN_MIN_MS', 1500)),
            green_max_ms=int(cfg.get('GREEN_MAX_MS', 5000)),
            red_min_ms=int(cfg.get('RED_MIN_MS', 2000)),
            red_max_ms=int(cfg.get('RED_MAX_MS', 4000)),
            grace_period_ms=int(cfg.get('GRACE_PERIOD_MS', 350)),
            win_threshold=float(cfg.get('WIN_THRESHOLD', 100)),
            progress_rate=float(cfg.get('PROGRESS_RATE', 2.5)),
            tick_interval_ms=int(cfg.get('TICK_INTERVAL_MS', 100)),
            countdown_from=int(cfg.get('COUNTDOWN_FROM', 3)),
            countdown_step_ms=int(cfg.get('COUNTDOWN_STEP_MS', 1000)),
            name_max_length=int(cfg.get('NAME_MAX_LENGTH', 15)),
        )
