import heapq
import itertools
import os
import random
import sys
import pytest

# Ensure the backend root (containing the `redlight` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from redlight import create_app, socketio
from redlight.models import MatchSettings
from redlight.services.game import MatchController, TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    # Fixed durations keep the light cycle predictable
    GREEN_MIN_MS = 2000
    GREEN_MAX_MS = 2000
    RED_MIN_MS = 3000
    RED_MAX_MS = 3000
    GRACE_PERIOD_MS = 350
    WIN_THRESHOLD = 100
    PROGRESS_RATE = 2.5
    TICK_INTERVAL_MS = 100
    COUNTDOWN_FROM = 3
    COUNTDOWN_STEP_MS = 1000
    NAME_MAX_LENGTH = 15
    RANDOM_SEED = 1
    CORS_ORIGINS = '*'
    PUBLIC_BASE_URL = None
    PHONE_PATH = '/phone.html'
    SOCKETIO_NAMESPACE = '/ws'


class ManualTimers:
    """Deterministic stand-in for BackgroundTimers driven by ``advance``."""

    def __init__(self, start_ms: float = 1_000_000.0):
        self.now = start_ms
        self._queue = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        return self.now

    def call_later(self, delay_ms, fn, *args):
        handle = TimerHandle()
        heapq.heappush(self._queue, (self.now + delay_ms, next(self._seq), handle, None, fn, args))
        return handle

    def call_every(self, interval_ms, fn, *args):
        handle = TimerHandle()
        heapq.heappush(self._queue, (self.now + interval_ms, next(self._seq), handle, interval_ms, fn, args))
        return handle

    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].cancelled)

    def advance(self, ms: float) -> None:
        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, interval, fn, args = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            if interval is not None:
                heapq.heappush(self._queue, (due + interval, next(self._seq), handle, interval, fn, args))
            fn(*args)
        self.now = target


class RecordingBroadcaster:
    """Captures outbound events as (event, target, payload) tuples."""

    def __init__(self):
        self.events = []

    def names(self):
        return [e[0] for e in self.events]

    def of(self, name):
        return [e for e in self.events if e[0] == name]

    def clear(self):
        self.events.clear()

    def game_state(self, view):
        self.events.append(('game_state', 'tv', view))

    def player_state(self, player_id, view):
        self.events.append(('player_state', player_id, view))

    def player_joined(self, summary):
        self.events.append(('player_joined', 'tv', summary))

    def countdown(self, count, player_ids):
        self.events.append(('countdown', 'tv', count))
        for player_id in player_ids:
            self.events.append(('countdown', player_id, count))

    def eliminations(self, batch):
        self.events.append(('eliminations', 'tv', batch))

    def game_over(self, winner, players):
        self.events.append(('game_over', 'tv', {'winner': winner, 'players': players}))

    def kicked(self, player_id):
        self.events.append(('kicked', player_id, {}))


@pytest.fixture()
def timers():
    return ManualTimers()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def settings():
    return MatchSettings(
        green_min_ms=2000, green_max_ms=2000,
        red_min_ms=3000, red_max_ms=3000,
        grace_period_ms=350,
    )


@pytest.fixture()
def controller(settings, timers, broadcaster):
    return MatchController(settings, timers, broadcaster, rng=random.Random(1))


@pytest.fixture()
def play(controller, timers):
    """Start a match and run the countdown so the first green light is on."""
    def _play():
        assert controller.start_match()
        timers.advance(controller.settings.countdown_from * controller.settings.countdown_step_ms)
    return _play


@pytest.fixture()
def flask_app(timers):
    application = create_app(TestConfig, timers=timers)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass
