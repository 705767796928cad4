import random

import pytest

from redlight.models import GAME_OVER, MatchSettings
from redlight.services.game import MatchController


@pytest.fixture()
def long_green(timers, broadcaster):
    """A controller whose first green lasts long enough to finish the race."""
    settings = MatchSettings(green_min_ms=5000, green_max_ms=5000, red_min_ms=3000, red_max_ms=3000)
    ctrl = MatchController(settings, timers, broadcaster, rng=random.Random(1))

    def _play():
        assert ctrl.start_match()
        timers.advance(3000)
    return ctrl, _play


def test_holding_on_green_accumulates_progress(controller, timers, play):
    alice = controller.join_player('Alice')
    bob = controller.join_player('Bob')
    play()

    controller.begin_hold(alice.id)
    timers.advance(1000)

    assert alice.progress == pytest.approx(25.0)
    assert bob.progress == 0.0


def test_progress_is_monotonic_across_hold_and_release(controller, timers, play):
    alice = controller.join_player('Alice')
    controller.join_player('Bob')
    play()

    seen = []
    for step in range(19):
        if step % 3 == 0:
            controller.begin_hold(alice.id)
        elif step % 3 == 2:
            controller.end_hold(alice.id)
        timers.advance(100)
        seen.append(alice.progress)

    assert seen == sorted(seen)
    assert seen[-1] > 0
    assert all(value <= controller.settings.win_threshold for value in seen)


def test_progress_is_idle_while_red(controller, timers, play):
    alice = controller.join_player('Alice')
    controller.join_player('Bob')
    controller.join_player('Cara')
    play()

    controller.begin_hold(alice.id)
    timers.advance(1950)
    controller.end_hold(alice.id)
    before = alice.progress
    timers.advance(3000)

    assert alice.alive is True
    assert alice.progress == before


def test_progress_broadcasts_once_per_tick(controller, timers, play, broadcaster):
    alice = controller.join_player('Alice')
    controller.join_player('Bob')
    play()
    controller.begin_hold(alice.id)
    broadcaster.clear()

    timers.advance(100)

    assert len(broadcaster.of('game_state')) == 1
    assert len(broadcaster.of('player_state')) == 2


def test_crossing_threshold_clamps_and_wins(long_green, timers, broadcaster):
    ctrl, play = long_green
    alice = ctrl.join_player('Alice')
    bob = ctrl.join_player('Bob')
    play()

    ctrl.begin_hold(alice.id)
    timers.advance(3999)
    assert alice.progress < 100.0
    assert ctrl.match.phase != GAME_OVER
    timers.advance(1)

    assert alice.progress == 100.0
    assert alice.finished_at == timers.now_ms()
    assert ctrl.match.phase == GAME_OVER
    assert bob.alive is True
    over = broadcaster.of('game_over')[-1][2]
    assert over['winner'] == {'id': alice.id, 'name': 'Alice'}
    assert [p['name'] for p in over['players']] == ['Alice', 'Bob']


def test_progress_rate_does_not_overshoot_threshold(timers, broadcaster):
    settings = MatchSettings(green_min_ms=5000, green_max_ms=5000, progress_rate=30.0)
    ctrl = MatchController(settings, timers, broadcaster, rng=random.Random(1))
    alice = ctrl.join_player('Alice')
    ctrl.start_match()
    timers.advance(3000)

    ctrl.begin_hold(alice.id)
    timers.advance(400)

    assert alice.progress == 100.0
    assert ctrl.match.phase == GAME_OVER


@pytest.mark.parametrize('order', [('Alice', 'Bob'), ('Bob', 'Alice')])
def test_same_tick_finish_goes_to_first_in_registry_order(long_green, timers, broadcaster, order):
    ctrl, play = long_green
    players = [ctrl.join_player(name) for name in order]
    play()

    for player in players:
        ctrl.begin_hold(player.id)
    timers.advance(4000)

    assert all(p.finished_at == timers.now_ms() for p in players)
    winner = broadcaster.of('game_over')[-1][2]['winner']
    assert winner == {'id': players[0].id, 'name': order[0]}
    assert ctrl.match.finishers == [p.id for p in players]


def test_tick_stops_after_match_end(long_green, timers):
    ctrl, play = long_green
    alice = ctrl.join_player('Alice')
    play()
    ctrl.begin_hold(alice.id)
    timers.advance(4000)

    assert not ctrl.progress.running
    assert timers.pending() == 0
