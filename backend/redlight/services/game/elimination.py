from typing import Iterable, List

from redlight.models import Player, RED


def is_fatal_hold(light: str, elimination_pending: bool) -> bool:
    """A hold that starts on red after the grace window has closed is fatal.

    Holds that start inside the grace window are only caught by the sweep.
    """
    return light == RED and not elimination_pending


def sweep_victims(players: Iterable[Player]) -> List[Player]:
    """Players caught holding when the grace period expires.

    Finished players are out of the race and are never swept.
    """
    return [p for p in players if p.alive and p.holding and not p.finished]


def eliminate(players: Iterable[Player]) -> List[dict]:
    """Mark players dead and return the elimination batch as id/name pairs."""
    batch = []
    for player in players:
        player.eliminate()
        batch.append(player.summary())
    return batch
