"""Projection of match state into client views, and their delivery.

The display (TV) sees the whole roster; each phone only ever sees its own
player. Nothing here mutates game state.
"""
from typing import Iterable, List, Optional

TV_ROOM = 'tv'


def player_room(player_id: str) -> str:
    return f"player:{player_id}"


def roster(players: Iterable) -> List[dict]:
    return [p.to_dict() for p in players]


def display_view(match, players) -> dict:
    return {
        'phase': match.phase,
        'light': match.light,
        'round': match.round,
        'players': roster(players),
    }


def player_view(match, player) -> dict:
    return {
        'phase': match.phase,
        'light': match.light,
        'progress': player.progress,
        'alive': player.alive,
        'holding': player.holding,
    }


class StateBroadcaster:
    """Emits projected state to the TV room and to per-player rooms."""

    def __init__(self, socketio, namespace: str = '/ws'):
        self._socketio = socketio
        self._namespace = namespace

    def _emit(self, event: str, payload, room: str) -> None:
        self._socketio.emit(event, payload, to=room, namespace=self._namespace)

    def game_state(self, view: dict) -> None:
        self._emit('game_state', view, TV_ROOM)

    def player_state(self, player_id: str, view: dict) -> None:
        self._emit('player_state', view, player_room(player_id))

    def player_joined(self, summary: dict) -> None:
        self._emit('player_joined', summary, TV_ROOM)

    def countdown(self, count: int, player_ids: Iterable[str]) -> None:
        self._emit('countdown', count, TV_ROOM)
        for player_id in player_ids:
            self._emit('countdown', count, player_room(player_id))

    def eliminations(self, batch: List[dict]) -> None:
        self._emit('eliminations', batch, TV_ROOM)
        for entry in batch:
            self._emit('eliminated', {}, player_room(entry['id']))

    def game_over(self, winner: Optional[dict], players: List[dict]) -> None:
        self._emit('game_over', {'winner': winner, 'players': players}, TV_ROOM)

    def kicked(self, player_id: str) -> None:
        self._emit('kicked', {}, player_room(player_id))
