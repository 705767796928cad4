from typing import Dict, List, Optional

from redlight.models import Player
from .errors import DuplicateId, InvalidName


class PlayerRegistry:
    """Connected players keyed by their game id, in join order."""

    def __init__(self, name_max_length: int = 15):
        self._name_max_length = name_max_length
        self._players: Dict[str, Player] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id) -> bool:
        return player_id in self._players

    def add(self, player_id: str, name) -> Player:
        cleaned = name.strip() if isinstance(name, str) else ''
        if not cleaned:
            raise InvalidName('Please enter a name!')
        if player_id in self._players:
            raise DuplicateId(f'Player {player_id} already registered')
        player = Player(id=player_id, name=cleaned[:self._name_max_length])
        self._players[player_id] = player
        return player

    def remove(self, player_id: str) -> Optional[Player]:
        return self._players.pop(player_id, None)

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def all(self) -> List[Player]:
        return list(self._players.values())

    def alive(self) -> List[Player]:
        return [p for p in self._players.values() if p.alive]

    def reset_all(self) -> None:
        for player in self._players.values():
            player.reset()
