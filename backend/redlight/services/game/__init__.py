"""Game engine: player registry, light scheduler, progress loop and the
match state machine.

Everything here is transport-agnostic. Socket handlers and HTTP routes call
into ``MatchController``; outbound traffic goes through the broadcaster it
was built with.
"""

from .controller import MatchController
from .errors import DuplicateId, GameError, InvalidInput, InvalidName, UnknownTarget, WrongPhase
from .registry import PlayerRegistry
from .timers import BackgroundTimers, TimerHandle

__all__ = [
    'BackgroundTimers',
    'DuplicateId',
    'GameError',
    'InvalidInput',
    'InvalidName',
    'MatchController',
    'PlayerRegistry',
    'TimerHandle',
    'UnknownTarget',
    'WrongPhase',
]
