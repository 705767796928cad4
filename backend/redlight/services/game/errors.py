class GameError(Exception):
    """Base class for rejected game operations.

    Raised before any state is touched, so catching one never leaves the
    match or the registry half-updated.
    """
    code = 'game_error'

    def __init__(self, message: str = ''):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self):
        return {'code': self.code, 'message': self.message}


class InvalidInput(GameError):
    code = 'invalid_input'


class InvalidName(InvalidInput):
    code = 'invalid_name'


class DuplicateId(GameError):
    code = 'duplicate_id'


class WrongPhase(GameError):
    code = 'wrong_phase'


class UnknownTarget(GameError):
    code = 'unknown_target'
