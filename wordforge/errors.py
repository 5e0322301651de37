class RoomError(Exception):
    """Failure reported to the requesting connection only; room state is left untouched."""

    code = 'error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {'message': self.message, 'code': self.code}


class RoomNotFound(RoomError):
    code = 'not_found'


class Unauthorized(RoomError):
    code = 'unauthorized'


class InvalidState(RoomError):
    code = 'invalid_state'


class InvalidInput(RoomError):
    code = 'invalid_input'
