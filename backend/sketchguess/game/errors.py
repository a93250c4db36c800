"""Errors raised by the game layer.

Each error carries a short machine-readable ``code`` that the realtime
handlers send back to the offending connection. None of them is fatal to a
room.
"""

from __future__ import annotations


class GameError(Exception):
    code = "game_error"

    def __init__(self, message: str = "", room_code: str = "") -> None:
        super().__init__(message or self.code)
        self.room_code = room_code


class InvalidPayload(GameError):
    code = "invalid_payload"


class RoomExists(GameError):
    code = "room_exists"


class NoSuchRoom(GameError):
    code = "room_not_found"


class RoomFull(GameError):
    code = "room_full"


class AlreadyInRoom(GameError):
    code = "already_in_room"


class NotInRoom(GameError):
    code = "not_in_room"


class NotYourTurn(GameError):
    code = "not_your_turn"
