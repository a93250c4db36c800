from __future__ import annotations

from typing import Any

from flask import current_app, request
from flask_socketio import SocketIO, emit

from ..game.errors import (
    AlreadyInRoom,
    GameError,
    InvalidPayload,
    NoSuchRoom,
    NotInRoom,
    NotYourTurn,
    RoomExists,
    RoomFull,
)
from ..game.session import GameSession
from . import events


MAX_CHAT_LENGTH = 200


def _text(value: Any, field: str, max_length: int | None = None) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidPayload(f"{field} must be a string")
    return value[:max_length] if max_length else value


def _room_args(args: tuple) -> tuple[str, str]:
    # Accept createRoom(code, name) as well as createRoom({"code": ..., "name": ...}).
    if len(args) == 1 and isinstance(args[0], dict):
        payload = args[0]
        code, name = payload.get("code"), payload.get("name")
    else:
        code = args[0] if len(args) > 0 else None
        name = args[1] if len(args) > 1 else None
    code = _text(code, "code")
    if not code.strip():
        raise InvalidPayload("code is required")
    return code, _text(name, "name")


def _report(exc: GameError) -> dict:
    """Tell only the offending connection what went wrong."""
    if isinstance(exc, NoSuchRoom):
        emit(events.INVALID_CODE, exc.room_code)
    elif isinstance(exc, RoomFull):
        emit(events.ROOM_FULL, exc.room_code)
    elif isinstance(exc, RoomExists):
        emit(events.ROOM_ERROR, "Room exists")
    elif isinstance(exc, AlreadyInRoom):
        emit(events.ROOM_ERROR, "Already in a room")
    elif isinstance(exc, InvalidPayload):
        emit(events.ROOM_ERROR, "Invalid request")
    # NotYourTurn / NotInRoom are dropped silently.
    return {"ok": False, "error": exc.code}


def register_socketio_handlers(socketio: SocketIO, session: GameSession) -> None:
    @socketio.on(events.CREATE_ROOM)
    def create_room(*args):
        try:
            code, name = _room_args(args)
            room = session.create_room(request.sid, code, name)
        except GameError as exc:
            return _report(exc)
        return {"ok": True, "code": room.code}

    @socketio.on(events.JOIN_ROOM)
    def join_room(*args):
        try:
            code, name = _room_args(args)
            room = session.join_room(request.sid, code, name)
        except GameError as exc:
            return _report(exc)
        return {"ok": True, "code": room.code}

    @socketio.on(events.LEAVE_ROOM)
    def leave_room(*args):
        room = session.leave(request.sid)
        if room is None:
            return {"ok": False, "error": NotInRoom.code}
        return {"ok": True}

    @socketio.on(events.CHOOSE_WORD)
    def choose_word(word=None, *args):
        try:
            word = _text(word, "word")
            if not word.strip():
                raise InvalidPayload("word is required")
            session.choose_word(request.sid, word)
        except GameError as exc:
            return _report(exc)
        return {"ok": True}

    @socketio.on(events.DRAW)
    def draw(payload=None, *args):
        if payload is None:
            return {"ok": False, "error": InvalidPayload.code}
        try:
            session.draw(request.sid, payload)
        except (NotYourTurn, NotInRoom) as exc:
            return {"ok": False, "error": exc.code}
        return {"ok": True}

    @socketio.on(events.CLEAR_CANVAS)
    def clear_canvas(*args):
        try:
            session.clear_canvas(request.sid)
        except (NotYourTurn, NotInRoom) as exc:
            return {"ok": False, "error": exc.code}
        return {"ok": True}

    @socketio.on(events.CHAT_MESSAGE)
    def chat_message(text=None, *args):
        if isinstance(text, dict):
            text = text.get("text")
        try:
            text = _text(text, "text", max_length=MAX_CHAT_LENGTH)
            if not text.strip():
                return {"ok": False, "error": InvalidPayload.code}
            session.chat(request.sid, text)
        except GameError as exc:
            return _report(exc)
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(*args):
        session.leave(request.sid)

    @socketio.on_error_default
    def on_error(exc):
        # Keep the dispatch loop alive for every other connection.
        current_app.logger.exception(f"[socket-error] sid={request.sid} event={request.event!r}: {exc}")
        return {"ok": False, "error": "internal_error"}
