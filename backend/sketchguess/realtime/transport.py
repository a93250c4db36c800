from __future__ import annotations

from typing import Any

from flask_socketio import SocketIO


def pack_args(args: tuple) -> Any:
    """Shape positional arguments the way python-socketio expects ``data``.

    No arguments sends no data, one argument is sent as is, and several are
    sent as a tuple so the client receives them as separate arguments.
    """
    if not args:
        return None
    if len(args) == 1:
        return args[0]
    return tuple(args)


class SocketIOTransport:
    """Room-scoped publish/subscribe on top of a Flask-SocketIO server."""

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self.socketio = socketio
        self.namespace = namespace

    def emit(self, event: str, *args: Any, to: str | None = None, skip_sid: str | None = None) -> None:
        data = pack_args(args)
        if data is None:
            self.socketio.emit(event, to=to, skip_sid=skip_sid, namespace=self.namespace)
        else:
            self.socketio.emit(event, data, to=to, skip_sid=skip_sid, namespace=self.namespace)

    def enter_room(self, sid: str, room: str) -> None:
        self.socketio.server.enter_room(sid, room, namespace=self.namespace)

    def leave_room(self, sid: str, room: str) -> None:
        self.socketio.server.leave_room(sid, room, namespace=self.namespace)
