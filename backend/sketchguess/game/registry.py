from __future__ import annotations

import re
from threading import RLock

from .errors import AlreadyInRoom, InvalidPayload, NoSuchRoom, RoomExists, RoomFull
from .models import Player, Room


_CODE_RE = re.compile(r"[A-Z0-9]{1,12}")


def normalize_code(code: str) -> str:
    c = (code or "").strip().upper()
    if not _CODE_RE.fullmatch(c):
        raise InvalidPayload("invalid room code", room_code=c)
    return c


def normalize_name(name: str, max_length: int = 16) -> str:
    n = " ".join((name or "").split())
    # No control characters.
    n = "".join(ch for ch in n if ord(ch) >= 32)
    return n[:max_length].strip() or "Guest"


class RoomRegistry:
    """Rooms by code, plus a reverse index from connection id to room code."""

    def __init__(self, capacity: int = 10, max_name_length: int = 16) -> None:
        self.capacity = capacity
        self.max_name_length = max_name_length
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._sid_to_code: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def get(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get((code or "").strip().upper())

    def room_for(self, sid: str) -> Room | None:
        with self._lock:
            code = self._sid_to_code.get(sid)
            return self._rooms.get(code) if code else None

    def create(self, code: str, sid: str, name: str) -> tuple[Room, Player]:
        with self._lock:
            c = normalize_code(code)
            self._ensure_free(sid, c)
            if c in self._rooms:
                raise RoomExists("room exists", room_code=c)
            room = Room(code=c)
            self._rooms[c] = room
            return room, self._add_player(room, sid, name)

    def join(self, code: str, sid: str, name: str) -> tuple[Room, Player]:
        with self._lock:
            c = normalize_code(code)
            self._ensure_free(sid, c)
            room = self._rooms.get(c)
            if room is None:
                raise NoSuchRoom("room not found", room_code=c)
            if len(room.players) >= self.capacity:
                raise RoomFull("room is full", room_code=c)
            return room, self._add_player(room, sid, name)

    def leave(self, sid: str) -> tuple[Room, Player] | None:
        with self._lock:
            code = self._sid_to_code.pop(sid, None)
            room = self._rooms.get(code) if code else None
            if room is None:
                return None
            player = room.players.pop(sid, None)
            if player is None:
                return None
            room.correct_guessers.discard(sid)
            return room, player

    def discard(self, room: Room) -> bool:
        with self._lock:
            if self._rooms.get(room.code) is not room:
                return False
            del self._rooms[room.code]
            for sid in [s for s, c in self._sid_to_code.items() if c == room.code]:
                del self._sid_to_code[sid]
            return True

    def _ensure_free(self, sid: str, code: str) -> None:
        if sid in self._sid_to_code:
            raise AlreadyInRoom("already in a room", room_code=code)

    def _add_player(self, room: Room, sid: str, name: str) -> Player:
        player = Player(id=sid, name=normalize_name(name, self.max_name_length))
        room.players[sid] = player
        self._sid_to_code[sid] = room.code
        return player
