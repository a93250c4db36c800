from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Protocol

from ..realtime import events
from .errors import NotInRoom, NotYourTurn
from .models import Player, Room
from .registry import RoomRegistry
from .rounds import RoundMachine, Step, mask_word
from .timers import Timer, TimerCallback


class Transport(Protocol):
    def emit(self, event: str, *args: Any, to: str | None = None, skip_sid: str | None = None) -> None: ...

    def enter_room(self, sid: str, room: str) -> None: ...

    def leave_room(self, sid: str, room: str) -> None: ...


class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay: float, callback: TimerCallback, label: str = "") -> Timer: ...


class GameSession:
    """Binds connection events to rooms and applies round transitions.

    Every public method and every timer callback runs under one lock, so the
    handlers for a room never interleave.
    """

    def __init__(
        self,
        transport: Transport,
        scheduler: Scheduler,
        machine: RoundMachine | None = None,
        registry: RoomRegistry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transport = transport
        self.scheduler = scheduler
        self.machine = machine if machine is not None else RoundMachine()
        self.registry = registry if registry is not None else RoomRegistry()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._lock = RLock()

    # -- membership -------------------------------------------------------

    def create_room(self, sid: str, code: str, name: str) -> Room:
        with self._lock:
            room, player = self.registry.create(code, sid, name)
            self.logger.info(f"[room-create] room={room.code} by={sid}")
            self._attach(room, player)
            return room

    def join_room(self, sid: str, code: str, name: str) -> Room:
        with self._lock:
            room, player = self.registry.join(code, sid, name)
            self.logger.info(f"[room-join] room={room.code} sid={sid} players={len(room.players)}")
            self._attach(room, player)
            return room

    def leave(self, sid: str) -> Room | None:
        """Remove a connection from its room. Disconnects take the same path."""
        with self._lock:
            left = self.registry.leave(sid)
            if left is None:
                return None
            room, player = left
            self.transport.leave_room(sid, room.code)
            self.logger.info(f"[room-leave] room={room.code} sid={sid} players={len(room.players)}")
            self._apply(room, self.machine.player_left(room, player, self.scheduler.now()))
            return room

    # -- gameplay ---------------------------------------------------------

    def choose_word(self, sid: str, word: str) -> None:
        with self._lock:
            room = self._room_of(sid)
            step = self.machine.choose_word(room, sid, word, self.scheduler.now())
            self.logger.info(f"[word-chosen] room={room.code} round={room.round}")
            self._apply(room, step)

    def chat(self, sid: str, text: str) -> None:
        with self._lock:
            room = self._room_of(sid)
            self._apply(room, self.machine.submit_chat(room, sid, text, self.scheduler.now()))

    def draw(self, sid: str, payload: Any) -> None:
        with self._lock:
            room = self._room_of(sid)
            if not self.machine.can_draw(room, sid):
                raise NotYourTurn("only the drawer can draw", room_code=room.code)
            self.transport.emit(events.DRAW, payload, to=room.code, skip_sid=sid)

    def clear_canvas(self, sid: str) -> None:
        with self._lock:
            room = self._room_of(sid)
            if not self.machine.can_draw(room, sid):
                raise NotYourTurn("only the drawer can clear", room_code=room.code)
            self.transport.emit(events.CLEAR_CANVAS, to=room.code, skip_sid=sid)

    def snapshot(self, code: str) -> dict | None:
        with self._lock:
            room = self.registry.get(code)
            if room is None:
                return None
            return {
                "code": room.code,
                "state": room.state,
                "round": room.round,
                "maxRounds": self.machine.settings.max_rounds,
                "drawerId": room.drawer_id,
                "wordHint": mask_word(room.word) if room.word_is_secret else None,
                "timeLeft": room.time_left if room.state == "playing" else None,
                "players": room.public_players(),
            }

    # -- internals --------------------------------------------------------

    def _room_of(self, sid: str) -> Room:
        room = self.registry.room_for(sid)
        if room is None:
            raise NotInRoom("connection is not in a room")
        return room

    def _attach(self, room: Room, player: Player) -> None:
        self.transport.enter_room(player.id, room.code)
        self._apply(room, self.machine.player_joined(room, player))

    def _apply(self, room: Room, step: Step) -> None:
        for out in step.outbound:
            self.transport.emit(out.event, *out.args, to=out.to, skip_sid=out.skip_sid)
            if out.event == events.NEW_ROUND and out.to == room.code:
                self.logger.info(f"[round-start] room={room.code} round={out.args[0]} drawer={out.args[1]}")

        if step.close:
            self._close(room)
            return
        if step.cancel_timer:
            self._cancel_timer(room)
        if step.after is not None:
            delay, action = step.after
            self._schedule(room, delay, action)

    def _schedule(self, room: Room, delay: float, action: str) -> None:
        if action not in self.machine.ACTIONS:
            raise ValueError(f"unknown round action {action!r}")
        self._cancel_timer(room)

        def _fire(timer: Timer) -> None:
            with self._lock:
                # Superseded or the room is gone.
                if room.timer is not timer or self.registry.get(room.code) is not room:
                    return
                room.timer = None
                if action != "tick":
                    self.logger.info(f"[timer-fire] room={room.code} action={action} round={room.round}")
                step = getattr(self.machine, action)(room, self.scheduler.now())
                self._apply(room, step)

        room.timer = self.scheduler.call_later(delay, _fire, label=f"{room.code}:{action}")
        if action != "tick":
            self.logger.info(f"[timer-set] room={room.code} action={action} delay={delay}s")

    def _cancel_timer(self, room: Room) -> None:
        timer, room.timer = room.timer, None
        if timer is not None and timer.cancel():
            self.logger.debug(f"[timer-cancel] room={room.code} timer={timer!r}")

    def _close(self, room: Room) -> None:
        self._cancel_timer(room)
        for sid in list(room.players):
            self.transport.leave_room(sid, room.code)
        if self.registry.discard(room):
            if room.state == "over":
                self.logger.info(f"[game-over] room={room.code} players={len(room.players)}")
            self.logger.info(f"[room-closed] room={room.code}")
