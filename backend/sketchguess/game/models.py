from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Literal

from .timers import Timer


RoomState = Literal["lobby", "choosing", "playing", "ending", "reveal", "over"]

# States in which the word is chosen but not yet revealed to guessers.
SECRET_STATES = ("playing", "ending")


@dataclass
class Player:
    id: str
    name: str
    score: int = 0

    def public(self) -> dict:
        return asdict(self)


@dataclass
class Room:
    code: str
    state: RoomState = "lobby"
    game_started: bool = False
    round: int = 1
    drawer_index: int = 0
    drawer_id: str | None = None
    word: str | None = None
    word_choices: list[str] = field(default_factory=list)
    correct_guessers: set[str] = field(default_factory=set)
    started_at: float | None = None
    time_left: int = 0
    timer: Timer | None = None
    players: dict[str, Player] = field(default_factory=dict)

    @property
    def drawer(self) -> Player | None:
        if self.drawer_id is None:
            return None
        return self.players.get(self.drawer_id)

    @property
    def word_is_secret(self) -> bool:
        return self.word is not None and self.state in SECRET_STATES

    def guesser_ids(self) -> list[str]:
        return [pid for pid in self.players if pid != self.drawer_id]

    def everyone_guessed(self) -> bool:
        guessers = self.guesser_ids()
        return bool(guessers) and all(pid in self.correct_guessers for pid in guessers)

    def public_players(self) -> list[dict]:
        return [p.public() for p in self.players.values()]
