"""Round state machine.

Every transition mutates a :class:`Room` and returns a :class:`Step`
describing what to send and what to schedule next. Nothing here sleeps,
emits, or reads a clock; the session applies the step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..realtime import events
from .errors import NotYourTurn
from .models import Player, Room
from .scoring import elapsed_seconds, points_for
from .words import WordBank


@dataclass(frozen=True)
class GameSettings:
    min_players: int = 2
    max_rounds: int = 6
    round_duration_sec: int = 80
    word_choices_count: int = 3
    choose_duration_sec: float = 15.0
    start_delay_sec: float = 3.0
    all_guessed_delay_sec: float = 2.0
    next_round_delay_sec: float = 4.0
    reveal_delay_sec: float = 5.0
    drawer_left_delay_sec: float = 3.0
    min_points: int = 20
    max_points: int = 100
    near_miss_min_length: int = 3

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "GameSettings":
        defaults = cls()
        values = {}
        for name in cls.__dataclass_fields__:
            key = name.upper()
            values[name] = type(getattr(defaults, name))(config.get(key, getattr(defaults, name)))
        return cls(**values)


@dataclass
class Outbound:
    event: str
    args: tuple = ()
    to: str | None = None
    skip_sid: str | None = None


@dataclass
class Step:
    outbound: list[Outbound] = field(default_factory=list)
    # (delay_sec, action) to run next; replaces whatever timer the room holds.
    after: tuple[float, str] | None = None
    cancel_timer: bool = False
    close: bool = False

    def emit(self, event: str, *args: Any, to: str | None = None, skip_sid: str | None = None) -> None:
        self.outbound.append(Outbound(event, args, to=to, skip_sid=skip_sid))

    def system(self, text: str, to: str) -> None:
        self.emit(events.MESSAGE, {"user": events.SYSTEM_USER, "text": text}, to=to)


def mask_word(word: str) -> str:
    """Show even-index characters, hide odd-index letters: ``cat`` -> ``c _ t``."""
    return " ".join(ch if i % 2 == 0 or not ch.isalpha() else "_" for i, ch in enumerate(word))


def build_leaderboard(room: Room) -> list[dict]:
    # sorted() is stable, so equal scores keep join order.
    ranked = sorted(room.players.values(), key=lambda p: p.score, reverse=True)
    return [{"rank": i + 1, "name": p.name, "score": p.score} for i, p in enumerate(ranked)]


class RoundMachine:
    # Actions that may be scheduled through Step.after.
    ACTIONS = ("start_round", "auto_choose", "tick", "reveal", "next_round")

    def __init__(self, settings: GameSettings | None = None, word_bank: WordBank | None = None) -> None:
        self.settings = settings or GameSettings()
        self.word_bank = word_bank or WordBank()

    # -- membership -------------------------------------------------------

    def player_joined(self, room: Room, player: Player) -> Step:
        step = Step()
        step.emit(events.ROOM_JOINED, room.code, room.public_players(), to=player.id)
        step.emit(events.UPDATE_PLAYERS, room.public_players(), to=room.code)
        step.system(f"{player.name} joined!", to=room.code)

        # Late joiners see the round in progress.
        drawer = room.drawer
        if drawer is not None and room.state in ("choosing", "playing", "ending"):
            step.emit(events.NEW_ROUND, room.round, drawer.id, drawer.name, to=player.id)
            if room.word_is_secret:
                step.emit(events.WORD_HINT, mask_word(room.word), to=player.id)

        if room.state == "lobby" and not room.game_started and len(room.players) >= self.settings.min_players:
            room.game_started = True
            step.after = (self.settings.start_delay_sec, "start_round")
        return step

    def player_left(self, room: Room, player: Player, now: float) -> Step:
        step = Step()
        room.correct_guessers.discard(player.id)
        if not room.players:
            step.close = True
            return step

        step.emit(events.UPDATE_PLAYERS, room.public_players(), to=room.code)
        step.system(f"{player.name} left", to=room.code)

        if player.id == room.drawer_id:
            room.drawer_id = None
            if room.state in ("choosing", "playing", "ending"):
                # Abandon the round: nothing is scored and the word stays hidden.
                self._clear_round(room)
                room.state = "reveal"
                step.after = (self.settings.drawer_left_delay_sec, "next_round")
        elif room.state == "playing" and room.everyone_guessed():
            self._begin_early_end(room, step)
        return step

    # -- round flow -------------------------------------------------------

    def start_round(self, room: Room, now: float) -> Step:
        if room.round > self.settings.max_rounds:
            return self.game_over(room)

        step = Step()
        player_ids = list(room.players)
        if len(player_ids) < self.settings.min_players:
            self._clear_round(room)
            room.state = "lobby"
            room.game_started = False
            room.drawer_id = None
            step.cancel_timer = True
            step.system("Waiting for more players...", to=room.code)
            return step

        drawer_id = player_ids[room.drawer_index % len(player_ids)]
        self._clear_round(room)
        room.state = "choosing"
        room.drawer_id = drawer_id
        room.word_choices = self.word_bank.pick(self.settings.word_choices_count)

        drawer = room.players[drawer_id]
        step.emit(events.NEW_ROUND, room.round, drawer.id, drawer.name, to=room.code)
        step.emit(events.CLEAR_CANVAS, to=room.code)
        step.emit(events.WORD_HINT, "Waiting...", to=room.code)
        step.emit(events.YOUR_TURN, list(room.word_choices), to=drawer.id)
        step.after = (self.settings.choose_duration_sec, "auto_choose")
        return step

    def next_round(self, room: Room, now: float) -> Step:
        room.round += 1
        room.drawer_index += 1
        return self.start_round(room, now)

    def choose_word(self, room: Room, sid: str, word: str, now: float) -> Step:
        if room.state != "choosing" or sid != room.drawer_id:
            raise NotYourTurn("not your turn", room_code=room.code)
        wanted = (word or "").strip().casefold()
        for choice in room.word_choices:
            if choice.casefold() == wanted:
                return self._activate(room, choice, now, auto=False)
        raise NotYourTurn("word was not offered", room_code=room.code)

    def auto_choose(self, room: Room, now: float) -> Step:
        if room.state != "choosing" or not room.word_choices:
            return Step()
        return self._activate(room, room.word_choices[0], now, auto=True)

    def tick(self, room: Room, now: float) -> Step:
        step = Step()
        if room.state != "playing":
            return step

        step.emit(events.TIMER, room.time_left, to=room.code)
        room.time_left -= 1
        if room.time_left < 0:
            room.state = "reveal"
            step.emit(events.WORD_REVEAL, room.word, to=room.code)
            step.system(f"Time's up! The word was: {room.word}", to=room.code)
            step.after = (self.settings.reveal_delay_sec, "next_round")
        else:
            step.after = (1, "tick")
        return step

    def reveal(self, room: Room, now: float) -> Step:
        step = Step()
        if room.state != "ending":
            return step
        room.state = "reveal"
        step.emit(events.WORD_REVEAL, room.word, to=room.code)
        step.system("Everyone guessed it!", to=room.code)
        step.after = (self.settings.next_round_delay_sec, "next_round")
        return step

    def game_over(self, room: Room) -> Step:
        step = Step()
        self._clear_round(room)
        room.state = "over"
        room.drawer_id = None
        step.emit(events.GAME_OVER, build_leaderboard(room), to=room.code)
        step.close = True
        return step

    # -- chat / guesses ---------------------------------------------------

    def submit_chat(self, room: Room, sid: str, text: str, now: float) -> Step:
        step = Step()
        player = room.players.get(sid)
        guess = (text or "").strip()
        if player is None or not guess:
            return step

        if not room.word_is_secret:
            self._chat(step, room, player, guess)
            return step

        word = room.word.casefold()
        lowered = guess.casefold()

        if sid == room.drawer_id:
            if word in lowered:
                step.system("You can't reveal the word!", to=sid)
            else:
                self._chat(step, room, player, guess)
            return step

        if sid in room.correct_guessers:
            step.system("You already guessed it!", to=sid)
            return step

        if lowered == word:
            room.correct_guessers.add(sid)
            points = points_for(
                elapsed_seconds(room.started_at, now),
                min_points=self.settings.min_points,
                max_points=self.settings.max_points,
            )
            player.score += points
            step.system(f"Correct! +{points} pts", to=sid)
            step.emit(events.CORRECT_GUESS, player.name, points, to=room.code)
            step.emit(events.UPDATE_PLAYERS, room.public_players(), to=room.code)
            if room.state == "playing" and room.everyone_guessed():
                self._begin_early_end(room, step)
            return step

        if len(guess) >= self.settings.near_miss_min_length and (word in lowered or lowered in word):
            step.system("Too close!", to=sid)
            return step

        self._chat(step, room, player, guess)
        return step

    def can_draw(self, room: Room, sid: str) -> bool:
        return sid == room.drawer_id and room.word_is_secret

    # -- helpers ----------------------------------------------------------

    def _activate(self, room: Room, word: str, now: float, auto: bool) -> Step:
        step = Step()
        room.state = "playing"
        room.word = word
        room.word_choices = []
        room.correct_guessers = set()
        room.started_at = now
        room.time_left = self.settings.round_duration_sec

        step.emit(events.WORD_HINT, mask_word(word), to=room.code)
        if auto:
            step.emit(events.AUTO_CHOOSE_WORD, word, to=room.drawer_id)
        else:
            step.emit(events.SECRET_WORD, word, to=room.drawer_id)
        step.after = (1, "tick")
        return step

    def _begin_early_end(self, room: Room, step: Step) -> None:
        room.state = "ending"
        step.after = (self.settings.all_guessed_delay_sec, "reveal")

    def _chat(self, step: Step, room: Room, player: Player, text: str) -> None:
        step.emit(events.MESSAGE, {"user": player.name, "text": text}, to=room.code)

    @staticmethod
    def _clear_round(room: Room) -> None:
        room.word = None
        room.word_choices = []
        room.correct_guessers = set()
        room.started_at = None
        room.time_left = 0
