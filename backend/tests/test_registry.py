import pytest

from sketchguess.game.errors import AlreadyInRoom, InvalidPayload, NoSuchRoom, RoomExists, RoomFull
from sketchguess.game.registry import RoomRegistry, normalize_name


def test_codes_are_case_insensitive():
    registry = RoomRegistry()
    room, player = registry.create("abcd", "s1", "Alice")
    assert room.code == "ABCD"
    assert registry.get("aBcD") is room
    with pytest.raises(RoomExists):
        registry.create("ABCD", "s2", "Bob")
    joined, _ = registry.join(" abcd ", "s2", "Bob")
    assert joined is room
    assert list(room.players) == ["s1", "s2"]


def test_join_unknown_room():
    registry = RoomRegistry()
    with pytest.raises(NoSuchRoom) as info:
        registry.join("ZZZZ", "s1", "Alice")
    assert info.value.room_code == "ZZZZ"


def test_room_full_at_capacity():
    registry = RoomRegistry(capacity=3)
    registry.create("ROOM", "s0", "p0")
    registry.join("ROOM", "s1", "p1")
    registry.join("ROOM", "s2", "p2")
    with pytest.raises(RoomFull):
        registry.join("ROOM", "s3", "p3")


@pytest.mark.parametrize("code", ["", "   ", "AB-CD", "X" * 13])
def test_bad_codes_rejected(code):
    registry = RoomRegistry()
    with pytest.raises(InvalidPayload):
        registry.create(code, "s1", "Alice")
    assert len(registry) == 0


def test_reverse_index_tracks_membership():
    registry = RoomRegistry()
    room, _ = registry.create("ABCD", "s1", "Alice")
    registry.join("ABCD", "s2", "Bob")
    assert registry.room_for("s2") is room
    with pytest.raises(AlreadyInRoom):
        registry.create("WXYZ", "s2", "Bob")

    room.correct_guessers.add("s2")
    left_room, player = registry.leave("s2")
    assert left_room is room and player.name == "Bob"
    assert "s2" not in room.correct_guessers
    assert registry.room_for("s2") is None
    assert registry.leave("s2") is None


def test_discard_drops_room_and_index():
    registry = RoomRegistry()
    room, _ = registry.create("ABCD", "s1", "Alice")
    registry.join("ABCD", "s2", "Bob")
    assert registry.discard(room) is True
    assert registry.get("ABCD") is None
    assert registry.room_for("s1") is None
    assert registry.discard(room) is False
    with pytest.raises(NoSuchRoom):
        registry.join("ABCD", "s3", "Cara")


def test_names_are_defaulted_and_clipped():
    assert normalize_name("") == "Guest"
    assert normalize_name("   ") == "Guest"
    assert normalize_name("  Ann  Lee ") == "Ann Lee"
    assert normalize_name("x" * 40, max_length=16) == "x" * 16
