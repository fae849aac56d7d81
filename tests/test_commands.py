# tests/test_commands.py

from __future__ import annotations

from seat_watch.cli.commands import CommandRegistry, registry
from seat_watch.tracking.models import AvailabilityStatus

ROOM = "!abc:example.org"


def test_command_registry_routes_args_aliases_and_bot_suffix(state) -> None:
    reg = CommandRegistry()
    seen: list[tuple[list[str], str | None, str | None]] = []

    def handler(state, args, user_id, room_id):
        seen.append((args, user_id, room_id))
        return "ok"

    reg.register("track", handler, "t", aliases=["t"])

    assert reg.handle(state, "/track 252 ENGL", user_id="u", room_id="r") == "ok"
    assert reg.handle(state, "/T@seatbot 1", user_id="u") == "ok"
    assert seen == [(["252", "ENGL"], "u", "r"), (["1"], "u", None)]
    assert "/track - t" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_track_list_untrack_clear_flow(state) -> None:
    reply = registry.handle(state, "/track 252 engl 214 2 30577", user_id="@bob:example.org", room_id=ROOM)
    assert reply == "Added: ENGL214-02 - 30577"

    # Lists are per room, not per sender.
    assert [x.crn for x in state.store.list(ROOM)] == ["30577"]

    dup = registry.handle(state, "/track 252 ENGL 214 02 30577", user_id="@ann:example.org", room_id=ROOM)
    assert dup == "CRN 30577 is already tracked. Use /tracked"
    assert state.store.count(ROOM) == 1

    state.store.update(ROOM, "30577", AvailabilityStatus(available_seats=3, waiting_list_open=True, is_open=True))
    listing = registry.handle(state, "/tracked", room_id=ROOM)
    assert listing is not None
    assert "ENGL214-02  -  30577" in listing
    assert "Available Seats: 3" in listing
    assert "Waiting list: 🟢 Open" in listing
    assert "copy a CRN from the list" in listing

    assert registry.handle(state, "/untrack 99999", room_id=ROOM) == "CRN not found."
    assert registry.handle(state, "/untrack 30577", room_id=ROOM) == "Removed CRN 30577."
    assert state.store.list(ROOM) == []

    registry.handle(state, "/track 252 MATH 101 01 11111", room_id=ROOM)
    assert registry.handle(state, "/clear", room_id=ROOM) == "Cleared your tracking list."
    assert registry.handle(state, "/tracked", room_id=ROOM) == "Your tracking list is empty. Use /track"


def test_track_usage_on_wrong_arity(state) -> None:
    reply = registry.handle(state, "/track 252 ENGL 214", user_id="console")
    assert reply is not None and reply.startswith("Usage: /track")
    assert state.store.list("console") == []


def test_console_user_key_when_no_room(state) -> None:
    registry.handle(state, "/track 252 ENGL 214 02 30577", user_id="console")
    assert state.store.count("console") == 1


def test_help_and_status(state) -> None:
    help_text = registry.handle(state, "/help", user_id="console") or ""
    for name in ("/track", "/untrack", "/clear", "/tracked"):
        assert name in help_text
    assert "/track 252 ENGL 214 02 30577" in help_text

    status = registry.handle(state, "/status", user_id="console") or ""
    assert "Poll interval: 300s" in status
    assert "Your tracked sections: 0" in status
