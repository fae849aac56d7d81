# tests/test_notify.py

from __future__ import annotations

import asyncio
import logging

import pytest

from seat_watch.connectors.console_connector import CONSOLE_USER_ID, ConsoleSink
from seat_watch.connectors.formatting import render_open_alert
from seat_watch.core.notify import NotificationHub
from seat_watch.tracking.models import TrackedItem

from .fakes import FakeSink


class RoomSink(FakeSink):
    def owns(self, user_id: str) -> bool:
        return user_id.startswith("!")


def _item(seats: int = 3) -> TrackedItem:
    return TrackedItem(
        term="252", subject="ENGL", course_number="214", section="02", crn="30577",
        available_seats=seats, is_open=True,
    )


def test_open_alert_text() -> None:
    assert render_open_alert(_item()) == "OPEN: ENGL214-02 - 30577\nAvailable Seats: 3"


@pytest.mark.asyncio
async def test_hub_routes_to_owner_and_drops_unowned() -> None:
    hub = NotificationHub()
    rooms = RoomSink()
    hub.register(rooms)

    await hub.on_became_open("!room:example.org", _item())
    await hub.on_became_open("someone-else", _item())

    assert [a.user_id for a in rooms.sent] == ["!room:example.org"]
    assert hub.owns("!x:y") is True
    assert hub.owns("console") is False

    hub.unregister(rooms)
    assert hub.owns("!x:y") is False


@pytest.mark.asyncio
async def test_console_sink_prints_alert(capsys) -> None:
    sink = ConsoleSink()
    assert sink.owns(CONSOLE_USER_ID)
    assert not sink.owns("!room:example.org")

    await sink.on_became_open(CONSOLE_USER_ID, _item(seats=7))
    out = capsys.readouterr().out
    assert "OPEN: ENGL214-02 - 30577" in out
    assert "Available Seats: 7" in out


class _FakeMatrixClient:
    def __init__(self, response) -> None:
        self.response = response
        self.sent: list[dict] = []

    async def room_send(self, **kwargs):
        self.sent.append(kwargs)
        return self.response


@pytest.mark.asyncio
async def test_matrix_sink_warns_when_send_is_rejected(caplog) -> None:
    from nio import RoomSendError, RoomSendResponse

    from seat_watch.connectors.matrix_connector import MatrixSink

    room = "!room:example.org"
    loop = asyncio.get_running_loop()

    rejected = _FakeMatrixClient(RoomSendError("not allowed", "M_FORBIDDEN"))
    with caplog.at_level(logging.INFO, logger="seat_watch.connectors.matrix_connector"):
        await MatrixSink(rejected, loop, None).on_became_open(room, _item())

    assert rejected.sent[0]["room_id"] == room
    assert rejected.sent[0]["content"]["body"].startswith("OPEN: ENGL214-02 - 30577")
    assert any(r.levelno == logging.WARNING and "NOT delivered" in r.getMessage() for r in caplog.records)
    assert not any("Open alert sent" in r.getMessage() for r in caplog.records)

    caplog.clear()
    accepted = _FakeMatrixClient(RoomSendResponse("$event", room))
    with caplog.at_level(logging.INFO, logger="seat_watch.connectors.matrix_connector"):
        await MatrixSink(accepted, loop, {room}).on_became_open(room, _item())

    assert any("Open alert sent" in r.getMessage() for r in caplog.records)
    assert not any(r.levelno >= logging.WARNING for r in caplog.records)
