# src/seat_watch/connectors/matrix_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import time
from dataclasses import dataclass

from nio import MatrixRoom, RoomMessageText, RoomSendError

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tracking.models import TrackedItem
from .formatting import render_open_alert
from .matrix_client import create_matrix_client

logger = logging.getLogger(__name__)

SEND_TIMEOUT_SECONDS = 30.0


def _ms_now() -> int:
    return int(time.time() * 1000)


def _room_allowlist(settings_rooms: list[str]) -> set[str] | None:
    rooms = [r.strip() for r in (settings_rooms or []) if str(r).strip()]
    return set(rooms) if rooms else None


async def _send_text(client, *, room_id: str, text: str):
    """Send a plain-text message. nio reports failures as a RoomSendError response, not an exception."""
    return await client.room_send(
        room_id=room_id,
        message_type="m.room.message",
        content={"msgtype": "m.text", "body": text},
        ignore_unverified_devices=True,
    )


class MatrixSink:
    """
    Delivers open alerts to Matrix rooms.

    Tracking lists from Matrix are keyed by room id, so this sink owns every
    "!room:server" key (restricted to the allowlist when one is configured).
    The poller runs on another thread/loop; sends are scheduled onto the
    connector's own loop.
    """

    def __init__(self, client, loop: asyncio.AbstractEventLoop, allowed_rooms: set[str] | None) -> None:
        self._client = client
        self._loop = loop
        self._allowed_rooms = allowed_rooms

    def owns(self, user_id: str) -> bool:
        if not user_id.startswith("!"):
            return False
        return self._allowed_rooms is None or user_id in self._allowed_rooms

    async def on_became_open(self, user_id: str, item: TrackedItem) -> None:
        text = render_open_alert(item)
        fut = asyncio.run_coroutine_threadsafe(_send_text(self._client, room_id=user_id, text=text), self._loop)
        resp = await asyncio.wait_for(asyncio.wrap_future(fut), timeout=SEND_TIMEOUT_SECONDS)
        if isinstance(resp, RoomSendError):
            logger.warning("Open alert NOT delivered to room %s (crn=%s): %s", user_id, item.crn, resp)
            return
        logger.info("Open alert sent to room %s (crn=%s).", user_id, item.crn)


async def _run_matrix_bot(state: AppState, stop_event: asyncio.Event) -> None:
    """
    Matrix connector (async):

    login -> register sink -> callbacks -> sync loop

    Shutdown model:
    - main thread sets stop_event via loop.call_soon_threadsafe(stop_event.set)
    - we run a manual sync loop so we can exit promptly.
    """
    settings = state.settings

    startup_ts = _ms_now()
    allowed_rooms = _room_allowlist(getattr(settings, "matrix_rooms", []) or [])
    logger.info("Matrix allowed_rooms=%s", allowed_rooms if allowed_rooms is not None else "ALL")

    client = await create_matrix_client(settings)
    if client is None:
        logger.error("Matrix client creation failed; connector will stop.")
        return

    sink = MatrixSink(client, asyncio.get_running_loop(), allowed_rooms)
    state.notifier.register(sink)

    async def message_callback(room: MatrixRoom, event: RoomMessageText) -> None:
        # Ignore backlog from before startup.
        ts = getattr(event, "server_timestamp", None)
        if ts is not None and ts <= startup_ts:
            return

        if event.sender == client.user_id:
            return

        if allowed_rooms is not None and room.room_id not in allowed_rooms:
            return

        body = (event.body or "").strip()
        if not body.startswith("/"):
            return

        logger.info("Matrix <%s> %s: %r", room.display_name, event.sender, body)

        try:
            resp = command_registry.handle(state, body, user_id=event.sender, room_id=room.room_id)
        except Exception:
            logger.exception("Command handler crashed.")
            resp = "Internal error while handling a command."

        if not resp:
            return
        try:
            sent = await _send_text(client, room_id=room.room_id, text=resp)
            if isinstance(sent, RoomSendError):
                logger.warning("Command reply to %s failed: %s", room.room_id, sent)
        except Exception:
            logger.exception("Failed to send command reply.")

    client.add_event_callback(message_callback, RoomMessageText)

    try:
        logger.info("Matrix initial sync...")
        await client.sync(timeout=30000, full_state=True)
        logger.info("Matrix initial sync done. Joined rooms: %d", len(client.rooms))

        while not stop_event.is_set():
            await client.sync(timeout=30000, full_state=False)

    except asyncio.CancelledError:
        logger.info("Matrix connector cancelled.")
    except Exception:
        logger.exception("Matrix connector crashed.")
    finally:
        state.notifier.unregister(sink)
        with contextlib.suppress(Exception):
            await client.close()
        logger.info("Matrix connector stopped.")


@dataclass
class MatrixBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal Matrix stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_matrix_in_background(state: AppState) -> MatrixBackgroundRunner | None:
    """Start the Matrix connector in a background thread with its own event loop."""
    if not getattr(state.settings, "matrix_enabled", False):
        logger.info("Matrix connector disabled, not starting.")
        return None

    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_matrix_bot(state, stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="matrix-connector", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Matrix thread did not initialize properly.")
        return None

    logger.info("Matrix background thread started.")
    return MatrixBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
