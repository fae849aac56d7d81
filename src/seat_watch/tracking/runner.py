# src/seat_watch/tracking/runner.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from ..core.state import AppState
from .poller import run_poller

logger = logging.getLogger(__name__)


@dataclass
class PollerBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        """Ask the poller to exit after the sweep in progress (if any)."""
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal poller stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_poller_in_background(state: AppState) -> PollerBackgroundRunner | None:
    """
    Start the seat poller on its own thread + event loop.

    The console REPL blocks the main thread on input(), and the Matrix
    connector owns a separate loop, so the poller gets a loop of its own.
    """
    settings = state.settings
    interval = float(getattr(settings, "poll_interval_seconds", 300.0))
    concurrency = int(getattr(settings, "poll_max_concurrency", 4))

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
            loop.run_until_complete(
                run_poller(
                    state.store,
                    state.source,
                    state.notifier,
                    interval_seconds=interval,
                    max_concurrency=concurrency,
                    stop_event=stop_event,
                )
            )
        except Exception:
            logger.exception("Poller thread crashed.")
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="seat-poller", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Poller thread did not initialize properly.")
        return None

    logger.info("Poller background thread started.")
    return PollerBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
