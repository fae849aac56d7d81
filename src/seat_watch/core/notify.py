# src/seat_watch/core/notify.py

from __future__ import annotations

import logging
import threading

from ..tracking.models import TrackedItem
from .ports import OpenSectionSink

logger = logging.getLogger(__name__)


class NotificationHub:
    """
    Routes "section became open" events to the connector that owns the user key.

    Connectors register themselves when they start (possibly after the poller
    is already running) and unregister on shutdown. The hub is itself an
    OpenSectionSink, so the poller only ever sees one sink.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sinks: list[OpenSectionSink] = []

    def register(self, sink: OpenSectionSink) -> None:
        with self._lock:
            if sink not in self._sinks:
                self._sinks.append(sink)

    def unregister(self, sink: OpenSectionSink) -> None:
        with self._lock:
            if sink in self._sinks:
                self._sinks.remove(sink)

    def _owner(self, user_id: str) -> OpenSectionSink | None:
        with self._lock:
            sinks = list(self._sinks)
        for sink in sinks:
            if sink.owns(user_id):
                return sink
        return None

    def owns(self, user_id: str) -> bool:
        return self._owner(user_id) is not None

    async def on_became_open(self, user_id: str, item: TrackedItem) -> None:
        sink = self._owner(user_id)
        if sink is None:
            logger.warning("No connector owns user=%s; alert for %s (crn=%s) dropped", user_id, item.label, item.crn)
            return
        await sink.on_became_open(user_id, item)
