# src/seat_watch/tracking/store.py

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from .models import AvailabilityStatus, TrackedItem, normalize_section, normalize_subject

logger = logging.getLogger(__name__)


class DuplicateError(Exception):
    """The user already tracks a section with this CRN."""

    def __init__(self, user_id: str, crn: str) -> None:
        super().__init__(f"CRN {crn} is already tracked for {user_id}")
        self.user_id = user_id
        self.crn = crn


class TrackedStore:
    """
    In-memory tracked-section store: user key -> ordered list of TrackedItem.

    Thread-safety:
    - one lock per user list; a guard lock protects the user map itself
    - every read returns copies, so callers never hold a list that a
      concurrent removal could mutate under them

    Only add() creates a user entry; reads for an unknown user return empty
    results without touching the map.

    Nothing is persisted; the store lives as long as the process.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._items: dict[str, list[TrackedItem]] = {}
        logger.info("TrackedStore ready (in-memory)")

    # ---- low-level helpers ----

    def _lock_for(self, user_id: str, *, create: bool = False) -> threading.Lock | None:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None and create:
                lock = threading.Lock()
                self._locks[user_id] = lock
                self._items[user_id] = []
            return lock

    # ---- public API ----

    def add(
        self,
        user_id: str,
        *,
        term: str,
        subject: str,
        course_number: str,
        section: str,
        crn: str,
    ) -> TrackedItem:
        item = TrackedItem(
            term=str(term).strip(),
            subject=normalize_subject(subject),
            course_number=str(course_number).strip(),
            section=normalize_section(section),
            crn=str(crn).strip(),
        )
        if not item.crn:
            raise ValueError("crn is required")

        lock = self._lock_for(user_id, create=True)
        with lock:
            items = self._items[user_id]
            if any(x.crn == item.crn for x in items):
                raise DuplicateError(user_id, item.crn)
            items.append(item)
            logger.debug("Tracked user=%s %s crn=%s term=%s", user_id, item.label, item.crn, item.term)
            return replace(item)

    def remove(self, user_id: str, crn: str) -> bool:
        lock = self._lock_for(user_id)
        if lock is None:
            return False

        crn = str(crn).strip()
        with lock:
            items = self._items[user_id]
            for i, x in enumerate(items):
                if x.crn == crn:
                    del items[i]
                    logger.debug("Untracked user=%s crn=%s", user_id, crn)
                    return True
            return False

    def clear(self, user_id: str) -> None:
        lock = self._lock_for(user_id)
        if lock is None:
            return
        with lock:
            self._items[user_id].clear()

    def list(self, user_id: str) -> list[TrackedItem]:
        lock = self._lock_for(user_id)
        if lock is None:
            return []
        with lock:
            return [replace(x) for x in self._items[user_id]]

    def update(
        self,
        user_id: str,
        crn: str,
        status: AvailabilityStatus,
        *,
        expect: TrackedItem | None = None,
    ) -> AvailabilityStatus | None:
        """
        Overwrite the status fields of one item.

        Returns the status the item had before the write, or None if the item
        is gone (it may have been removed while its poll was in flight).

        When `expect` is given (the poller passes the item it polled), the
        stored item must still point at the same term/course/section; a CRN
        that was removed and re-added for another section counts as gone.
        """
        lock = self._lock_for(user_id)
        if lock is None:
            return None

        with lock:
            for x in self._items[user_id]:
                if x.crn != crn:
                    continue
                if expect is not None and x.key != expect.key:
                    logger.debug("Stale update skipped user=%s crn=%s (now %s)", user_id, crn, x.label)
                    return None
                previous = x.status
                x.apply(status)
                return previous
            return None

    def users(self) -> list[str]:
        with self._guard:
            return list(self._items.keys())

    def snapshot(self) -> dict[str, list[TrackedItem]]:
        """Copies of every non-empty user list (used by the poller)."""
        out: dict[str, list[TrackedItem]] = {}
        for user_id in self.users():
            items = self.list(user_id)
            if items:
                out[user_id] = items
        return out

    def count(self, user_id: str | None = None) -> int:
        if user_id is not None:
            return len(self.list(user_id))
        return sum(len(items) for items in self.snapshot().values())
