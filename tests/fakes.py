# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from seat_watch.core.ports import OpenSectionSink
from seat_watch.tracking.models import SectionRecord, TrackedItem

Key = tuple[str, str, str]


class FakeSectionSource:
    """
    Deterministic SectionSource for poller tests.

    - responses maps (term, subject, course_number) -> rows, or an Exception to raise
    - captures calls and the peak number of concurrent fetches
    """

    def __init__(self, responses: dict[Key, list[SectionRecord] | Exception] | None = None, delay: float = 0.0) -> None:
        self.responses: dict[Key, list[SectionRecord] | Exception] = dict(responses or {})
        self.delay = delay
        self.calls: list[Key] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_sections(self, term: str, subject: str, course_number: str) -> list[SectionRecord]:
        key = (term, subject, course_number)
        self.calls.append(key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            resp = self.responses.get(key, [])
            if isinstance(resp, Exception):
                raise resp
            return [dict(r) for r in resp]
        finally:
            self.in_flight -= 1


@dataclass(slots=True)
class SentAlert:
    user_id: str
    item: TrackedItem


@dataclass(slots=True)
class FakeSink(OpenSectionSink):
    """
    Fake OpenSectionSink used by poller tests. Owns every user key.
    """

    sent: list[SentAlert] = field(default_factory=list)

    def owns(self, user_id: str) -> bool:
        return True

    async def on_became_open(self, user_id: str, item: TrackedItem) -> None:
        self.sent.append(SentAlert(user_id=user_id, item=item))
