# src/seat_watch/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The poller depends on Protocols instead of concrete implementations.
This keeps the platform client and the connectors swappable and makes testing easier.
"""

from typing import Any, Awaitable, Protocol

from ..tracking.models import AvailabilityStatus, SectionRecord, TrackedItem


class SectionSource(Protocol):
    """Live section data for a (term, subject, course number) triple. Raises QueryError."""

    def fetch_sections(self, term: str, subject: str, course_number: str) -> Awaitable[list[SectionRecord]]: ...


class OpenSectionSink(Protocol):
    """
    Connector-side port: how the poller reports a closed -> open transition.

    The connector decides how to format and deliver the alert.
    owns() tells the hub which user keys a connector is responsible for.
    """

    def owns(self, user_id: str) -> bool: ...

    def on_became_open(self, user_id: str, item: TrackedItem) -> Awaitable[None]: ...


class TrackedRepo(Protocol):
    # Command layer API
    def add(
            self,
            user_id: str,
            *,
            term: str,
            subject: str,
            course_number: str,
            section: str,
            crn: str,
    ) -> TrackedItem: ...
    def remove(self, user_id: str, crn: str) -> bool: ...
    def clear(self, user_id: str) -> None: ...
    def list(self, user_id: str) -> list[TrackedItem]: ...
    def count(self, user_id: str | None = None) -> int: ...

    # Poller API
    def snapshot(self) -> dict[str, list[Any]]: ...
    def update(
            self,
            user_id: str,
            crn: str,
            status: AvailabilityStatus,
            *,
            expect: TrackedItem | None = None,
    ) -> AvailabilityStatus | None: ...
