# src/seat_watch/tracking/models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SectionRecord = dict[str, Any]
# Raw Banner search row: {"courseReferenceNumber": "...", "sequenceNumber": "...", ...}.


def normalize_section(value: object) -> str:
    """Zero-pad a section number to two characters ("2" -> "02"); longer values pass through."""
    return str(value).strip().rjust(2, "0")


def normalize_subject(value: object) -> str:
    return str(value).strip().upper()


@dataclass(slots=True, frozen=True)
class AvailabilityStatus:
    available_seats: int = 0
    waiting_list_open: bool = False
    is_open: bool = False


CLOSED = AvailabilityStatus()


@dataclass(slots=True)
class TrackedItem:
    """
    One user's watch on one section.

    Status fields start closed/zero and are only written by the poller
    after a successful match.
    """

    term: str
    subject: str
    course_number: str
    section: str
    crn: str

    available_seats: int = 0
    waiting_list_open: bool = False
    is_open: bool = False

    @property
    def label(self) -> str:
        # ENGL214-02
        return f"{self.subject}{self.course_number}-{self.section}"

    @property
    def key(self) -> tuple[str, str, str, str, str]:
        """Which section this watch points at; a re-added CRN with other fields is a different watch."""
        return (self.term, self.subject, self.course_number, self.section, self.crn)

    @property
    def status(self) -> AvailabilityStatus:
        return AvailabilityStatus(
            available_seats=self.available_seats,
            waiting_list_open=self.waiting_list_open,
            is_open=self.is_open,
        )

    def apply(self, status: AvailabilityStatus) -> None:
        self.available_seats = status.available_seats
        self.waiting_list_open = status.waiting_list_open
        self.is_open = status.is_open
