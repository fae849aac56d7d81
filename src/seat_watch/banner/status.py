# src/seat_watch/banner/status.py

"""
Availability evaluation for a single Banner search row.

Banner deployments disagree on waitlist field names, so any positive
waitlist signal counts. Missing fields never raise; they degrade to
"closed / no seats / no waitlist".
"""

from __future__ import annotations

from typing import Any

from ..tracking.models import AvailabilityStatus, SectionRecord


def _as_int(value: Any) -> int | None:
    # bool is an int subclass; a flag in a numeric field is not a count.
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _positive(value: Any) -> bool:
    n = _as_int(value)
    return n is not None and n > 0


def evaluate(record: SectionRecord) -> AvailabilityStatus:
    seats = _as_int(record.get("seatsAvailable"))
    open_flag = record.get("openSection") is True

    is_open = open_flag and (seats is None or seats > 0)

    wait_flag = record.get("waitAvailable")
    waiting_list_open = (
        wait_flag is True
        or _positive(wait_flag)
        or _positive(record.get("waitCount"))
        or _positive(record.get("waitCapacity"))
    )

    return AvailabilityStatus(
        available_seats=max(0, seats) if seats is not None else 0,
        waiting_list_open=waiting_list_open,
        is_open=is_open,
    )
