# src/seat_watch/connectors/formatting.py

from __future__ import annotations

from collections.abc import Sequence

from ..tracking.models import TrackedItem

TRACKED_HEADER = "Here is the list of your currently tracked sections:"
COPY_HINT = "copy a CRN from the list to use it with /untrack"


def _marker(flag: bool) -> str:
    return "🟢" if flag else "🔴"


def _open_closed(flag: bool) -> str:
    return f"{_marker(flag)} {'Open' if flag else 'Closed'}"


def render_item_line(item: TrackedItem) -> str:
    # ENGL214-02  -  30577
    return f"{item.label}  -  {item.crn}"


def render_tracked_list(items: Sequence[TrackedItem]) -> str:
    if not items:
        return "Your tracking list is empty. Use /track"

    blocks = [f"{TRACKED_HEADER}\n\n{COPY_HINT}"]
    for it in items:
        blocks.append(
            f"{render_item_line(it)}\n"
            f"Available Seats: {it.available_seats}\n"
            f"Waiting list: {_open_closed(it.waiting_list_open)}"
        )
    return "\n\n".join(blocks)


def render_open_alert(item: TrackedItem) -> str:
    return f"OPEN: {item.label} - {item.crn}\nAvailable Seats: {item.available_seats}"
