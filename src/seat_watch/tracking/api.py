# src/seat_watch/tracking/api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from .models import TrackedItem

logger = logging.getLogger(__name__)


def add_tracked(
    state: AppState,
    user_id: str,
    *,
    term: str,
    subject: str,
    course_number: str,
    section: str,
    crn: str,
) -> TrackedItem:
    """
    Start watching one section for user_id.
    Raises DuplicateError if the CRN is already on the user's list.
    """
    item = state.store.add(
        user_id,
        term=term,
        subject=subject,
        course_number=course_number,
        section=section,
        crn=crn,
    )
    logger.info("user=%s now tracks %s crn=%s term=%s", user_id, item.label, item.crn, item.term)
    return item


def remove_tracked(state: AppState, user_id: str, crn: str) -> bool:
    removed = state.store.remove(user_id, crn)
    if removed:
        logger.info("user=%s untracked crn=%s", user_id, crn)
    return removed


def clear_tracked(state: AppState, user_id: str) -> None:
    state.store.clear(user_id)
    logger.info("user=%s cleared tracking list", user_id)


def get_tracked(state: AppState, user_id: str) -> list[TrackedItem]:
    return state.store.list(user_id)
