# src/seat_watch/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (store, Banner client, notification hub).
"""

from __future__ import annotations

import logging

from ..banner.client import BannerClient
from ..config import get_settings
from ..core.notify import NotificationHub
from ..core.state import AppState
from ..tracking.store import TrackedStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    source = BannerClient(
        settings.banner_base_url,
        timeout_seconds=settings.query_timeout_seconds,
        page_max_size=settings.page_max_size,
    )
    logger.debug("Banner client ready base_url=%s", source.base_url)

    return AppState(
        settings=settings,
        store=TrackedStore(),
        source=source,
        notifier=NotificationHub(),
    )
