# src/seat_watch/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tracking.store import TrackedStore
from .notify import NotificationHub
from .ports import SectionSource


@dataclass
class AppState:
    # Settings object (config.Settings or a SimpleNamespace in tests).
    settings: Any

    store: TrackedStore
    source: SectionSource
    notifier: NotificationHub
