# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from seat_watch.core.notify import NotificationHub
from seat_watch.core.state import AppState
from seat_watch.tracking.store import TrackedStore

from .fakes import FakeSectionSource


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="seat-watch-test",
        data_dir=tmp_path,
        banner_base_url="https://banner.test/StudentRegistrationSsb",
        query_timeout_seconds=1.0,
        page_max_size=50,
        poll_interval_seconds=300.0,
        poll_max_concurrency=4,
        console_enabled=False,
        matrix_enabled=False,
    )


@pytest.fixture()
def source() -> FakeSectionSource:
    return FakeSectionSource()


@pytest.fixture()
def state(settings: SimpleNamespace, source: FakeSectionSource) -> AppState:
    """
    AppState wired with a fake section source.

    NOTE: We keep the real TrackedStore here because its locking and
    normalization are part of what we want to test.
    """
    return AppState(
        settings=settings,
        store=TrackedStore(),
        source=source,
        notifier=NotificationHub(),
    )
