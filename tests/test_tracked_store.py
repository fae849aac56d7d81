# tests/test_tracked_store.py

from __future__ import annotations

import threading

import pytest

from seat_watch.tracking.models import AvailabilityStatus
from seat_watch.tracking.store import DuplicateError, TrackedStore


def _add(store: TrackedStore, user: str, crn: str, section: str = "2"):
    return store.add(user, term="252", subject="engl", course_number="214", section=section, crn=crn)


def test_add_normalizes_and_zeroes_status() -> None:
    store = TrackedStore()
    item = _add(store, "u1", "30577")

    assert item.subject == "ENGL"
    assert item.course_number == "214"
    assert item.section == "02"
    assert item.crn == "30577"
    assert (item.available_seats, item.waiting_list_open, item.is_open) == (0, False, False)
    assert [x.crn for x in store.list("u1")] == ["30577"]


def test_duplicate_crn_is_rejected_and_store_unchanged() -> None:
    store = TrackedStore()
    _add(store, "u1", "30577")

    with pytest.raises(DuplicateError) as exc:
        _add(store, "u1", "30577", section="05")

    assert exc.value.crn == "30577"
    items = store.list("u1")
    assert len(items) == 1
    assert items[0].section == "02"


def test_same_crn_for_different_users_is_allowed() -> None:
    store = TrackedStore()
    _add(store, "u1", "30577")
    _add(store, "u2", "30577")
    assert store.count() == 2


def test_remove_existing_and_missing() -> None:
    store = TrackedStore()
    _add(store, "u1", "1")
    _add(store, "u1", "2")

    assert store.remove("u1", "999") is False
    assert len(store.list("u1")) == 2

    assert store.remove("u1", "1") is True
    assert [x.crn for x in store.list("u1")] == ["2"]


def test_list_preserves_insertion_order_and_returns_copies() -> None:
    store = TrackedStore()
    for crn in ("30", "10", "20"):
        _add(store, "u1", crn)

    items = store.list("u1")
    assert [x.crn for x in items] == ["30", "10", "20"]

    items[0].is_open = True
    items.clear()
    assert store.list("u1")[0].is_open is False
    assert len(store.list("u1")) == 3


def test_clear_and_unknown_user() -> None:
    store = TrackedStore()
    assert store.list("nobody") == []

    _add(store, "u1", "1")
    store.clear("u1")
    assert store.list("u1") == []
    assert store.snapshot() == {}


def test_update_returns_previous_status() -> None:
    store = TrackedStore()
    _add(store, "u1", "30577")

    opened = AvailabilityStatus(available_seats=3, waiting_list_open=True, is_open=True)
    prev = store.update("u1", "30577", opened)
    assert prev == AvailabilityStatus()

    item = store.list("u1")[0]
    assert (item.available_seats, item.waiting_list_open, item.is_open) == (3, True, True)

    assert store.update("u1", "30577", AvailabilityStatus()) == opened


def test_update_missing_item_is_noop() -> None:
    store = TrackedStore()
    assert store.update("u1", "404", AvailabilityStatus(is_open=True)) is None

    _add(store, "u1", "1")
    store.remove("u1", "1")
    assert store.update("u1", "1", AvailabilityStatus(is_open=True)) is None
    assert store.list("u1") == []


def test_update_with_expected_item_rejects_readded_crn() -> None:
    store = TrackedStore()
    polled = _add(store, "u1", "30577")

    store.remove("u1", "30577")
    store.add("u1", term="261", subject="MATH", course_number="101", section="5", crn="30577")

    assert store.update("u1", "30577", AvailabilityStatus(is_open=True), expect=polled) is None
    assert store.list("u1")[0].is_open is False

    current = store.list("u1")[0]
    assert store.update("u1", "30577", AvailabilityStatus(is_open=True), expect=current) == AvailabilityStatus()


def test_reads_for_unknown_user_do_not_create_entries() -> None:
    store = TrackedStore()

    assert store.list("ghost") == []
    assert store.remove("ghost", "1") is False
    assert store.update("ghost", "1", AvailabilityStatus(is_open=True)) is None
    assert store.count("ghost") == 0
    store.clear("ghost")

    assert store.users() == []


def test_concurrent_adds_from_threads_are_not_lost() -> None:
    store = TrackedStore()

    def worker(start: int) -> None:
        for n in range(start, start + 50):
            _add(store, "u1", str(n))

    threads = [threading.Thread(target=worker, args=(i * 1000,)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.count("u1") == 200
