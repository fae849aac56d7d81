# src/seat_watch/tracking/poller.py

from __future__ import annotations

"""
Seat poller.

A polling loop that, once per interval:
- snapshots every tracked item of every user,
- queries the registration platform for each item (bounded concurrency),
- matches the tracked CRN + section in the results and evaluates availability,
- writes the new status back into the store,
- notifies the sink on a closed -> open transition only (edge-triggered).

A failed query only affects that one item for that one sweep; the next
sweep retries it naturally. Alert formatting/delivery belongs to the connector.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

from ..banner.client import QueryError
from ..banner.status import evaluate
from ..core.ports import OpenSectionSink, SectionSource, TrackedRepo
from .models import AvailabilityStatus, SectionRecord, TrackedItem, normalize_section

logger = logging.getLogger(__name__)


class PollResult(str, Enum):
    OK = "ok"
    NO_MATCH = "no_match"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class PollOutcome:
    """Result of polling one item: a status (OK), nothing to do (NO_MATCH), or an error (FAILED)."""

    user_id: str
    item: TrackedItem
    result: PollResult
    status: AvailabilityStatus | None = None
    error: Exception | None = None


@dataclass(slots=True)
class SweepReport:
    checked: int = 0
    updated: int = 0
    unmatched: int = 0
    failed: int = 0
    notified: int = 0


def find_matching_record(records: Iterable[SectionRecord], item: TrackedItem) -> SectionRecord | None:
    """The row with the tracked CRN *and* the tracked (normalized) section number."""
    for row in records:
        crn = row.get("courseReferenceNumber")
        seq = row.get("sequenceNumber")
        if str("" if crn is None else crn) != item.crn:
            continue
        if normalize_section("" if seq is None else seq) != item.section:
            continue
        return row
    return None


async def poll_item(source: SectionSource, user_id: str, item: TrackedItem) -> PollOutcome:
    try:
        records = await source.fetch_sections(item.term, item.subject, item.course_number)
        row = find_matching_record(records, item)
        if row is None:
            return PollOutcome(user_id=user_id, item=item, result=PollResult.NO_MATCH)
        status = evaluate(row)
    except QueryError as e:
        logger.debug("Poll failed user=%s %s crn=%s: %s", user_id, item.label, item.crn, e)
        return PollOutcome(user_id=user_id, item=item, result=PollResult.FAILED, error=e)
    except Exception as e:
        logger.exception("Poll crashed user=%s %s crn=%s", user_id, item.label, item.crn)
        return PollOutcome(user_id=user_id, item=item, result=PollResult.FAILED, error=e)

    return PollOutcome(user_id=user_id, item=item, result=PollResult.OK, status=status)


async def _process_item(
        repo: TrackedRepo,
        source: SectionSource,
        sink: OpenSectionSink,
        user_id: str,
        item: TrackedItem,
        report: SweepReport,
        gate: asyncio.Semaphore,
) -> None:
    async with gate:
        outcome = await poll_item(source, user_id, item)

    report.checked += 1

    if outcome.result == PollResult.FAILED:
        report.failed += 1
        return
    if outcome.result == PollResult.NO_MATCH or outcome.status is None:
        report.unmatched += 1
        return

    new_status = outcome.status
    previous = repo.update(user_id, item.crn, new_status, expect=item)
    if previous is None:
        # Removed (or re-added for another section) while the query was in flight.
        logger.debug("Item gone before update user=%s crn=%s", user_id, item.crn)
        return
    report.updated += 1

    became_open = new_status.is_open and not previous.is_open
    if not became_open:
        return

    opened = replace(item)
    opened.apply(new_status)
    logger.info(
        "OPEN user=%s %s crn=%s seats=%s",
        user_id,
        opened.label,
        opened.crn,
        opened.available_seats,
    )
    try:
        await sink.on_became_open(user_id, opened)
        report.notified += 1
    except Exception:
        logger.exception("Open notification failed user=%s crn=%s", user_id, item.crn)


async def run_sweep(
        repo: TrackedRepo,
        source: SectionSource,
        sink: OpenSectionSink,
        *,
        max_concurrency: int = 4,
) -> SweepReport:
    """One full pass over all tracked items of all users."""
    report = SweepReport()
    gate = asyncio.Semaphore(max(1, int(max_concurrency)))

    jobs = [
        _process_item(repo, source, sink, user_id, item, report, gate)
        for user_id, items in repo.snapshot().items()
        for item in items
    ]
    if jobs:
        await asyncio.gather(*jobs)

    return report


async def run_poller(
        repo: TrackedRepo,
        source: SectionSource,
        sink: OpenSectionSink,
        *,
        interval_seconds: float = 300.0,
        max_concurrency: int = 4,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Sweep immediately, then once every interval_seconds.

    Sweeps never overlap: the interval wait starts after the previous sweep
    has completed. Setting stop_event ends the loop between sweeps; cancelling
    the coroutine also works.
    """
    sleep_s = max(0.01, float(interval_seconds))
    stop = stop_event or asyncio.Event()

    logger.info("Poller started (interval=%ss, max_concurrency=%s)", sleep_s, max_concurrency)

    while not stop.is_set():
        try:
            report = await run_sweep(repo, source, sink, max_concurrency=max_concurrency)
            if report.checked:
                logger.info(
                    "Sweep done: checked=%d updated=%d unmatched=%d failed=%d notified=%d",
                    report.checked,
                    report.updated,
                    report.unmatched,
                    report.failed,
                    report.notified,
                )
        except Exception:
            logger.exception("Sweep failed")

        try:
            await asyncio.wait_for(stop.wait(), timeout=sleep_s)
        except asyncio.TimeoutError:
            pass

    logger.info("Poller stopped.")
