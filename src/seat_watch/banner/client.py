# src/seat_watch/banner/client.py

"""
Banner 9 (StudentRegistrationSsb) section search client.

Every call opens its own cookie-bearing session:
1) POST term/search binds the session to a term (Banner ignores searches otherwise),
2) GET searchResults returns the sections for (subject, course number).

Sessions are never reused across calls, so concurrent polls cannot leak
term/search state into each other.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..tracking.models import SectionRecord

logger = logging.getLogger(__name__)

TERM_SEARCH_PATH = "/ssb/term/search"
SEARCH_RESULTS_PATH = "/ssb/searchResults/searchResults"

MAX_PAGE_SIZE = 50

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "application/json, text/javascript, */*; q=0.01",
}


class QueryError(Exception):
    """Transport failure, timeout, or an unusable response from the platform."""


def extract_records(payload: Any) -> list[SectionRecord]:
    """
    {"success": true, "data": [...]} -> the rows.

    Anything else (success missing/false, data missing) is "no results",
    not an error.
    """
    if not isinstance(payload, dict) or payload.get("success") is not True:
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]


class BannerClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 20.0,
        page_max_size: int = MAX_PAGE_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = max(0.001, float(timeout_seconds))
        self._page_max_size = max(1, min(int(page_max_size), MAX_PAGE_SIZE))
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _new_session(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=httpx.Timeout(self._timeout_s),
            follow_redirects=True,
            transport=self._transport,
        )

    async def fetch_sections(self, term: str, subject: str, course_number: str) -> list[SectionRecord]:
        try:
            return await asyncio.wait_for(
                self._search(term, subject, course_number),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise QueryError(
                f"search {subject}{course_number} term={term} timed out after {self._timeout_s:g}s"
            ) from e

    async def _search(self, term: str, subject: str, course_number: str) -> list[SectionRecord]:
        async with self._new_session() as session:
            try:
                resp = await session.post(
                    f"{self._base_url}{TERM_SEARCH_PATH}",
                    data={
                        "term": term,
                        "studyPath": "",
                        "studyPathText": "",
                        "startDatepicker": "",
                        "endDatepicker": "",
                    },
                )
                resp.raise_for_status()

                resp = await session.get(
                    f"{self._base_url}{SEARCH_RESULTS_PATH}",
                    params={
                        "txt_subject": subject,
                        "txt_courseNumber": course_number,
                        "txt_term": term,
                        "startDatepicker": "",
                        "endDatepicker": "",
                        "pageOffset": 0,
                        "pageMaxSize": self._page_max_size,
                        "sortColumn": "subjectDescription",
                        "sortDirection": "asc",
                    },
                )
                resp.raise_for_status()
            except httpx.HTTPError as e:
                raise QueryError(f"search {subject}{course_number} term={term} failed: {e!r}") from e

            try:
                payload = resp.json()
            except ValueError as e:
                raise QueryError(f"search {subject}{course_number} term={term}: response is not JSON") from e

        records = extract_records(payload)
        logger.debug("Banner search %s%s term=%s -> %d rows", subject, course_number, term, len(records))
        return records
