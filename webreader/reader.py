"""Extraction controller: owns the page collection and runs pagination chains.

``ReaderController`` holds all mutable application state: the stored
pages, the recent-search log, the "new pages" badge counter and the
presentation settings. The HTTP layer talks to it through a handful of
methods and never touches that state directly.

An extraction chain starts from one URL and keeps following the page's
"next" link. Each step fetches, extracts, stores the page if its title
is new, and then moves on. A chain ends when a page has no next link,
when a link points back to a URL already visited in the same chain, when
``max_pages`` pages have been fetched, or on the first error. Errors are
logged and recorded on the returned ``ExtractionResult``; they never
propagate to the caller.

Pages are deduplicated by title: two URLs whose pages share a title are
stored once, under the first URL that produced it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

import httpx

from . import config
from .errors import PaginationLimitReached, PersistenceError, ReaderError
from .extractor import ExtractedPage, extract_page, fetch_html, resolve_link, validate_url
from .history import RecentSearches
from .models import (
    STOP_CYCLE,
    STOP_ERROR,
    STOP_LIMIT,
    ExtractionResult,
    Page,
    Settings,
)
from .store import PageStore

logger = logging.getLogger(__name__)


def _visit_key(url: str) -> str:
    # Fragments address the same document.
    return str(httpx.URL(url).copy_with(fragment=None))


class ReaderController:
    def __init__(
        self,
        store: PageStore,
        *,
        max_pages: int = config.MAX_PAGES,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = config.FETCH_TIMEOUT,
        settings: Optional[Settings] = None,
    ) -> None:
        self.store = store
        self.max_pages = max_pages
        self.recent = RecentSearches()
        self.new_pages_count = 0
        self.settings = settings or Settings()
        self._client = client
        self._timeout = timeout
        self._pages: List[Page] = store.load()
        # Held for every read-modify-write of the page collection, so concurrent
        # chains see a consistent dedup check, append and save.
        self._lock = asyncio.Lock()
        logger.info("Loaded %d saved pages from %s", len(self._pages), store.path)

    @property
    def pages(self) -> List[Page]:
        return list(self._pages)

    def get_page(self, title: str) -> Optional[Page]:
        for page in self._pages:
            if page.title == title:
                return page
        return None

    def page_at(self, index: int) -> Optional[Page]:
        """Return the page at ``index`` in insertion order, or None."""
        if 0 <= index < len(self._pages):
            return self._pages[index]
        return None

    def acknowledge_new_pages(self) -> None:
        self.new_pages_count = 0

    def update_settings(self, dark_mode: Optional[bool] = None,
                        speech_rate: Optional[float] = None) -> Settings:
        """Replace the settings; raises ``ValueError`` for an out-of-range rate."""
        self.settings = Settings(
            dark_mode=self.settings.dark_mode if dark_mode is None else dark_mode,
            speech_rate=self.settings.speech_rate if speech_rate is None else speech_rate,
        )
        return self.settings

    async def extract(self, url: str) -> ExtractionResult:
        """Run an extraction chain starting at ``url``."""
        result = ExtractionResult(start_url=url)
        try:
            if self._client is not None:
                await self._follow(url, self._client, result)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    await self._follow(url, client, result)
        except PaginationLimitReached as exc:
            logger.warning("Pagination from %s stopped: %s", url, exc)
            result.stop_reason = STOP_LIMIT
            result.error = exc
        except ReaderError as exc:
            logger.error("Extraction from %s aborted: %s", url, exc)
            result.stop_reason = STOP_ERROR
            result.error = exc
        logger.info(
            "Extraction from %s finished (%s): %d visited, %d new",
            url, result.stop_reason, len(result.visited), len(result.added),
        )
        return result

    async def reopen(self, index: int) -> ExtractionResult:
        """Re-run extraction for the recent entry at ``index``."""
        entry = self.recent[index]
        return await self.extract(entry.url)

    async def delete(self, offsets: Iterable[int]) -> List[Page]:
        """Delete the pages at ``offsets`` and their recent-search entries.

        Raises ``IndexError`` without changing anything if an offset is
        out of range.
        """
        async with self._lock:
            indices = set(offsets)
            for idx in indices:
                if idx < 0 or idx >= len(self._pages):
                    raise IndexError(f"No page at offset {idx}")
            removed = [self._pages[idx] for idx in sorted(indices)]
            for page in removed:
                self.recent.remove_by_title(page.title)
            self._pages = [p for i, p in enumerate(self._pages) if i not in indices]
            self._persist()
        logger.info("Deleted %d pages", len(removed))
        return removed

    async def _follow(self, url: str, client: httpx.AsyncClient,
                      result: ExtractionResult) -> None:
        visited = set()
        current = url
        while current:
            validate_url(current)
            key = _visit_key(current)
            if key in visited:
                logger.info("Next link %s was already visited; stopping", current)
                result.stop_reason = STOP_CYCLE
                return
            if len(result.visited) >= self.max_pages:
                raise PaginationLimitReached(self.max_pages, current)
            visited.add(key)
            result.visited.append(current)

            html_doc = await fetch_html(current, client)
            extracted = extract_page(html_doc)
            if await self._add_page(current, extracted):
                result.added.append(extracted.title)

            current = resolve_link(current, extracted.next_link) if extracted.next_link else ""

    async def _add_page(self, url: str, extracted: ExtractedPage) -> bool:
        title = extracted.title
        async with self._lock:
            if not title:
                logger.info("Page at %s has no title; not stored", url)
                return False
            if self.get_page(title) is not None:
                logger.debug("Page %r already stored", title)
                return False
            self._pages.append(Page(title=title, paragraphs=tuple(extracted.paragraphs)))
            self.new_pages_count += 1
            self.recent.record(url, title)
            self._persist()
        logger.info("Stored page %r from %s", title, url)
        return True

    def _persist(self) -> None:
        # The in-memory collection stays authoritative; the next save rewrites it all.
        try:
            self.store.save(self._pages)
        except PersistenceError as exc:
            logger.error("Could not save pages: %s", exc)
