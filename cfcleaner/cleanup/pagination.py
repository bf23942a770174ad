"""Pagination over page-number and start-index listing APIs.

A ``PaginatedCollector`` turns a "fetch one page" coroutine into a single
async stream of raw resource payloads. The cursor arithmetic is delegated to a
``Pagination`` strategy so the two API families share one collector.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Awaitable, Callable, Optional

from ..models.page import Page

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int], Awaitable[Page]]


class Pagination(ABC):
    """Cursor strategy for a family of listing endpoints."""

    @abstractmethod
    def first(self) -> int:
        """Cursor of the first page."""

    @abstractmethod
    def next(self, cursor: int, page: Page) -> Optional[int]:
        """Cursor of the page after ``page``, or None when exhausted."""


class PageNumberPagination(Pagination):
    """1-based page numbers; stops at the reported ``total_pages``."""

    def first(self) -> int:
        return 1

    def next(self, cursor: int, page: Page) -> Optional[int]:
        if page.total_pages is None or cursor >= page.total_pages:
            return None
        return cursor + 1


class StartIndexPagination(Pagination):
    """0-based offsets advanced by the number of items actually returned.

    Page sizes are not assumed to be uniform; the stream stops when the offset
    reaches ``total_results`` or the server returns an empty page.
    """

    def first(self) -> int:
        return 0

    def next(self, cursor: int, page: Page) -> Optional[int]:
        if not page.resources:
            return None

        offset = cursor + len(page.resources)
        if page.total_results is None or offset >= page.total_results:
            return None
        return offset


class PaginatedCollector:
    """Lazy, restartable stream of every item across all pages.

    Each ``async for`` starts again from the first page. A failing page request
    propagates its TransportError; pages are not retried individually.

    Attributes:
        fetch_page: Coroutine function returning the page for a cursor
        pagination: Cursor strategy
    """

    def __init__(self, fetch_page: PageFetcher, pagination: Pagination) -> None:
        self.fetch_page = fetch_page
        self.pagination = pagination

    def __aiter__(self) -> AsyncIterator[dict]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict]:
        cursor: Optional[int] = self.pagination.first()

        while cursor is not None:
            page = await self.fetch_page(cursor)
            for resource in page.resources:
                yield resource
            cursor = self.pagination.next(cursor, page)

    async def collect(self) -> list[dict]:
        """Exhaust every page into a list."""
        return [resource async for resource in self]
