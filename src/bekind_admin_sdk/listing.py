from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from .logger import get_logger, log_event
from .pagination import DEFAULT_PAGE_SIZE, PageQuery, PageResult, page_count

logger = get_logger(__name__)

T = TypeVar("T")

FetchPage = Callable[[PageQuery], Awaitable[PageResult[T]]]


class ListController(Generic[T]):
    """Paginated, searchable list state driven by explicit ``refetch()`` calls.

    Every fetch takes a sequence number when it is issued. A completion is
    applied only if no later fetch was issued in the meantime, so the visible
    page always belongs to the most recently issued query even when responses
    arrive out of order. ``reset()`` cancels every fetch issued before it.
    """

    def __init__(self, fetch_page: FetchPage[T], *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._fetch_page = fetch_page
        self.query = PageQuery(page_size=page_size)
        self.result: PageResult[T] = PageResult.empty()
        self.loading = False
        self.error: Exception | None = None
        self._issued = 0
        self._cancelled_through = 0

    @property
    def items(self) -> list[T]:
        return self.result.items

    @property
    def total_count(self) -> int:
        return self.result.total_count

    @property
    def has_prev(self) -> bool:
        return self.query.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.query.page_number * self.query.page_size < self.result.total_count

    @property
    def page_count(self) -> int:
        return page_count(self.result.total_count, self.query.page_size)

    def set_page(self, page_number: int) -> None:
        if page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {page_number}")
        self.query = self.query.with_page(page_number)

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self.query = self.query.with_page_size(page_size)

    def set_search_term(self, search_term: str) -> None:
        self.query = self.query.with_search_term(search_term)

    def next_page(self) -> bool:
        if not self.has_next:
            return False
        self.query = self.query.with_page(self.query.page_number + 1)
        return True

    def prev_page(self) -> bool:
        if not self.has_prev:
            return False
        self.query = self.query.with_page(self.query.page_number - 1)
        return True

    def visible_range(self) -> tuple[int, int, int]:
        total = self.result.total_count
        if total <= 0:
            return (0, 0, 0)
        first = (self.query.page_number - 1) * self.query.page_size + 1
        last = min(self.query.page_number * self.query.page_size, total)
        return (first, last, total)

    async def refetch(self) -> PageResult[T] | None:
        self._issued += 1
        sequence = self._issued
        query = self.query
        self.loading = True
        try:
            result = await self._fetch_page(query)
        except Exception as error:
            if sequence != self._issued:
                self._discard(sequence, "error")
                return None
            if sequence <= self._cancelled_through:
                # Cancelled by reset(); the error still reaches the caller.
                raise
            self.result = PageResult.empty()
            self.error = error
            log_event(
                logger,
                "listing",
                "refetch",
                "error",
                level=logging.WARNING,
                trace_id=getattr(error, "trace_id", None),
                sequence=sequence,
                status_code=getattr(error, "status_code", None),
                error_type=type(error).__name__,
            )
            raise
        finally:
            if sequence == self._issued:
                self.loading = False
        if sequence != self._issued or sequence <= self._cancelled_through:
            self._discard(sequence, "success")
            return None
        self.result = result
        self.error = None
        return result

    def reset(self) -> None:
        """Drop the visible page and ignore every fetch issued so far."""
        self._cancelled_through = self._issued
        self.result = PageResult.empty()
        self.error = None
        self.loading = False

    def _discard(self, sequence: int, outcome: str) -> None:
        log_event(
            logger,
            "listing",
            "refetch",
            "stale_discarded",
            level=logging.DEBUG,
            sequence=sequence,
            latest=self._issued,
            stale_outcome=outcome,
        )
