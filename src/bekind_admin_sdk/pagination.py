from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS = (5, 10, 20)


@dataclass(frozen=True)
class PageQuery:
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search_term: str = ""

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be > 0, got {self.page_size}")

    def with_page(self, page_number: int) -> PageQuery:
        return replace(self, page_number=page_number)

    # Changing the query's shape always restarts from the first page.
    def with_page_size(self, page_size: int) -> PageQuery:
        return replace(self, page_size=page_size, page_number=1)

    def with_search_term(self, search_term: str) -> PageQuery:
        return replace(self, search_term=search_term or "", page_number=1)

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"pageNumber": self.page_number, "pageSize": self.page_size}
        term = self.search_term.strip()
        if term:
            params["search"] = term
        return params


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    total_count: int = 0

    @classmethod
    def empty(cls) -> PageResult[T]:
        return cls(items=[], total_count=0)


def page_count(total_count: int, page_size: int) -> int:
    if total_count <= 0:
        return 0
    return (total_count + page_size - 1) // page_size
