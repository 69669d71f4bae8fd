"""Paging value objects."""

from dataclasses import dataclass
from math import ceil
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Pageable:
    """1-based page request. ``size=None`` means all rows."""

    page: int = 1
    size: int | None = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            object.__setattr__(self, "page", 1)
        if self.size is not None:
            object.__setattr__(self, "size", min(max(self.size, 1), MAX_PAGE_SIZE))

    @classmethod
    def unpaged(cls) -> "Pageable":
        return cls(page=1, size=None)

    @property
    def is_paged(self) -> bool:
        return self.size is not None

    @property
    def offset(self) -> int:
        if self.size is None:
            return 0
        return (self.page - 1) * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results with the total match count."""

    items: list[T]
    total: int
    page: int = 1
    size: int | None = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if not self.size:
            return 1 if self.total else 0
        return ceil(self.total / self.size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1
