import math
from dataclasses import dataclass, field
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")
U = TypeVar("U")

# SQL OFFSET is a signed 64-bit integer.
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index and page size."""

    page: int = 0
    size: int = 20

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page index must not be negative")
        if self.size < 1:
            raise ValueError("page size must be at least 1")
        if self.page * self.size > MAX_OFFSET:
            raise ValueError("page offset is out of range")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    """A slice of an ordered result set plus the size of the whole set."""

    items: List[T] = field(default_factory=list)
    number: int = 0
    size: int = 20
    total_elements: int = 0

    @classmethod
    def of(
        cls, items: List[T], request: PageRequest, total_elements: int
    ) -> "Page[T]":
        return cls(
            items=items,
            number=request.page,
            size=request.size,
            total_elements=total_elements,
        )

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    def map(self, fn: Callable[[T], U]) -> "Page[U]":
        return Page(
            items=[fn(item) for item in self.items],
            number=self.number,
            size=self.size,
            total_elements=self.total_elements,
        )
