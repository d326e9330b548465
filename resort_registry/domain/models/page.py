"""Cursor page value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 21


@dataclass(frozen=True)
class Page(Generic[T]):
    """One ordered, bounded page of records.

    Attributes:
        records: Records in ascending order of ``order_by``.
        order_by: Document field the page is ordered by.
        cursor: Ordering value of the first record (None if empty).
            Re-querying with this cursor reproduces the page.
        next_cursor: Ordering value of the first record after this page,
            i.e. where the next page starts; None on the last page.
            Equal to ``cursor`` when more than ``page_size`` records
            share the first ordering value (see ``is_stalled``).
        page_size: Requested page size.
    """

    records: tuple[T, ...]
    order_by: str
    cursor: Any | None
    next_cursor: Any | None
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def is_stalled(self) -> bool:
        """True if the next cursor would re-read this same page."""
        return self.next_cursor is not None and self.next_cursor == self.cursor

    @property
    def is_last(self) -> bool:
        return self.next_cursor is None or self.is_stalled

    def __len__(self) -> int:
        return len(self.records)
