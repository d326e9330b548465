"""Cursor pagination over one collection.

PageReader is stateless: each call issues one ordered, bounded query
starting at-or-after a cursor. Navigation state (which page came
before which) belongs to the caller; PageHistory keeps it.

Query Pattern:
    query(collection, order_by=field, start_at=cursor, limit=page_size + 1)

The extra record is not returned. Its ordering value becomes the next
page's cursor, so consecutive pages meet exactly at the boundary when
ordering values are unique. Records sharing an ordering value across a
boundary are repeated on the next page.

A cursor is an ordering value, not a record position. When more than
page_size records share the first value of a page, the next cursor equals
the page's own cursor and the records past the page size cannot be
reached with this ordering. Such a page is stalled: it reports is_last,
PageHistory offers no next page, and the reader logs a warning. Ordering
by the key field always pages through every record.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from resort_registry.application.ports.document_store import DocumentStoreProtocol
from resort_registry.application.services.base import LoggingMixin
from resort_registry.domain.models.page import DEFAULT_PAGE_SIZE, Page

T = TypeVar("T")


class PageReader(LoggingMixin, Generic[T]):
    """Reads ordered pages of records from one collection.

    Attributes:
        _collection: Collection to page through.
        _from_document: Converts a stored document to a record.
        _orderable_fields: Fields a page may be ordered by.
        _page_size: Records per page.
    """

    def __init__(
        self,
        store: DocumentStoreProtocol,
        collection: str,
        from_document: Callable[[Mapping[str, Any]], T],
        orderable_fields: tuple[str, ...],
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._store = store
        self._collection = collection
        self._from_document = from_document
        self._orderable_fields = orderable_fields
        self._page_size = page_size
        self._init_logger(collection=collection)

    async def read_page(self, order_by: str, cursor: Any = None) -> Page[T]:
        """Read one page ordered ascending by ``order_by``.

        Args:
            order_by: Document field to order by.
            cursor: Inclusive start value, or None for the first page.

        Returns:
            The page, with its own cursor and the next page's cursor.

        Raises:
            ValueError: If ``order_by`` is not an orderable field.
            DocumentStoreError: If the store cannot be read.
        """
        if order_by not in self._orderable_fields:
            raise ValueError(
                f"Cannot order {self._collection} by {order_by!r}; "
                f"expected one of {', '.join(self._orderable_fields)}"
            )
        documents = await self._store.query(
            self._collection,
            order_by=order_by,
            start_at=cursor,
            limit=self._page_size + 1,
        )
        page_documents = documents[: self._page_size]
        next_cursor = (
            documents[self._page_size][order_by]
            if len(documents) > self._page_size
            else None
        )
        page: Page[T] = Page(
            records=tuple(self._from_document(d) for d in page_documents),
            order_by=order_by,
            cursor=page_documents[0][order_by] if page_documents else None,
            next_cursor=next_cursor,
            page_size=self._page_size,
        )
        log = self._log_operation("read_page", order_by=order_by)
        if page.is_stalled:
            log.warning(
                "page_cursor_stalled",
                cursor=page.cursor,
                page_size=self._page_size,
            )
        log.debug(
            "page_read",
            cursor=page.cursor,
            next_cursor=next_cursor,
            record_count=len(page),
        )
        return page


class PageHistory:
    """Caller-side navigation state for one list view.

    Keeps the start cursors of visited pages for the current ordering,
    so "previous" can re-read an earlier page. Changing the ordering
    resets the history.

    Usage:
        history = PageHistory("employeeId")
        page = await reader.read_page(history.order_by)
        history.visit(page)
        if history.has_next:
            page = await reader.read_page(history.order_by, history.next_cursor)
            history.visit(page)
    """

    def __init__(self, order_by: str) -> None:
        self.order_by = order_by
        self._starts: list[Any] = []
        self._current: Page[Any] | None = None

    @property
    def start_cursors(self) -> tuple[Any, ...]:
        return tuple(self._starts)

    @property
    def current(self) -> Page[Any] | None:
        return self._current

    def visit(self, page: Page[Any]) -> None:
        """Record the page just displayed.

        Raises:
            ValueError: If the page is ordered by another field.
        """
        if page.order_by != self.order_by:
            raise ValueError(
                f"Page ordered by {page.order_by!r}, history by {self.order_by!r}"
            )
        self._current = page
        if page.cursor is not None and page.cursor not in self._starts:
            self._starts.append(page.cursor)

    @property
    def has_next(self) -> bool:
        return self._current is not None and not self._current.is_last

    @property
    def next_cursor(self) -> Any | None:
        return self._current.next_cursor if self.has_next else None

    @property
    def has_previous(self) -> bool:
        return self._position() > 0

    @property
    def previous_cursor(self) -> Any | None:
        """Start cursor of the page before the current one, if any."""
        position = self._position()
        return self._starts[position - 1] if position > 0 else None

    def reset(self, order_by: str | None = None) -> None:
        """Forget all visited pages, optionally switching the ordering."""
        if order_by is not None:
            self.order_by = order_by
        self._starts.clear()
        self._current = None

    def _position(self) -> int:
        if self._current is None or self._current.cursor not in self._starts:
            return -1
        return self._starts.index(self._current.cursor)
