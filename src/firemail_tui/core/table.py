# =============================================================================
# Account Table State
# =============================================================================
# The authoritative in-memory account list behind the accounts screen, plus
# everything derived from it:
#
#   - Filter: case-insensitive substring match on the email address
#   - Pagination: page size, current page, clamped page window
#   - Selection: a set of account ids that survives filter/page changes
#
# The filtered/paginated view is never stored. view() recomputes it from
# (accounts, filter, page size, page) on every call so it cannot drift from
# the account list after an import or delete.
#
# Only load() talks to the backend. Everything else is synchronous.
# =============================================================================

import logging
import math
from dataclasses import dataclass, field
from types import EllipsisType
from typing import TYPE_CHECKING, Iterable

from firemail_tui.core.account import AccountRecord

if TYPE_CHECKING:
    from firemail_tui.backend.base import Backend


logger = logging.getLogger(__name__)


# Allowed page sizes, smallest first
PAGE_SIZES = (10, 20, 50)
DEFAULT_PAGE_SIZE = PAGE_SIZES[0]

# Page windows with more pages than this get ellipsis markers
MAX_WINDOW_SLOTS = 7

# A page window entry: a page number or the (non-interactive) ellipsis
PageItem = int | EllipsisType


def total_pages_for(count: int, page_size: int) -> int:
    """Number of pages needed for `count` rows. Always at least 1."""
    return max(1, math.ceil(count / page_size))


def page_window(total_pages: int, current: int) -> list[PageItem]:
    """
    Compute the page numbers to show in the pagination bar.

    With up to 7 pages every page is shown. Beyond that the first and last
    pages are always present and `...` stands in for the hidden ranges:

        current near the start:  [1, 2, 3, 4, ..., N]
        current near the end:    [1, ..., N-3, N-2, N-1, N]
        otherwise:               [1, ..., c-1, c, c+1, ..., N]

    Args:
        total_pages: Total number of pages (>= 1).
        current: The current page.

    Returns:
        At most 7 entries, each a page number or Ellipsis.
    """
    if total_pages <= MAX_WINDOW_SLOTS:
        return list(range(1, total_pages + 1))

    if current <= 3:
        return [1, 2, 3, 4, ..., total_pages]

    if current >= total_pages - 2:
        return [1, ..., total_pages - 3, total_pages - 2, total_pages - 1, total_pages]

    return [1, ..., current - 1, current, current + 1, ..., total_pages]


@dataclass(frozen=True)
class TableView:
    """
    One derived, read-only snapshot of the table.

    Attributes:
        filter_text: The active filter.
        page_size: Rows per page.
        page: Current page, already clamped into [1, total_pages].
        total_pages: max(1, ceil(filtered_count / page_size)).
        filtered_count: Rows matching the filter, across all pages.
        rows: The records on the current page.
    """

    filter_text: str
    page_size: int
    page: int
    total_pages: int
    filtered_count: int
    rows: tuple[AccountRecord, ...] = field(default_factory=tuple)

    @property
    def start_index(self) -> int:
        """0-based offset of the first visible row within the filtered list."""
        return (self.page - 1) * self.page_size

    @property
    def page_ids(self) -> list[int]:
        """Ids of the visible rows, in display order."""
        return [record.id for record in self.rows]

    @property
    def window(self) -> list[PageItem]:
        """Page-number controls for this view."""
        return page_window(self.total_pages, self.page)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class AccountTable:
    """
    Filterable, paginated, multi-selectable account list.

    Usage:
        >>> table = AccountTable(backend)
        >>> await table.load()
        >>> table.set_filter("outlook")
        >>> view = table.view()
        >>> table.set_all(view.page_ids, checked=True)

    Attributes:
        backend: Source of the account listing used by load().
    """

    def __init__(self, backend: "Backend", page_size: int = DEFAULT_PAGE_SIZE) -> None:
        """
        Initialize an empty table.

        Args:
            backend: Backend providing list_accounts().
            page_size: Initial page size, one of PAGE_SIZES.

        Raises:
            ValueError: If page_size is not an allowed size.
        """
        _check_page_size(page_size)
        self.backend = backend
        self._accounts: list[AccountRecord] = []
        self._filter = ""
        self._page_size = page_size
        self._page = 1
        self._selected: set[int] = set()

    # -------------------------------------------------------------------------
    # Backing list
    # -------------------------------------------------------------------------

    async def load(self) -> None:
        """
        Replace the account list with the backend's full listing.

        No merging: the listing replaces whatever was loaded before. Selected
        ids that are no longer present are dropped. Filter and page are left
        alone (view() clamps the page if the list shrank).

        Raises:
            BackendError: If the listing fails. The table is left unchanged.
        """
        accounts = await self.backend.list_accounts()
        self.replace(accounts)

    def replace(self, accounts: Iterable[AccountRecord]) -> None:
        """Install a new account list (the synchronous half of load())."""
        self._accounts = list(accounts)
        known = {record.id for record in self._accounts}
        dropped = self._selected - known
        if dropped:
            logger.debug(f"Dropping {len(dropped)} stale ids from selection")
        self._selected &= known

    @property
    def accounts(self) -> tuple[AccountRecord, ...]:
        """All loaded accounts, in backend order."""
        return tuple(self._accounts)

    @property
    def known_ids(self) -> set[int]:
        return {record.id for record in self._accounts}

    def get(self, account_id: int) -> AccountRecord | None:
        """Look up a loaded account by id."""
        for record in self._accounts:
            if record.id == account_id:
                return record
        return None

    # -------------------------------------------------------------------------
    # Filter and pagination
    # -------------------------------------------------------------------------

    @property
    def filter_text(self) -> str:
        return self._filter

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page(self) -> int:
        return self._page

    def set_filter(self, text: str) -> None:
        """Filter by case-insensitive email substring. Resets to page 1."""
        self._filter = text
        self._page = 1

    def set_page_size(self, size: int) -> None:
        """
        Change the page size. Resets to page 1.

        Raises:
            ValueError: If size is not one of PAGE_SIZES.
        """
        _check_page_size(size)
        self._page_size = size
        self._page = 1

    def set_page(self, page: int) -> None:
        """Go to a page, clamped into [1, total_pages]."""
        self._page = min(max(1, page), self.total_pages)

    def next_page(self) -> None:
        self.set_page(self._page + 1)

    def previous_page(self) -> None:
        self.set_page(self._page - 1)

    def filtered(self) -> list[AccountRecord]:
        """All accounts matching the filter, in backend order."""
        if not self._filter:
            return list(self._accounts)
        return [record for record in self._accounts if record.matches(self._filter)]

    @property
    def total_pages(self) -> int:
        return total_pages_for(len(self.filtered()), self._page_size)

    def view(self) -> TableView:
        """
        Project the current state into a TableView.

        filter -> count -> total pages -> clamp page -> slice. The clamped
        page is written back so later navigation starts from a valid page.
        """
        rows = self.filtered()
        total = total_pages_for(len(rows), self._page_size)
        if self._page > total:
            self._page = total

        start = (self._page - 1) * self._page_size
        return TableView(
            filter_text=self._filter,
            page_size=self._page_size,
            page=self._page,
            total_pages=total,
            filtered_count=len(rows),
            rows=tuple(rows[start:start + self._page_size]),
        )

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    @property
    def selected_ids(self) -> tuple[int, ...]:
        """Selected ids in ascending order."""
        return tuple(sorted(self._selected))

    @property
    def selection_count(self) -> int:
        return len(self._selected)

    def is_selected(self, account_id: int) -> bool:
        return account_id in self._selected

    def toggle(self, account_id: int) -> bool:
        """
        Flip the selection state of one account.

        Ids that are not loaded are ignored, so the selection stays a subset
        of the known ids.

        Returns:
            The new selection state of the id.
        """
        if account_id in self._selected:
            self._selected.discard(account_id)
            return False
        if self.get(account_id) is None:
            return False
        self._selected.add(account_id)
        return True

    def set_all(self, account_ids: Iterable[int], checked: bool) -> None:
        """
        Add or remove exactly the given ids.

        Typically called with the ids of the visible page. Ids outside the
        given set are not touched.
        """
        ids = set(account_ids)
        if checked:
            self._selected |= ids & self.known_ids
        else:
            self._selected -= ids

    def clear_selection(self) -> None:
        self._selected.clear()

    def all_page_selected(self) -> bool:
        """True iff the visible page is non-empty and fully selected."""
        page_ids = self.view().page_ids
        return bool(page_ids) and all(i in self._selected for i in page_ids)


def _check_page_size(size: int) -> None:
    if size not in PAGE_SIZES:
        raise ValueError(f"Page size must be one of {PAGE_SIZES}, got {size}")
