# =============================================================================
# Account List Widget
# =============================================================================
# A table view of one page of accounts.
#
# Features:
#   - Columns: Selection checkbox, row number, email, password (masked),
#     client id, refresh token (truncated)
#   - Keyboard navigation
#   - Multi-select across pages (selection state lives in AccountTable,
#     this widget only draws it and reports key presses)
# =============================================================================

from typing import TYPE_CHECKING

from rich.text import Text
from textual.binding import Binding
from textual.coordinate import Coordinate
from textual.message import Message as TextualMessage
from textual.widgets import DataTable
from textual.widgets.data_table import CellDoesNotExist

if TYPE_CHECKING:
    from firemail_tui.core import AccountRecord, AccountTable, TableView


CHECKED = "[green]☑[/]"
UNCHECKED = "☐"


def row_cells(record: "AccountRecord", number: int, selected: bool) -> tuple:
    """
    Cell values for one account row, in COLUMNS order.

    Imported values are wrapped in Text so brackets in an address or token
    are shown as-is instead of being read as markup.
    """
    return (
        CHECKED if selected else UNCHECKED,
        str(number),
        Text(record.email),
        record.masked_password,
        Text(record.client_id),
        Text(record.token_preview),
    )


class AccountList(DataTable):
    """
    A table widget displaying the current page of accounts.

    Row keys are the account ids (as strings), so rows can be updated in
    place when their selection changes.

    Multi-select:
        - x or Space: Toggle selection of the current row
        - a: Select / deselect every row on this page

    Usage:
        >>> account_list = AccountList()
        >>> account_list.show(table.view(), table)
    """

    BINDINGS = [
        Binding("x", "toggle_select", "Select", show=False),
        Binding("space", "toggle_select", "Select", show=False),
        Binding("a", "toggle_page", "Select Page"),
    ]

    # Column configuration: (label, key, width); width 0 = flexible
    COLUMNS = [
        (UNCHECKED, "select", 2),
        ("#", "number", 5),
        ("Email", "email", 0),
        ("Password", "password", 10),
        ("Client ID", "client_id", 38),
        ("Refresh Token", "refresh_token", 24),
    ]

    class ToggleRequested(TextualMessage):
        """Posted when the user toggles the row under the cursor."""
        def __init__(self, account_id: int) -> None:
            super().__init__()
            self.account_id = account_id

    class TogglePageRequested(TextualMessage):
        """Posted when the user toggles every row on the page."""
        pass

    def __init__(self, **kwargs) -> None:
        """
        Initialize the account list.

        Args:
            **kwargs: Additional arguments passed to DataTable.
        """
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True

    def on_mount(self) -> None:
        """Set up columns when widget is mounted."""
        for label, key, width in self.COLUMNS:
            if width > 0:
                self.add_column(label, width=width, key=key)
            else:
                self.add_column(label, key=key)

    def show(self, view: "TableView", table: "AccountTable") -> None:
        """
        Replace the rows with the records of `view`.

        The cursor stays on the same row index where possible.

        Args:
            view: The page to display.
            table: Source of the selection state.
        """
        cursor = self.cursor_row
        self.clear()

        for offset, record in enumerate(view.rows):
            self.add_row(
                *row_cells(record, view.start_index + offset + 1, table.is_selected(record.id)),
                key=str(record.id),
            )

        if self.row_count:
            self.move_cursor(row=min(max(cursor, 0), self.row_count - 1))

    def current_account_id(self) -> int | None:
        """
        Get the id of the account under the cursor.

        Returns:
            Account id, or None if the table is empty.
        """
        if not self.row_count:
            return None
        try:
            cell_key = self.coordinate_to_cell_key(Coordinate(self.cursor_row, 0))
        except CellDoesNotExist:
            return None
        return int(cell_key.row_key.value)

    def set_checked(self, account_id: int, selected: bool) -> None:
        """Update the checkbox of one visible row."""
        try:
            self.update_cell(str(account_id), "select", CHECKED if selected else UNCHECKED)
        except CellDoesNotExist:
            pass

    def action_toggle_select(self) -> None:
        """Ask the screen to toggle the current row."""
        account_id = self.current_account_id()
        if account_id is not None:
            self.post_message(self.ToggleRequested(account_id))

    def action_toggle_page(self) -> None:
        """Ask the screen to toggle the whole page."""
        self.post_message(self.TogglePageRequested())
