# =============================================================================
# Accounts Screen
# =============================================================================
# The primary view of Firemail-TUI:
#
#   +--------------------------------------------------+
#   |                    Header                         |
#   +--------------------------------------------------+
#   | Separator [----]   Search [                    ]  |
#   +--------------------------------------------------+
#   |                  Account List                     |
#   +--------------------------------------------------+
#   | ‹ Prev 1 2 [3] Next ›   10/page   23 accounts     |
#   | Last import result                                |
#   | Status                                            |
#   +--------------------------------------------------+
#   |                    Footer                         |
#   +--------------------------------------------------+
#
# All list state (filter, page, selection) lives in AccountTable; this
# screen forwards user input to it and redraws from table.view().
# Backend work runs in workers, guarded by a busy flag: a new import or
# batch can't start while one is outstanding, and nothing in flight is
# cancelled.
# =============================================================================

import logging

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Label, Static
from textual.containers import Horizontal

from firemail_tui.accounts import (
    BatchAction,
    BatchActionPlanner,
    ImportAggregator,
    read_import_file,
)
from firemail_tui.backend import AccountNotFoundError, Backend, BackendError
from firemail_tui.config import Config
from firemail_tui.core import PAGE_SIZES, AccountFields, AccountTable
from firemail_tui.ui.screens.add_account import AddAccountScreen
from firemail_tui.ui.screens.confirm import ConfirmScreen
from firemail_tui.ui.screens.file_picker import FilePickerScreen
from firemail_tui.ui.screens.paste_import import PasteImportScreen
from firemail_tui.ui.widgets.account_list import AccountList
from firemail_tui.ui.widgets.pagination import PaginationBar


logger = logging.getLogger(__name__)


class AccountsScreen(Screen):
    """
    The account management screen.

    Keybindings:
        - Space / x: Toggle selection of the current row
        - a: Toggle selection of the whole page
        - [ / ]: Previous / next page
        - z: Cycle page size (10 / 20 / 50)
        - i: Import from file
        - p: Paste import
        - n: Add a single account
        - d / D: Delete current row / delete selected
        - c / C: Check mail for current row / for selected
        - K: Batch check every account matching the filter
        - r: Reload
        - /: Focus search
        - Escape: Clear selection
    """

    BINDINGS = [
        Binding("[", "previous_page", "Prev Page", show=False),
        Binding("]", "next_page", "Next Page", show=False),
        Binding("z", "cycle_page_size", "Page Size"),
        Binding("i", "import_file", "Import File"),
        Binding("p", "paste_import", "Paste"),
        Binding("n", "add_account", "Add"),
        Binding("d", "delete_current", "Delete"),
        Binding("D", "delete_selected", "Delete Selected"),
        Binding("c", "check_current", "Check", show=False),
        Binding("C", "check_selected", "Check Selected", show=False),
        Binding("K", "check_all", "Check All", show=False),
        Binding("r", "reload", "Reload"),
        Binding("/", "focus_search", "Search"),
        Binding("escape", "clear_selection", "Clear", show=False),
    ]

    AUTO_FOCUS = "#account-list"

    CSS = """
    #toolbar {
        height: 3;
        padding: 0 1;
    }

    #toolbar Label {
        padding: 1 1 0 0;
    }

    #separator-input {
        width: 14;
        margin-right: 2;
    }

    #search-input {
        width: 1fr;
    }

    #account-list {
        height: 1fr;
    }

    #import-result {
        height: auto;
        max-height: 8;
        padding: 0 1;
        overflow-y: auto;
    }

    #import-result.error {
        color: $error;
    }

    #import-result.success {
        color: $success;
    }

    #status-line {
        height: 1;
        background: $surface-darken-2;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self, backend: Backend, config: Config | None = None) -> None:
        """
        Initialize the accounts screen.

        Args:
            backend: Connected backend.
            config: Application configuration (defaults if omitted).
        """
        super().__init__()
        self._config = config or Config()
        self._backend = backend
        self._table = AccountTable(backend, page_size=self._config.table.page_size)
        self._importer = ImportAggregator(backend, self._table)
        self._planner = BatchActionPlanner(backend, self._table)
        self._separator = self._config.importing.separator
        self._busy = False

    @property
    def table(self) -> AccountTable:
        return self._table

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="toolbar"):
            yield Label("Separator")
            yield Input(value=self._separator, id="separator-input")
            yield Label("Search")
            yield Input(placeholder="Filter by email address", id="search-input")
        yield AccountList(id="account-list")
        yield PaginationBar(id="pagination")
        yield Static("", id="import-result", markup=False)
        yield Static("Ready", id="status-line")
        yield Footer()

    async def on_mount(self) -> None:
        """Load the accounts and focus the table."""
        self.query_one("#account-list", AccountList).focus()
        self.query_one("#import-result", Static).display = False
        self._reload()

    def update_status(self, text: str) -> None:
        """Update the status line."""
        self.query_one("#status-line", Static).update(text)

    def refresh_table(self) -> None:
        """Redraw the list and the pagination bar from the table state."""
        view = self._table.view()
        self.query_one("#account-list", AccountList).show(view, self._table)
        self.query_one("#pagination", PaginationBar).show(
            view, selected=self._table.selection_count
        )

    def _show_import_result(self, text: str, error: bool) -> None:
        result = self.query_one("#import-result", Static)
        result.update(text)
        result.set_class(error, "error")
        result.set_class(not error, "success")
        result.display = True

    def _start(self, label: str) -> bool:
        """Claim the busy flag. Returns False if an operation is running."""
        if self._busy:
            self.notify("Another operation is still running", severity="warning")
            return False
        self._busy = True
        self.update_status(label)
        return True

    def _finish(self, status: str = "Ready") -> None:
        self._busy = False
        self.refresh_table()
        self.update_status(status)

    # -------------------------------------------------------------------------
    # Input handling
    # -------------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input":
            self._table.set_filter(event.value.strip())
            self.refresh_table()
        elif event.input.id == "separator-input":
            self._separator = event.value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the toolbar returns focus to the list."""
        self.query_one("#account-list", AccountList).focus()

    def on_account_list_toggle_requested(self, event: AccountList.ToggleRequested) -> None:
        selected = self._table.toggle(event.account_id)
        self.query_one("#account-list", AccountList).set_checked(event.account_id, selected)
        self.query_one("#pagination", PaginationBar).show(
            self._table.view(), selected=self._table.selection_count
        )

    def on_account_list_toggle_page_requested(
        self, event: AccountList.TogglePageRequested
    ) -> None:
        page_ids = self._table.view().page_ids
        self._table.set_all(page_ids, checked=not self._table.all_page_selected())
        self.refresh_table()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def action_previous_page(self) -> None:
        self._table.previous_page()
        self.refresh_table()

    def action_next_page(self) -> None:
        self._table.next_page()
        self.refresh_table()

    def action_cycle_page_size(self) -> None:
        """Switch to the next allowed page size."""
        index = PAGE_SIZES.index(self._table.page_size)
        self._table.set_page_size(PAGE_SIZES[(index + 1) % len(PAGE_SIZES)])
        self.refresh_table()

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_clear_selection(self) -> None:
        self._table.clear_selection()
        self.refresh_table()
        self.query_one("#account-list", AccountList).focus()

    def action_reload(self) -> None:
        self._reload()

    @work(exclusive=False, name="reload")
    async def _reload(self) -> None:
        """Background worker to reload the account list."""
        if not self._start("Loading accounts..."):
            return
        try:
            await self._table.load()
        except BackendError as e:
            logger.error(f"Loading accounts failed: {e}")
            self.notify(f"Loading accounts failed: {e}", severity="error")
            self._finish("Load failed")
            return
        self._finish(f"{len(self._table.accounts)} accounts")

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def action_import_file(self) -> None:
        """Pick a .txt file and import it."""

        def on_file_picked(path: str | None) -> None:
            if not path:
                return
            try:
                text = read_import_file(path)
            except (OSError, UnicodeDecodeError, ValueError) as e:
                self.notify(f"Cannot read file: {e}", severity="error")
                return
            self._do_import(text)

        self.app.push_screen(FilePickerScreen(), on_file_picked)

    def action_paste_import(self) -> None:
        """Paste import text into a dialog and import it."""

        def on_pasted(text: str | None) -> None:
            if text:
                self._do_import(text)

        self.app.push_screen(PasteImportScreen(self._separator), on_pasted)

    def action_add_account(self) -> None:
        """Add one account through a form."""

        def on_entered(fields: AccountFields | None) -> None:
            if fields is not None:
                self._do_add(fields)

        self.app.push_screen(AddAccountScreen(), on_entered)

    @work(exclusive=False, name="import")
    async def _do_import(self, text: str) -> None:
        """Background worker to run a bulk import."""
        if not self._separator:
            self.notify("Separator must not be empty", severity="warning")
            return
        if not self._start("Importing..."):
            return

        outcome = await self._importer.run(text, self._separator)

        error = outcome.failed or outcome.failure_count > 0 or outcome.reload_error is not None
        self._show_import_result(outcome.summary(), error=error)
        if outcome.failed:
            self.notify(outcome.summary().splitlines()[0], severity="error")
        elif outcome.reload_error is not None:
            self.notify(f"Reload failed: {outcome.reload_error}", severity="error")
        self._finish(f"Imported {outcome.success_count}, failed {outcome.failure_count}")

    @work(exclusive=False, name="add-account")
    async def _do_add(self, fields: AccountFields) -> None:
        """Background worker to create one account."""
        if not self._start(f"Adding {fields.email}..."):
            return
        try:
            record = await self._importer.add_single(fields)
        except BackendError as e:
            self._show_import_result(f"Import failed: {e}", error=True)
            self._finish("Add failed")
            return
        self._show_import_result("Successfully imported 1 account(s)", error=False)
        self._finish(f"Added {record.email}")

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def _confirm(self, message: str, on_confirmed) -> None:
        """Run `on_confirmed` directly or after a confirm dialog."""
        if not self._config.ui.confirm_delete:
            on_confirmed()
            return

        def on_answer(confirmed: bool | None) -> None:
            if confirmed:
                on_confirmed()

        self.app.push_screen(ConfirmScreen(message), on_answer)

    def action_delete_current(self) -> None:
        account_id = self.query_one("#account-list", AccountList).current_account_id()
        record = self._table.get(account_id) if account_id is not None else None
        if record is None:
            self.notify("No account selected", severity="warning")
            return
        self._confirm(f"Delete {record.email}?", lambda: self._do_delete_one(record.id))

    @work(exclusive=False, name="delete")
    async def _do_delete_one(self, account_id: int) -> None:
        """Background worker to delete one account."""
        if not self._start("Deleting..."):
            return
        try:
            try:
                await self._backend.delete_account(account_id)
            except AccountNotFoundError:
                pass
            await self._table.load()
        except BackendError as e:
            self.notify(f"Delete failed: {e}", severity="error")
            self._finish("Delete failed")
            return
        self._finish("Deleted 1 account")

    def action_delete_selected(self) -> None:
        count = self._table.selection_count
        if not count:
            self.notify("No accounts selected", severity="warning")
            return
        self._confirm(
            f"Delete the {count} selected account(s)?",
            lambda: self._run_batch(BatchAction.DELETE),
        )

    # -------------------------------------------------------------------------
    # Mail checks
    # -------------------------------------------------------------------------

    def action_check_current(self) -> None:
        account_id = self.query_one("#account-list", AccountList).current_account_id()
        if account_id is None:
            self.notify("No account selected", severity="warning")
            return
        self._do_check_one(account_id)

    @work(exclusive=False, name="check")
    async def _do_check_one(self, account_id: int) -> None:
        """Background worker to check one mailbox."""
        if not self._start("Checking mail..."):
            return
        try:
            message = await self._backend.check_mail(account_id)
        except BackendError as e:
            self.notify(f"Check failed: {e}", severity="error")
            self._finish("Check failed")
            return
        self.notify(message)
        self._finish(message)

    def action_check_selected(self) -> None:
        if not self._table.selection_count:
            self.notify("No accounts selected", severity="warning")
            return
        self._run_batch(BatchAction.CHECK)

    def action_check_all(self) -> None:
        """Batch check every account matching the current filter."""
        account_ids = [record.id for record in self._table.filtered()]
        if not account_ids:
            self.notify("No accounts to check", severity="warning")
            return
        self._do_batch_check(account_ids)

    @work(exclusive=False, name="batch-check")
    async def _do_batch_check(self, account_ids: list[int]) -> None:
        """Background worker for the backend's own batched check."""
        if not self._start(f"Checking {len(account_ids)} mailboxes..."):
            return
        try:
            result = await self._backend.batch_check_mail(account_ids)
        except BackendError as e:
            self.notify(f"Batch check failed: {e}", severity="error")
            self._finish("Batch check failed")
            return
        msg = f"Checked: {result.success_count} ok, {result.failure_count} failed"
        self.notify(msg, severity="warning" if result.failure_count else "information")
        self._finish(msg)

    # -------------------------------------------------------------------------
    # Batch actions
    # -------------------------------------------------------------------------

    @work(exclusive=False, name="batch")
    async def _run_batch(self, action: BatchAction) -> None:
        """Background worker to apply an action to the selection."""
        if not self._start(f"Running batch {action.value}..."):
            return
        try:
            report = await self._planner.run(action)
        except BackendError as e:
            self.notify(f"Reload failed: {e}", severity="error")
            self._finish("Batch done, reload failed")
            return

        self.notify(report.summary())
        self._finish(report.summary())
