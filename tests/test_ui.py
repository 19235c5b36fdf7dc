# =============================================================================
# UI Tests
# =============================================================================
# Rendering helpers plus a headless run of the accounts screen against the
# in-memory backend.
# =============================================================================

import asyncio

from rich.text import Text

from firemail_tui.app import FiremailApp, parse_args
from firemail_tui.config import Config
from firemail_tui.core import AccountRecord, AccountTable
from firemail_tui.ui.screens.accounts import AccountsScreen
from firemail_tui.ui.screens.file_picker import format_size
from firemail_tui.ui.widgets.account_list import CHECKED, row_cells
from firemail_tui.ui.widgets.pagination import render_window

from conftest import FakeBackend, make_records


def view_at(count: int, page: int):
    table = AccountTable(FakeBackend())
    table.replace(make_records(count))
    table.set_page(page)
    return table.view()


class TestRenderWindow:
    def test_current_page_highlighted(self):
        assert render_window(view_at(23, 2)) == "1 [reverse] 2 [/] 3"

    def test_ellipsis(self):
        text = render_window(view_at(100, 5))

        assert text.count("…") == 2
        assert "[reverse] 5 [/]" in text
        assert text.endswith("10")


class TestRowCells:
    def test_imported_values_are_not_markup(self):
        record = AccountRecord(7, "[bold]a@x.com", "pw", "[red]cid[/]", "tok[en]")

        cells = row_cells(record, number=3, selected=False)

        assert isinstance(cells[2], Text)
        assert cells[2].plain == "[bold]a@x.com"
        assert cells[4].plain == "[red]cid[/]"
        assert cells[5].plain == "tok[en]"

    def test_password_masked_and_checkbox(self):
        record = AccountRecord(7, "a@x.com", "hunter2", "c", "r")

        cells = row_cells(record, number=3, selected=True)

        assert cells[0] == CHECKED
        assert cells[1] == "3"
        assert cells[3] == "********"


class TestFormatSize:
    def test_sizes(self):
        assert format_size(512) == "512 B"
        assert format_size(2048) == "2 KB"
        assert format_size(1536) == "1.5 KB"


class TestArgs:
    def test_defaults(self):
        args = parse_args([])

        assert not args.debug
        assert args.config is None
        assert args.database is None

    def test_database_option(self, tmp_path):
        args = parse_args(["--database", str(tmp_path / "x.db"), "--debug"])

        assert args.database == tmp_path / "x.db"
        assert args.debug


class TestAccountsScreen:
    def test_loads_and_pages(self):
        backend = FakeBackend(make_records(23))
        app = FiremailApp(config=Config(), backend=backend)

        async def body():
            async with app.run_test() as pilot:
                await pilot.pause()
                await app.workers.wait_for_complete()
                await pilot.pause()

                screen = app.screen
                assert isinstance(screen, AccountsScreen)
                assert len(screen.table.accounts) == 23

                await pilot.press("space")
                await pilot.pause()
                assert screen.table.selected_ids == (1,)

                await pilot.press("right_square_bracket")
                await pilot.pause()
                assert screen.table.page == 2

        asyncio.run(body())
