# =============================================================================
# Account Table Tests
# =============================================================================
# Filter, pagination, page window and selection behavior of AccountTable.
# =============================================================================

import asyncio

import pytest

from firemail_tui.backend import BackendError
from firemail_tui.core import AccountTable, page_window, total_pages_for
from firemail_tui.core.table import MAX_WINDOW_SLOTS, PAGE_SIZES

from conftest import FakeBackend, make_records


class TestPageWindow:
    def test_few_pages_show_everything(self):
        assert page_window(1, 1) == [1]
        assert page_window(7, 4) == [1, 2, 3, 4, 5, 6, 7]

    def test_near_start(self):
        assert page_window(10, 2) == [1, 2, 3, 4, ..., 10]

    def test_near_end(self):
        assert page_window(10, 9) == [1, ..., 7, 8, 9, 10]

    def test_middle(self):
        assert page_window(10, 5) == [1, ..., 4, 5, 6, ..., 10]

    @pytest.mark.parametrize("total", range(1, 30))
    def test_window_shape(self, total):
        for current in range(1, total + 1):
            window = page_window(total, current)

            assert len(window) <= MAX_WINDOW_SLOTS
            assert window[0] == 1
            assert window[-1] == total
            assert current in window
            numbers = [item for item in window if item is not ...]
            assert numbers == sorted(numbers)


class TestTotalPages:
    def test_empty_list_has_one_page(self):
        assert total_pages_for(0, 10) == 1

    def test_rounds_up(self):
        assert total_pages_for(23, 10) == 3
        assert total_pages_for(20, 10) == 2
        assert total_pages_for(21, 20) == 2


class TestFilterAndPages:
    def test_initial_view(self, table):
        view = table.view()

        assert view.page == 1
        assert view.total_pages == 3
        assert view.filtered_count == 23
        assert view.page_ids == list(range(1, 11))
        assert not view.has_previous
        assert view.has_next

    def test_last_page_is_partial(self, table):
        table.set_page(3)
        view = table.view()

        assert view.page_ids == [21, 22, 23]
        assert view.start_index == 20

    def test_set_page_clamps(self, table):
        table.set_page(5)
        assert table.view().page == 3

        table.set_page(0)
        assert table.view().page == 1

    def test_navigation_stops_at_edges(self, table):
        table.previous_page()
        assert table.page == 1

        table.set_page(3)
        table.next_page()
        assert table.page == 3

    def test_filter_resets_page(self, table):
        table.set_page(3)
        table.set_filter("user1")

        view = table.view()
        assert view.page == 1
        # user1, user10..user19
        assert view.filtered_count == 11

    def test_filter_is_case_insensitive(self, table):
        table.set_filter("USER2")

        assert [r.id for r in table.filtered()] == [2, 20, 21, 22, 23]

    def test_filter_with_no_match(self, table):
        table.set_filter("nobody")
        view = table.view()

        assert view.rows == ()
        assert view.total_pages == 1
        assert view.page == 1

    def test_page_size_change_resets_page(self, table):
        table.set_page(2)
        table.set_page_size(20)

        view = table.view()
        assert view.page == 1
        assert view.total_pages == 2
        assert len(view.rows) == 20

    def test_invalid_page_size(self, loaded_backend, table):
        with pytest.raises(ValueError):
            table.set_page_size(15)
        with pytest.raises(ValueError):
            AccountTable(loaded_backend, page_size=0)

    @pytest.mark.parametrize("size", PAGE_SIZES)
    def test_allowed_page_sizes(self, loaded_backend, size):
        table = AccountTable(loaded_backend, page_size=size)
        assert table.page_size == size

    def test_page_clamped_after_shrink(self, table):
        table.set_page(3)
        table.replace(make_records(12))

        view = table.view()
        assert view.page == 2
        assert table.page == 2

    def test_view_recomputed_after_replace(self, table):
        table.set_filter("user2")
        table.replace(make_records(5))

        assert table.view().page_ids == [2]


class TestSelection:
    def test_toggle(self, table):
        assert table.toggle(4) is True
        assert table.is_selected(4)
        assert table.toggle(4) is False
        assert not table.is_selected(4)

    def test_toggle_unknown_id_is_ignored(self, table):
        assert table.toggle(999) is False
        assert table.selection_count == 0

    def test_selection_survives_filter_and_paging(self, table):
        table.toggle(3)
        table.toggle(15)
        table.set_filter("user1")
        table.set_page(2)
        table.set_filter("")

        assert table.selected_ids == (3, 15)

    def test_select_page(self, table):
        table.set_page(2)
        page_ids = table.view().page_ids
        table.set_all(page_ids, checked=True)

        assert table.selected_ids == tuple(range(11, 21))
        assert table.all_page_selected()

    def test_unselect_page_leaves_other_pages(self, table):
        table.toggle(1)
        table.set_page(2)
        table.set_all(table.view().page_ids, checked=True)
        table.set_all(table.view().page_ids, checked=False)

        assert table.selected_ids == (1,)
        assert not table.all_page_selected()

    def test_set_all_ignores_unknown_ids(self, table):
        table.set_all([1, 2, 500], checked=True)

        assert table.selected_ids == (1, 2)

    def test_all_page_selected_on_empty_page(self, table):
        table.set_filter("nobody")
        assert not table.all_page_selected()

    def test_partial_page_is_not_all_selected(self, table):
        table.toggle(1)
        assert not table.all_page_selected()

    def test_replace_drops_stale_ids(self, table):
        table.set_all([1, 2, 20, 23], checked=True)
        table.replace(make_records(10))

        assert table.selected_ids == (1, 2)

    def test_selection_is_subset_of_known_ids(self, table):
        table.set_all(range(1, 30), checked=True)
        table.replace(make_records(7))

        assert set(table.selected_ids) <= table.known_ids

    def test_clear_selection(self, table):
        table.set_all([1, 2, 3], checked=True)
        table.clear_selection()

        assert table.selection_count == 0


class TestLoad:
    def test_load_replaces_accounts(self, loaded_backend):
        table = AccountTable(loaded_backend)
        asyncio.run(table.load())

        assert len(table.accounts) == 23
        assert loaded_backend.call_names() == ["list_accounts"]

    def test_load_reflects_backend_changes(self, loaded_backend):
        table = AccountTable(loaded_backend)
        asyncio.run(table.load())
        loaded_backend.add("new@example.com")
        asyncio.run(table.load())

        assert table.get(24).email == "new@example.com"

    def test_failed_load_keeps_previous_list(self):
        backend = FakeBackend(make_records(3))
        table = AccountTable(backend)
        asyncio.run(table.load())

        backend.list_error = "offline"
        with pytest.raises(BackendError):
            asyncio.run(table.load())
        assert len(table.accounts) == 3
