# =============================================================================
# Pagination Bar Widget
# =============================================================================
# One line under the account list:
#
#   ‹ Prev  1 … 4 [5] 6 … 10  Next ›   10/page   23 accounts   3 selected
#
# The page numbers come from TableView.window, which never has more than
# seven slots.
# =============================================================================

from typing import TYPE_CHECKING

from textual.widgets import Static

if TYPE_CHECKING:
    from firemail_tui.core import TableView


def render_window(view: "TableView") -> str:
    """
    Render the page-number controls as Rich markup.

    The current page is highlighted; Ellipsis entries become "…".
    """
    parts = []
    for item in view.window:
        if item is ...:
            parts.append("[dim]…[/]")
        elif item == view.page:
            parts.append(f"[reverse] {item} [/]")
        else:
            parts.append(str(item))
    return " ".join(parts)


class PaginationBar(Static):
    """
    Displays the page window, page size and selection count.

    Usage:
        >>> bar = PaginationBar(id="pagination")
        >>> bar.show(table.view(), selected=table.selection_count)
    """

    DEFAULT_CSS = """
    PaginationBar {
        height: 1;
        padding: 0 1;
        background: $surface-darken-1;
    }
    """

    def show(self, view: "TableView", selected: int = 0) -> None:
        """Redraw the bar for `view`."""
        prev_label = "‹ Prev" if view.has_previous else "[dim]‹ Prev[/]"
        next_label = "Next ›" if view.has_next else "[dim]Next ›[/]"
        text = (
            f"{prev_label}  {render_window(view)}  {next_label}"
            f"   {view.page_size}/page"
            f"   {view.filtered_count} accounts"
        )
        if selected:
            text += f"   [bold]{selected} selected[/]"
        self.update(text)
