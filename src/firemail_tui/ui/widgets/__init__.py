# =============================================================================
# UI Widgets
# =============================================================================
# Reusable UI components for Firemail-TUI:
#   - AccountList: One page of accounts with selection checkboxes
#   - PaginationBar: Page window, page size and selection count
# =============================================================================

from firemail_tui.ui.widgets.account_list import AccountList
from firemail_tui.ui.widgets.pagination import PaginationBar

__all__ = ["AccountList", "PaginationBar"]
