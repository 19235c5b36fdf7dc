# =============================================================================
# UI Module
# =============================================================================
# Textual-based user interface for Firemail-TUI.
#
# Structure:
#   - screens/: Full-screen views and modal dialogs
#   - widgets/: Reusable UI components (account list, pagination bar)
#
# Textual is async-native, so backend calls run in workers on the same
# event loop as the UI and the table state needs no locking.
# =============================================================================

from firemail_tui.ui.screens.accounts import AccountsScreen
from firemail_tui.ui.widgets.account_list import AccountList
from firemail_tui.ui.widgets.pagination import PaginationBar

__all__ = [
    "AccountsScreen",
    "AccountList",
    "PaginationBar",
]
