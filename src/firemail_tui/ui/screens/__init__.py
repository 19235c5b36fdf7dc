# =============================================================================
# UI Screens
# =============================================================================
# Full-screen views and modal dialogs for the application.
#
# Screens are the top-level containers in Textual. The app shows one screen
# at a time, and screens can be pushed/popped like a stack.
#
#   - AccountsScreen: The account table with import and batch actions
#   - PasteImportScreen: Paste import text
#   - AddAccountScreen: Add one account through a form
#   - FilePickerScreen: Choose a .txt import file
#   - ConfirmScreen: Yes/no before deleting
# =============================================================================

from firemail_tui.ui.screens.accounts import AccountsScreen
from firemail_tui.ui.screens.add_account import AddAccountScreen
from firemail_tui.ui.screens.confirm import ConfirmScreen
from firemail_tui.ui.screens.file_picker import FilePickerScreen
from firemail_tui.ui.screens.paste_import import PasteImportScreen

__all__ = [
    "AccountsScreen",
    "AddAccountScreen",
    "ConfirmScreen",
    "FilePickerScreen",
    "PasteImportScreen",
]
