# =============================================================================
# Firemail-TUI: Bulk Mail Account Manager for the Terminal
# =============================================================================
#
# Firemail-TUI keeps a list of OAuth mail accounts (address, password,
# client id, refresh token) and makes it easy to manage hundreds of them:
#
# Features:
#   - Bulk import from pasted text or .txt files, with per-line error reports
#   - Configurable field separator (default "----")
#   - Filter by address, paginate, select across pages
#   - Batch delete and mail checks over the selection
#   - Local SQLite storage, XDG Base Directory compliant
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "firemail-tui"

# Main entry point - this is what gets called by the 'firemail-tui' command
from firemail_tui.app import main

__all__ = ["main", "__version__", "__app_name__"]
