# =============================================================================
# Storage Module
# =============================================================================
# Handles persistent storage using SQLite.
#
# Provides:
#   - Database initialization and migrations
#   - CRUD operations for accounts
#   - Async operations via aiosqlite
#
# The database is stored in the XDG data directory
# (~/.local/share/firemail-tui/).
# =============================================================================

from firemail_tui.storage.database import Database
from firemail_tui.storage.repository import Repository

__all__ = ["Database", "Repository"]
