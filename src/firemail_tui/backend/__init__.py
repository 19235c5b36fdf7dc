# =============================================================================
# Backend Module
# =============================================================================
# The command interface between Firemail-TUI and the service that stores the
# accounts and checks their mail:
#
#   - Backend: Abstract async command set (list, import, create, delete, check)
#   - LocalBackend: Implementation on the local SQLite database
#
# The OAuth / mail protocol work behind "check mail" lives on the far side of
# this interface.
# =============================================================================

from firemail_tui.backend.base import (
    AccountNotFoundError,
    Backend,
    BackendError,
    BackendUnsupportedError,
    BackendValidationError,
    BatchCheckResult,
    BulkImportResult,
)
from firemail_tui.backend.local import LocalBackend

__all__ = [
    # Interface
    "Backend",
    "BulkImportResult",
    "BatchCheckResult",
    # Implementations
    "LocalBackend",
    # Exceptions
    "BackendError",
    "BackendValidationError",
    "AccountNotFoundError",
    "BackendUnsupportedError",
]
