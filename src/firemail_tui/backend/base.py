# =============================================================================
# Backend Command Interface
# =============================================================================
# The fixed set of commands Firemail-TUI issues against whatever actually
# stores the accounts and talks to the mail servers.
#
# Everything here is async: backend calls are the only places where the
# import pipeline and the table state suspend. Implementations raise the
# exceptions at the bottom of this module; callers decide whether a failure
# is per-line, per-id or operation-level.
# =============================================================================

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

from firemail_tui.core.account import AccountFields, AccountRecord
from firemail_tui.core.importing import ImportFailure, ImportLine


@dataclass
class BulkImportResult:
    """
    What the backend reports for one bulk import.

    Attributes:
        success_count: Accounts created.
        failure_count: Lines the backend rejected.
        failures: Rejections in the order the backend produced them. Each
                  keeps the line number it was submitted with.
    """
    success_count: int = 0
    failure_count: int = 0
    failures: list[ImportFailure] = field(default_factory=list)


@dataclass
class BatchCheckResult:
    """Counts reported by the backend's own batched mail check."""
    success_count: int = 0
    failure_count: int = 0


class Backend(ABC):
    """
    Abstract backend consumed by the import pipeline and the account table.

    Implementations:
        - LocalBackend: SQLite storage via aiosqlite
    """

    @abstractmethod
    async def list_accounts(self) -> list[AccountRecord]:
        """
        Return every stored account.

        The result replaces the table's list wholesale.
        """

    @abstractmethod
    async def bulk_import(self, candidates: Sequence[ImportLine]) -> BulkImportResult:
        """
        Create accounts for already-parsed import lines.

        The backend validates every line again on its own (duplicates,
        field checks) and reports rejections per line.

        Args:
            candidates: Parsed lines, carrying their original line numbers.

        Raises:
            BackendError: If the call as a whole failed. Nothing should be
                          assumed persisted.
        """

    @abstractmethod
    async def create_account(self, fields: AccountFields) -> AccountRecord:
        """
        Create a single account.

        Raises:
            BackendValidationError: If the backend rejects the fields.
            BackendError: On any other failure.
        """

    @abstractmethod
    async def delete_account(self, account_id: int) -> None:
        """
        Delete one account.

        Raises:
            AccountNotFoundError: If no such account exists.
            BackendError: On any other failure.
        """

    @abstractmethod
    async def check_mail(self, account_id: int) -> str:
        """
        Ask the backend to check one account's mailbox.

        Returns:
            A status message for the operator.
        """

    @abstractmethod
    async def batch_check_mail(self, account_ids: Sequence[int]) -> BatchCheckResult:
        """Check several mailboxes using the backend's own batching."""

    async def close(self) -> None:
        """Release any resources held by the backend."""


# =============================================================================
# Exceptions
# =============================================================================

class BackendError(Exception):
    """Base exception for backend calls (transport or operation failure)."""
    pass


class BackendValidationError(BackendError):
    """Raised when the backend rejects the data it was given."""
    pass


class AccountNotFoundError(BackendError):
    """Raised when an account id does not exist on the backend."""
    pass


class BackendUnsupportedError(BackendError):
    """Raised when the backend cannot perform the requested command."""
    pass
