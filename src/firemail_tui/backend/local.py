# =============================================================================
# Local Backend
# =============================================================================
# A Backend that keeps accounts in the local SQLite database.
#
# It repeats the field checks of the line parser (a backend never trusts its
# callers) and applies the duplicate email policy:
#
#   - "allow":  the same address may be stored any number of times
#   - "reject": an address already stored, or repeated earlier in the same
#               import, is reported as a failed line
#
# Checking mail needs the remote mail protocol, which this backend does not
# speak. Single checks raise BackendUnsupportedError and batch checks count
# every id as failed.
# =============================================================================

import logging
from pathlib import Path
from typing import Sequence

import aiosqlite

from firemail_tui.backend.base import (
    AccountNotFoundError,
    Backend,
    BackendError,
    BackendUnsupportedError,
    BackendValidationError,
    BatchCheckResult,
    BulkImportResult,
)
from firemail_tui.config import DUPLICATE_POLICIES
from firemail_tui.core import AccountFields, AccountRecord, FailureSource, ImportFailure, ImportLine
from firemail_tui.core.importing import FIELD_NAMES, is_valid_email
from firemail_tui.storage import Database, Repository


logger = logging.getLogger(__name__)


class LocalBackend(Backend):
    """
    Backend implementation on top of the local SQLite database.

    Usage:
        >>> backend = LocalBackend(duplicate_policy="reject")
        >>> await backend.connect()
        >>> accounts = await backend.list_accounts()
        >>> await backend.close()

    Attributes:
        db: The underlying database.
        repo: Repository used for all queries.
        duplicate_policy: "allow" or "reject".
    """

    def __init__(
        self,
        db_path: Path | None = None,
        duplicate_policy: str = "allow",
    ) -> None:
        """
        Initialize the backend (does not connect).

        Args:
            db_path: Database file. Defaults to the XDG data location.
            duplicate_policy: One of DUPLICATE_POLICIES.

        Raises:
            ValueError: If the duplicate policy is unknown.
        """
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {duplicate_policy!r}")
        self.db = Database(db_path)
        self.repo = Repository(self.db)
        self.duplicate_policy = duplicate_policy

    async def connect(self) -> None:
        """
        Open the database.

        Raises:
            BackendError: If the database can't be opened.
        """
        try:
            await self.db.connect()
        except (aiosqlite.Error, OSError) as e:
            raise BackendError(f"Cannot open database {self.db.db_path}: {e}") from e

    async def close(self) -> None:
        await self.db.close()

    # -------------------------------------------------------------------------
    # Backend commands
    # -------------------------------------------------------------------------

    async def list_accounts(self) -> list[AccountRecord]:
        try:
            return await self.repo.get_all_accounts()
        except aiosqlite.Error as e:
            raise BackendError(f"Failed to list accounts: {e}") from e

    async def bulk_import(self, candidates: Sequence[ImportLine]) -> BulkImportResult:
        """
        Validate and store parsed import lines.

        Accepted lines are inserted in one transaction, so a database error
        leaves nothing half-imported.
        """
        result = BulkImportResult()
        accepted: list[AccountFields] = []

        try:
            seen = await self.repo.get_emails() if self.duplicate_policy == "reject" else set()

            for line in candidates:
                reason = self._rejection_reason(line.fields, seen)
                if reason is not None:
                    result.failures.append(
                        ImportFailure(line.line_number, line.raw, reason, FailureSource.BACKEND)
                    )
                    continue
                accepted.append(line.fields)
                if self.duplicate_policy == "reject":
                    seen.add(line.fields.email.lower())

            if accepted:
                await self.repo.insert_accounts(accepted)
        except aiosqlite.Error as e:
            raise BackendError(f"Bulk import failed: {e}") from e

        result.success_count = len(accepted)
        result.failure_count = len(result.failures)
        logger.info(
            f"Bulk import stored {result.success_count} account(s), "
            f"rejected {result.failure_count}"
        )
        return result

    async def create_account(self, fields: AccountFields) -> AccountRecord:
        try:
            seen = await self.repo.get_emails() if self.duplicate_policy == "reject" else set()
            reason = self._rejection_reason(fields, seen)
            if reason is not None:
                raise BackendValidationError(reason)
            record = await self.repo.insert_account(fields)
        except aiosqlite.Error as e:
            raise BackendError(f"Failed to create account: {e}") from e

        logger.info(f"Created account {record}")
        return record

    async def delete_account(self, account_id: int) -> None:
        try:
            deleted = await self.repo.delete_account(account_id)
        except aiosqlite.Error as e:
            raise BackendError(f"Failed to delete account {account_id}: {e}") from e
        if not deleted:
            raise AccountNotFoundError(f"Account {account_id} not found")
        logger.info(f"Deleted account {account_id}")

    async def check_mail(self, account_id: int) -> str:
        raise BackendUnsupportedError("Mail checking is not available with the local backend")

    async def batch_check_mail(self, account_ids: Sequence[int]) -> BatchCheckResult:
        return BatchCheckResult(success_count=0, failure_count=len(account_ids))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _rejection_reason(self, fields: AccountFields | None, seen: set[str]) -> str | None:
        """
        Backend-side checks for one account.

        Returns:
            None if the account may be stored, otherwise the reason.
        """
        if fields is None:
            return "line was not parsed"

        values = (fields.email, fields.password, fields.client_id, fields.refresh_token)
        for name, value in zip(FIELD_NAMES, values):
            if not value.strip():
                return f"{name} is empty"

        if not is_valid_email(fields.email):
            return "invalid email address"

        if self.duplicate_policy == "reject" and fields.email.lower() in seen:
            return f"email already exists: {fields.email}"

        return None
