# =============================================================================
# Repository - Data Access Layer
# =============================================================================
# CRUD operations for stored accounts.
#
# This is the only module that knows the accounts table layout. It converts
# between rows and AccountRecord objects and groups multi-row inserts into a
# single transaction.
#
# All methods are async for non-blocking database access.
# =============================================================================

from datetime import datetime
from typing import TYPE_CHECKING, Sequence

from firemail_tui.core import AccountFields, AccountRecord

if TYPE_CHECKING:
    from firemail_tui.storage.database import Database


class Repository:
    """
    Data access layer for Firemail-TUI.

    Usage:
        >>> repo = Repository(database)
        >>> accounts = await repo.get_all_accounts()
        >>> record = await repo.insert_account(fields)

    Attributes:
        db: Database instance for executing queries.
    """

    def __init__(self, db: "Database") -> None:
        """
        Initialize the repository.

        Args:
            db: Connected Database instance.
        """
        self.db = db

    async def get_all_accounts(self) -> list[AccountRecord]:
        """
        Get all stored accounts, oldest first.

        Returns:
            List of AccountRecord objects.
        """
        async with self.db.conn.execute(
            "SELECT id, email, password, client_id, refresh_token, created_at "
            "FROM accounts ORDER BY id"
        ) as cursor:
            rows = await cursor.fetchall()
            return [self._row_to_account(row) for row in rows]

    async def get_account(self, account_id: int) -> AccountRecord | None:
        """
        Get an account by ID.

        Returns:
            AccountRecord if found, None otherwise.
        """
        async with self.db.conn.execute(
            "SELECT id, email, password, client_id, refresh_token, created_at "
            "FROM accounts WHERE id = ?",
            (account_id,)
        ) as cursor:
            row = await cursor.fetchone()
            return self._row_to_account(row) if row else None

    async def get_emails(self) -> set[str]:
        """
        Get every stored email address, lowercased.

        Used for duplicate checks.
        """
        async with self.db.conn.execute("SELECT lower(email) FROM accounts") as cursor:
            rows = await cursor.fetchall()
            return {row[0] for row in rows}

    async def insert_account(self, fields: AccountFields) -> AccountRecord:
        """
        Insert a single account and commit.

        Returns:
            The stored record with its new ID.
        """
        account_id = await self._insert(fields)
        await self.db.conn.commit()
        record = await self.get_account(account_id)
        return record or AccountRecord.from_fields(account_id, fields)

    async def insert_accounts(self, batch: Sequence[AccountFields]) -> list[int]:
        """
        Insert several accounts in one transaction.

        Either every row is committed or, if any insert fails, none is.

        Returns:
            The new IDs, in input order.
        """
        ids: list[int] = []
        try:
            for fields in batch:
                ids.append(await self._insert(fields))
            await self.db.conn.commit()
        except Exception:
            await self.db.conn.rollback()
            raise
        return ids

    async def delete_account(self, account_id: int) -> bool:
        """
        Delete an account.

        Returns:
            True if a row was deleted, False if the ID didn't exist.
        """
        cursor = await self.db.conn.execute(
            "DELETE FROM accounts WHERE id = ?", (account_id,)
        )
        await self.db.conn.commit()
        return cursor.rowcount > 0

    async def _insert(self, fields: AccountFields) -> int:
        cursor = await self.db.conn.execute(
            """INSERT INTO accounts (email, password, client_id, refresh_token)
               VALUES (?, ?, ?, ?)""",
            (fields.email, fields.password, fields.client_id, fields.refresh_token)
        )
        return cursor.lastrowid

    def _row_to_account(self, row) -> AccountRecord:
        """Convert a database row to an AccountRecord object."""
        created_at = None
        if row[5]:
            try:
                created_at = datetime.fromisoformat(row[5])
            except ValueError:
                pass
        return AccountRecord(
            id=row[0],
            email=row[1],
            password=row[2],
            client_id=row[3],
            refresh_token=row[4],
            created_at=created_at,
        )
