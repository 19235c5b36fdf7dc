# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the Firemail-TUI test suite.
#
# FakeBackend is an in-memory Backend that records every call, so tests can
# assert on call order and inject failures per id or per email.
# =============================================================================

import pytest
import tempfile
from pathlib import Path
from typing import Sequence

from firemail_tui.backend.base import (
    AccountNotFoundError,
    Backend,
    BackendError,
    BatchCheckResult,
    BulkImportResult,
)
from firemail_tui.core import (
    AccountFields,
    AccountRecord,
    AccountTable,
    FailureSource,
    ImportFailure,
    ImportLine,
)


class FakeBackend(Backend):
    """In-memory backend with call recording and failure injection."""

    def __init__(self, records: Sequence[AccountRecord] = ()) -> None:
        self.records: dict[int, AccountRecord] = {r.id: r for r in records}
        self.next_id = max(self.records, default=0) + 1
        self.calls: list[tuple] = []

        # Failure injection
        self.reject_emails: set[str] = set()     # bulk_import rejects these
        self.fail_ids: set[int] = set()          # delete/check raise BackendError
        self.bulk_error: str | None = None       # bulk_import raises BackendError
        self.list_error: str | None = None       # list_accounts raises BackendError

    def add(self, email: str) -> AccountRecord:
        record = AccountRecord(
            id=self.next_id,
            email=email,
            password="pw",
            client_id="client",
            refresh_token="token",
        )
        self.records[record.id] = record
        self.next_id += 1
        return record

    async def list_accounts(self) -> list[AccountRecord]:
        self.calls.append(("list_accounts",))
        if self.list_error:
            raise BackendError(self.list_error)
        return list(self.records.values())

    async def bulk_import(self, candidates: Sequence[ImportLine]) -> BulkImportResult:
        self.calls.append(("bulk_import", [line.line_number for line in candidates]))
        if self.bulk_error:
            raise BackendError(self.bulk_error)

        result = BulkImportResult()
        for line in candidates:
            if line.fields.email in self.reject_emails:
                result.failures.append(
                    ImportFailure(line.line_number, line.raw, "email already exists",
                                  FailureSource.BACKEND)
                )
                continue
            record = AccountRecord.from_fields(self.next_id, line.fields)
            self.records[record.id] = record
            self.next_id += 1
            result.success_count += 1
        result.failure_count = len(result.failures)
        return result

    async def create_account(self, fields: AccountFields) -> AccountRecord:
        self.calls.append(("create_account", fields.email))
        record = AccountRecord.from_fields(self.next_id, fields)
        self.records[record.id] = record
        self.next_id += 1
        return record

    async def delete_account(self, account_id: int) -> None:
        self.calls.append(("delete_account", account_id))
        if account_id in self.fail_ids:
            raise BackendError(f"transport error for {account_id}")
        if account_id not in self.records:
            raise AccountNotFoundError(f"Account {account_id} not found")
        del self.records[account_id]

    async def check_mail(self, account_id: int) -> str:
        self.calls.append(("check_mail", account_id))
        if account_id in self.fail_ids:
            raise BackendError(f"check failed for {account_id}")
        return f"checked {account_id}"

    async def batch_check_mail(self, account_ids: Sequence[int]) -> BatchCheckResult:
        self.calls.append(("batch_check_mail", list(account_ids)))
        failed = len([i for i in account_ids if i in self.fail_ids])
        return BatchCheckResult(success_count=len(account_ids) - failed, failure_count=failed)

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


def make_records(count: int, domain: str = "example.com") -> list[AccountRecord]:
    """Records with ids 1..count and emails user1@domain .. userN@domain."""
    return [
        AccountRecord(
            id=i,
            email=f"user{i}@{domain}",
            password=f"pw{i}",
            client_id=f"client-{i}",
            refresh_token=f"token-{i}",
        )
        for i in range(1, count + 1)
    ]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def xdg_dirs(tmp_path, monkeypatch):
    """Point every XDG directory at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    return tmp_path


@pytest.fixture
def sample_fields():
    """Parsed fields for one Outlook-style account."""
    return AccountFields(
        email="test@outlook.com",
        password="Secr3t!",
        client_id="9e5f94bc-e8a4-4e73-b8be-63364c29d753",
        refresh_token="M.C5_BAY.0.U.-CgGqN7kX1oB2eK8mQ!z5tYh3dW*Jp",
    )


@pytest.fixture
def fake_backend():
    """An empty FakeBackend."""
    return FakeBackend()


@pytest.fixture
def loaded_backend():
    """A FakeBackend holding 23 accounts (ids 1..23)."""
    return FakeBackend(make_records(23))


@pytest.fixture
def table(loaded_backend):
    """An AccountTable over loaded_backend, already populated."""
    table = AccountTable(loaded_backend)
    table.replace(make_records(23))
    return table
