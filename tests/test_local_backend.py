# =============================================================================
# Local Backend and Storage Tests
# =============================================================================
# Runs against a real SQLite file in a temporary directory. Each test drives
# one coroutine so the aiosqlite connection lives on a single event loop.
# =============================================================================

import asyncio

import pytest

from firemail_tui.backend import (
    AccountNotFoundError,
    BackendError,
    BackendUnsupportedError,
    BackendValidationError,
    LocalBackend,
)
from firemail_tui.core import AccountFields, FailureSource, parse_text
from firemail_tui.storage import Database, Repository


def run_with_backend(tmp_path, body, duplicate_policy="allow"):
    """Connect a LocalBackend on tmp_path, run body(backend), then close."""

    async def runner():
        backend = LocalBackend(db_path=tmp_path / "test.db", duplicate_policy=duplicate_policy)
        await backend.connect()
        try:
            return await body(backend)
        finally:
            await backend.close()

    return asyncio.run(runner())


def fields(email: str) -> AccountFields:
    return AccountFields(email=email, password="pw", client_id="cid", refresh_token="rt" * 40)


class TestDatabase:
    def test_connect_creates_file(self, tmp_path):
        db_path = tmp_path / "nested" / "firemail.db"

        async def body():
            db = Database(db_path)
            await db.connect()
            assert db.is_connected
            await db.close()
            assert not db.is_connected

        asyncio.run(body())
        assert db_path.exists()

    def test_conn_requires_connect(self, tmp_path):
        db = Database(tmp_path / "x.db")

        with pytest.raises(RuntimeError):
            db.conn

    def test_reopen_keeps_data(self, tmp_path):
        db_path = tmp_path / "firemail.db"

        async def body():
            db = Database(db_path)
            await db.connect()
            await Repository(db).insert_account(fields("a@x.com"))
            await db.close()

            db = Database(db_path)
            await db.connect()
            accounts = await Repository(db).get_all_accounts()
            await db.close()
            return accounts

        accounts = asyncio.run(body())
        assert [a.email for a in accounts] == ["a@x.com"]


class TestRepository:
    def test_insert_and_list(self, tmp_path):
        async def body(backend):
            await backend.repo.insert_accounts([fields("a@x.com"), fields("b@x.com")])
            return await backend.repo.get_all_accounts()

        accounts = run_with_backend(tmp_path, body)

        assert [a.email for a in accounts] == ["a@x.com", "b@x.com"]
        assert accounts[0].id < accounts[1].id
        assert accounts[0].created_at is not None

    def test_long_token_stored_untruncated(self, tmp_path):
        token = "M.C5_BAY." + "x" * 1500

        async def body(backend):
            record = await backend.repo.insert_account(
                AccountFields("a@x.com", "pw", "cid", token)
            )
            return await backend.repo.get_account(record.id)

        assert run_with_backend(tmp_path, body).refresh_token == token

    def test_get_emails_is_lowercased(self, tmp_path):
        async def body(backend):
            await backend.repo.insert_account(fields("Mixed@Case.com"))
            return await backend.repo.get_emails()

        assert run_with_backend(tmp_path, body) == {"mixed@case.com"}

    def test_delete_reports_missing(self, tmp_path):
        async def body(backend):
            record = await backend.repo.insert_account(fields("a@x.com"))
            first = await backend.repo.delete_account(record.id)
            second = await backend.repo.delete_account(record.id)
            return first, second

        assert run_with_backend(tmp_path, body) == (True, False)


class TestBulkImport:
    def test_stores_parsed_lines(self, tmp_path):
        lines = [line for line in parse_text("a@x.com----p----c----r\nb@x.com----p----c----r")]

        async def body(backend):
            result = await backend.bulk_import(lines)
            return result, await backend.list_accounts()

        result, accounts = run_with_backend(tmp_path, body)

        assert result.success_count == 2
        assert result.failure_count == 0
        assert [a.email for a in accounts] == ["a@x.com", "b@x.com"]

    def test_allow_policy_keeps_duplicates(self, tmp_path):
        lines = parse_text("a@x.com----p----c----r\nA@X.com----p----c----r")

        async def body(backend):
            await backend.bulk_import(lines)
            return await backend.list_accounts()

        accounts = run_with_backend(tmp_path, body, duplicate_policy="allow")
        assert len(accounts) == 2

    def test_reject_policy(self, tmp_path):
        first = parse_text("a@x.com----p----c----r")
        second = parse_text("b@x.com----p----c----r\nA@x.com----p----c----r\nb@x.com----q----c----r")

        async def body(backend):
            await backend.bulk_import(first)
            result = await backend.bulk_import(second)
            return result, await backend.list_accounts()

        result, accounts = run_with_backend(tmp_path, body, duplicate_policy="reject")

        assert result.success_count == 1
        assert result.failure_count == 2
        # Failures keep their original line numbers
        assert [f.line_number for f in result.failures] == [2, 3]
        assert all(f.source is FailureSource.BACKEND for f in result.failures)
        assert "already exists" in result.failures[0].reason
        assert sorted(a.email for a in accounts) == ["a@x.com", "b@x.com"]

    def test_unparsed_line_is_rejected(self, tmp_path):
        lines = parse_text("not-a-line")

        async def body(backend):
            return await backend.bulk_import(lines)

        result = run_with_backend(tmp_path, body)
        assert result.success_count == 0
        assert result.failure_count == 1

    def test_empty_batch(self, tmp_path):
        async def body(backend):
            return await backend.bulk_import([])

        result = run_with_backend(tmp_path, body)
        assert (result.success_count, result.failure_count) == (0, 0)


class TestAccountCommands:
    def test_create_account(self, tmp_path, sample_fields):
        async def body(backend):
            return await backend.create_account(sample_fields)

        record = run_with_backend(tmp_path, body)
        assert record.id >= 1
        assert record.fields == sample_fields

    def test_create_rejects_invalid_email(self, tmp_path):
        async def body(backend):
            await backend.create_account(fields("nope"))

        with pytest.raises(BackendValidationError):
            run_with_backend(tmp_path, body)

    def test_create_rejects_duplicate_under_reject_policy(self, tmp_path):
        async def body(backend):
            await backend.create_account(fields("a@x.com"))
            await backend.create_account(fields("a@x.com"))

        with pytest.raises(BackendValidationError):
            run_with_backend(tmp_path, body, duplicate_policy="reject")

    def test_delete_account(self, tmp_path):
        async def body(backend):
            record = await backend.create_account(fields("a@x.com"))
            await backend.delete_account(record.id)
            return await backend.list_accounts()

        assert run_with_backend(tmp_path, body) == []

    def test_delete_missing_account(self, tmp_path):
        async def body(backend):
            await backend.delete_account(42)

        with pytest.raises(AccountNotFoundError):
            run_with_backend(tmp_path, body)

    def test_check_mail_unsupported(self, tmp_path):
        async def body(backend):
            await backend.check_mail(1)

        with pytest.raises(BackendUnsupportedError):
            run_with_backend(tmp_path, body)

    def test_batch_check_reports_all_failed(self, tmp_path):
        async def body(backend):
            return await backend.batch_check_mail([1, 2, 3])

        result = run_with_backend(tmp_path, body)
        assert (result.success_count, result.failure_count) == (0, 3)


class TestConstruction:
    def test_unknown_policy(self, tmp_path):
        with pytest.raises(ValueError):
            LocalBackend(db_path=tmp_path / "x.db", duplicate_policy="merge")

    def test_unopenable_database(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        backend = LocalBackend(db_path=blocker / "sub" / "x.db")

        with pytest.raises(BackendError):
            asyncio.run(backend.connect())

    def test_not_found_is_a_backend_error(self):
        assert issubclass(AccountNotFoundError, BackendError)
