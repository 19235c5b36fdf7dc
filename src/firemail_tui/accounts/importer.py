# =============================================================================
# Import Aggregator
# =============================================================================
# Drives one bulk import from raw text to a single ImportOutcome:
#
#   1. Parse every line locally (bad lines are collected, never fatal)
#   2. Send the accepted lines to the backend's bulk import
#   3. Fold local and backend failures into one report
#   4. Reload the account table
#
# Failure order: local parse failures in line order, then backend failures
# in the order the backend returned them. The two lists are concatenated,
# not merged.
#
# A transport failure of the backend call becomes outcome.error. In that
# case the table is not reloaded and nothing is assumed persisted. A failed
# reload after a completed import becomes outcome.reload_error.
# =============================================================================

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from firemail_tui.backend.base import BackendError
from firemail_tui.core import AccountFields, AccountRecord, ImportOutcome, parse_text
from firemail_tui.core.importing import DEFAULT_SEPARATOR

if TYPE_CHECKING:
    from firemail_tui.backend.base import Backend
    from firemail_tui.core.table import AccountTable


logger = logging.getLogger(__name__)

# Extensions accepted by read_import_file()
IMPORT_FILE_SUFFIXES = (".txt",)


class ImportAggregator:
    """
    Runs bulk and single-account imports against a backend.

    Usage:
        >>> aggregator = ImportAggregator(backend, table)
        >>> outcome = await aggregator.run(text, separator="----")
        >>> print(outcome.summary())

    Attributes:
        backend: Backend receiving the accepted lines.
        table: Account table reloaded after each import.
    """

    def __init__(self, backend: "Backend", table: "AccountTable") -> None:
        self.backend = backend
        self.table = table

    async def run(self, text: str, separator: str = DEFAULT_SEPARATOR) -> ImportOutcome:
        """
        Import every line of `text`.

        Args:
            text: Newline-separated import text.
            separator: Field separator.

        Returns:
            The aggregate outcome. Per-line problems never raise.

        Raises:
            ValueError: If the separator is empty.
        """
        lines = parse_text(text, separator)
        if not lines:
            # Nothing was sent, so the backend state is unchanged: no reload
            logger.info("Import text has no non-blank lines")
            return ImportOutcome()

        accepted = [line for line in lines if line.is_parsed]
        outcome = ImportOutcome(
            failures=[line.failure() for line in lines if not line.is_parsed],
        )
        outcome.failure_count = len(outcome.failures)

        logger.info(
            f"Parsed {len(lines)} line(s): {len(accepted)} accepted, "
            f"{outcome.failure_count} rejected locally"
        )

        if accepted:
            try:
                result = await self.backend.bulk_import(accepted)
            except BackendError as e:
                logger.error(f"Bulk import call failed: {e}")
                outcome.error = str(e)
                return outcome

            outcome.success_count = result.success_count
            outcome.failure_count += result.failure_count
            outcome.failures.extend(result.failures)

        try:
            await self.table.load()
        except BackendError as e:
            logger.error(f"Reload after import failed: {e}")
            outcome.reload_error = str(e)
        return outcome

    async def add_single(self, fields: AccountFields) -> AccountRecord:
        """
        Create one account (the non-batch add path) and reload the table.

        Raises:
            BackendError: If the backend rejects or fails the call.
        """
        record = await self.backend.create_account(fields)
        await self.table.load()
        return record


def read_import_file(path: str | Path) -> str:
    """
    Read an import file verbatim.

    Args:
        path: A .txt file, read as UTF-8.

    Returns:
        The file content, unchanged.

    Raises:
        ValueError: If the file is not a .txt file.
        OSError: If the file can't be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    path = Path(path).expanduser()
    if path.suffix.lower() not in IMPORT_FILE_SUFFIXES:
        raise ValueError(f"Please choose a .txt file: {path.name}")
    return path.read_text(encoding="utf-8")
