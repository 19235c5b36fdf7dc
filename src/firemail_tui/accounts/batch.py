# =============================================================================
# Batch Action Planner
# =============================================================================
# Turns the current selection plus an action into one backend call per
# selected account.
#
# Calls are issued one at a time, each awaited before the next, so every
# backend error can be attributed to exactly one id. A failing call is
# logged and the batch goes on. There is no bulk-delete command on the
# backend, so a batch delete is N independent deletes. When the batch is
# done the selection is cleared and the table reloaded.
#
# Suited to small batches. Bounded concurrency would be the next step if
# selections get large.
# =============================================================================

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from firemail_tui.backend.base import AccountNotFoundError, BackendError

if TYPE_CHECKING:
    from firemail_tui.backend.base import Backend
    from firemail_tui.core.table import AccountTable


logger = logging.getLogger(__name__)


class BatchAction(Enum):
    """Actions that can be applied to a selection."""
    DELETE = "delete"
    CHECK = "check"


@dataclass
class BatchReport:
    """
    Result of one batch run.

    Only the attempt count is reported to the operator. Per-id messages and
    errors are kept for the log and for callers that want them.

    Attributes:
        action: The action that was run.
        attempted: Number of ids a call was issued for.
        messages: Status message per id (CHECK only).
        errors: Error text per id that failed.
    """
    action: BatchAction
    attempted: int = 0
    messages: dict[int, str] = field(default_factory=dict)
    errors: dict[int, str] = field(default_factory=dict)

    def summary(self) -> str:
        verb = "Delete" if self.action is BatchAction.DELETE else "Mail check"
        return f"{verb} attempted for {self.attempted} account(s)"


class BatchActionPlanner:
    """
    Applies an action to every selected account.

    Usage:
        >>> planner = BatchActionPlanner(backend, table)
        >>> report = await planner.run(BatchAction.DELETE)

    Attributes:
        backend: Backend receiving the per-id calls.
        table: Account table whose selection is consumed.
    """

    def __init__(self, backend: "Backend", table: "AccountTable") -> None:
        self.backend = backend
        self.table = table

    async def run(self, action: BatchAction) -> BatchReport:
        """
        Run `action` for each selected id, then clear and reload.

        With an empty selection nothing is called and nothing reloaded.

        Raises:
            BackendError: Only if the final table reload fails.
        """
        report = BatchReport(action=action)
        account_ids = self.table.selected_ids
        if not account_ids:
            return report

        logger.info(f"Batch {action.value} for {len(account_ids)} account(s)")

        for account_id in account_ids:
            report.attempted += 1
            try:
                await self._apply(action, account_id, report)
            except BackendError as e:
                logger.warning(f"Batch {action.value} failed for account {account_id}: {e}")
                report.errors[account_id] = str(e)

        self.table.clear_selection()
        await self.table.load()
        return report

    async def _apply(self, action: BatchAction, account_id: int, report: BatchReport) -> None:
        if action is BatchAction.DELETE:
            try:
                await self.backend.delete_account(account_id)
            except AccountNotFoundError:
                # Already gone is as good as deleted
                logger.debug(f"Account {account_id} was already deleted")
        else:
            report.messages[account_id] = await self.backend.check_mail(account_id)
