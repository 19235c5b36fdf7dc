# =============================================================================
# Accounts Module
# =============================================================================
# Operations that change the account set and then refresh the table:
#
#   - ImportAggregator: Bulk import from text, single-account add
#   - BatchActionPlanner: Delete / check every selected account
# =============================================================================

from firemail_tui.accounts.batch import BatchAction, BatchActionPlanner, BatchReport
from firemail_tui.accounts.importer import ImportAggregator, read_import_file

__all__ = [
    "ImportAggregator",
    "read_import_file",
    "BatchAction",
    "BatchActionPlanner",
    "BatchReport",
]
