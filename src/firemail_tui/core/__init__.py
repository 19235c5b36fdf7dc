# =============================================================================
# Firemail-TUI Core Module
# =============================================================================
# Domain models and state for Firemail-TUI. Nothing in here touches the
# terminal, the database or the network directly, so these modules can be
# imported (and tested) anywhere.
#
#   - AccountRecord / AccountFields: One mail credential entry
#   - importing: Line parser and the aggregate import outcome
#   - table: Filter / pagination / selection state over the account list
# =============================================================================

from firemail_tui.core.account import AccountFields, AccountRecord
from firemail_tui.core.importing import (
    DEFAULT_SEPARATOR,
    FailureSource,
    ImportFailure,
    ImportLine,
    ImportOutcome,
    parse_line,
    parse_text,
)
from firemail_tui.core.table import (
    PAGE_SIZES,
    AccountTable,
    TableView,
    page_window,
    total_pages_for,
)

__all__ = [
    "AccountFields",
    "AccountRecord",
    "DEFAULT_SEPARATOR",
    "FailureSource",
    "ImportFailure",
    "ImportLine",
    "ImportOutcome",
    "parse_line",
    "parse_text",
    "PAGE_SIZES",
    "AccountTable",
    "TableView",
    "page_window",
    "total_pages_for",
]
