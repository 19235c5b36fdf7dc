# =============================================================================
# Firemail-TUI Entry Point for `python -m firemail_tui`
# =============================================================================
# This module allows Firemail-TUI to be run as a Python module:
#
#   python -m firemail_tui
#
# This is equivalent to running the 'firemail-tui' command after installation.
# =============================================================================

import sys

from firemail_tui.app import main

if __name__ == "__main__":
    sys.exit(main())
