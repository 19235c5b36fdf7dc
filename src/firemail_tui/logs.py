# =============================================================================
# Logging Setup
# =============================================================================
# Every module logs through logging.getLogger(__name__), so all records end
# up under the "firemail_tui" logger. While the TUI runs Textual owns the
# terminal, so records go to a dated file in the XDG state directory:
#
#   ~/.local/state/firemail-tui/logs/firemail-YYYY-MM-DD.log
#
# Passwords and refresh tokens are never logged (AccountRecord.__repr__
# leaves them out).
# =============================================================================

import logging
from datetime import date
from pathlib import Path

from firemail_tui.config import Config


LOGGER_NAME = "firemail_tui"


def setup_logging(level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    """
    Attach a dated file handler to the application logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Log level name ("DEBUG", "INFO", ...).
        log_dir: Directory for log files. Defaults to the XDG state location.

    Returns:
        The configured application logger.
    """
    log_dir = log_dir or Config.log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(
        log_dir / f"firemail-{date.today().isoformat()}.log",
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    return logger
