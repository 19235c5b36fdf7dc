# =============================================================================
# Firemail-TUI Main Application
# =============================================================================
# This is the main Textual application class. It:
#   - Opens the backend (the local SQLite store)
#   - Shows the accounts screen
#   - Owns the global keybindings
#   - Closes the backend on quit
#
# The command-line entry point (argparse) lives at the bottom.
# =============================================================================

import argparse
import logging
import sys
from pathlib import Path

from textual.app import App
from textual.binding import Binding

from firemail_tui import __version__, __app_name__
from firemail_tui.backend import Backend, BackendError, LocalBackend
from firemail_tui.config import Config, ConfigError, print_paths
from firemail_tui.logs import setup_logging
from firemail_tui.ui.screens.accounts import AccountsScreen


logger = logging.getLogger(__name__)


class FiremailApp(App):
    """
    The main Firemail-TUI application.

    Attributes:
        config: The loaded application configuration.
        backend: Backend used by every screen.
        startup_error: Set when the backend could not be opened; the app
                       exits and main() reports it.
    """

    TITLE = "Firemail-TUI"
    SUB_TITLE = "Mail Account Manager"

    # Global keybindings - these work from any screen
    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("?", "show_help", "Help"),
    ]

    def __init__(
        self,
        config: Config | None = None,
        backend: Backend | None = None,
        config_error: str | None = None,
    ) -> None:
        """
        Initialize the Firemail-TUI application.

        Args:
            config: Optional pre-loaded configuration. If not provided,
                    configuration will be loaded from the default location.
            backend: Optional backend. Defaults to a LocalBackend on the XDG
                     database, connected on mount.
            config_error: Error from loading the configuration, shown once
                          the UI is up.
        """
        super().__init__()

        self._config_error = config_error

        if config is None:
            try:
                self.config = Config.load()
            except ConfigError as e:
                self.config = Config()
                self._config_error = str(e)
        else:
            self.config = config

        self.backend = backend or LocalBackend(
            duplicate_policy=self.config.importing.duplicate_policy,
        )
        self.startup_error: str | None = None

    async def on_mount(self) -> None:
        """Open the backend and show the accounts screen."""
        if isinstance(self.backend, LocalBackend) and not self.backend.db.is_connected:
            try:
                await self.backend.connect()
            except BackendError as e:
                logger.error(f"Startup failed: {e}")
                self.startup_error = str(e)
                self.exit()
                return

        if self._config_error:
            self.notify(
                f"Config error: {self._config_error}",
                severity="error",
                timeout=10,
            )

        await self.push_screen(AccountsScreen(self.backend, self.config))

    # -------------------------------------------------------------------------
    # Action Handlers
    # -------------------------------------------------------------------------

    async def action_quit(self) -> None:
        """Close the backend and quit."""
        await self.backend.close()
        self.exit()

    def action_show_help(self) -> None:
        """Show the key bindings."""
        self.notify(
            "space=select, a=select page, [/]=page, z=page size, i=import file, "
            "p=paste, n=add, d/D=delete, c/C=check, K=check all, r=reload, q=quit",
            timeout=10,
        )


# =============================================================================
# CLI Entry Point
# =============================================================================

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="Firemail-TUI: bulk import and manage OAuth mail accounts",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )

    parser.add_argument(
        "--database",
        type=Path,
        help="Path to the account database (default: XDG data location)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for Firemail-TUI.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --version)
        3. Loads configuration and sets up logging
        4. Starts the Textual application

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)

    if args.paths:
        print_paths()
        return 0

    config_error = None
    try:
        config = Config.load(args.config)
    except ConfigError as e:
        if args.config:
            print(f"Config error: {e}", file=sys.stderr)
            return 1
        config = Config()
        config_error = str(e)

    setup_logging("DEBUG" if args.debug else config.logging.level)
    logger.info(f"Starting {__app_name__} {__version__}")

    backend = LocalBackend(
        db_path=args.database,
        duplicate_policy=config.importing.duplicate_policy,
    )
    app = FiremailApp(config=config, backend=backend, config_error=config_error)
    app.run()

    if app.startup_error:
        print(f"Error: {app.startup_error}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
