# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating Firemail-TUI configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/firemail-tui/  (default: ~/.config/firemail-tui/)
#   - Data:    $XDG_DATA_HOME/firemail-tui/    (default: ~/.local/share/firemail-tui/)
#   - State:   $XDG_STATE_HOME/firemail-tui/   (default: ~/.local/state/firemail-tui/)
#
# Files:
#   - config.toml: User configuration (import, table, UI, logging)
#   - firemail.db: SQLite database (in data directory)
#   - logs/: Dated log files (in state directory)
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from firemail_tui.core.importing import DEFAULT_SEPARATOR
from firemail_tui.core.table import DEFAULT_PAGE_SIZE, PAGE_SIZES


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "firemail-tui"


def _app_dir(env_var: str, fallback: str) -> Path:
    """$env_var/firemail-tui, or ~/fallback/firemail-tui when it is unset."""
    base = os.environ.get(env_var)
    return (Path(base) if base else Path.home() / fallback) / APP_NAME


def get_xdg_config_home() -> Path:
    """Config directory (config.toml)."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_xdg_data_home() -> Path:
    """Data directory. This is where the account database lives."""
    return _app_dir("XDG_DATA_HOME", ".local/share")


def get_xdg_state_home() -> Path:
    """State directory. Log files go here."""
    return _app_dir("XDG_STATE_HOME", ".local/state")


def ensure_directories() -> dict[str, Path]:
    """
    Create the config, data, state and log directories.

    Returns:
        Mapping of directory kind ("config", "data", "state", "logs") to path.
    """
    dirs = {
        "config": get_xdg_config_home(),
        "data": get_xdg_data_home(),
        "state": get_xdg_state_home(),
    }
    dirs["logs"] = dirs["state"] / "logs"

    for dir_path in dirs.values():
        dir_path.mkdir(parents=True, exist_ok=True)

    return dirs


# =============================================================================
# Configuration Data Structures
# =============================================================================

# How the backend treats an email address that already exists
DUPLICATE_POLICIES = ("allow", "reject")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class ImportConfig:
    """
    Configuration for bulk import.

    Attributes:
        separator: Field separator used to split import lines.
        duplicate_policy: What to do with an email address that is already
                          stored (or repeated within one import).
                          - "allow": Store it again (default)
                          - "reject": Report the line as failed
    """
    separator: str = DEFAULT_SEPARATOR
    duplicate_policy: str = "allow"


@dataclass
class TableConfig:
    """
    Configuration for the account table.

    Attributes:
        page_size: Rows per page on startup. One of PAGE_SIZES.
    """
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class UIConfig:
    """
    Configuration for the user interface.

    Attributes:
        confirm_delete: Ask before deleting accounts.
    """
    confirm_delete: bool = True


@dataclass
class LoggingConfig:
    """
    Configuration for the log file.

    Attributes:
        level: Log level name. --debug on the command line overrides it.
    """
    level: str = "INFO"


@dataclass
class Config:
    """
    Main configuration container for Firemail-TUI.

    Usage:
        >>> config = Config.load()
        >>> config.importing.separator
        '----'
    """
    importing: ImportConfig = field(default_factory=ImportConfig)
    table: TableConfig = field(default_factory=TableConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    @staticmethod
    def database_path() -> Path:
        """Returns the path to the SQLite database."""
        return get_xdg_data_home() / "firemail.db"

    @staticmethod
    def log_dir() -> Path:
        """Returns the directory for log files."""
        return get_xdg_state_home() / "logs"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from the config file.

        If the config file doesn't exist, returns default configuration.
        Creates necessary directories if they don't exist.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        ensure_directories()

        config_path = path or cls.config_file_path()

        if not config_path.exists():
            if path is not None:
                raise ConfigError(f"Config file not found: {config_path}")
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e

        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> None:
        """
        Save configuration to the config file.

        Creates the config directory if it doesn't exist.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).

        Raises:
            ConfigError: If a value is out of range.
        """
        config = cls()

        importing = data.get("import", {})
        config.importing = ImportConfig(
            separator=importing.get("separator", DEFAULT_SEPARATOR),
            duplicate_policy=importing.get("duplicate_policy", "allow"),
        )
        if not config.importing.separator:
            raise ConfigError("import.separator must not be empty")
        if config.importing.duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigError(
                f"import.duplicate_policy must be one of {DUPLICATE_POLICIES}, "
                f"got {config.importing.duplicate_policy!r}"
            )

        table = data.get("table", {})
        config.table = TableConfig(
            page_size=table.get("page_size", DEFAULT_PAGE_SIZE),
        )
        if config.table.page_size not in PAGE_SIZES:
            raise ConfigError(
                f"table.page_size must be one of {PAGE_SIZES}, got {config.table.page_size!r}"
            )

        ui = data.get("ui", {})
        config.ui = UIConfig(
            confirm_delete=ui.get("confirm_delete", True),
        )

        logging_data = data.get("logging", {})
        level = str(logging_data.get("level", "INFO")).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"logging.level must be one of {LOG_LEVELS}, got {level!r}")
        config.logging = LoggingConfig(level=level)

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        return {
            "import": {
                "separator": self.importing.separator,
                "duplicate_policy": self.importing.duplicate_policy,
            },
            "table": {
                "page_size": self.table.page_size,
            },
            "ui": {
                "confirm_delete": self.ui.confirm_delete,
            },
            "logging": {
                "level": self.logging.level,
            },
        }


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print all XDG paths for debugging.
    Useful for users wondering where their config/data is stored.
    """
    print(f"Config:  {get_xdg_config_home()}")
    print(f"Data:    {get_xdg_data_home()}")
    print(f"State:   {get_xdg_state_home()}")
    print()
    print(f"Config file:  {Config.config_file_path()}")
    print(f"Database:     {Config.database_path()}")
    print(f"Logs:         {Config.log_dir()}")
