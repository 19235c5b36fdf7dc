# =============================================================================
# Import File Picker
# =============================================================================
# Modal browser for choosing the .txt file to bulk import.
#
#   - The tree lists folders and .txt files only (dotfiles hidden)
#   - A typed path takes precedence over the tree selection
#   - The info line shows size and line count of the highlighted file, so
#     the operator can tell a 10-line test file from a 10 000-line dump
# =============================================================================

from pathlib import Path
from typing import Iterable

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Button, DirectoryTree, Input, Static
from textual.containers import Horizontal, Vertical

from firemail_tui.accounts.importer import IMPORT_FILE_SUFFIXES


def is_import_file(path: Path) -> bool:
    return path.suffix.lower() in IMPORT_FILE_SUFFIXES


class ImportFileTree(DirectoryTree):
    """DirectoryTree that hides everything except folders and import files."""

    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        return [
            path for path in paths
            if not path.name.startswith(".")
            and (path.is_dir() or is_import_file(path))
        ]


def format_size(size: float) -> str:
    """Human-readable file size."""
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}" if size != int(size) else f"{int(size)} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def describe_file(path: Path) -> str:
    """One-line summary of an import file: name, size and line count."""
    size = path.stat().st_size
    with open(path, "rb") as f:
        lines = sum(1 for _ in f)
    return f"{path.name}: {format_size(size)}, {lines} line(s)"


class FilePickerScreen(ModalScreen[str | None]):
    """
    Modal screen for picking an import file.

    Returns the chosen .txt path, or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+o", "choose", "Import"),
    ]

    CSS = """
    FilePickerScreen {
        align: center middle;
    }

    #picker-dialog {
        width: 80%;
        height: 80%;
        min-width: 60;
        min-height: 20;
        padding: 1;
        background: $surface;
        border: thick $primary;
    }

    #picker-title {
        text-align: center;
        text-style: bold;
    }

    #picker-path {
        margin: 1 0;
    }

    #picker-tree {
        height: 1fr;
        border: tall $primary;
    }

    #picker-info {
        height: 1;
        margin-top: 1;
        color: $text-muted;
    }

    #picker-buttons {
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #picker-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(self, start_dir: str | Path | None = None) -> None:
        """
        Args:
            start_dir: Directory shown first. Defaults to the current working
                       directory, where import files usually sit.
        """
        super().__init__()
        self._start_dir = Path(start_dir).expanduser() if start_dir else Path.cwd()
        self._highlighted: Path | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="picker-dialog"):
            yield Static("Import Accounts From File", id="picker-title")
            yield Input(
                value=str(self._start_dir),
                placeholder="Path to a .txt file or folder",
                id="picker-path",
            )
            yield ImportFileTree(str(self._start_dir), id="picker-tree")
            yield Static("No file selected", id="picker-info", markup=False)
            with Horizontal(id="picker-buttons"):
                yield Button("Import", id="choose-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#picker-tree", ImportFileTree).focus()

    def on_directory_tree_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        self._highlighted = event.path
        self.query_one("#picker-path", Input).value = str(event.path)
        try:
            info = describe_file(event.path)
        except OSError as e:
            info = f"Cannot read {event.path.name}: {e}"
        self.query_one("#picker-info", Static).update(info)

    def on_directory_tree_directory_selected(
        self, event: DirectoryTree.DirectorySelected
    ) -> None:
        self.query_one("#picker-path", Input).value = str(event.path)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter on a folder opens it in the tree, on a file imports it."""
        path = Path(event.value).expanduser()
        if path.is_dir():
            tree = self.query_one("#picker-tree", ImportFileTree)
            tree.path = path
            tree.reload()
        else:
            self.action_choose()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "choose-btn":
            self.action_choose()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_choose(self) -> None:
        """Dismiss with the typed path, or the tree selection."""
        typed = Path(self.query_one("#picker-path", Input).value).expanduser()
        candidate = typed if typed.is_file() else self._highlighted

        if candidate is None or not candidate.is_file():
            self.notify("Please select a file", severity="warning")
        elif not is_import_file(candidate):
            self.notify("Only .txt files can be imported", severity="warning")
        else:
            self.dismiss(str(candidate))

    def action_cancel(self) -> None:
        self.dismiss(None)
