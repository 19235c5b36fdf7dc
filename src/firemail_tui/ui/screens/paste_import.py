# =============================================================================
# Paste Import Screen
# =============================================================================
# Modal dialog for pasting import text directly, one account per line:
#
#   email----password----client_id----refresh_token
#
# The text is returned untouched; parsing happens in the import pipeline.
# =============================================================================

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Static, Button, TextArea
from textual.containers import Vertical, Horizontal


class PasteImportScreen(ModalScreen[str | None]):
    """
    Modal screen for pasting import text.

    Returns:
        The pasted text, or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+s", "submit", "Import"),
    ]

    CSS = """
    PasteImportScreen {
        align: center middle;
    }

    #paste-dialog {
        width: 90%;
        height: 80%;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #paste-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #paste-hint {
        color: $text-muted;
        margin-bottom: 1;
    }

    #paste-text {
        height: 1fr;
        margin-bottom: 1;
    }

    #paste-buttons {
        align: center middle;
        height: auto;
    }

    #paste-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(self, separator: str) -> None:
        """
        Initialize the paste screen.

        Args:
            separator: Current field separator, shown in the format hint.
        """
        super().__init__()
        self._separator = separator

    def compose(self) -> ComposeResult:
        sep = self._separator
        with Vertical(id="paste-dialog"):
            yield Static("Paste Accounts", id="paste-title")
            yield Static(
                f"One account per line. Format: email{sep}password{sep}client_id{sep}refresh_token\n"
                "Ctrl+S to import, Escape to cancel.",
                id="paste-hint",
                markup=False,
            )
            yield TextArea(id="paste-text")
            with Horizontal(id="paste-buttons"):
                yield Button("Import", id="import-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#paste-text", TextArea).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "import-btn":
            self.action_submit()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_submit(self) -> None:
        """Return the text if it has any content."""
        text = self.query_one("#paste-text", TextArea).text
        if text.strip():
            self.dismiss(text)
        else:
            self.notify("Nothing to import", severity="warning")

    def action_cancel(self) -> None:
        self.dismiss(None)
