# =============================================================================
# Add Account Screen
# =============================================================================
# A modal form for adding a single account without going through the bulk
# import text format.
#
# Only presence is checked here. Address shape and duplicates are checked by
# the backend, which reports them back as a create failure.
# =============================================================================

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Static, Input, Button
from textual.containers import Vertical, Horizontal

from firemail_tui.core import AccountFields


class AddAccountScreen(ModalScreen[AccountFields | None]):
    """
    Modal screen with one input per account field.

    Returns:
        The entered AccountFields, or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    AddAccountScreen {
        align: center middle;
    }

    #add-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #add-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #add-dialog Input {
        margin-bottom: 1;
    }

    #add-buttons {
        align: center middle;
        height: auto;
    }

    #add-buttons Button {
        margin: 0 1;
    }
    """

    # (input id, placeholder, masked)
    FIELDS = [
        ("email-input", "Email (example@outlook.com)", False),
        ("password-input", "Password", True),
        ("client-id-input", "Client ID", False),
        ("refresh-token-input", "Refresh Token", False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="add-dialog"):
            yield Static("Add Account", id="add-title")
            for input_id, placeholder, masked in self.FIELDS:
                yield Input(placeholder=placeholder, password=masked, id=input_id)
            with Horizontal(id="add-buttons"):
                yield Button("Add", id="add-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#email-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-btn":
            self.action_submit()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the last field submits, elsewhere it moves on."""
        if event.input.id == self.FIELDS[-1][0]:
            self.action_submit()
        else:
            self.focus_next()

    def action_submit(self) -> None:
        values = [
            self.query_one(f"#{input_id}", Input).value.strip()
            for input_id, _, _ in self.FIELDS
        ]
        if not all(values):
            self.notify("All four fields are required", severity="warning")
            return

        email, password, client_id, refresh_token = values
        self.dismiss(
            AccountFields(
                email=email,
                password=password,
                client_id=client_id,
                refresh_token=refresh_token,
            )
        )

    def action_cancel(self) -> None:
        self.dismiss(None)
