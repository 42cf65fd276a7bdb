"""
Modal dialogs.

MessageDialog blocks the UI until acknowledged; ConfirmDialog returns
True for Yes and False for No.
"""

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

DIALOG_CSS = """
{name} {{
    align: center middle;
}}

{name} > #dialog {{
    width: 70;
    max-width: 90%;
    height: auto;
    max-height: 80%;
    padding: 1 2;
    border: thick $primary;
    background: $surface;
}}

{name} #dialog-title {{
    text-style: bold;
    margin-bottom: 1;
}}

{name} #dialog-title.error {{
    color: $error;
}}

{name} #dialog-title.warning {{
    color: $warning;
}}

{name} #dialog-title.information {{
    color: $success;
}}

{name} #dialog-message {{
    margin-bottom: 1;
}}

{name} #dialog-buttons {{
    height: auto;
    align-horizontal: right;
}}

{name} #dialog-buttons Button {{
    margin-left: 1;
}}
"""


class MessageDialog(ModalScreen[None]):
    """Blocking notification carrying a title and message text."""

    DEFAULT_CSS = DIALOG_CSS.format(name="MessageDialog")

    BINDINGS = [
        Binding("escape", "acknowledge", "OK", show=False),
    ]

    def __init__(self, title: str, message: str, severity: str = "error") -> None:
        super().__init__()
        self._title = title
        self._message = message
        self._severity = severity

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(self._title, id="dialog-title", classes=self._severity, markup=False)
            yield Static(self._message, id="dialog-message", markup=False)
            with Horizontal(id="dialog-buttons"):
                yield Button("OK", variant="primary", id="ok")

    def on_mount(self) -> None:
        self.query_one("#ok", Button).focus()

    @on(Button.Pressed, "#ok")
    def action_acknowledge(self) -> None:
        self.dismiss(None)


class ConfirmDialog(ModalScreen[bool]):
    """Yes/No question."""

    DEFAULT_CSS = DIALOG_CSS.format(name="ConfirmDialog")

    BINDINGS = [
        Binding("escape", "answer_no", "No", show=False),
    ]

    def __init__(self, title: str, question: str) -> None:
        super().__init__()
        self._title = title
        self._question = question

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(self._title, id="dialog-title", classes="warning", markup=False)
            yield Static(self._question, id="dialog-message", markup=False)
            with Horizontal(id="dialog-buttons"):
                yield Button("Yes", variant="error", id="yes")
                yield Button("No", variant="default", id="no")

    def on_mount(self) -> None:
        self.query_one("#no", Button).focus()

    @on(Button.Pressed, "#yes")
    def answer_yes(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#no")
    def action_answer_no(self) -> None:
        self.dismiss(False)
