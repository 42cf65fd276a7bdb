"""
BurpNote UI Panels.

NotesPanel is the root component handed to the host. It contains the
connection panel and three tabs: Add Note, Search Notes, All Notes.

Every database call runs in a Textual async worker. Worker results are
applied on the app's event loop, so widgets are never touched from
another thread.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.coordinate import Coordinate
from textual.message import Message
from textual.widgets import (
    Button,
    DataTable,
    Input,
    Label,
    RadioButton,
    RadioSet,
    TabbedContent,
    TabPane,
    TextArea,
)

from burpnote.backend.core.config_schema import DatabaseSchema, FeaturesSchema
from burpnote.backend.core.exceptions import (
    ApplicationError,
    DatabaseConnectionError,
    QueryError,
    ValidationError,
)
from burpnote.backend.core.logging import get_logger
from burpnote.backend.schemas.note import ConnectionParams, NoteRecord, SearchMode
from burpnote.backend.services.note import NoteService
from burpnote.plugin.dialogs import ConfirmDialog, MessageDialog
from burpnote.plugin.selection import apply_deletion, plan_deletion
from burpnote.plugin.table_model import COLUMNS, NoteTableModel

if TYPE_CHECKING:
    from burpnote.plugin.extender import PluginHost

logger = get_logger(__name__)

MARK = "●"


def _preview(content: str | None, length: int) -> str:
    text = " ".join((content or "").split())
    if len(text) > length:
        return text[: length - 1] + "…"
    return text


def _format_time(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


# =============================================================================
# Results table
# =============================================================================


class NoteTable(DataTable):
    """
    Read-only results table with multi-row selection.

    Rows are displayed in NoteTableModel view order, so cursor_row is a
    view row. Space marks rows; with nothing marked, the highlighted row
    is the selection. Clicking a header sorts by that column.
    """

    BINDINGS = [
        Binding("space", "toggle_mark", "Select"),
        Binding("ctrl+a", "mark_all", "Select all"),
        Binding("escape", "clear_marks", "Clear selection", show=False),
    ]

    class SelectionChanged(Message):
        """Posted when the set of selected rows may have changed."""

        def __init__(self, table: NoteTable) -> None:
            self.table = table
            super().__init__()

    def __init__(self, model: NoteTableModel, preview_length: int, **kwargs) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self.model = model
        self._preview_length = preview_length
        self._marked: set[int] = set()

    def on_mount(self) -> None:
        self.add_column(" ", key="mark", width=1)
        for label in COLUMNS:
            self.add_column(label, key=label)

    @property
    def marked_rows(self) -> frozenset[int]:
        return frozenset(self._marked)

    def selected_view_rows(self) -> list[int]:
        """Marked rows, or the highlighted row when nothing is marked."""
        if self._marked:
            return sorted(self._marked)
        if self.row_count and 0 <= self.cursor_row < self.row_count:
            return [self.cursor_row]
        return []

    def refresh_rows(self) -> None:
        """Redraw from the model's view order. Clears marks."""
        if not self.columns:
            return
        self._marked.clear()
        self.clear()
        for record in self.model.view_records():
            self.add_row(
                "",
                str(record.id),
                record.domain or "",
                _preview(record.content, self._preview_length),
                _format_time(record.created_at),
                key=str(record.id),
            )
        self.post_message(self.SelectionChanged(self))

    def action_toggle_mark(self) -> None:
        if not self.row_count:
            return
        row = self.cursor_row
        if row in self._marked:
            self._marked.discard(row)
            self.update_cell_at(Coordinate(row, 0), "")
        else:
            self._marked.add(row)
            self.update_cell_at(Coordinate(row, 0), MARK)
        self.post_message(self.SelectionChanged(self))

    def action_mark_all(self) -> None:
        for row in range(self.row_count):
            self._marked.add(row)
            self.update_cell_at(Coordinate(row, 0), MARK)
        self.post_message(self.SelectionChanged(self))

    def action_clear_marks(self) -> None:
        for row in self._marked:
            self.update_cell_at(Coordinate(row, 0), "")
        self._marked.clear()
        self.post_message(self.SelectionChanged(self))

    @on(DataTable.HeaderSelected)
    def _sort_on_header(self, event: DataTable.HeaderSelected) -> None:
        event.stop()
        if event.column_index == 0:
            return
        self.model.toggle_sort(event.column_index - 1)
        self.refresh_rows()


# =============================================================================
# Root panel
# =============================================================================


class NotesPanel(Vertical):
    """Root UI component registered with the host."""

    DEFAULT_CSS = """
    NotesPanel {
        height: 1fr;
        padding: 0 1;
    }

    NotesPanel .row {
        height: auto;
    }

    NotesPanel .row Label {
        padding: 1 1 0 1;
    }

    NotesPanel #connection {
        height: auto;
        border: round $primary;
        border-title-align: left;
    }

    NotesPanel #connection Input {
        width: 1fr;
    }

    NotesPanel #db-port {
        max-width: 10;
    }

    NotesPanel #status {
        padding: 0 1;
        color: $text-muted;
    }

    NotesPanel #status.-connected {
        color: $success;
    }

    NotesPanel #status.-failed {
        color: $error;
    }

    NotesPanel TabbedContent {
        height: 1fr;
    }

    NotesPanel .controls {
        height: auto;
    }

    NotesPanel .controls Button {
        margin-left: 1;
    }

    NotesPanel NoteTable {
        height: 1fr;
        border: round $primary;
    }

    NotesPanel .detail {
        height: 1fr;
        border: round $secondary;
    }

    NotesPanel #note-content {
        height: 1fr;
    }
    """

    def __init__(
        self,
        service: NoteService,
        host: PluginHost,
        db_defaults: DatabaseSchema,
        features: FeaturesSchema,
        password: str = "",
    ) -> None:
        super().__init__()
        self.service = service
        self.host = host
        self.db_defaults = db_defaults
        self.features = features
        self._password = password

    def compose(self) -> ComposeResult:
        yield ConnectionPanel(self, self.db_defaults, self._password, id="connection")
        with TabbedContent(id="notes-tabs"):
            with TabPane("Add Note", id="add-note"):
                yield AddNotePanel(self)
            with TabPane("Search Notes", id="search-notes"):
                yield SearchPanel(self)
            with TabPane("All Notes", id="all-notes"):
                yield AllNotesPanel(self)

    async def on_unmount(self) -> None:
        await self.service.connections.disconnect()

    def set_connected(self, connected: bool, status: str) -> None:
        """Update the status line and the controls that need a connection."""
        label = self.query_one("#status", Label)
        label.update(status)
        label.set_class(connected, "-connected")
        label.set_class(not connected and status != "Status: Not Connected", "-failed")
        self.query_one("#insert", Button).disabled = not connected

    def show_message(self, title: str, message: str, severity: str = "information") -> None:
        self.app.push_screen(MessageDialog(title, message, severity))

    def report_error(self, exc: ApplicationError) -> None:
        """Show an error dialog and mirror it to the host's error sink."""
        if isinstance(exc, ValidationError):
            title, message, severity = "Warning", exc.message, "warning"
        elif isinstance(exc, DatabaseConnectionError):
            title, message, severity = "Error", f"Connection Failed:\n{exc.message}", "error"
        elif isinstance(exc, QueryError):
            title, message, severity = "Database Error", f"Database Operation Failed:\n{exc.message}", "error"
            if exc.connection_lost:
                self.set_connected(False, "Connection lost")
        else:
            title, message, severity = "Error", exc.message, "error"

        self.host.stderr.println(f"{title}: {exc.message}")
        logger.warning(
            "Operation failed",
            extra={"code": exc.code, "error": exc.message},
        )
        self.show_message(title, message, severity)


# =============================================================================
# Connection
# =============================================================================


class ConnectionPanel(Vertical):
    """Host/port/database/credentials inputs and the Connect button."""

    def __init__(self, notes: NotesPanel, defaults: DatabaseSchema, password: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._notes = notes
        self._defaults = defaults
        self._password = password

    def compose(self) -> ComposeResult:
        with Horizontal(classes="row"):
            yield Label("MySQL Host:")
            yield Input(value=self._defaults.host, id="db-host")
            yield Label("Port:")
            yield Input(value=str(self._defaults.port), id="db-port")
            yield Label("Database:")
            yield Input(value=self._defaults.name, id="db-name")
        with Horizontal(classes="row"):
            yield Label("Username:")
            yield Input(value=self._defaults.user, id="db-user")
            yield Label("Password:")
            yield Input(value=self._password, password=True, id="db-password")
            yield Button("Connect", variant="primary", id="connect")
        yield Label("Status: Not Connected", id="status")

    def on_mount(self) -> None:
        self.border_title = "Database Configuration"

    def connection_params(self) -> ConnectionParams:
        return ConnectionParams(
            host=self.query_one("#db-host", Input).value,
            port=self.query_one("#db-port", Input).value,
            database=self.query_one("#db-name", Input).value,
            user=self.query_one("#db-user", Input).value,
            password=self.query_one("#db-password", Input).value,
        )

    @on(Button.Pressed, "#connect")
    def _on_connect(self) -> None:
        self.connect_database()

    @work(exclusive=True, group="connect")
    async def connect_database(self) -> None:
        params = self.connection_params()
        button = self.query_one("#connect", Button)
        button.disabled = True
        try:
            await self._notes.service.connections.connect(params)
        except ValidationError as e:
            self._notes.report_error(e)
        except DatabaseConnectionError as e:
            self._notes.set_connected(False, f"Connection failed: {e.message}")
            self._notes.report_error(e)
        else:
            self._notes.set_connected(True, "Database connected successfully")
            url = self._notes.service.connections.url
            self._notes.host.stdout.println(
                f"Database connected: {url.render_as_string(hide_password=True)}"
            )
        finally:
            button.disabled = False


# =============================================================================
# Add Note
# =============================================================================


class AddNotePanel(Vertical):
    """Domain and content inputs and the insert button."""

    def __init__(self, notes: NotesPanel, **kwargs) -> None:
        super().__init__(**kwargs)
        self._notes = notes

    def compose(self) -> ComposeResult:
        with Horizontal(classes="row"):
            yield Label("Domain:")
            yield Input(placeholder="example.com", id="note-domain")
        yield Label("Content:")
        yield TextArea(id="note-content")
        yield Button("Insert into Database", variant="success", disabled=True, id="insert")

    @on(Button.Pressed, "#insert")
    def _on_insert(self) -> None:
        self.insert_note()

    @work(exclusive=True, group="insert")
    async def insert_note(self) -> None:
        domain_input = self.query_one("#note-domain", Input)
        content_area = self.query_one("#note-content", TextArea)
        domain = domain_input.value
        try:
            await self._notes.service.insert_note(domain, content_area.text)
        except ApplicationError as e:
            self._notes.report_error(e)
            return
        content_area.load_text("")
        domain_input.value = ""
        self._notes.host.stdout.println(f"Inserted content for domain: {domain.strip()}")
        self._notes.show_message("Success", "Data inserted successfully!")


# =============================================================================
# Results panels
# =============================================================================


class ResultsPanel(Vertical):
    """
    Shared master/detail layout: controls, a NoteTable, and a read-only
    view of the highlighted note's full content.
    """

    table_title = "Results List"

    def __init__(self, notes: NotesPanel, **kwargs) -> None:
        super().__init__(**kwargs)
        self._notes = notes
        self.model = NoteTableModel()
        self._generation = 0

    def compose_controls(self) -> ComposeResult:
        yield from ()

    def compose(self) -> ComposeResult:
        with Horizontal(classes="row controls"):
            yield from self.compose_controls()
            yield Button("Delete Selected", variant="error", disabled=True, classes="delete")
        yield NoteTable(self.model, self._notes.features.preview_length)
        yield TextArea(read_only=True, soft_wrap=False, classes="detail")

    def on_mount(self) -> None:
        self.query_one(NoteTable).border_title = self.table_title
        self.query_one(".detail", TextArea).border_title = "Full Content View"

    @property
    def table(self) -> NoteTable:
        return self.query_one(NoteTable)

    def load(self, records: list[NoteRecord]) -> None:
        self._generation += 1
        self.model.set_rows(records)
        self.table.refresh_rows()
        self._show_detail()

    def _show_detail(self) -> None:
        detail = self.query_one(".detail", TextArea)
        rows = self.table.selected_view_rows()
        if rows:
            detail.load_text(self.model.record_at_view(rows[0]).content or "")
        else:
            detail.load_text("")
        self.query_one(".delete", Button).disabled = not rows

    @on(DataTable.RowHighlighted)
    def _on_row_highlighted(self) -> None:
        self._show_detail()

    @on(NoteTable.SelectionChanged)
    def _on_selection_changed(self) -> None:
        self._show_detail()

    @on(Button.Pressed, ".delete")
    def _on_delete(self) -> None:
        self.delete_selected()

    @work(exclusive=True, group="delete")
    async def delete_selected(self) -> None:
        view_rows = self.table.selected_view_rows()
        if not view_rows:
            return

        # Resolve ids now; view rows are only meaningful for the rows on screen
        plan = plan_deletion(self.model, view_rows)
        generation = self._generation

        if self._notes.features.confirm_before_delete:
            confirmed = await self.app.push_screen_wait(ConfirmDialog(
                "Confirm Delete",
                f"Are you sure you want to delete {len(plan)} selected note(s)?",
            ))
            if not confirmed:
                return
            if generation != self._generation:
                self._notes.show_message(
                    "Warning",
                    "The list was reloaded. Please select the notes to delete again.",
                    "warning",
                )
                return

        try:
            deleted = await self._notes.service.delete_notes(plan.ids)
        except ApplicationError as e:
            self._notes.report_error(e)
            return

        if not deleted:
            self._notes.show_message("Not Found", "Delete failed: Records not found.", "warning")
            return

        # Rows were reloaded while the delete ran; positions no longer apply
        if generation == self._generation:
            apply_deletion(self.model, plan)
            self.table.refresh_rows()
        self._show_detail()
        self._notes.host.stdout.println(f"Deleted {len(plan.ids)} records.")
        self._notes.show_message("Success", "Records deleted successfully.")


class SearchPanel(ResultsPanel):
    """Search by domain, exact or fuzzy."""

    def compose_controls(self) -> ComposeResult:
        yield Label("Domain:")
        yield Input(placeholder="example.com", id="search-domain")
        with RadioSet(id="match-mode"):
            yield RadioButton("Exact Match", id="exact")
            yield RadioButton("Fuzzy Match", value=True, id="fuzzy")
        yield Button("Search", variant="primary", id="search")

    def search_mode(self) -> SearchMode:
        if self.query_one("#exact", RadioButton).value:
            return SearchMode.EXACT
        return SearchMode.FUZZY

    @on(Button.Pressed, "#search")
    @on(Input.Submitted, "#search-domain")
    def _on_search(self) -> None:
        self.search_notes()

    @work(exclusive=True, group="search")
    async def search_notes(self) -> None:
        domain = self.query_one("#search-domain", Input).value
        try:
            records = await self._notes.service.search_notes(domain, self.search_mode())
        except ApplicationError as e:
            self._notes.report_error(e)
            return
        self.load(records)
        self._notes.host.stdout.println(f"Search completed. Found {len(records)} records.")


class AllNotesPanel(ResultsPanel):
    """Every note, newest first, with a client-side filter."""

    table_title = "All Notes List"

    def compose_controls(self) -> ComposeResult:
        yield Button("Refresh / Load All", variant="primary", id="refresh")
        yield Label("Filter:")
        yield Input(placeholder="domain or content", id="all-filter")

    @on(Input.Changed, "#all-filter")
    def _on_filter(self, event: Input.Changed) -> None:
        self.model.set_filter(event.value)
        self.table.refresh_rows()

    @on(Button.Pressed, "#refresh")
    def _on_refresh(self) -> None:
        self.load_all()

    @work(exclusive=True, group="load")
    async def load_all(self) -> None:
        try:
            records = await self._notes.service.list_notes()
        except ApplicationError as e:
            self._notes.report_error(e)
            return
        self.load(records)
        self._notes.host.stdout.println(f"Loaded {len(records)} records.")
