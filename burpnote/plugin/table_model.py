"""
Note Table Model.

Backing store for the results tables. Rows are kept in two layers:

    model rows - canonical order, as loaded from the database
    view rows  - what the table shows after sorting and filtering

view_to_model() and model_to_view() translate between the two. Widgets
only ever address rows by view index; deletion resolves ids through
the model layer (see plugin/selection.py).
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from burpnote.backend.schemas.note import NoteRecord

COLUMNS = ("ID", "Domain", "Content (Preview)", "Time")

ID_COLUMN = 0
DOMAIN_COLUMN = 1
CONTENT_COLUMN = 2
TIME_COLUMN = 3


def _sort_key(value: Any) -> tuple:
    # None sorts before everything else regardless of column type
    if value is None:
        return (0, "")
    if isinstance(value, str):
        return (1, value.casefold())
    if isinstance(value, datetime):
        return (1, value.timestamp())
    return (1, value)


class NoteTableModel:
    """Two-layer row index over a list of NoteRecord."""

    def __init__(self, records: Iterable[NoteRecord] = ()) -> None:
        self._rows: list[NoteRecord] = list(records)
        self._view: list[int] = []
        self._sort_column: int | None = None
        self._sort_descending = False
        self._filter = ""
        self._rebuild_view()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def set_rows(self, records: Iterable[NoteRecord]) -> None:
        """Replace all rows. The current sort and filter are kept."""
        self._rows = list(records)
        self._rebuild_view()

    def clear(self) -> None:
        self.set_rows([])

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    @property
    def sort_column(self) -> int | None:
        return self._sort_column

    @property
    def sort_descending(self) -> bool:
        return self._sort_descending

    @property
    def filter_text(self) -> str:
        return self._filter

    def sort_by(self, column: int, descending: bool = False) -> None:
        """Sort the view by a column. Model order is untouched."""
        if not 0 <= column < len(COLUMNS):
            raise IndexError(f"Column out of range: {column}")
        self._sort_column = column
        self._sort_descending = descending
        self._rebuild_view()

    def toggle_sort(self, column: int) -> None:
        """Sort ascending by column, or flip direction if already sorted by it."""
        if self._sort_column == column:
            self.sort_by(column, not self._sort_descending)
        else:
            self.sort_by(column)

    def clear_sort(self) -> None:
        self._sort_column = None
        self._sort_descending = False
        self._rebuild_view()

    def set_filter(self, text: str) -> None:
        """Show only rows whose domain or content contains text (case-insensitive)."""
        self._filter = text.strip()
        self._rebuild_view()

    def _matches(self, record: NoteRecord) -> bool:
        if not self._filter:
            return True
        needle = self._filter.casefold()
        return any(
            needle in (value or "").casefold()
            for value in (record.domain, record.content)
        )

    def _rebuild_view(self) -> None:
        view = [i for i, record in enumerate(self._rows) if self._matches(record)]
        if self._sort_column is not None:
            column = self._sort_column
            view.sort(
                key=lambda i: _sort_key(self.value_at(i, column)),
                reverse=self._sort_descending,
            )
        self._view = view

    # ------------------------------------------------------------------
    # Index mapping
    # ------------------------------------------------------------------

    @property
    def model_row_count(self) -> int:
        return len(self._rows)

    @property
    def view_row_count(self) -> int:
        return len(self._view)

    def view_to_model(self, view_row: int) -> int:
        """Translate a displayed row index to its model row index."""
        if not 0 <= view_row < len(self._view):
            raise IndexError(f"View row out of range: {view_row}")
        return self._view[view_row]

    def model_to_view(self, model_row: int) -> int | None:
        """Displayed position of a model row, or None if it is filtered out."""
        try:
            return self._view.index(model_row)
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def value_at(self, model_row: int, column: int) -> Any:
        record = self._rows[model_row]
        if column == ID_COLUMN:
            return record.id
        if column == DOMAIN_COLUMN:
            return record.domain
        if column == CONTENT_COLUMN:
            return record.content
        if column == TIME_COLUMN:
            return record.created_at
        raise IndexError(f"Column out of range: {column}")

    def record_at_model(self, model_row: int) -> NoteRecord:
        return self._rows[model_row]

    def record_at_view(self, view_row: int) -> NoteRecord:
        return self._rows[self.view_to_model(view_row)]

    def view_records(self) -> list[NoteRecord]:
        """Rows in display order."""
        return [self._rows[i] for i in self._view]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def remove_row(self, model_row: int) -> NoteRecord:
        """
        Remove one model row. Later model rows shift up by one, so callers
        removing several rows must go from the highest index down.
        """
        record = self._rows.pop(model_row)
        self._rebuild_view()
        return record
