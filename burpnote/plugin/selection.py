"""
Selection mapping for bulk deletes.

Turns the rows a user selected in a sorted or filtered table into:
    - the note ids to send to the store
    - the model rows to drop from the table once the store confirms

Model rows are removed highest first; removing in ascending order would
shift later rows up and drop the wrong ones.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from burpnote.plugin.table_model import ID_COLUMN, NoteTableModel


@dataclass(frozen=True)
class DeletionPlan:
    ids: tuple[int, ...]
    model_rows: tuple[int, ...]

    def __bool__(self) -> bool:
        return bool(self.ids)

    def __len__(self) -> int:
        return len(self.model_rows)


def plan_deletion(model: NoteTableModel, view_rows: Iterable[int]) -> DeletionPlan:
    """
    Resolve selected view rows to note ids and model rows.

    Args:
        model: Table model the view rows refer to
        view_rows: Selected rows as displayed (any order, duplicates ignored)

    Returns:
        DeletionPlan with ids in selection order and model rows descending
    """
    model_rows: list[int] = []
    ids: list[int] = []
    for view_row in dict.fromkeys(view_rows):
        model_row = model.view_to_model(view_row)
        model_rows.append(model_row)
        ids.append(model.value_at(model_row, ID_COLUMN))

    model_rows.sort(reverse=True)
    return DeletionPlan(ids=tuple(dict.fromkeys(ids)), model_rows=tuple(model_rows))


def apply_deletion(model: NoteTableModel, plan: DeletionPlan) -> None:
    """Drop the planned rows from the model. Call only after the store deleted them."""
    for model_row in plan.model_rows:
        model.remove_row(model_row)
