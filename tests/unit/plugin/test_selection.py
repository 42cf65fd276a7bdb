"""
Unit Tests for Selection Mapping.

Whatever the sort order, deleting a selection must remove exactly the
selected notes and leave every other row in place.
"""

from datetime import datetime

import pytest

from burpnote.backend.schemas.note import NoteRecord
from burpnote.plugin.selection import DeletionPlan, apply_deletion, plan_deletion
from burpnote.plugin.table_model import DOMAIN_COLUMN, ID_COLUMN, NoteTableModel


def _model(ids: list[int]) -> NoteTableModel:
    return NoteTableModel(
        NoteRecord(id=i, domain=f"d{i}.com", content=f"c{i}", created_at=datetime(2024, 1, 1))
        for i in ids
    )


class TestPlanDeletion:
    """Tests for resolving view rows to ids and model rows."""

    def test_unsorted_view(self):
        model = _model([1, 2, 3, 4])
        plan = plan_deletion(model, [0, 2])
        assert plan.ids == (1, 3)
        assert plan.model_rows == (2, 0)

    def test_sorted_view_resolves_through_model(self):
        model = _model([1, 2, 3, 4])
        model.sort_by(ID_COLUMN, descending=True)
        # View shows 4, 3, 2, 1
        plan = plan_deletion(model, [0, 1])
        assert plan.ids == (4, 3)
        assert plan.model_rows == (3, 2)

    def test_model_rows_are_strictly_descending(self):
        model = _model([5, 3, 9, 1, 7])
        model.sort_by(DOMAIN_COLUMN)
        plan = plan_deletion(model, [4, 0, 2])
        assert list(plan.model_rows) == sorted(plan.model_rows, reverse=True)
        assert len(set(plan.model_rows)) == len(plan.model_rows)

    def test_duplicate_view_rows_are_ignored(self):
        model = _model([1, 2, 3])
        plan = plan_deletion(model, [1, 1, 1])
        assert plan.ids == (2,)
        assert len(plan) == 1

    def test_empty_selection(self):
        plan = plan_deletion(_model([1, 2]), [])
        assert not plan
        assert plan == DeletionPlan(ids=(), model_rows=())

    def test_out_of_range_view_row(self):
        with pytest.raises(IndexError):
            plan_deletion(_model([1]), [1])


class TestApplyDeletion:
    """Tests for removing planned rows from the model."""

    @pytest.mark.parametrize(
        "sort, descending",
        [(None, False), (ID_COLUMN, False), (ID_COLUMN, True), (DOMAIN_COLUMN, True)],
    )
    def test_removes_exactly_the_selected_notes(self, sort, descending):
        """Should remove the selected ids regardless of sort order."""
        ids = [11, 42, 7, 23, 5, 16]
        model = _model(ids)
        if sort is not None:
            model.sort_by(sort, descending)
        view_rows = [0, 2, 5]
        selected = {model.record_at_view(r).id for r in view_rows}

        plan = plan_deletion(model, view_rows)
        apply_deletion(model, plan)

        remaining = {model.record_at_model(i).id for i in range(model.model_row_count)}
        assert set(plan.ids) == selected
        assert remaining == set(ids) - selected

    def test_remaining_rows_keep_load_order(self):
        model = _model([1, 2, 3, 4, 5])
        model.sort_by(ID_COLUMN, descending=True)
        apply_deletion(model, plan_deletion(model, [0, 4]))
        model.clear_sort()
        assert [r.id for r in model.view_records()] == [2, 3, 4]

    def test_filtered_view(self):
        model = _model([1, 2, 3, 12])
        model.set_filter("d1")
        # View shows d1.com and d12.com
        plan = plan_deletion(model, [1])
        assert plan.ids == (12,)
        apply_deletion(model, plan)
        assert model.model_row_count == 3
