"""
Unit tests for checklist and status reconciliation
"""

import pytest

from taskboard_core.exceptions import ValidationError
from taskboard_core.reconcile import (
    apply_checklist,
    apply_status_change,
    compute_progress,
    count_completed,
    status_for_progress,
    validate_status,
)


def checklist(*flags):
    return [{"text": f"item {i}", "completed": flag} for i, flag in enumerate(flags)]


class TestProgress:
    """Test progress computation"""

    def test_empty_checklist_is_zero(self):
        assert compute_progress([]) == 0

    def test_counts_completed(self):
        assert count_completed(checklist(True, False, True)) == 2

    @pytest.mark.parametrize("flags,expected", [
        ((False, True), 50),
        ((True, True), 100),
        ((False, False), 0),
        ((True, False, False), 33),
        ((True, True, False), 67),
        ((True,) + (False,) * 7, 13),
        ((True,) * 5 + (False,) * 3, 63),
    ])
    def test_rounds_half_up(self, flags, expected):
        assert compute_progress(checklist(*flags)) == expected

    def test_missing_completed_flag_counts_as_open(self):
        assert compute_progress([{"text": "a"}, {"text": "b", "completed": True}]) == 50


class TestStatusDerivation:
    """Test status derived from progress"""

    @pytest.mark.parametrize("progress,status", [
        (0, "Pending"),
        (1, "In Progress"),
        (99, "In Progress"),
        (100, "Completed"),
    ])
    def test_status_for_progress(self, progress, status):
        assert status_for_progress(progress) == status

    def test_apply_checklist(self):
        updates = apply_checklist(checklist(False, True))
        assert updates["progress"] == 50
        assert updates["status"] == "In Progress"
        assert updates["todo_checklist"] == checklist(False, True)

    def test_apply_checklist_normalizes_items(self):
        updates = apply_checklist([{"text": "a", "completed": 1, "extra": "x"}])
        assert updates["todo_checklist"] == [{"text": "a", "completed": True}]
        assert updates["status"] == "Completed"


class TestExplicitStatus:
    """Test explicit status transitions"""

    def test_completed_forces_checklist(self):
        task = {"todo_checklist": checklist(False, True, False), "progress": 33}
        updates = apply_status_change(task, "Completed")
        assert updates["status"] == "Completed"
        assert updates["progress"] == 100
        assert all(item["completed"] for item in updates["todo_checklist"])
        assert [item["text"] for item in updates["todo_checklist"]] == ["item 0", "item 1", "item 2"]

    def test_completed_does_not_mutate_input(self):
        task = {"todo_checklist": checklist(False)}
        apply_status_change(task, "Completed")
        assert task["todo_checklist"][0]["completed"] is False

    @pytest.mark.parametrize("status", ["Pending", "In Progress"])
    def test_other_statuses_only_set_status(self, status):
        task = {"todo_checklist": checklist(True, True), "progress": 100}
        assert apply_status_change(task, status) == {"status": status}

    def test_completed_with_empty_checklist(self):
        updates = apply_status_change({}, "Completed")
        assert updates == {"status": "Completed", "todo_checklist": [], "progress": 100}

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_status(self, value):
        with pytest.raises(ValidationError, match="Status is required"):
            validate_status(value)

    def test_unknown_status(self):
        with pytest.raises(ValidationError, match="Invalid status"):
            apply_status_change({}, "Done")
