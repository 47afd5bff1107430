"""Unit tests for lane view derivation, sorting and due-date helpers."""

import locale
from datetime import date
from unittest.mock import patch

import pytest

from taskboard.domain.task import Lane, Task
from taskboard.services.lane_view import (
    SortDirection,
    SortKey,
    SortOrder,
    derive_view,
    format_due_date,
    is_overdue,
    sort_tasks,
    use_environment_collation,
)


def _task(task_id: int, title: str, project: str = "Development", lane: Lane = Lane.TODAY, **kwargs) -> Task:
    return Task(id=task_id, title=title, project=project, lane=lane, **kwargs)


@pytest.fixture
def tasks() -> list[Task]:
    return [
        _task(5, "Charlie", "Marketing"),
        _task(2, "Alpha", "Design"),
        _task(9, "Echo", "Development", Lane.DONE),
        _task(7, "Bravo", "Marketing"),
        _task(3, "Delta", "Finance", Lane.URGENT),
    ]


@pytest.mark.unit
class TestDeriveViewFiltering:
    """Tests for lane and project filtering."""

    def test_keeps_only_target_lane_in_insertion_order(self, tasks):
        view = derive_view(tasks, Lane.TODAY)

        assert [t.id for t in view] == [5, 2, 7]

    def test_project_filter(self, tasks):
        view = derive_view(tasks, Lane.TODAY, "Marketing")

        assert [t.title for t in view] == ["Charlie", "Bravo"]

    def test_all_sentinel_disables_project_filter(self, tasks):
        assert derive_view(tasks, Lane.TODAY, "All") == derive_view(tasks, Lane.TODAY)

    def test_unknown_project_gives_empty_view(self, tasks):
        assert derive_view(tasks, Lane.TODAY, "Nope") == []

    def test_project_filter_is_case_sensitive(self, tasks):
        assert derive_view(tasks, Lane.TODAY, "marketing") == []

    def test_empty_lane(self, tasks):
        assert derive_view(tasks, Lane.WAITING) == []


@pytest.mark.unit
class TestDeriveViewPurity:
    """derive_view never mutates its input and is deterministic."""

    def test_input_not_mutated(self, tasks):
        before = list(tasks)

        derive_view(tasks, Lane.TODAY, "All", SortOrder(key=SortKey.TITLE, direction=SortDirection.DESC))

        assert tasks == before

    def test_same_arguments_same_output(self, tasks):
        order = SortOrder(key=SortKey.PROJECT)

        assert derive_view(tasks, Lane.TODAY, "All", order) == derive_view(tasks, Lane.TODAY, "All", order)

    def test_returns_new_list(self, tasks):
        view = derive_view(tasks, Lane.TODAY)
        view.clear()

        assert len(derive_view(tasks, Lane.TODAY)) == 3

    def test_accepts_any_iterable(self, tasks):
        by_id = {t.id: t for t in tasks}

        assert [t.id for t in derive_view(by_id.values(), Lane.TODAY)] == [5, 2, 7]


@pytest.mark.unit
class TestSorting:
    """Tests for single-key sorting."""

    def test_title_ascending(self, tasks):
        view = derive_view(tasks, Lane.TODAY, sort=SortOrder(key=SortKey.TITLE))

        assert [t.title for t in view] == ["Alpha", "Bravo", "Charlie"]

    def test_title_descending_is_exact_reverse_without_ties(self, tasks):
        asc = derive_view(tasks, Lane.TODAY, sort=SortOrder(key=SortKey.TITLE, direction=SortDirection.ASC))
        desc = derive_view(tasks, Lane.TODAY, sort=SortOrder(key=SortKey.TITLE, direction=SortDirection.DESC))

        assert desc == list(reversed(asc))

    def test_id_sort_is_numeric(self):
        items = [_task(100, "a"), _task(9, "b"), _task(20, "c")]

        newest_first = sort_tasks(items, SortOrder(key=SortKey.ID, direction=SortDirection.DESC))
        oldest_first = sort_tasks(items, SortOrder(key=SortKey.ID))

        assert [t.id for t in newest_first] == [100, 20, 9]
        assert [t.id for t in oldest_first] == [9, 20, 100]

    def test_project_sort(self, tasks):
        view = derive_view(tasks, Lane.TODAY, sort=SortOrder(key=SortKey.PROJECT))

        assert [t.project for t in view] == ["Design", "Marketing", "Marketing"]

    def test_ties_keep_input_order_ascending(self):
        items = [_task(1, "Same", "B"), _task(2, "Other", "A"), _task(3, "Same", "C")]

        view = sort_tasks(items, SortOrder(key=SortKey.TITLE))

        assert [t.id for t in view] == [2, 1, 3]

    def test_ties_keep_input_order_descending(self):
        items = [_task(1, "Same", "B"), _task(2, "Other", "A"), _task(3, "Same", "C")]

        view = sort_tasks(items, SortOrder(key=SortKey.TITLE, direction=SortDirection.DESC))

        assert [t.id for t in view] == [1, 3, 2]

    def test_title_sort_ignores_case(self):
        items = [_task(1, "banana"), _task(2, "Apple"), _task(3, "cherry"), _task(4, "Zebra")]

        view = sort_tasks(items, SortOrder(key=SortKey.TITLE))

        assert [t.title for t in view] == ["Apple", "banana", "cherry", "Zebra"]

    def test_project_sort_ignores_case(self):
        items = [_task(1, "a", "marketing"), _task(2, "b", "Design"), _task(3, "c", "finance")]

        view = sort_tasks(items, SortOrder(key=SortKey.PROJECT, direction=SortDirection.DESC))

        assert [t.project for t in view] == ["marketing", "finance", "Design"]

    def test_case_variants_have_a_fixed_order(self):
        items = [_task(1, "apple"), _task(2, "Apple")]

        view = sort_tasks(items, SortOrder(key=SortKey.TITLE))

        assert [t.title for t in view] == ["Apple", "apple"]

    def test_no_sort_keeps_order(self, tasks):
        assert sort_tasks(tasks, None) == tasks

    def test_sort_order_from_strings(self):
        order = SortOrder(key="title", direction="desc")

        assert order.key is SortKey.TITLE
        assert order.direction is SortDirection.DESC


@pytest.mark.unit
class TestOverdue:
    """Tests for overdue classification."""

    TODAY = date(2024, 6, 10)

    def test_past_due_is_overdue(self):
        assert is_overdue(_task(1, "t", due_date=date(2024, 6, 9)), today=self.TODAY) is True

    def test_due_today_is_not_overdue(self):
        assert is_overdue(_task(1, "t", due_date=self.TODAY), today=self.TODAY) is False

    def test_future_due_is_not_overdue(self):
        assert is_overdue(_task(1, "t", due_date=date(2024, 7, 1)), today=self.TODAY) is False

    def test_no_due_date_is_not_overdue(self):
        assert is_overdue(_task(1, "t"), today=self.TODAY) is False

    def test_done_task_is_never_overdue(self):
        task = _task(1, "t", lane=Lane.DONE, due_date=date(2020, 1, 1))

        assert is_overdue(task, today=self.TODAY) is False

    def test_defaults_to_current_date(self):
        assert is_overdue(_task(1, "t", due_date=date(2000, 1, 1))) is True


@pytest.mark.unit
class TestFormatDueDate:
    def test_label(self):
        assert format_due_date(_task(1, "t", due_date=date(2024, 5, 20))) == "May 20"

    def test_no_date(self):
        assert format_due_date(_task(1, "t")) is None


@pytest.mark.unit
class TestEnvironmentCollation:
    def test_applies_locale_from_environment(self):
        with patch("taskboard.services.lane_view.locale.setlocale", return_value="en_US.UTF-8") as mock_setlocale:
            assert use_environment_collation() is True

        mock_setlocale.assert_called_once_with(locale.LC_COLLATE, "")

    def test_unavailable_locale_is_tolerated(self):
        with patch("taskboard.services.lane_view.locale.setlocale", side_effect=locale.Error("unsupported locale")):
            assert use_environment_collation() is False
