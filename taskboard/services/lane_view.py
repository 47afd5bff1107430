"""Pure derivations over the task collection: lane views, sorting and due-date status."""

import locale
import logging
from collections.abc import Callable, Iterable
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from taskboard.core.config import constants
from taskboard.domain.task import Lane, Task


logger = logging.getLogger(__name__)


class SortKey(StrEnum):
    """Field a lane can be sorted by."""

    TITLE = "title"
    PROJECT = "project"
    ID = "id"  # Proxy for creation recency


class SortDirection(StrEnum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class SortOrder(BaseModel):
    """A single-key sort applied to one lane."""

    model_config = ConfigDict(frozen=True)

    key: SortKey
    direction: SortDirection = SortDirection.ASC


def use_environment_collation() -> bool:
    """Adopt the collation locale from the environment (LANG, LC_ALL, LC_COLLATE).

    Returns:
        False if the environment names a locale the system does not provide
    """
    try:
        name = locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Collation locale unavailable, sorting by case-folded text: %s", e)
        return False
    logger.info("Collation locale: %s", name)
    return True


def _text_key(value: str) -> tuple[str, str]:
    # Case-insensitive under any LC_COLLATE, including the default C locale
    return locale.strxfrm(value.casefold()), value


_SORT_KEYS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.TITLE: lambda task: _text_key(task.title),
    SortKey.PROJECT: lambda task: _text_key(task.project),
    SortKey.ID: lambda task: task.id,
}


def matches_project(task: Task, project_filter: str) -> bool:
    """Return True if the task passes the project filter ("All" passes everything)."""
    return project_filter == constants.ALL_PROJECTS or task.project == project_filter


def sort_tasks(tasks: Iterable[Task], sort: SortOrder | None) -> list[Task]:
    """Return tasks sorted by ``sort``, or in input order when it is None.

    Python's sort is stable in both directions, so tasks with equal keys keep
    their relative input order whether ascending or descending.
    """
    if sort is None:
        return list(tasks)
    return sorted(tasks, key=_SORT_KEYS[sort.key], reverse=sort.direction == SortDirection.DESC)


def derive_view(
    tasks: Iterable[Task],
    lane: Lane,
    project_filter: str = constants.ALL_PROJECTS,
    sort: SortOrder | None = None,
) -> list[Task]:
    """Build the ordered list of tasks shown in one lane.

    Args:
        tasks: The task collection in insertion order (not modified)
        lane: Lane to show
        project_filter: Project name, or "All" for every project
        sort: Optional single-key sort; None keeps insertion order

    Returns:
        A new list; recompute it whenever any argument changes
    """
    filtered = (task for task in tasks if task.lane == lane and matches_project(task, project_filter))
    return sort_tasks(filtered, sort)


def is_overdue(task: Task, today: date | None = None) -> bool:
    """Return True if the task is past its due date and not done.

    A task due today is not overdue.
    """
    if task.due_date is None or task.lane == Lane.DONE:
        return False
    return task.due_date < (today or date.today())


def format_due_date(task: Task) -> str | None:
    """Short due-date label such as "May 20", or None when there is no due date."""
    if task.due_date is None:
        return None
    return f"{task.due_date:%b} {task.due_date.day}"
