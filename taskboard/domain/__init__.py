"""Domain models and DTOs."""

from taskboard.domain.lane import LANE_STYLES, LANES, REOPEN_LANE, LaneStyle
from taskboard.domain.ports import TaskStore
from taskboard.domain.task import ConnectivityMode, Lane, Task, TaskDraft


__all__ = [
    "LANES",
    "LANE_STYLES",
    "REOPEN_LANE",
    "ConnectivityMode",
    "Lane",
    "LaneStyle",
    "Task",
    "TaskDraft",
    "TaskStore",
]
