"""HTTP surface a web front end uses to drive the board."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from taskboard.core.config import constants
from taskboard.domain.defaults import COLOR_PALETTE, DEFAULT_NEW_PROJECT_COLOR
from taskboard.domain.lane import LANE_STYLES
from taskboard.domain.task import Lane, Task, TaskDraft
from taskboard.services.board_engine import BoardEngine
from taskboard.services.lane_view import SortDirection, SortKey, SortOrder, format_due_date, is_overdue
from taskboard.services.project_registry import ProjectRegistry


logger = logging.getLogger(__name__)

router = APIRouter(tags=["board"])


class MoveRequest(BaseModel):
    """Drop of a card into a lane."""

    lane: str = Field(..., description="Target lane identifier")


class ProjectCreate(BaseModel):
    """New project (or new color for an existing one)."""

    name: str = Field(..., description="Project name")
    color: str = Field(default=DEFAULT_NEW_PROJECT_COLOR, description="Display color, e.g. a hex code")


def get_engine(request: Request) -> BoardEngine:
    return request.app.state.engine


def get_registry(request: Request) -> ProjectRegistry:
    return request.app.state.registry


def _sort_order(sort: SortKey | None, direction: SortDirection) -> SortOrder | None:
    return SortOrder(key=sort, direction=direction) if sort else None


def _card(task: Task, registry: ProjectRegistry) -> dict[str, Any]:
    return {
        **task.to_wire(),
        "color": registry.color_for(task.project),
        "overdue": is_overdue(task),
        "dueLabel": format_due_date(task),
    }


def _lane(lane: Lane, tasks: list[Task], registry: ProjectRegistry) -> dict[str, Any]:
    style = LANE_STYLES[lane]
    return {
        "lane": lane.value,
        "title": style.title,
        "style": style.model_dump(),
        "count": len(tasks),
        "tasks": [_card(task, registry) for task in tasks],
    }


@router.get("/status")
async def get_status(engine: BoardEngine = Depends(get_engine)) -> dict[str, Any]:
    """Connectivity mode and collection size."""
    return {
        "mode": engine.mode.value,
        "ready": engine.is_ready,
        "tasks": len(engine),
        "pendingSync": engine.pending_sync_count,
    }


@router.get("/board")
async def get_board(
    project: str = constants.ALL_PROJECTS,
    sort: SortKey | None = None,
    direction: SortDirection = SortDirection.ASC,
    engine: BoardEngine = Depends(get_engine),
    registry: ProjectRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Every lane, in column order, under one project filter and sort."""
    order = _sort_order(sort, direction)
    board = engine.board(project, {lane: order for lane in Lane} if order else None)
    return {
        "mode": engine.mode.value,
        "project": project,
        "lanes": [_lane(lane, tasks, registry) for lane, tasks in board.items()],
    }


@router.get("/lanes/{lane}")
async def get_lane(
    lane: Lane,
    project: str = constants.ALL_PROJECTS,
    sort: SortKey | None = None,
    direction: SortDirection = SortDirection.ASC,
    engine: BoardEngine = Depends(get_engine),
    registry: ProjectRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """One lane's view."""
    return _lane(lane, engine.lane_view(lane, project, _sort_order(sort, direction)), registry)


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    draft: TaskDraft,
    engine: BoardEngine = Depends(get_engine),
    registry: ProjectRegistry = Depends(get_registry),
) -> dict[str, Any]:
    task = engine.create_task(draft)
    if task is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Task title is required")
    return _card(task, registry)


@router.put("/tasks/{task_id}")
async def edit_task(
    task_id: int,
    draft: TaskDraft,
    engine: BoardEngine = Depends(get_engine),
    registry: ProjectRegistry = Depends(get_registry),
) -> dict[str, Any]:
    task = engine.edit_task(task_id, draft)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found or title empty")
    return _card(task, registry)


@router.post("/tasks/{task_id}/move")
async def move_task(
    task_id: int,
    move: MoveRequest,
    engine: BoardEngine = Depends(get_engine),
    registry: ProjectRegistry = Depends(get_registry),
) -> dict[str, Any]:
    task = engine.move_task(task_id, move.lane)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task or lane not found")
    return _card(task, registry)


@router.post("/tasks/{task_id}/toggle")
async def toggle_task(
    task_id: int,
    engine: BoardEngine = Depends(get_engine),
    registry: ProjectRegistry = Depends(get_registry),
) -> dict[str, Any]:
    task = engine.toggle_done(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return _card(task, registry)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, engine: BoardEngine = Depends(get_engine)) -> Response:
    """Delete is idempotent: unknown ids also answer 204."""
    engine.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/projects")
async def list_projects(registry: ProjectRegistry = Depends(get_registry)) -> dict[str, Any]:
    return {
        "projects": [{"name": name, "color": registry.color_for(name)} for name in registry.projects],
        "palette": list(COLOR_PALETTE),
    }


@router.post("/projects", status_code=status.HTTP_201_CREATED)
async def add_project(
    project: ProjectCreate,
    registry: ProjectRegistry = Depends(get_registry),
) -> dict[str, str]:
    if not await registry.add_project(project.name, project.color):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Project name is required")
    name = project.name.strip()
    return {"name": name, "color": registry.color_for(name)}
