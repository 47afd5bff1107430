"""Interfaces of external collaborators the board engine depends on."""

from typing import Protocol

from taskboard.domain.task import Task, TaskDraft


class TaskStore(Protocol):
    """Remote task store. Every method raises TaskStoreError on failure."""

    async def list_tasks(self) -> list[Task]: ...

    async def create_task(self, draft: TaskDraft) -> Task: ...

    async def update_task(self, task: Task) -> None: ...

    async def delete_task(self, task_id: int) -> None: ...
