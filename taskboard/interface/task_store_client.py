"""HTTP client for the remote task store using httpx."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from taskboard.core.config import settings
from taskboard.core.errors import TaskStoreError, classify_status, classify_store_error
from taskboard.core.logging import span
from taskboard.domain.task import Task, TaskDraft


logger = logging.getLogger(__name__)


class TaskStoreClient:
    """Talks to a task store exposing GET/POST /tasks and PUT/DELETE /tasks/{id}.

    Any transport error, non-success status or undecodable body is raised as
    TaskStoreError; callers never see raw httpx exceptions.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Task store root URL (defaults to settings.task_store_url)
            timeout: Transport timeout in seconds (defaults to settings.task_store_timeout_seconds)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.base_url = (base_url or settings.task_store_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.task_store_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TaskStoreError(
                f"{method} {path} failed: {e!s}", operation=operation, category=classify_store_error(e)
            ) from e

        if not response.is_success:
            raise TaskStoreError(
                f"{method} {path} returned {response.status_code}",
                operation=operation,
                category=classify_status(response.status_code),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _decode(operation: str, response: httpx.Response) -> Any:  # noqa: ANN401
        try:
            return response.json()
        except ValueError as e:
            raise TaskStoreError(
                f"Undecodable {operation} response: {e!s}",
                operation=operation,
                category=classify_store_error(e),
            ) from e

    async def list_tasks(self) -> list[Task]:
        """Fetch the full task collection.

        Records that do not validate (unknown lane, missing title, ...) are
        skipped with a warning rather than failing the whole fetch.

        Returns:
            Tasks in the order the store returned them

        Raises:
            TaskStoreError: If the request fails or the body is not a list
        """
        with span("task_store.list_tasks"):
            response = await self._request("list", "GET", "/tasks")
            payload = self._decode("list", response)
            if not isinstance(payload, list):
                raise TaskStoreError(
                    f"Expected a list of tasks, got {type(payload).__name__}",
                    operation="list",
                    category=classify_store_error(ValueError()),
                )

            tasks: list[Task] = []
            for raw in payload:
                try:
                    tasks.append(Task.model_validate(raw))
                except ValidationError as e:
                    logger.warning("Skipping malformed task record: %s", e.errors(include_url=False))
            logger.debug("Fetched %d tasks from %s", len(tasks), self.base_url)
            return tasks

    async def create_task(self, draft: TaskDraft) -> Task:
        """Submit a new task (without id) and return the stored record.

        Raises:
            TaskStoreError: If the request fails or the response is not a task
        """
        with span("task_store.create_task", title=draft.title):
            response = await self._request("create", "POST", "/tasks", json=draft.to_wire())
            payload = self._decode("create", response)
            try:
                return Task.model_validate(payload)
            except ValidationError as e:
                raise TaskStoreError(
                    f"Created task response is invalid: {e!s}",
                    operation="create",
                    category=classify_store_error(e),
                ) from e

    async def update_task(self, task: Task) -> None:
        """Replace the stored task with the full local representation."""
        with span("task_store.update_task", task_id=task.id):
            await self._request("update", "PUT", f"/tasks/{task.id}", json=task.to_wire())

    async def delete_task(self, task_id: int) -> None:
        """Delete the stored task."""
        with span("task_store.delete_task", task_id=task_id):
            await self._request("delete", "DELETE", f"/tasks/{task_id}")
