"""Board engine: owns the task collection and keeps it in sync with the remote task store.

Every mutation is applied to the local collection first and is visible as soon
as the call returns. While online, the matching remote call then runs as a
background asyncio task; its completion is a second, independent update that
tolerates the target having been deleted in the meantime. Edits and deletes of
a task whose creation is still in flight are held back and replayed against
the authoritative id once the store confirms it. The first remote
failure switches the engine to offline mode for the rest of the session.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine, Mapping
from typing import Any

from taskboard.core.config import constants, settings
from taskboard.core.errors import classify_store_error
from taskboard.core.logging import log_with_context, span
from taskboard.domain.defaults import seed_tasks
from taskboard.domain.lane import LANES, REOPEN_LANE
from taskboard.domain.ports import TaskStore
from taskboard.domain.task import ConnectivityMode, Lane, Task, TaskDraft
from taskboard.services.lane_view import SortOrder, derive_view


logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class BoardEngine:
    """Single owner of the board's tasks and connectivity mode."""

    def __init__(
        self,
        store: TaskStore | None = None,
        *,
        seed_on_fetch_failure: bool | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize engine.

        Args:
            store: Remote task store; None runs the board offline from the start
            seed_on_fetch_failure: Load the seed board when the initial fetch fails
                (defaults to settings.seed_on_fetch_failure)
            clock: Time source in seconds, used for provisional ids
        """
        self._store = store
        self._seed_on_fetch_failure = (
            settings.seed_on_fetch_failure if seed_on_fetch_failure is None else seed_on_fetch_failure
        )
        self._clock = clock

        self._tasks: dict[int, Task] = {}
        self._mode = ConnectivityMode.ONLINE
        self._ready = False
        self._initializing = False
        self._last_provisional_id = 0
        self._pending: set[asyncio.Task[None]] = set()
        # Provisional id -> last update deferred until the create is confirmed
        self._unconfirmed: dict[int, str | None] = {}
        self._listeners: list[Listener] = []

    # -------------------- state --------------------

    @property
    def mode(self) -> ConnectivityMode:
        return self._mode

    @property
    def is_online(self) -> bool:
        return self._mode == ConnectivityMode.ONLINE

    @property
    def is_ready(self) -> bool:
        """True once initialize() has completed."""
        return self._ready

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the collection in insertion order."""
        return list(self._tasks.values())

    @property
    def pending_sync_count(self) -> int:
        return len(self._pending)

    def get_task(self, task_id: int) -> Task | None:
        return self._tasks.get(task_id)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every state change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Board listener failed")

    def _go_offline(self, reason: str) -> None:
        """The only place the connectivity mode changes. There is no way back online."""
        if self._mode == ConnectivityMode.OFFLINE:
            return
        self._mode = ConnectivityMode.OFFLINE
        log_with_context(logger, "warning", "board_offline", reason=reason)
        self._changed()

    def _adopt(self, tasks: list[Task]) -> None:
        collection: dict[int, Task] = {}
        for task in tasks:
            if task.id in collection:
                logger.warning("Dropping task with duplicate id %s", task.id)
                continue
            collection[task.id] = task
        self._tasks = collection

    # -------------------- lifecycle --------------------

    async def initialize(self) -> ConnectivityMode:
        """Load the board from the task store, or fall back to local data.

        Runs once per engine; later calls return the current mode unchanged.
        Mutations are ignored until this has completed.

        Returns:
            The connectivity mode the session starts in
        """
        if self._ready or self._initializing:
            logger.debug("Board already initialized")
            return self._mode

        self._initializing = True
        try:
            with span("board_engine.initialize"):
                if self._store is None:
                    self._load_fallback()
                    self._go_offline("no task store configured")
                    return self._mode

                try:
                    tasks = await self._store.list_tasks()
                except Exception as e:
                    self._load_fallback()
                    self._remote_failed("list", e)
                    return self._mode

                self._adopt(tasks)
                logger.info("Loaded %d tasks from task store", len(self._tasks))
                return self._mode
        finally:
            self._initializing = False
            self._ready = True
            self._changed()

    def _load_fallback(self) -> None:
        if self._seed_on_fetch_failure:
            self._adopt(seed_tasks())
            logger.info("Task store unavailable, loaded %d seed tasks", len(self._tasks))
        else:
            self._tasks = {}
            logger.info("Task store unavailable, starting with an empty board")

    async def wait_for_sync(self) -> None:
        """Wait until every background remote call issued so far has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -------------------- mutations --------------------

    def _accepting(self, operation: str) -> bool:
        if not self._ready:
            logger.debug("Ignoring %s before the board is initialized", operation)
            return False
        return True

    def _next_provisional_id(self) -> int:
        """Millisecond timestamp, bumped so it never repeats or collides within the session."""
        candidate = max(int(self._clock() * 1000), self._last_provisional_id + 1)
        while candidate in self._tasks:
            candidate += 1
        self._last_provisional_id = candidate
        return candidate

    def create_task(self, draft: TaskDraft) -> Task | None:
        """Add a task under a provisional id and, when online, submit it to the task store.

        Returns:
            The provisional task, or None if the title is blank or the board is not ready
        """
        if not self._accepting("create"):
            return None
        if not draft.title.strip():
            logger.debug("Ignoring task with empty title")
            return None

        task = Task.from_draft(self._next_provisional_id(), draft)
        self._tasks[task.id] = task
        logger.info("Created task %s: %s", task.id, task.title)
        self._changed()

        if self.is_online and self._dispatch("create", self._sync_create(task.id, task.draft())):
            self._unconfirmed[task.id] = None
        return task

    def edit_task(self, task_id: int, draft: TaskDraft) -> Task | None:
        """Replace every editable field of a task.

        Returns:
            The updated task, or None if the id is unknown or the title is blank
        """
        if not self._accepting("edit"):
            return None
        current = self._tasks.get(task_id)
        if current is None:
            logger.debug("Ignoring edit of unknown task %s", task_id)
            return None
        if not draft.title.strip():
            logger.debug("Ignoring edit of task %s with empty title", task_id)
            return None

        return self._apply_update(current.with_fields(draft), "edit")

    def move_task(self, task_id: int, lane: Lane | str) -> Task | None:
        """Reassign a task to another lane.

        Returns:
            The moved task, or None if the id is unknown or the lane is not a board lane
        """
        if not self._accepting("move"):
            return None
        target = Lane.parse(lane)
        if target is None:
            logger.debug("Ignoring move of task %s to unknown lane %r", task_id, lane)
            return None
        current = self._tasks.get(task_id)
        if current is None:
            logger.debug("Ignoring move of unknown task %s", task_id)
            return None

        return self._apply_update(current.moved_to(target), "move")

    def toggle_done(self, task_id: int) -> Task | None:
        """Move a task to done, or reopen a done task into today."""
        if not self._accepting("toggle"):
            return None
        current = self._tasks.get(task_id)
        if current is None:
            logger.debug("Ignoring toggle of unknown task %s", task_id)
            return None
        return self.move_task(task_id, REOPEN_LANE if current.is_done else Lane.DONE)

    def delete_task(self, task_id: int) -> bool:
        """Remove a task locally; the removal is final even if the remote delete fails.

        Deleting an unknown id changes nothing and issues no remote call. A task
        whose creation is still unconfirmed is deleted remotely once its
        authoritative id is known.

        Returns:
            True if a task was removed
        """
        if not self._accepting("delete"):
            return False
        removed = self._tasks.pop(task_id, None)
        if removed is None:
            return False

        logger.info("Deleted task %s", task_id)
        self._changed()
        if self.is_online and task_id not in self._unconfirmed:
            self._dispatch("delete", self._sync_delete(task_id))
        return True

    def _apply_update(self, updated: Task, operation: str) -> Task:
        self._tasks[updated.id] = updated
        self._changed()
        if not self.is_online:
            return updated
        if updated.id in self._unconfirmed:
            logger.debug("Deferring %s of task %s until its creation is confirmed", operation, updated.id)
            self._unconfirmed[updated.id] = operation
        else:
            self._dispatch(operation, self._sync_update(updated, operation))
        return updated

    # -------------------- remote sync --------------------

    def _dispatch(self, operation: str, coro: Coroutine[Any, Any, None]) -> bool:
        """Run a remote call in the background without blocking the caller.

        Returns:
            False if there is no running event loop and the engine went offline instead
        """
        try:
            background = asyncio.get_running_loop().create_task(coro, name=f"taskboard.{operation}")
        except RuntimeError:
            coro.close()
            self._go_offline(f"no running event loop for {operation}")
            return False
        self._pending.add(background)
        background.add_done_callback(self._pending.discard)
        return True

    def _remote_failed(self, operation: str, error: Exception, **context: object) -> None:
        category = classify_store_error(error)
        log_with_context(
            logger,
            "warning",
            f"Task store {operation} failed, switching to offline mode: {error}",
            operation=operation,
            category=category.value,
            **context,
        )
        self._go_offline(f"{operation} failed ({category.value})")

    async def _sync_create(self, provisional_id: int, draft: TaskDraft) -> None:
        """Submit a new task, then replay whatever happened to it locally while the POST was in flight."""
        if self._store is None:
            return
        try:
            confirmed = await self._store.create_task(draft)
        except Exception as e:
            self._unconfirmed.pop(provisional_id, None)
            self._remote_failed("create", e, task_id=provisional_id)
            return

        deferred = self._unconfirmed.pop(provisional_id, None)
        if provisional_id not in self._tasks:
            logger.debug("Task %s was removed before its creation was confirmed", provisional_id)
            if self.is_online:
                await self._sync_delete(confirmed.id)
            return

        adopted = self._reconcile_created(provisional_id, confirmed, keep_local_fields=deferred is not None)
        if adopted is not None and deferred is not None and self.is_online:
            await self._sync_update(adopted, deferred)

    def _reconcile_created(self, provisional_id: int, confirmed: Task, *, keep_local_fields: bool) -> Task | None:
        """Swap the provisional task for the stored one, keeping its position.

        With keep_local_fields the local edits made since submission win and
        only the authoritative id is taken from the store.

        Returns:
            The task now in the collection, or None if the confirmed id was unusable
        """
        if confirmed.id != provisional_id and confirmed.id in self._tasks:
            logger.warning(
                "Confirmed id %s for task %s is already in use; keeping the provisional id",
                confirmed.id,
                provisional_id,
            )
            return None

        current = self._tasks[provisional_id]
        adopted = current.model_copy(update={"id": confirmed.id}) if keep_local_fields else confirmed
        self._tasks = {
            (adopted.id if task_id == provisional_id else task_id): (adopted if task_id == provisional_id else task)
            for task_id, task in self._tasks.items()
        }
        logger.info("Task %s confirmed as %s", provisional_id, adopted.id)
        self._changed()
        return adopted

    async def _sync_update(self, task: Task, operation: str) -> None:
        if self._store is None:
            return
        try:
            await self._store.update_task(task)
        except Exception as e:
            self._remote_failed(operation, e, task_id=task.id)
            return
        logger.debug("Task %s %s synced", task.id, operation)

    async def _sync_delete(self, task_id: int) -> None:
        if self._store is None:
            return
        try:
            await self._store.delete_task(task_id)
        except Exception as e:
            self._remote_failed("delete", e, task_id=task_id)
            return
        logger.debug("Task %s delete synced", task_id)

    # -------------------- views --------------------

    def lane_view(
        self,
        lane: Lane,
        project_filter: str = constants.ALL_PROJECTS,
        sort: SortOrder | None = None,
    ) -> list[Task]:
        """Tasks shown in one lane under the given project filter and sort."""
        return derive_view(self._tasks.values(), lane, project_filter, sort)

    def board(
        self,
        project_filter: str = constants.ALL_PROJECTS,
        sorts: Mapping[Lane, SortOrder] | None = None,
    ) -> dict[Lane, list[Task]]:
        """Every lane's view, in column order. Each lane may have its own sort."""
        sorts = sorts or {}
        return {lane: self.lane_view(lane, project_filter, sorts.get(lane)) for lane in LANES}
