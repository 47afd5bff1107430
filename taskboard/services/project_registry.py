"""Project registry: known project names and their display colors."""

import json
import logging
from typing import Any

from taskboard.core.config import constants
from taskboard.core.kv_store import KeyValueStore
from taskboard.core.logging import span
from taskboard.domain.defaults import DEFAULT_NEW_PROJECT_COLOR, DEFAULT_PROJECTS, DEFAULT_PROJECT_COLORS


logger = logging.getLogger(__name__)


def _decode_projects(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(value, list) or not all(isinstance(name, str) for name in value):
        return None
    # Names are unique; keep first occurrence
    return list(dict.fromkeys(value))


def _decode_colors(raw: str | None) -> dict[str, str] | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(value, dict) or not all(isinstance(c, str) for c in value.values()):
        return None
    return value


class ProjectRegistry:
    """Ordered project names plus a name -> color mapping.

    Loaded once from a key-value store and written back on every change.
    Tasks may reference projects that are not registered; those render with
    the default color.
    """

    def __init__(
        self,
        store: KeyValueStore,
        projects: list[str] | None = None,
        colors: dict[str, str] | None = None,
    ) -> None:
        self._store = store
        self._projects: list[str] = list(DEFAULT_PROJECTS if projects is None else projects)
        self._colors: dict[str, str] = dict(DEFAULT_PROJECT_COLORS if colors is None else colors)

    @classmethod
    async def load(cls, store: KeyValueStore) -> "ProjectRegistry":
        """Read both entries from the store, falling back to defaults when absent or malformed."""
        with span("project_registry.load"):
            raw_projects = await store.get(constants.PROJECTS_KEY)
            raw_colors = await store.get(constants.PROJECT_COLORS_KEY)

            projects = _decode_projects(raw_projects)
            if projects is None and raw_projects is not None:
                logger.warning("Stored project list is malformed, using defaults")
            colors = _decode_colors(raw_colors)
            if colors is None and raw_colors is not None:
                logger.warning("Stored project colors are malformed, using defaults")

            registry = cls(store, projects, colors)
            logger.info("Loaded %d projects", len(registry.projects))
            return registry

    @property
    def projects(self) -> list[str]:
        return list(self._projects)

    @property
    def colors(self) -> dict[str, str]:
        return dict(self._colors)

    def __contains__(self, name: object) -> bool:
        return name in self._projects

    def color_for(self, project: str) -> str:
        """Return the project's color, or the default color for unknown projects."""
        return self._colors.get(project, constants.DEFAULT_PROJECT_COLOR)

    async def add_project(self, name: str, color: str = DEFAULT_NEW_PROJECT_COLOR) -> bool:
        """Register a project (or recolor an existing one) and persist the registry.

        Args:
            name: Project name; surrounding whitespace is ignored, matching is case-sensitive
            color: Display color token, e.g. a hex code

        Returns:
            False if the name was blank and nothing changed, True otherwise
        """
        name = name.strip()
        if not name:
            logger.debug("Ignoring project with empty name")
            return False

        if name not in self._projects:
            self._projects.append(name)
            logger.info("Added project: %s", name)
        self._colors[name] = color

        await self._persist()
        return True

    async def _persist(self) -> None:
        with span("project_registry.persist"):
            saved_projects = await self._store.set(constants.PROJECTS_KEY, _encode(self._projects))
            saved_colors = await self._store.set(constants.PROJECT_COLORS_KEY, _encode(self._colors))
            if not (saved_projects and saved_colors):
                logger.warning("Project registry could not be persisted; changes kept for this session")


def _encode(value: Any) -> str:  # noqa: ANN401
    return json.dumps(value, ensure_ascii=False)
