"""Built-in data: default projects, colors and the seed board used when the task store is unreachable."""

from datetime import date

from taskboard.domain.task import Lane, Task


DEFAULT_PROJECTS: tuple[str, ...] = ("Development", "Marketing", "Design", "Finance")

DEFAULT_PROJECT_COLORS: dict[str, str] = {
    "Development": "#3b82f6",
    "Marketing": "#6366f1",
    "Design": "#ec4899",
    "Finance": "#10b981",
}

# Colors offered when creating a project
COLOR_PALETTE: tuple[str, ...] = (
    "#ef4444",  # red
    "#f97316",  # orange
    "#f59e0b",  # amber
    "#84cc16",  # lime
    "#10b981",  # emerald
    "#06b6d4",  # cyan
    "#3b82f6",  # blue
    "#6366f1",  # indigo
    "#8b5cf6",  # violet
    "#d946ef",  # fuchsia
    "#ec4899",  # pink
    "#f43f5e",  # rose
    "#64748b",  # slate
)

DEFAULT_NEW_PROJECT_COLOR = COLOR_PALETTE[6]


def seed_tasks() -> list[Task]:
    """Return a fresh copy of the seed board."""
    return [
        Task(id=1, title="Fix the server", description="Main database outage", project="Development",
             lane=Lane.URGENT, due_date=date(2024, 5, 20)),
        Task(id=2, title="Monthly report", description="January financial report", project="Finance",
             lane=Lane.TODAY),
        Task(id=3, title="Logo design", description="Options for the new client", project="Design",
             lane=Lane.WAITING, due_date=date(2024, 6, 1)),
        Task(id=4, title="Team meeting", description="Discuss the new project", project="Marketing",
             lane=Lane.TOMORROW),
        Task(id=5, title="Office furniture", description="Order new chairs", project="Finance",
             lane=Lane.NOT_URGENT),
        Task(id=6, title="Client Call", description="Confirm the technical brief", project="Development",
             lane=Lane.URGENT, due_date=date(2024, 5, 22)),
        Task(id=7, title="Instagram Post", description="Write copy and pick a picture", project="Marketing",
             lane=Lane.TODAY),
        Task(id=8, title="React course", description="Watch module 5", project="Development",
             lane=Lane.NOT_URGENT, due_date=date(2024, 7, 15)),
        Task(id=9, title="Email replies", description="Answer partners", project="Marketing",
             lane=Lane.TODAY),
        Task(id=10, title="Budget planning", description="Q2 planning", project="Finance",
             lane=Lane.WAITING),
        Task(id=11, title="UI Kit update", description="Add new button styles", project="Design",
             lane=Lane.TOMORROW),
    ]
