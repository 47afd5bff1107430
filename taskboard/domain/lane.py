"""Board column definitions: order, header titles and header styles."""

from pydantic import BaseModel, ConfigDict

from taskboard.domain.task import Lane


class LaneStyle(BaseModel):
    """How a lane header is presented."""

    model_config = ConfigDict(frozen=True)

    title: str
    border_color: str
    text_color: str


# Column order on the board
LANES: tuple[Lane, ...] = (
    Lane.URGENT,
    Lane.TODAY,
    Lane.TOMORROW,
    Lane.WAITING,
    Lane.NOT_URGENT,
    Lane.DONE,
)

LANE_STYLES: dict[Lane, LaneStyle] = {
    Lane.URGENT: LaneStyle(title="Urgent", border_color="#ef4444", text_color="#b91c1c"),
    Lane.TODAY: LaneStyle(title="For Today", border_color="#06b6d4", text_color="#0e7490"),
    Lane.TOMORROW: LaneStyle(title="For Tomorrow", border_color="#22c55e", text_color="#15803d"),
    Lane.WAITING: LaneStyle(title="Waiting", border_color="#fb923c", text_color="#b45309"),
    Lane.NOT_URGENT: LaneStyle(title="Not Urgent", border_color="#94a3b8", text_color="#64748b"),
    Lane.DONE: LaneStyle(title="Done", border_color="#10b981", text_color="#047857"),
}

# Where a completed task goes when it is reopened
REOPEN_LANE = Lane.TODAY
