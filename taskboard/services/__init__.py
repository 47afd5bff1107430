from taskboard.services import board_engine, lane_view, project_registry


__all__ = [
    "board_engine",
    "lane_view",
    "project_registry",
]
