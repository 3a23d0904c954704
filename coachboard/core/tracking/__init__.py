"""
Progress tracking: progression charts, body-weight charts and the coach's
recent-activity feed.
"""

from .progression import (
    RECENT_ACTIVITY_LIMIT,
    LineChart,
    SeriesPoint,
    exercise_names,
    max_weight_series,
    parse_weight,
    progression_chart,
    recent_activity,
    weight_chart,
)

__all__ = [
    "RECENT_ACTIVITY_LIMIT",
    "LineChart",
    "SeriesPoint",
    "exercise_names",
    "max_weight_series",
    "parse_weight",
    "progression_chart",
    "recent_activity",
    "weight_chart",
]
