"""
Progression and weight tracking.

Turns training history and weight entries into chart series. Logged weights
are free text, so they are read the way a browser's parseFloat reads them:
the leading number counts ("62.5kg" -> 62.5) and anything else is 0.

Charts are returned as line-chart configuration for the client's charting
library; no rendering happens server-side.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from ..program.models import TrainingHistoryEntry, WeightEntry

RECENT_ACTIVITY_LIMIT = 10

PROGRESSION_COLOR = "rgb(245, 158, 11)"
WEIGHT_COLOR = "rgb(132, 204, 22)"

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_weight(value: Optional[str]) -> float:
    """Leading number of a logged weight, 0.0 when there isn't one."""
    match = _LEADING_FLOAT.match(value or "")
    return float(match.group(1)) if match else 0.0


def format_chart_date(moment: datetime) -> str:
    """Chart labels use day/month/year."""
    return moment.strftime("%d/%m/%Y")


@dataclass(frozen=True)
class SeriesPoint:
    date: datetime
    value: float


@dataclass(frozen=True)
class LineChart:
    """A single-dataset line chart."""
    label: str
    points: tuple[SeriesPoint, ...]
    border_color: str
    tension: float = 0.1

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_config(self) -> dict[str, Any]:
        return {
            "type": "line",
            "data": {
                "labels": [format_chart_date(point.date) for point in self.points],
                "datasets": [{
                    "label": self.label,
                    "data": [point.value for point in self.points],
                    "borderColor": self.border_color,
                    "tension": self.tension,
                }],
            },
        }


def exercise_names(history: Iterable[TrainingHistoryEntry]) -> list[str]:
    """Every exercise name appearing in the history, first occurrence first."""
    names: dict[str, None] = {}
    for entry in history:
        for exercise in entry.exercises:
            names.setdefault(exercise.name, None)
    return list(names)


def max_weight_series(history: Iterable[TrainingHistoryEntry], exercise_name: str) -> list[SeriesPoint]:
    """
    Heaviest logged set per session for one exercise, oldest first.

    Sessions that didn't include the exercise are skipped. An exercise logged
    without sets counts as 0.
    """
    points = []
    for entry in history:
        exercise = entry.find_exercise(exercise_name)
        if exercise is None:
            continue
        heaviest = max(
            (parse_weight(logged.performance.weight) for logged in exercise.sets),
            default=0.0,
        )
        points.append(SeriesPoint(date=entry.completed_at, value=heaviest))
    return sorted(points, key=lambda point: point.date)


def progression_chart(
    history: Iterable[TrainingHistoryEntry], exercise_name: str, label_prefix: str,
) -> LineChart:
    return LineChart(
        label=f"{label_prefix} {exercise_name}",
        points=tuple(max_weight_series(history, exercise_name)),
        border_color=PROGRESSION_COLOR,
    )


def weight_chart(entries: Iterable[WeightEntry], label: str) -> LineChart:
    """Body weight over time; entries are expected oldest first, as stored."""
    return LineChart(
        label=label,
        points=tuple(SeriesPoint(date=entry.date, value=entry.weight) for entry in entries),
        border_color=WEIGHT_COLOR,
    )


def recent_activity(
    histories: Iterable[Iterable[TrainingHistoryEntry]],
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> list[TrainingHistoryEntry]:
    """
    Merge per-student histories into the coach's activity feed.

    Each input is expected to be one student's most recent entries already;
    the merge keeps the newest `limit` across everyone.
    """
    merged = [entry for history in histories for entry in history]
    merged.sort(key=lambda entry: entry.completed_at, reverse=True)
    return merged[:limit]
