"""Unit tests for progression charts, weight charts and the recent-activity feed."""

from datetime import datetime, timedelta, timezone

import pytest

from coachboard.core.program.models import (
    LoggedExercise,
    LoggedSet,
    Performance,
    TrainingHistoryEntry,
    WeightEntry,
)
from coachboard.core.tracking.progression import (
    PROGRESSION_COLOR,
    WEIGHT_COLOR,
    exercise_names,
    max_weight_series,
    parse_weight,
    progression_chart,
    recent_activity,
    weight_chart,
)


def day(n: int) -> datetime:
    return datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(days=n)


def entry(when: datetime, *exercises: tuple[str, list[str]], student: str = "s1") -> TrainingHistoryEntry:
    """History entry with one logged set per weight string."""
    return TrainingHistoryEntry(
        student_id=student,
        student_name=student,
        session_name="Séance",
        completed_at=when,
        exercises=tuple(
            LoggedExercise(
                name=name,
                sets=tuple(LoggedSet(performance=Performance(weight=w, reps="8")) for w in weights),
            )
            for name, weights in exercises
        ),
    )


class TestParseWeight:
    @pytest.mark.parametrize("value,expected", [
        ("60", 60.0),
        ("62.5kg", 62.5),
        (" 70 ", 70.0),
        ("N/A", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("kg 60", 0.0),
        (".5", 0.5),
    ])
    def test_reads_leading_number(self, value, expected):
        assert parse_weight(value) == expected


class TestMaxWeightSeries:
    def test_takes_heaviest_set_per_session(self):
        history = [entry(day(0), ("Squat", ["80", "85kg", "N/A"]))]

        points = max_weight_series(history, "Squat")

        assert [p.value for p in points] == [85.0]

    def test_sorted_oldest_first(self):
        """History arrives newest first; the chart runs left to right in time."""
        history = [
            entry(day(10), ("Squat", ["90"])),
            entry(day(0), ("Squat", ["80"])),
            entry(day(5), ("Squat", ["85"])),
        ]

        points = max_weight_series(history, "Squat")

        assert [p.value for p in points] == [80.0, 85.0, 90.0]
        assert [p.date for p in points] == [day(0), day(5), day(10)]

    def test_sessions_without_exercise_are_skipped(self):
        history = [entry(day(0), ("Squat", ["80"])), entry(day(1), ("Pompes", ["0"]))]
        assert len(max_weight_series(history, "Squat")) == 1

    def test_exercise_without_sets_counts_as_zero(self):
        history = [entry(day(0), ("Squat", []))]
        assert [p.value for p in max_weight_series(history, "Squat")] == [0.0]


class TestCharts:
    def test_progression_chart_config(self):
        history = [entry(day(5), ("Squat", ["85"])), entry(day(0), ("Squat", ["80"]))]

        config = progression_chart(history, "Squat", "Poids max soulevé (kg) pour").to_config()

        assert config["type"] == "line"
        assert config["data"]["labels"] == ["01/01/2025", "06/01/2025"]
        dataset = config["data"]["datasets"][0]
        assert dataset == {
            "label": "Poids max soulevé (kg) pour Squat",
            "data": [80.0, 85.0],
            "borderColor": PROGRESSION_COLOR,
            "tension": 0.1,
        }

    def test_weight_chart(self):
        entries = [WeightEntry(date=day(0), weight=80.5), WeightEntry(date=day(14), weight=80.1)]

        chart = weight_chart(entries, "Poids (kg)")

        assert not chart.is_empty
        config = chart.to_config()
        assert config["data"]["datasets"][0]["data"] == [80.5, 80.1]
        assert config["data"]["datasets"][0]["borderColor"] == WEIGHT_COLOR
        assert config["data"]["labels"] == ["01/01/2025", "15/01/2025"]

    def test_empty_weight_chart(self):
        assert weight_chart([], "Poids (kg)").is_empty


class TestExerciseNames:
    def test_unique_in_first_seen_order(self):
        history = [
            entry(day(2), ("Squat", []), ("Pompes", [])),
            entry(day(1), ("Développé couché", []), ("Squat", [])),
        ]
        assert exercise_names(history) == ["Squat", "Pompes", "Développé couché"]


class TestRecentActivity:
    def test_merges_and_keeps_ten_newest(self):
        """Three students with ten entries each still give ten entries, newest first."""
        histories = [
            [entry(day(offset + 3 * i), student=f"s{offset}") for i in range(10)]
            for offset in range(3)
        ]

        feed = recent_activity(histories)

        assert len(feed) == 10
        dates = [e.completed_at for e in feed]
        assert dates == sorted(dates, reverse=True)
        assert feed[0].completed_at == day(2 + 27)

    def test_fewer_than_limit(self):
        feed = recent_activity([[entry(day(0))], [], [entry(day(1))]])
        assert [e.completed_at for e in feed] == [day(1), day(0)]

    def test_no_students(self):
        assert recent_activity([]) == []
