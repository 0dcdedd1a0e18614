from datetime import datetime, timedelta
from types import SimpleNamespace

from tasknest.services import analytics

NOW = datetime(2026, 10, 15, 12, 0)  # a Thursday


def _reminder(due_at, priority="MEDIUM", is_completed=False, created_at=None, completed_at=None):
    return SimpleNamespace(
        due_at=due_at,
        priority=priority,
        is_completed=is_completed,
        created_at=created_at or datetime(2026, 9, 1),
        completed_at=completed_at,
    )


def test_week_start_is_previous_sunday():
    assert analytics.week_start(NOW) == datetime(2026, 10, 11)
    assert analytics.week_start(datetime(2026, 10, 11, 23, 59)) == datetime(2026, 10, 11)
    assert analytics.week_start(datetime(2026, 10, 10, 8, 0)) == datetime(2026, 10, 4)


def test_weekly_trend_counts_four_sunday_weeks():
    reminders = [
        _reminder(datetime(2026, 9, 20, 9)),                      # Week 1 starts Sep 20
        _reminder(datetime(2026, 9, 26, 23), is_completed=True),  # still Week 1
        _reminder(datetime(2026, 10, 4, 0)),                      # Week 3
        _reminder(datetime(2026, 10, 17, 10), is_completed=True),  # Week 4, later this week
        _reminder(datetime(2026, 9, 19, 9)),                      # before the window
        _reminder(datetime(2026, 10, 18, 0)),                     # next week
    ]
    trend = analytics.weekly_trend(reminders, NOW)
    assert [point.model_dump() for point in trend] == [
        {"week": "Week 1", "completed": 1, "total": 2},
        {"week": "Week 2", "completed": 0, "total": 0},
        {"week": "Week 3", "completed": 0, "total": 1},
        {"week": "Week 4", "completed": 1, "total": 1},
    ]


def test_compute_stats():
    reminders = [
        _reminder(NOW - timedelta(days=1)),
        _reminder(NOW + timedelta(days=1), priority="URGENT"),
        _reminder(NOW - timedelta(days=3), priority="URGENT", is_completed=True),
        _reminder(NOW + timedelta(days=2)),
    ]
    stats = analytics.compute_stats(reminders, NOW)
    assert stats.model_dump() == {"total": 4, "completed": 1, "upcoming": 2, "overdue": 1, "urgent": 1}


def test_compute_analytics():
    created = datetime(2026, 10, 1)
    reminders = [
        _reminder(NOW - timedelta(days=1), priority="HIGH"),
        _reminder(NOW + timedelta(days=1), priority="HIGH"),
        _reminder(
            NOW - timedelta(days=2),
            is_completed=True,
            created_at=created,
            completed_at=created + timedelta(days=2),
        ),
        _reminder(
            NOW - timedelta(days=2),
            priority="LOW",
            is_completed=True,
            created_at=created,
            completed_at=created + timedelta(days=3),
        ),
    ]
    result = analytics.compute_analytics(reminders, NOW)
    assert result.total_reminders == 4
    assert result.completed_reminders == 2
    assert result.completion_rate == 50.0
    assert result.average_completion_days == 2.5
    assert result.priority_distribution == {"HIGH": 2, "MEDIUM": 1, "LOW": 1}
    assert result.overdue_count == 1
    assert result.upcoming_count == 1
    assert len(result.weekly_trend) == 4


def test_compute_analytics_empty():
    result = analytics.compute_analytics([], NOW)
    assert result.completion_rate == 0
    assert result.average_completion_days == 0
    assert result.priority_distribution == {}
    assert [point.total for point in result.weekly_trend] == [0, 0, 0, 0]


def test_stats_endpoint(user_client, iso):
    user_client.post("/api/reminders/", json={"title": "Late", "due_at": iso(days=-1)})
    user_client.post("/api/reminders/", json={"title": "Soon", "due_at": iso(days=1), "priority": "URGENT"})

    response = user_client.get("/api/reminders/stats")
    assert response.status_code == 200
    assert response.json() == {"total": 2, "completed": 0, "upcoming": 1, "overdue": 1, "urgent": 1}


def test_analytics_endpoint(user_client, other_client, iso):
    first = user_client.post("/api/reminders/", json={"title": "Done", "due_at": iso(hours=-1)}).json()
    user_client.post("/api/reminders/", json={"title": "Open", "due_at": iso(days=1), "priority": "HIGH"})
    user_client.patch(f"/api/reminders/{first['id']}")
    other_client.post("/api/reminders/", json={"title": "Not mine", "due_at": iso(days=1)})

    response = user_client.get("/api/reminders/analytics")
    assert response.status_code == 200
    body = response.json()
    assert body["total_reminders"] == 2
    assert body["completed_reminders"] == 1
    assert body["completion_rate"] == 50.0
    assert body["priority_distribution"] == {"MEDIUM": 1, "HIGH": 1}
    assert body["upcoming_count"] == 1
    assert body["overdue_count"] == 0
    assert [point["week"] for point in body["weekly_trend"]] == ["Week 1", "Week 2", "Week 3", "Week 4"]
    assert body["average_completion_days"] >= 0
