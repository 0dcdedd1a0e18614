"""
Dashboard counters and the analytics page figures for a single user.

All figures are computed in Python over the user's reminders; a personal
reminder list is small enough that one query per request is fine.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from tasknest import crud
from tasknest.models.reminder import Reminder
from tasknest.schemas.reminder import ReminderAnalytics, ReminderStats, WeeklyTrendPoint
from tasknest.utils.timezone import utcnow

TREND_WEEKS = 4


def _is_overdue(reminder: Reminder, now: datetime) -> bool:
    return not reminder.is_completed and reminder.due_at < now


def _is_upcoming(reminder: Reminder, now: datetime) -> bool:
    return not reminder.is_completed and reminder.due_at > now


def compute_stats(reminders: Iterable[Reminder], now: Optional[datetime] = None) -> ReminderStats:
    now = now or utcnow()
    reminders = list(reminders)
    return ReminderStats(
        total=len(reminders),
        completed=sum(1 for r in reminders if r.is_completed),
        upcoming=sum(1 for r in reminders if _is_upcoming(r, now)),
        overdue=sum(1 for r in reminders if _is_overdue(r, now)),
        urgent=sum(1 for r in reminders if not r.is_completed and r.priority == "URGENT"),
    )


def week_start(moment: datetime) -> datetime:
    """Midnight of the Sunday on or before ``moment``."""
    days_since_sunday = (moment.weekday() + 1) % 7
    return (moment - timedelta(days=days_since_sunday)).replace(hour=0, minute=0, second=0, microsecond=0)


def weekly_trend(reminders: Iterable[Reminder], now: Optional[datetime] = None) -> List[WeeklyTrendPoint]:
    """Completed/total per Sunday-to-Saturday week, oldest first; the last week contains ``now``."""
    now = now or utcnow()
    reminders = list(reminders)
    current_start = week_start(now)
    points = []
    for offset in range(TREND_WEEKS - 1, -1, -1):
        start = current_start - timedelta(weeks=offset)
        end = start + timedelta(weeks=1)
        in_week = [r for r in reminders if start <= r.due_at < end]
        points.append(
            WeeklyTrendPoint(
                week=f"Week {TREND_WEEKS - offset}",
                completed=sum(1 for r in in_week if r.is_completed),
                total=len(in_week),
            )
        )
    return points


def average_completion_days(reminders: Iterable[Reminder]) -> float:
    durations = [
        (r.completed_at - r.created_at).total_seconds() / 86400
        for r in reminders
        if r.is_completed and r.completed_at and r.created_at
    ]
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations), 1)


def compute_analytics(reminders: Iterable[Reminder], now: Optional[datetime] = None) -> ReminderAnalytics:
    now = now or utcnow()
    reminders = list(reminders)
    total = len(reminders)
    completed = sum(1 for r in reminders if r.is_completed)
    completion_rate = (completed / total) * 100 if total else 0.0

    return ReminderAnalytics(
        total_reminders=total,
        completed_reminders=completed,
        completion_rate=round(completion_rate, 1),
        average_completion_days=average_completion_days(reminders),
        priority_distribution=dict(Counter(r.priority for r in reminders)),
        weekly_trend=weekly_trend(reminders, now),
        overdue_count=sum(1 for r in reminders if _is_overdue(r, now)),
        upcoming_count=sum(1 for r in reminders if _is_upcoming(r, now)),
    )


def get_stats_for_user(db: Session, *, user_id: int) -> ReminderStats:
    return compute_stats(crud.reminder.list_all_for_user(db, user_id=user_id))


def get_analytics_for_user(db: Session, *, user_id: int) -> ReminderAnalytics:
    return compute_analytics(crud.reminder.list_all_for_user(db, user_id=user_id))
