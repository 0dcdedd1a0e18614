from typing import Dict, List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasknest.utils.timezone import to_utc_naive

Priority = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]
Recurrence = Literal["DAILY", "WEEKLY", "MONTHLY", "YEARLY", "CUSTOM"]


class _DueAtNormalizer(BaseModel):
    @field_validator("due_at", check_fields=False)
    @classmethod
    def normalize_due_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc_naive(v)


# Properties to receive on reminder creation
class ReminderCreate(_DueAtNormalizer):
    title: str = Field(..., min_length=1, description="Title is required")
    description: Optional[str] = None
    due_at: datetime
    priority: Priority = "MEDIUM"
    is_recurring: bool = False
    recurrence: Optional[Recurrence] = None
    category_id: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None


# Properties to receive on reminder update; every field optional
class ReminderUpdate(_DueAtNormalizer):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    due_at: Optional[datetime] = None
    priority: Optional[Priority] = None
    is_recurring: Optional[bool] = None
    recurrence: Optional[Recurrence] = None
    category_id: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    is_completed: Optional[bool] = None


class Reminder(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    due_at: datetime
    priority: str
    is_recurring: bool
    recurrence: Optional[str] = None
    is_completed: bool
    completed_at: Optional[datetime] = None
    category_id: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ReminderPage(BaseModel):
    reminders: List[Reminder]
    pagination: Pagination


class ReminderList(BaseModel):
    reminders: List[Reminder]


class ReminderStats(BaseModel):
    total: int
    completed: int
    upcoming: int
    overdue: int
    urgent: int


class WeeklyTrendPoint(BaseModel):
    week: str
    completed: int
    total: int


class ReminderAnalytics(BaseModel):
    total_reminders: int
    completed_reminders: int
    completion_rate: float
    average_completion_days: float
    priority_distribution: Dict[str, int]
    weekly_trend: List[WeeklyTrendPoint]
    overdue_count: int
    upcoming_count: int
