import math
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Query, Session

from tasknest.crud.base import CRUDBase
from tasknest.models.reminder import Reminder
from tasknest.schemas.reminder import Pagination, ReminderCreate, ReminderUpdate
from tasknest.utils.timezone import utcnow

# Columns that may not be set to NULL by a partial update
NON_NULLABLE_FIELDS = {"title", "due_at", "priority", "is_recurring", "is_completed"}


class CRUDReminder(CRUDBase[Reminder, ReminderCreate, ReminderUpdate]):
    def filtered_query(
        self,
        db: Session,
        *,
        user_id: int,
        status: Optional[str] = None,
        category_id: Optional[int] = None,
        priority: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Query:
        now = now or utcnow()
        query = db.query(self.model).filter(Reminder.user_id == user_id)

        if status == "completed":
            query = query.filter(Reminder.is_completed.is_(True))
        elif status == "upcoming":
            query = query.filter(Reminder.is_completed.is_(False), Reminder.due_at > now)
        elif status == "overdue":
            query = query.filter(Reminder.is_completed.is_(False), Reminder.due_at < now)
        elif status == "urgent":
            query = query.filter(Reminder.is_completed.is_(False), Reminder.priority == "URGENT")
        # "all" and unrecognised values apply no status filter

        if category_id is not None:
            query = query.filter(Reminder.category_id == category_id)
        if priority:
            query = query.filter(Reminder.priority == priority)
        return query

    def get_page(
        self,
        db: Session,
        *,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        category_id: Optional[int] = None,
        priority: Optional[str] = None,
    ) -> Tuple[List[Reminder], Pagination]:
        query = self.filtered_query(
            db, user_id=user_id, status=status, category_id=category_id, priority=priority
        )
        total = query.count()
        skip = (page - 1) * limit
        reminders = (
            query.order_by(Reminder.due_at.asc(), Reminder.id.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        pagination = Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))
        return reminders, pagination

    def get_for_user(self, db: Session, *, reminder_id: int, user_id: int) -> Optional[Reminder]:
        return (
            db.query(self.model)
            .filter(Reminder.id == reminder_id, Reminder.user_id == user_id)
            .first()
        )

    def list_for_user(self, db: Session, *, user_id: int) -> List[Reminder]:
        """Every reminder of a user, latest due date first (admin view)."""
        return (
            db.query(self.model)
            .filter(Reminder.user_id == user_id)
            .order_by(Reminder.due_at.desc(), Reminder.id.desc())
            .all()
        )

    def list_all_for_user(self, db: Session, *, user_id: int) -> List[Reminder]:
        return db.query(self.model).filter(Reminder.user_id == user_id).all()

    def create_with_owner(self, db: Session, *, obj_in: ReminderCreate, user_id: int) -> Reminder:
        obj_in_data = obj_in.model_dump()
        obj_in_data["user_id"] = user_id
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update_reminder(self, db: Session, *, db_obj: Reminder, obj_in: ReminderUpdate) -> Reminder:
        update_data = obj_in.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        if "is_completed" in update_data and update_data["is_completed"] != db_obj.is_completed:
            update_data["completed_at"] = utcnow() if update_data["is_completed"] else None

        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def toggle_complete(self, db: Session, *, db_obj: Reminder) -> Reminder:
        completed = not db_obj.is_completed
        return super().update(
            db,
            db_obj=db_obj,
            obj_in={"is_completed": completed, "completed_at": utcnow() if completed else None},
        )


reminder = CRUDReminder(Reminder)
