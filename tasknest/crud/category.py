from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from tasknest.crud.base import CRUDBase
from tasknest.models.category import Category
from tasknest.models.reminder import Reminder
from tasknest.schemas.category import CategoryIn
from tasknest.utils.timezone import utcnow


class CRUDCategory(CRUDBase[Category, CategoryIn, CategoryIn]):
    def get_for_user(self, db: Session, *, category_id: int, user_id: int) -> Optional[Category]:
        return (
            db.query(self.model)
            .filter(Category.id == category_id, Category.user_id == user_id)
            .first()
        )

    def get_by_name(
        self, db: Session, *, user_id: int, name: str, exclude_id: Optional[int] = None
    ) -> Optional[Category]:
        query = db.query(self.model).filter(Category.user_id == user_id, Category.name == name)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def list_with_counts(self, db: Session, *, user_id: int) -> List[Tuple[Category, int]]:
        """The user's categories ordered by name, each paired with its reminder count."""
        reminder_count = func.count(Reminder.id)
        rows = (
            db.query(Category, reminder_count)
            .outerjoin(
                Reminder,
                (Reminder.category_id == Category.id) & (Reminder.user_id == user_id),
            )
            .filter(Category.user_id == user_id)
            .group_by(Category.id)
            .order_by(Category.name.asc())
            .all()
        )
        return [(category, int(count)) for category, count in rows]

    def create_for_user(
        self, db: Session, *, user_id: int, name: str, color: str, icon: Optional[str] = None
    ) -> Category:
        db_obj = Category(name=name, color=color, icon=icon, user_id=user_id)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove_for_user(self, db: Session, *, db_obj: Category) -> Category:
        # SQLite does not enforce ON DELETE SET NULL unless foreign keys are enabled
        (
            db.query(Reminder)
            .filter(Reminder.category_id == db_obj.id, Reminder.user_id == db_obj.user_id)
            .update({Reminder.category_id: None, Reminder.updated_at: utcnow()}, synchronize_session=False)
        )
        db.delete(db_obj)
        db.commit()
        return db_obj


category = CRUDCategory(Category)
