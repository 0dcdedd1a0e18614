import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tasknest import crud, models, schemas
from tasknest.api import deps
from tasknest.core.config import settings
from tasknest.db.session import get_db
from tasknest.services import analytics

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_category(db: Session, category_id: Optional[int], user_id: int) -> None:
    if category_id is None:
        return
    if not crud.category.get_for_user(db, category_id=category_id, user_id=user_id):
        raise HTTPException(status_code=404, detail="Category not found")


def _get_owned_reminder(db: Session, reminder_id: int, user_id: int) -> models.Reminder:
    reminder = crud.reminder.get_for_user(db, reminder_id=reminder_id, user_id=user_id)
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return reminder


@router.get("/", response_model=schemas.ReminderPage)
def read_reminders(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    status_filter: Optional[str] = Query(None, alias="status"),
    category_id: Optional[int] = Query(None),
    priority: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Any:
    """
    List the current user's reminders, soonest due first.

    ``status`` is one of all, upcoming, completed, overdue or urgent.
    """
    reminders, pagination = crud.reminder.get_page(
        db,
        user_id=current_user.id,
        page=page,
        limit=limit,
        status=status_filter,
        category_id=category_id,
        priority=priority,
    )
    return {"reminders": reminders, "pagination": pagination}


@router.post("/", response_model=schemas.Reminder, status_code=status.HTTP_201_CREATED)
def create_reminder(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    reminder_in: schemas.ReminderCreate,
) -> Any:
    _ensure_category(db, reminder_in.category_id, current_user.id)
    reminder = crud.reminder.create_with_owner(db, obj_in=reminder_in, user_id=current_user.id)
    logger.info(f"User {current_user.id} created reminder {reminder.id}")
    return reminder


@router.get("/stats", response_model=schemas.ReminderStats)
def read_reminder_stats(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """Dashboard counters."""
    return analytics.get_stats_for_user(db, user_id=current_user.id)


@router.get("/analytics", response_model=schemas.ReminderAnalytics)
def read_reminder_analytics(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    return analytics.get_analytics_for_user(db, user_id=current_user.id)


@router.get("/{reminder_id}", response_model=schemas.Reminder)
def read_reminder(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    reminder_id: int,
) -> Any:
    return _get_owned_reminder(db, reminder_id, current_user.id)


@router.put("/{reminder_id}", response_model=schemas.Reminder)
def update_reminder(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    reminder_id: int,
    reminder_in: schemas.ReminderUpdate,
) -> Any:
    reminder = _get_owned_reminder(db, reminder_id, current_user.id)
    _ensure_category(db, reminder_in.category_id, current_user.id)
    reminder = crud.reminder.update_reminder(db, db_obj=reminder, obj_in=reminder_in)
    logger.info(f"User {current_user.id} updated reminder {reminder.id}")
    return reminder


@router.patch("/{reminder_id}", response_model=schemas.Reminder)
def toggle_reminder(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    reminder_id: int,
) -> Any:
    """Flip the completion flag."""
    reminder = _get_owned_reminder(db, reminder_id, current_user.id)
    return crud.reminder.toggle_complete(db, db_obj=reminder)


@router.delete("/{reminder_id}", response_model=schemas.MessageResponse)
def delete_reminder(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    reminder_id: int,
) -> Any:
    reminder = _get_owned_reminder(db, reminder_id, current_user.id)
    crud.reminder.remove(db, db_obj=reminder)
    logger.info(f"User {current_user.id} deleted reminder {reminder_id}")
    return {"message": "Reminder deleted successfully"}
