import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from tasknest import crud, models, schemas
from tasknest.api import deps
from tasknest.core.config import settings
from tasknest.db.session import get_db
from tasknest.models.user import USER_ROLES

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_user_id(raw: Optional[str]) -> int:
    try:
        user_id = int(raw) if raw is not None else 0
    except ValueError:
        user_id = 0
    if user_id <= 0:
        raise HTTPException(status_code=400, detail="Missing user id")
    return user_id


def _get_user_or_404(db: Session, user_id: int) -> models.User:
    user = crud.user.get(db, id=user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _validated_email(email: str) -> str:
    try:
        return schemas.normalize_email(email)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid email address")


@router.get("/users", response_model=schemas.AdminUserListing)
def list_users(
    *,
    db: Session = Depends(get_db),
    _: models.User = Depends(deps.get_current_active_admin),
) -> Any:
    """Admin-only: every account, newest first."""
    return {"users": crud.user.list_newest_first(db)}


@router.post("/users", response_model=schemas.AdminUserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(
    *,
    db: Session = Depends(get_db),
    admin: models.User = Depends(deps.get_current_active_admin),
    user_in: schemas.AdminUserCreate,
) -> Any:
    """Admin-only: create an account with a known password."""
    if not user_in.name or not user_in.email or not user_in.password:
        raise HTTPException(status_code=400, detail="Missing fields")
    email = _validated_email(user_in.email.strip())
    if crud.user.get_by_email(db, email=email):
        raise HTTPException(status_code=409, detail="User already exists")

    user = crud.user.create(
        db,
        obj_in=schemas.UserCreate(
            name=user_in.name.strip(),
            email=email,
            password=user_in.password,
            nickname=user_in.nickname,
        ),
    )
    logger.info(f"Admin {admin.id} created user {user.id}")
    return {"user": user}


@router.put("/users", response_model=schemas.AdminUserEnvelope)
def update_user(
    *,
    db: Session = Depends(get_db),
    admin: models.User = Depends(deps.get_current_active_admin),
    user_in: schemas.AdminUserUpdate,
) -> Any:
    """Admin-only: edit name, email and nickname."""
    if not user_in.id or not user_in.name or not user_in.email:
        raise HTTPException(status_code=400, detail="Missing fields")
    user = _get_user_or_404(db, user_in.id)
    email = _validated_email(user_in.email.strip())
    other = crud.user.get_by_email(db, email=email)
    if other and other.id != user.id:
        raise HTTPException(status_code=409, detail="Email already in use")

    update_data = {"name": user_in.name.strip(), "email": email}
    # An omitted nickname is left as it is
    if "nickname" in user_in.model_fields_set:
        update_data["nickname"] = user_in.nickname
    user = crud.user.update(db, db_obj=user, obj_in=update_data)
    logger.info(f"Admin {admin.id} updated user {user.id}")
    return {"user": user}


@router.delete("/users", response_model=schemas.MessageResponse)
def delete_user(
    *,
    db: Session = Depends(get_db),
    admin: models.User = Depends(deps.get_current_active_admin),
    id: Optional[str] = Query(None),
) -> Any:
    """
    Admin-only: delete an account together with its reminders and categories.
    """
    user = _get_user_or_404(db, _parse_user_id(id))
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    crud.user.remove(db, db_obj=user)
    logger.info(f"Admin {admin.id} deleted user {user.id}")
    return {"message": "User deleted"}


@router.patch("/users", response_model=schemas.AdminUserEnvelope)
def update_user_status(
    *,
    db: Session = Depends(get_db),
    admin: models.User = Depends(deps.get_current_active_admin),
    action_in: schemas.AdminUserAction,
) -> Any:
    """
    Admin-only account actions:

    - resetPassword: ``value`` is the new password
    - toggleActive: ``value`` is the new active flag
    - changeRole: ``value`` is USER, MODERATOR or ADMIN
    """
    if not action_in.id or not action_in.action:
        raise HTTPException(status_code=400, detail="Missing fields")
    user = _get_user_or_404(db, action_in.id)
    value = action_in.value

    if action_in.action == "resetPassword":
        if not isinstance(value, str) or len(value) < settings.MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
            )
        user = crud.user.set_password(db, db_obj=user, password=value)
    elif action_in.action == "toggleActive":
        if not isinstance(value, bool):
            raise HTTPException(status_code=400, detail="Value must be a boolean")
        user = crud.user.update(db, db_obj=user, obj_in={"is_active": value})
    elif action_in.action == "changeRole":
        if value not in USER_ROLES:
            raise HTTPException(status_code=400, detail="Invalid role")
        user = crud.user.update(db, db_obj=user, obj_in={"role": value})
    else:
        raise HTTPException(status_code=400, detail="Unknown action")

    logger.info(f"Admin {admin.id} applied {action_in.action} to user {user.id}")
    return {"user": user}


@router.get("/user-reminders", response_model=schemas.ReminderList)
def read_user_reminders(
    *,
    db: Session = Depends(get_db),
    _: models.User = Depends(deps.get_current_active_admin),
    id: Optional[str] = Query(None),
) -> Any:
    """Admin-only: a user's reminders, latest due date first."""
    user = _get_user_or_404(db, _parse_user_id(id))
    return {"reminders": crud.reminder.list_for_user(db, user_id=user.id)}
