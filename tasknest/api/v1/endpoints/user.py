import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from tasknest import crud, models, schemas
from tasknest.api import deps
from tasknest.core.config import settings
from tasknest.core.security import verify_password
from tasknest.db.session import get_db
from tasknest.services.avatar import AvatarError, build_avatar_data_url, describe_avatar
from tasknest.utils.timezone import format_long_date, format_long_datetime, to_local

logger = logging.getLogger(__name__)

router = APIRouter()

# Mounted only in development
debug_router = APIRouter()


def _profile(user: models.User) -> schemas.Profile:
    return schemas.Profile(
        id=str(user.id),
        email=user.email,
        name=user.name,
        nickname=user.nickname or "",
        image_url=user.avatar or "",
    )


@router.get("/profile", response_model=schemas.Profile)
def read_profile(
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    return _profile(current_user)


@router.put("/profile", response_model=schemas.Profile)
async def update_profile(
    request: Request,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """
    Update name, nickname and profile picture from a multipart form.

    Fields: ``name`` (required), ``nickname`` (an empty value clears it, an
    absent field keeps it), ``image`` (JPG, PNG or GIF up to 5MB).
    """
    form = await request.form()
    name = form.get("name")
    if not isinstance(name, str) or not name.strip():
        raise HTTPException(status_code=400, detail="Name is required")

    update_data = {"name": name.strip()}

    nickname = form.get("nickname")
    if isinstance(nickname, str):
        update_data["nickname"] = nickname.strip()

    image = form.get("image")
    if isinstance(image, UploadFile) and image.filename:
        content = await image.read()
        if content:
            try:
                update_data["avatar"] = build_avatar_data_url(content, image.content_type)
            except AvatarError as e:
                raise HTTPException(status_code=400, detail=str(e))

    user = crud.user.update(db, db_obj=current_user, obj_in=update_data)
    logger.info(f"User {user.id} updated profile (fields: {', '.join(sorted(update_data))})")
    return _profile(user)


@router.post("/change-password", response_model=schemas.MessageResponse)
def change_password(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    password_in: schemas.PasswordChange,
) -> Any:
    if not password_in.current_password or not password_in.new_password:
        raise HTTPException(status_code=400, detail="Current password and new password are required")
    if len(password_in.new_password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
        )
    if not verify_password(password_in.current_password, current_user.hashed_password):
        logger.warning(f"Wrong current password on password change for user {current_user.id}")
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    crud.user.set_password(db, db_obj=current_user, password=password_in.new_password)
    logger.info(f"User {current_user.id} changed password")
    return {"message": "Password changed successfully"}


@router.get("/account-info", response_model=schemas.AccountInfo)
def read_account_info(
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """Member-since and last-login dates formatted for display."""
    last_seen = current_user.last_login_at or current_user.updated_at
    return schemas.AccountInfo(
        member_since=format_long_date(to_local(current_user.created_at)),
        last_login=format_long_datetime(to_local(last_seen)),
        status="Active" if current_user.is_active else "Inactive",
    )


@debug_router.get("/debug", response_model=schemas.UserDebug)
def read_user_debug(
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    avatar = current_user.avatar or ""
    return schemas.UserDebug(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        nickname=current_user.nickname,
        role=current_user.role,
        is_active=current_user.is_active,
        has_avatar=bool(avatar),
        avatar_length=len(avatar),
        avatar_type=describe_avatar(avatar),
        created_at=current_user.created_at,
        updated_at=current_user.updated_at,
    )
