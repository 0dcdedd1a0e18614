import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from tasknest import crud, models
from tasknest.core.config import settings
from tasknest.core.security import decode_session_email, encode_session_email
from tasknest.db.session import get_db

logger = logging.getLogger(__name__)

# The legacy cookie that still carries an email; "auth-token" is only ever expired
LEGACY_EMAIL_COOKIE = "user-email"


def get_session_email(request: Request) -> Optional[str]:
    """Email from the session cookie, falling back to the legacy cookie name."""
    raw = request.cookies.get(settings.SESSION_COOKIE_NAME) or request.cookies.get(LEGACY_EMAIL_COOKIE)
    if not raw:
        return None
    email = decode_session_email(raw)
    return email or None


def get_current_user(
    request: Request, db: Session = Depends(get_db)
) -> models.User:
    email = get_session_email(request)
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    user = crud.user.get_by_email(db, email=email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_current_active_user(
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    if not crud.user.is_active(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")
    return current_user


def get_current_active_admin(
    request: Request, db: Session = Depends(get_db)
) -> models.User:
    email = get_session_email(request)
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    user = crud.user.get_by_email(db, email=email)
    if not user or not crud.user.is_admin(user, settings.ADMIN_EMAIL) or not crud.user.is_active(user):
        logger.warning(f"Admin access denied for {email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user


def set_session_cookies(response: Response, user: models.User) -> None:
    """Identity cookies are readable by the browser client, so they are not HttpOnly."""
    cookie_options = dict(
        max_age=settings.SESSION_COOKIE_MAX_AGE,
        path="/",
        httponly=False,
        samesite="lax",
        secure=settings.secure_cookies,
    )
    response.set_cookie(settings.SESSION_COOKIE_NAME, encode_session_email(user.email), **cookie_options)
    response.set_cookie(settings.USER_ID_COOKIE_NAME, str(user.id), **cookie_options)


def clear_session_cookies(response: Response) -> None:
    names = [settings.SESSION_COOKIE_NAME, settings.USER_ID_COOKIE_NAME, *settings.LEGACY_SESSION_COOKIE_NAMES]
    for name in names:
        response.delete_cookie(name, path="/", samesite="lax", secure=settings.secure_cookies)
