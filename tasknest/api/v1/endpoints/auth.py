import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from tasknest import crud, schemas
from tasknest.api import deps
from tasknest.core.config import settings
from tasknest.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=schemas.RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(get_db),
    response: Response,
    user_in: schemas.RegisterRequest,
) -> Any:
    """
    Create a new account and sign it in.
    """
    name = (user_in.name or "").strip()
    email = (user_in.email or "").strip()
    password = user_in.password or ""
    if not name or not email or not password:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
        )
    try:
        email = schemas.normalize_email(email)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid email address")
    user_create = schemas.UserCreate(name=name, email=email, password=password)

    if crud.user.get_by_email(db, email=user_create.email):
        raise HTTPException(status_code=409, detail="User already exists")

    user = crud.user.create(db, obj_in=user_create)
    logger.info(f"Registered user {user.id} ({user.email})")
    deps.set_session_cookies(response, user)
    return {
        "message": "User registered successfully",
        "user": {"id": user.id, "email": user.email},
    }


@router.post("/login", response_model=schemas.LoginResponse)
def login(
    *,
    db: Session = Depends(get_db),
    response: Response,
    credentials: schemas.LoginRequest,
) -> Any:
    """
    Check email and password and set the session cookies.
    """
    email = (credentials.email or "").strip()
    password = credentials.password or ""
    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    # Look the address up in the same form register stored it
    try:
        email = schemas.normalize_email(email)
    except ValidationError:
        logger.warning(f"Failed login attempt with malformed email {email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")
    user = crud.user.authenticate(db, email=email, password=password)
    if not user:
        logger.warning(f"Failed login attempt for {email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not crud.user.is_active(user):
        logger.warning(f"Login attempt on deactivated account {user.id}")
        raise HTTPException(status_code=403, detail="Account is deactivated")

    user = crud.user.record_login(db, db_obj=user)
    deps.set_session_cookies(response, user)
    logger.info(f"User {user.id} logged in")
    return {
        "message": "Login successful",
        "user": {"id": user.id, "email": user.email, "name": user.name, "role": user.role},
    }


@router.post("/logout", response_model=schemas.MessageResponse)
def logout(response: Response) -> Any:
    """Expire every identity cookie, including the legacy ones."""
    deps.clear_session_cookies(response)
    return {"message": "Logged out successfully"}
