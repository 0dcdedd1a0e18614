from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, TypeAdapter
from datetime import datetime

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(value: str) -> str:
    """Canonical stored form of an address; raises pydantic.ValidationError when malformed."""
    return _email_adapter.validate_python(value.strip())


class UserBase(BaseModel):
    email: EmailStr
    name: str
    nickname: Optional[str] = None


class UserCreate(UserBase):
    password: str
    role: str = "USER"
    is_active: bool = True


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    nickname: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None


class UserSummary(BaseModel):
    id: int
    email: str


class SessionUser(UserSummary):
    name: str
    role: str


class AdminUserView(BaseModel):
    """User row as shown in the admin console; no password material."""
    id: int
    name: str
    email: str
    nickname: Optional[str] = None
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Profile(BaseModel):
    id: str
    email: str
    name: str
    nickname: str = ""
    image_url: str = ""


class AccountInfo(BaseModel):
    member_since: str
    last_login: str
    status: str


class PasswordChange(BaseModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class UserDebug(BaseModel):
    id: int
    email: str
    name: str
    nickname: Optional[str] = None
    role: str
    is_active: bool
    has_avatar: bool
    avatar_length: int
    avatar_type: str
    created_at: datetime
    updated_at: datetime
