from typing import Any, List, Optional
from pydantic import BaseModel

from tasknest.schemas.user import AdminUserView


class AdminUserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    nickname: Optional[str] = None


class AdminUserUpdate(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    nickname: Optional[str] = None


class AdminUserAction(BaseModel):
    id: Optional[int] = None
    action: Optional[str] = None
    value: Any = None


class AdminUserEnvelope(BaseModel):
    user: AdminUserView


class AdminUserListing(BaseModel):
    users: List[AdminUserView]
