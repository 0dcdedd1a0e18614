from typing import Optional
from pydantic import BaseModel

from tasknest.schemas.user import SessionUser, UserSummary


# Request schemas; presence is checked by the handlers to keep their error messages
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# Response schemas
class RegisterResponse(BaseModel):
    message: str
    user: UserSummary


class LoginResponse(BaseModel):
    message: str
    user: SessionUser


class MessageResponse(BaseModel):
    message: str
