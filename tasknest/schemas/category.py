from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class CategoryIn(BaseModel):
    """Create/update body. ``name`` is checked by the handler so a blank name gets its own message."""
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class Category(BaseModel):
    id: int
    name: str
    color: str
    icon: Optional[str] = None
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryWithCount(BaseModel):
    id: int
    name: str
    color: str
    icon: Optional[str] = None
    reminder_count: int = 0
