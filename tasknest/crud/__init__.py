from .user import user
from .category import category
from .reminder import reminder

__all__ = ["user", "category", "reminder"]
