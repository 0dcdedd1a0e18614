from .user import User
from .category import Category
from .reminder import Reminder
