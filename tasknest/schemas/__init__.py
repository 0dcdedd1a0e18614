from .user import (
    normalize_email,
    UserCreate,
    UserUpdate,
    UserSummary,
    SessionUser,
    AdminUserView,
    Profile,
    AccountInfo,
    PasswordChange,
    UserDebug,
)
from .auth import RegisterRequest, LoginRequest, RegisterResponse, LoginResponse, MessageResponse
from .category import CategoryIn, Category, CategoryWithCount
from .reminder import (
    ReminderCreate,
    ReminderUpdate,
    Reminder,
    ReminderPage,
    ReminderList,
    ReminderStats,
    ReminderAnalytics,
)
from .admin import AdminUserCreate, AdminUserUpdate, AdminUserAction, AdminUserEnvelope, AdminUserListing
