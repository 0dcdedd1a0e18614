from typing import Any, Dict, List, Optional, Union
from sqlalchemy.orm import Session
from tasknest.core.security import get_password_hash, verify_password
from tasknest.crud.base import CRUDBase
from tasknest.models.user import User
from tasknest.schemas.user import UserCreate, UserUpdate
from tasknest.utils.timezone import utcnow


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        db_obj = User(
            email=obj_in.email,
            name=obj_in.name,
            nickname=obj_in.nickname,
            hashed_password=get_password_hash(obj_in.password),
            role=obj_in.role,
            is_active=obj_in.is_active,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def list_newest_first(self, db: Session) -> List[User]:
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def count(self, db: Session) -> int:
        return db.query(User).count()

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def update(self, db: Session, *, db_obj: User, obj_in: Union[UserUpdate, Dict[str, Any]]) -> User:
        if isinstance(obj_in, dict):
            update_data = dict(obj_in)
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        if "password" in update_data:
            password = update_data.pop("password")
            if password:
                update_data["hashed_password"] = get_password_hash(password)
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def set_password(self, db: Session, *, db_obj: User, password: str) -> User:
        return super().update(db, db_obj=db_obj, obj_in={"hashed_password": get_password_hash(password)})

    def record_login(self, db: Session, *, db_obj: User) -> User:
        return super().update(db, db_obj=db_obj, obj_in={"last_login_at": utcnow()})

    def is_active(self, user: User) -> bool:
        return bool(user.is_active)

    def is_admin(self, user: User, admin_email: str) -> bool:
        return user.role == "ADMIN" or user.email == admin_email

    def ensure_admin(self, db: Session, *, email: str, password: str, name: str) -> tuple[User, bool]:
        """Create the admin account if missing. Returns (user, created)."""
        existing = self.get_by_email(db, email=email)
        if existing:
            return existing, False
        admin = self.create(
            db,
            obj_in=UserCreate(email=email, name=name, password=password, role="ADMIN", is_active=True),
        )
        return admin, True


# Create instance that can be imported directly
user = CRUDUser(User)
