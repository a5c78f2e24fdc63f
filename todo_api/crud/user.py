from sqlalchemy.orm import Session
from sqlalchemy import select
from todo_api.crud.base import CRUDBase
from todo_api.models.user import User
from todo_api.schemas.user import UserCreate, UserOut, normalize_email

from todo_api.core.security_password import hash_password

class CRUDUser(CRUDBase[User, UserCreate, UserOut]):
    def create(self, db: Session, obj_in: UserCreate, extra=None) -> User:
        data = obj_in.model_dump()
        data["email"] = normalize_email(data["email"])
        data["password_hash"] = hash_password(data.pop("password"))
        if extra: data.update(extra)
        user = User(**data)
        db.add(user); db.commit(); db.refresh(user)
        return user

    def get_by_email(self, db: Session, email: str) -> User | None:
        return db.execute(select(User).where(User.email==normalize_email(email))).scalar_one_or_none()

    def set_password_hash(self, db: Session, user: User, password_hash: str) -> User:
        return self.update(db, user, {"password_hash": password_hash})

user_crud = CRUDUser(User)
