from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from todo_api.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    todos = relationship("Todo", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
