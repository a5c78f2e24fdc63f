# todo_api/models/__init__.py
# Base primeiro: todo_api.db.base importa os modelos e registra as tabelas no metadata.
from todo_api.db.base import Base  # noqa: F401
from todo_api.models.user import User  # noqa: F401
from todo_api.models.todo import Todo  # noqa: F401

__all__: list[str] = ["Base", "User", "Todo"]
