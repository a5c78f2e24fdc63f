# todo_api/services/todos.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from todo_api.core.config import settings
from todo_api.core.errors import Forbidden, NotFound
from todo_api.crud.todo import SORTABLE_COLUMNS, SORT_ORDERS, todo_crud
from todo_api.models.todo import Todo
from todo_api.schemas.todo import TodoCreate, TodoUpdate

BATCH_MESSAGE = "Todos created successfully"

# maior id que cabe na coluna INTEGER; teto de OFFSET que SQLite e Postgres aceitam
MAX_TODO_ID = 2**31 - 1
MAX_OFFSET = 2**62


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def normalize_listing(
    page: Any = None,
    limit: Any = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> tuple[int, int, str, str]:
    """Parâmetros inválidos caem nos defaults em vez de virar 400."""
    page_n = _positive_int(page, 1)
    limit_n = min(_positive_int(limit, settings.TODO_LIST_DEFAULT_LIMIT), settings.TODO_LIST_MAX_LIMIT)
    sort_by = sort_by if sort_by in SORTABLE_COLUMNS else "created_at"
    sort_order = sort_order if sort_order in SORT_ORDERS else "desc"
    return page_n, limit_n, sort_by, sort_order


def to_out(todo: Todo) -> Dict[str, Any]:
    return {"id": todo.id, "title": todo.title, "description": todo.description}


def get_owned_todo(db: Session, user_id: int, todo_id: int) -> Todo:
    """Carrega o todo e confere o dono: 404 se não existe, 403 se é de outro usuário."""
    if not 1 <= todo_id <= MAX_TODO_ID:
        raise NotFound("Todo not found")
    todo = todo_crud.get(db, todo_id)
    if todo is None:
        raise NotFound("Todo not found")
    if todo.user_id != user_id:
        raise Forbidden()
    return todo


def list_todos(
    db: Session,
    user_id: int,
    *,
    page: Any = None,
    limit: Any = None,
    title: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    page_n, limit_n, sort_by, sort_order = normalize_listing(page, limit, sort_by, sort_order)
    rows, total = todo_crud.list_for_user(
        db,
        user_id=user_id,
        limit=limit_n,
        # página além do alcance do banco: fatia vazia, total continua valendo
        offset=min((page_n - 1) * limit_n, MAX_OFFSET),
        title=title or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {"data": [to_out(t) for t in rows], "page": page_n, "limit": limit_n, "total": total}


def create_todo(db: Session, user_id: int, body: TodoCreate) -> Dict[str, Any]:
    todo = todo_crud.create(db, body, extra={"user_id": user_id})
    return to_out(todo)


def batch_create_todos(db: Session, user_id: int, items: List[TodoCreate]) -> Dict[str, Any]:
    created = todo_crud.create_many(db, items, user_id=user_id)
    return {"message": BATCH_MESSAGE, "data": [to_out(t) for t in created]}


def update_todo(db: Session, user_id: int, todo_id: int, body: TodoUpdate) -> Dict[str, Any]:
    todo = get_owned_todo(db, user_id, todo_id)
    return to_out(todo_crud.update(db, todo, body))


def delete_todo(db: Session, user_id: int, todo_id: int) -> None:
    todo = get_owned_todo(db, user_id, todo_id)
    todo_crud.remove(db, todo)
