# todo_api/api/v1/todos.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from todo_api.api.deps import get_current_user
from todo_api.db.session import get_db
from todo_api.models.user import User
from todo_api.schemas.todo import TodoBatchCreate, TodoBatchOut, TodoCreate, TodoOut, TodoPage, TodoUpdate
from todo_api.services import todos as todo_service

router = APIRouter()

@router.get("", response_model=TodoPage)
def list_todos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    title: Optional[str] = Query(None, description="Filtra por substring do título"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return todo_service.list_todos(
        db, user.id, page=page, limit=limit, title=title, sort_by=sort_by, sort_order=sort_order
    )

@router.post("", response_model=TodoOut, status_code=status.HTTP_201_CREATED)
def create_todo(
    body: TodoCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return todo_service.create_todo(db, user.id, body)

@router.post("/batch", response_model=TodoBatchOut, status_code=status.HTTP_201_CREATED)
def batch_create_todos(
    body: TodoBatchCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return todo_service.batch_create_todos(db, user.id, body.todos)

@router.put("/{todo_id}", response_model=TodoOut)
def update_todo(
    body: TodoUpdate,
    todo_id: int = Path(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return todo_service.update_todo(db, user.id, todo_id, body)

@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: int = Path(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    todo_service.delete_todo(db, user.id, todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
