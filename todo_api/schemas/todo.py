# todo_api/schemas/todo.py
from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

class TodoBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = ""

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v

    @field_validator("description")
    @classmethod
    def _description_default(cls, v: Optional[str]) -> str:
        return v if v is not None else ""

class TodoCreate(TodoBase):
    pass

class TodoUpdate(TodoBase):
    pass

class TodoBatchCreate(BaseModel):
    todos: List[TodoCreate] = Field(min_length=1)

class TodoOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = ""

    model_config = {"from_attributes": True}

class TodoPage(BaseModel):
    data: List[TodoOut]
    page: int
    limit: int
    total: int

class TodoBatchOut(BaseModel):
    message: str
    data: List[TodoOut]
