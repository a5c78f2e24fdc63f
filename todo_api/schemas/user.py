# todo_api/schemas/user.py
from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field, field_validator

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return normalize_email(v)

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return normalize_email(v)

class UserOut(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}
