# todo_api/api/v1/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from todo_api.db.session import get_db
from todo_api.schemas.token import AccessToken, AuthTokens, Message, RefreshTokenIn
from todo_api.schemas.user import UserCreate, UserLogin
from todo_api.services import auth as auth_service

router = APIRouter()

# ---------- endpoints ----------
@router.post("/register", response_model=AuthTokens, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    return auth_service.register(db, body)

@router.post("/login", response_model=AuthTokens)
def login(body: UserLogin, db: Session = Depends(get_db)):
    return auth_service.login(db, body)

@router.post("/refresh-token", response_model=AccessToken)
def refresh_token(body: Optional[RefreshTokenIn] = None):
    return auth_service.refresh(body.refresh_token if body else None)

@router.post("/logout", response_model=Message)
def logout(body: Optional[RefreshTokenIn] = None):
    return auth_service.logout(body.refresh_token if body else None)
