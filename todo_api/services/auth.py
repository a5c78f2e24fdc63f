# todo_api/services/auth.py
"""
Fluxo de autenticação: register, login, refresh e logout.

Não existe tabela de sessões. Um usuário está "autenticado" enquanto tiver
um access token não expirado; o refresh token só serve enquanto estiver no
conjunto mantido por ``todo_api.core.tokens``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from todo_api.core import tokens
from todo_api.core.errors import Conflict, InvalidCredentials
from todo_api.core.security_password import dummy_verify, verify_and_maybe_upgrade
from todo_api.crud.user import user_crud
from todo_api.models.user import User
from todo_api.schemas.user import UserCreate, UserLogin

logger = logging.getLogger(__name__)

LOGOUT_MESSAGE = "Logged out successfully"


def _auth_response(user: User) -> Dict[str, Any]:
    return {
        "token": tokens.issue_access_token(user.id),
        "refresh_token": tokens.issue_refresh_token(user.id),
        "user": {"id": user.id, "name": user.name, "email": user.email},
    }


def register(db: Session, body: UserCreate) -> Dict[str, Any]:
    if user_crud.get_by_email(db, body.email):
        raise Conflict()
    user = user_crud.create(db, body)
    logger.info("registered user id=%s", user.id)
    return _auth_response(user)


def login(db: Session, body: UserLogin) -> Dict[str, Any]:
    user = user_crud.get_by_email(db, body.email)
    if user is None:
        dummy_verify()
        logger.warning("failed login attempt")
        raise InvalidCredentials()

    ok, new_hash = verify_and_maybe_upgrade(body.password, user.password_hash)
    if not ok:
        logger.warning("failed login attempt")
        raise InvalidCredentials()
    if new_hash:
        user_crud.set_password_hash(db, user, new_hash)

    return _auth_response(user)


def _as_token(raw: Any) -> str:
    return raw if isinstance(raw, str) else ""


def refresh(refresh_token: Optional[Any]) -> Dict[str, str]:
    user_id = tokens.verify_refresh_token(_as_token(refresh_token))
    return {"token": tokens.issue_access_token(user_id)}


def logout(refresh_token: Optional[Any]) -> Dict[str, str]:
    tokens.revoke(_as_token(refresh_token))
    logger.info("logout requested")
    return {"message": LOGOUT_MESSAGE}
