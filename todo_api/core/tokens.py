# todo_api/core/tokens.py
"""
Emissão e verificação de tokens JWT.

Access tokens são stateless (assinatura + expiração). Refresh tokens, além
disso, só valem enquanto estiverem no ``RefreshTokenStore`` do processo:
logout remove o token do conjunto. O conjunto vive em memória, portanto
reiniciar o processo invalida todos os refresh tokens emitidos.
"""
from __future__ import annotations

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol

from jose import JWTError, jwt

from todo_api.core.config import settings
from todo_api.core.errors import InvalidToken, Unauthorized

ACCESS = "access"
REFRESH = "refresh"


class RefreshTokenStore(Protocol):
    def add(self, token: str) -> None: ...
    def contains(self, token: str) -> bool: ...
    def discard(self, token: str) -> None: ...
    def clear(self) -> None: ...


class InMemoryRefreshTokenStore:
    """Conjunto thread-safe de refresh tokens emitidos e não revogados."""

    def __init__(self) -> None:
        self._tokens: set[str] = set()
        self._lock = threading.Lock()

    def add(self, token: str) -> None:
        with self._lock:
            self._tokens.add(token)

    def contains(self, token: str) -> bool:
        with self._lock:
            return token in self._tokens

    def discard(self, token: str) -> None:
        with self._lock:
            self._tokens.discard(token)

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)


refresh_tokens: RefreshTokenStore = InMemoryRefreshTokenStore()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(user_id: int, kind: str, secret: str, expires_delta: timedelta) -> str:
    now = _now()
    payload: Dict[str, Any] = {
        "id": user_id,
        "type": kind,
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=settings.ALGORITHM)


def _decode(token: str, kind: str, secret: str) -> Optional[int]:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload, dict) or payload.get("type") != kind:
        return None
    user_id = payload.get("id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    return user_id


def issue_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Access token curto (minutos), assinado com SECRET_KEY."""
    delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(user_id, ACCESS, settings.SECRET_KEY, delta)


def issue_refresh_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Refresh longo (dias), assinado com REFRESH_SECRET_KEY e registrado no conjunto válido."""
    delta = expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    token = _encode(user_id, REFRESH, settings.REFRESH_SECRET_KEY, delta)
    refresh_tokens.add(token)
    return token


def verify_access_token(token: str) -> int:
    user_id = _decode(token, ACCESS, settings.SECRET_KEY)
    if user_id is None:
        raise Unauthorized()
    return user_id


def verify_refresh_token(token: str) -> int:
    if not token or not refresh_tokens.contains(token):
        raise InvalidToken()
    user_id = _decode(token, REFRESH, settings.REFRESH_SECRET_KEY)
    if user_id is None:
        # expirado ou adulterado: não tem mais por que ficar no conjunto
        refresh_tokens.discard(token)
        raise InvalidToken()
    return user_id


def revoke(token: str) -> None:
    if token:
        refresh_tokens.discard(token)
