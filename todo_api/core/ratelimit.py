"""Rate limiting por IP em janela fixa (um processo; não compartilhado entre instâncias)."""
from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Dict, Iterable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from todo_api.core.errors import error_body

logger = logging.getLogger(__name__)

GLOBAL_MESSAGE = "Too many requests from this IP, please try again later"
AUTH_MESSAGE = "Too many authentication attempts, please try again later"


class FixedWindowCounter:
    _PRUNE_AT = 10_000

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> Tuple[bool, int]:
        """Conta uma requisição; devolve (permitida, segundos até a janela reabrir)."""
        now = self._clock()
        with self._lock:
            start, count = self._hits.get(key, (now, 0))
            if now - start >= self.window_seconds:
                start, count = now, 0
            count += 1
            self._hits[key] = (start, count)
            if len(self._hits) > self._PRUNE_AT:
                self._prune(now)
        retry_after = max(1, math.ceil(start + self.window_seconds - now))
        return count <= self.limit, retry_after

    def _prune(self, now: float) -> None:
        stale = [k for k, (start, _) in self._hits.items() if now - start >= self.window_seconds]
        for k in stale:
            del self._hits[k]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        limit: int,
        window_seconds: int,
        auth_limit: int,
        auth_paths: Iterable[str] = (),
    ):
        super().__init__(app)
        self.global_counter = FixedWindowCounter(limit, window_seconds)
        self.auth_counter = FixedWindowCounter(auth_limit, window_seconds)
        self.auth_paths = frozenset(p.rstrip("/") for p in auth_paths)

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _reject(self, request: Request, message: str, retry_after: int) -> JSONResponse:
        logger.warning("rate limit exceeded for %s on %s", self.client_key(request), request.url.path)
        return JSONResponse(status_code=429, content=error_body(message), headers={"Retry-After": str(retry_after)})

    async def dispatch(self, request: Request, call_next):
        key = self.client_key(request)

        allowed, retry_after = self.global_counter.hit(key)
        if not allowed:
            return self._reject(request, GLOBAL_MESSAGE, retry_after)

        if request.url.path.rstrip("/") in self.auth_paths:
            allowed, retry_after = self.auth_counter.hit(key)
            if not allowed:
                return self._reject(request, AUTH_MESSAGE, retry_after)

        return await call_next(request)
