import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_api.api.v1.router import api_router
from todo_api.core.config import settings
from todo_api.core.errors import (
    handle_http_exception,
    handle_integrity_error,
    handle_unexpected,
    handle_validation_error,
)
from todo_api.core.logging import setup_logging
from todo_api.core.ratelimit import RateLimitMiddleware
from todo_api.core.security_headers import SecurityHeadersMiddleware
from todo_api.db.bootstrap import bootstrap_database

setup_logging()
logger = logging.getLogger(__name__)

api = FastAPI(
    title="Todo API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"displayRequestDuration": True, "persistAuthorization": True},
)

# limites: 100 req/15min em tudo, 10 req/15min em register/login
api.add_middleware(
    RateLimitMiddleware,
    limit=settings.RATE_LIMIT_MAX,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    auth_limit=settings.AUTH_RATE_LIMIT_MAX,
    auth_paths=(f"{settings.API_PREFIX}/register", f"{settings.API_PREFIX}/login"),
)
api.add_middleware(SecurityHeadersMiddleware)
api.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# métricas /metrics (Prometheus)
Instrumentator().instrument(api).expose(api, include_in_schema=False, should_gzip=True)

api.include_router(api_router, prefix=settings.API_PREFIX)

api.add_exception_handler(StarletteHTTPException, handle_http_exception)
api.add_exception_handler(RequestValidationError, handle_validation_error)
api.add_exception_handler(IntegrityError, handle_integrity_error)
api.add_exception_handler(Exception, handle_unexpected)

@api.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}

@api.on_event("startup")
def startup():
    bootstrap_database()

def run() -> None:
    uvicorn.run(api, host=settings.HOST, port=settings.PORT, log_config=None)

if __name__ == "__main__":
    run()
