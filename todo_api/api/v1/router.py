# todo_api/api/v1/router.py
from fastapi import APIRouter
from todo_api.api.v1 import auth, todos

api_router = APIRouter()

# -------- rotas públicas (register/login/refresh-token/logout) --------
api_router.include_router(auth.router, tags=["auth"])

# -------- rotas protegidas por Bearer --------
api_router.include_router(todos.router, prefix="/todos", tags=["todos"])
