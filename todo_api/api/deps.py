from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from todo_api.db.session import get_db
from todo_api.models.user import User
from todo_api.core.errors import Unauthorized
from todo_api.core.tokens import verify_access_token
from todo_api.crud.user import user_crud

# ----------------------------------------------------------------------
# Lê o Bearer do header Authorization (formato exato "Bearer <token>")
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise Unauthorized()
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise Unauthorized()
    return parts[1]

# ----------------------------------------------------------------------
# Usuário atual: token válido + usuário ainda existente no banco
# ----------------------------------------------------------------------
def get_current_user(
    request: Request,
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    user_id = verify_access_token(token)
    user = user_crud.get(db, user_id)
    if not user:
        raise Unauthorized("User not found")
    request.state.user = user
    return user
