# todo_api/schemas/token.py
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from todo_api.schemas.user import UserOut

class AccessToken(BaseModel):
    token: str

class AuthTokens(AccessToken):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken")
    user: Optional[UserOut] = None

class RefreshTokenIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # qualquer coisa que não seja string conta como ausente: 401 no refresh, no-op no logout
    refresh_token: Optional[Any] = Field(default=None, alias="refreshToken")

class Message(BaseModel):
    message: str
