from datetime import datetime
from typing import Optional

from pydantic import EmailStr

from .common import CamelModel, RequestModel


class SignupRequest(RequestModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str


class LoginRequest(RequestModel):
    email: str
    password: str


class UserOut(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthPayload(CamelModel):
    token: str
    user: UserOut


class TokenData(CamelModel):
    user_id: str
    email: Optional[str] = None
    jti: Optional[str] = None
