# storefront/auth/controller.py
from typing import Annotated, Optional
from fastapi import APIRouter, Depends
from starlette import status
import logging

from ..database.core import DbSession
from ..schemas.common import ApiResponse
from ..schemas.user import AuthPayload, LoginRequest, SignupRequest, UserOut
from . import service

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/auth', tags=['auth'])


def _auth_payload(user) -> AuthPayload:
    token = service.create_access_token(email=user.email, user_id=user.id)
    return AuthPayload(token=token, user=UserOut.model_validate(user))


@router.post("/signup", response_model=ApiResponse[AuthPayload], status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest, db: DbSession):
    """Create an account and return a token for it."""
    user = service.register_user(db, request)
    return ApiResponse(data=_auth_payload(user))


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(request: LoginRequest, db: DbSession):
    """Exchange email and password for a bearer token."""
    user = service.authenticate_user(db, request.email, request.password)
    logger.info(f"User {user.email} logged in")
    return ApiResponse(data=_auth_payload(user))


@router.get("/profile", response_model=ApiResponse[UserOut])
async def get_profile(current_user: service.CurrentUser, db: DbSession):
    """Return the authenticated user's profile."""
    user = service.get_profile(db, current_user.user_id)
    return ApiResponse(data=UserOut.model_validate(user))


@router.post("/logout")
async def logout(
    db: DbSession,
    current_user: service.OptionalUser,
    token: Annotated[Optional[str], Depends(service.oauth2_bearer)],
):
    """Revoke the presented token. Succeeds even without a valid token."""
    if current_user and token:
        service.revoke_token(db, token)
    return {"success": True, "message": "Logged out"}
