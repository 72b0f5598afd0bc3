# storefront/auth/service.py

from datetime import timedelta, datetime, timezone
from typing import Annotated, Optional
from uuid import uuid4
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import jwt
from jwt import PyJWTError
import logging

from ..core.config import settings
from ..core.exceptions import (
    AuthError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    raise_invalid_token,
    raise_missing_token,
)
from ..database.core import get_db
from ..schemas.user import SignupRequest, TokenData
from ..users.models import User
from ..users.repository import UserRepository
from .passwords import ensure_password_strong, hash_password, verify_password
from .repository import RevokedTokenRepository

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches get_current_user and becomes our 401
oauth2_bearer = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)


def create_access_token(email: str, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Creates a signed access token carrying a unique id (jti) so it can be revoked."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    encode = {
        'sub': email,
        'id': str(user_id),
        'iat': now,
        'exp': expire,
        'scope': 'access_token',
        'jti': str(uuid4()),
    }
    return jwt.encode(encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and check signature, expiry and scope. Raises AuthError (403)."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except PyJWTError as e:
        logger.info(f"JWT decode error: {e}")
        raise_invalid_token()

    if payload.get('scope') != 'access_token' or not payload.get('id') or not payload.get('jti'):
        logger.warning("Token with unexpected scope or missing claims rejected")
        raise_invalid_token()
    return payload


def verify_token(db: Session, token: str) -> TokenData:
    """Decodes an access token and checks it has not been revoked by logout."""
    payload = decode_access_token(token)
    if RevokedTokenRepository(db).is_revoked(payload['jti']):
        logger.info(f"Revoked token presented for user {payload['id']}")
        raise_invalid_token()
    return TokenData(user_id=payload['id'], email=payload.get('sub'), jti=payload['jti'])


def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_bearer)],
    db: Session = Depends(get_db),
) -> TokenData:
    """FastAPI dependency: 401 without a token, 403 for a bad one."""
    if not token:
        raise_missing_token()
    return verify_token(db, token)


def get_optional_user(
    token: Annotated[Optional[str], Depends(oauth2_bearer)],
    db: Session = Depends(get_db),
) -> Optional[TokenData]:
    """Like get_current_user but never rejects; failures yield None."""
    if not token:
        return None
    try:
        return verify_token(db, token)
    except AuthError:
        return None


CurrentUser = Annotated[TokenData, Depends(get_current_user)]
OptionalUser = Annotated[Optional[TokenData], Depends(get_optional_user)]


def register_user(db: Session, request: SignupRequest) -> User:
    """Creates a user after checking password strength and email uniqueness."""
    ensure_password_strong(request.password)

    users = UserRepository(db)
    if users.find_by_email(request.email):
        raise ConflictError("Email already registered")

    user = users.add(
        User(
            email=request.email,
            first_name=request.first_name.strip(),
            last_name=request.last_name.strip(),
            password_hash=hash_password(request.password),
        )
    )
    try:
        db.commit()
    except Exception:
        logger.exception(f"Registration failed for {request.email}")
        db.rollback()
        raise
    db.refresh(user)
    logger.info(f"Registered user {user.email}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Returns the user for valid credentials; raises a 401 AuthError otherwise."""
    user = UserRepository(db).find_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Failed login attempt for {email}")
        raise AuthError("Invalid email or password", code=ErrorCode.INVALID_CREDENTIALS)
    return user


def get_profile(db: Session, user_id: str) -> User:
    user = UserRepository(db).find_by_id(user_id)
    if not user:
        logger.warning(f"Token refers to missing user {user_id}")
        raise NotFoundError("User", user_id)
    return user


def revoke_token(db: Session, token: str) -> bool:
    """Revoke a still-valid token. Returns False if it was already unusable."""
    try:
        payload = decode_access_token(token)
    except AuthError:
        return False

    revoked = RevokedTokenRepository(db)
    expires_at = datetime.fromtimestamp(payload['exp'], tz=timezone.utc).replace(tzinfo=None)
    try:
        revoked.purge_expired()
        revoked.revoke(payload['jti'], expires_at)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Revoked token {payload['jti']} for user {payload['id']}")
    return True
