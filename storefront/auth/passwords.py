# storefront/auth/passwords.py

import re
from passlib.context import CryptContext
import logging

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

PASSWORD_RULES = (
    "Password must be at least 8 characters long and include an uppercase letter, "
    "a lowercase letter, a number, and a special character."
)
_REQUIRED_CLASSES = (r"[A-Z]", r"[a-z]", r"[0-9]", r"[!@#$%^&*(),.?\":{}|<>]")


def is_password_strong(password: str) -> bool:
    return len(password) >= 8 and all(re.search(pattern, password) for pattern in _REQUIRED_CLASSES)


def ensure_password_strong(password: str) -> None:
    """Raise ValidationError unless the password satisfies PASSWORD_RULES."""
    if not is_password_strong(password):
        raise ValidationError(PASSWORD_RULES, fields=["password"])


def hash_password(password: str) -> str:
    try:
        return bcrypt_context.hash(password)
    except Exception:
        logger.exception("Error occurred while hashing password.")
        raise


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a plain password against a stored bcrypt hash."""
    return bcrypt_context.verify(plain_password, hashed_password)
