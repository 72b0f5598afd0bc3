# storefront/users/models.py

from sqlalchemy import Column, String, DateTime
import uuid
from datetime import datetime, timezone
from ..database.core import Base


def _now():
    return datetime.now(timezone.utc)


class User(Base):
    """
    SQLAlchemy model representing a user in the database.
    """
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=False, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_now)
    updated_at = Column(DateTime, nullable=False, default=_now, onupdate=_now)

    def __repr__(self):
        """String representation of the User object."""
        return f"<User(email='{self.email}', first_name='{self.first_name}', last_name='{self.last_name}')>"
