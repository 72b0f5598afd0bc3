from sqlalchemy import Column, String, DateTime
from ..database.core import Base


class RevokedToken(Base):
    """Token ids revoked by logout; rows are useless once expires_at has passed."""
    __tablename__ = "revoked_tokens"

    jti = Column(String, primary_key=True)
    expires_at = Column(DateTime, nullable=False)
