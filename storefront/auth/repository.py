from datetime import datetime, timezone
from sqlalchemy.orm import Session

from .models import RevokedToken


class RevokedTokenRepository:

    def __init__(self, db: Session):
        self.db = db

    def is_revoked(self, jti: str) -> bool:
        return self.db.get(RevokedToken, jti) is not None

    def revoke(self, jti: str, expires_at: datetime) -> None:
        if not self.is_revoked(jti):
            self.db.add(RevokedToken(jti=jti, expires_at=expires_at))

    def purge_expired(self) -> int:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        return self.db.query(RevokedToken).filter(RevokedToken.expires_at < now).delete()
