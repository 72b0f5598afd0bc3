from sqlalchemy.orm import Session
from typing import Optional

from .models import User


class UserRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def add(self, user: User) -> User:
        user.email = user.email.lower()
        self.db.add(user)
        return user
