from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.execute(select(User).where(User.email == email)).scalars().first()

    def create_or_update(self, name: str, email: str, password_hash: str) -> User:
        u = self.get_by_email(email)
        if u:
            u.name = name
            u.password = password_hash
        else:
            u = User(name=name, email=email, password=password_hash)
            self.db.add(u)
        self.db.flush()
        return u
