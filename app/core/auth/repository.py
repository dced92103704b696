from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import AlreadyExists
from app.shared.database.models import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def add(self, email: str, password_hash: str, role: str) -> User:
        """Stage a new user in the current transaction, caller commits"""
        if self.get_by_email(email):
            raise AlreadyExists("User with this email already exists")

        user = User(email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            # Lost a race against another registration for the same email
            self.db.rollback()
            raise AlreadyExists("User with this email already exists")
        return user
