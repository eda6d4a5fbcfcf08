from sqlalchemy.orm import Session

from backend.models.user import User


class UserStore:
    """Read-only lookups of user records."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)
