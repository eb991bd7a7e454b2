"""
Persistence for accounts.
"""

from sqlmodel import Session, select

from app.models.user import User


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_name(self, name: str) -> User | None:
        return self.session.exec(select(User).where(User.name == name)).first()

    def add(self, user: User) -> User:
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def rollback(self) -> None:
        self.session.rollback()
