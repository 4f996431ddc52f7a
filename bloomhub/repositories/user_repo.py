# bloomhub/repositories/user_repo.py
from sqlmodel import Session, select

from bloomhub.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic

    Write methods only flush; the calling service owns the commit so that
    multi-step writes (user + role grant) land in one transaction.
    """

    def get_by_id(self, session: Session, user_id: str) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        """Paginated user listing, newest first."""
        stmt = select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def add(self, session: Session, user: User) -> User:
        session.add(user)
        session.flush()
        return user

    def delete(self, session: Session, user: User) -> None:
        session.delete(user)
        session.flush()
