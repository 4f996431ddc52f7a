# bloomhub/repositories/role_repo.py
from datetime import datetime, timezone

from sqlalchemy import delete, func
from sqlmodel import Session, select

from bloomhub.models.user import UserRole
from bloomhub.repositories.upsert import dialect_insert


class RoleRepository:
    """Data access for (email, role) grants."""

    def list_roles(self, session: Session, email: str) -> list[str]:
        stmt = (
            select(UserRole.role)
            .where(UserRole.user_email == email)
            .order_by(UserRole.role)
        )
        return list(session.exec(stmt).all())

    def count(self, session: Session, email: str, role: str) -> int:
        """Number of stored rows for one (email, role) pair; 0 or 1."""
        stmt = (
            select(func.count())
            .select_from(UserRole)
            .where(UserRole.user_email == email, UserRole.role == role)
        )
        return session.exec(stmt).one()

    def grant(self, session: Session, email: str, role: str) -> None:
        """Insert the grant; an existing (email, role) pair is left untouched."""
        stmt = (
            dialect_insert(session, UserRole)
            .values(
                user_email=email,
                role=role,
                created_at=datetime.now(timezone.utc),
            )
            .on_conflict_do_nothing(index_elements=["user_email", "role"])
        )
        session.execute(stmt)

    def revoke(self, session: Session, email: str, role: str) -> None:
        stmt = delete(UserRole).where(UserRole.user_email == email, UserRole.role == role)
        session.execute(stmt)

    def revoke_all(self, session: Session, email: str) -> None:
        session.execute(delete(UserRole).where(UserRole.user_email == email))
