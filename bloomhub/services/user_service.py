# bloomhub/services/user_service.py
import logging
import secrets
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from bloomhub.core.errors import DuplicateEmail, NotFound
from bloomhub.core.escalation import AdminEscalationPolicy
from bloomhub.core.security import hash_password
from bloomhub.models.user import User
from bloomhub.repositories.user_repo import UserRepository
from bloomhub.schemas.user import (
    AdminUserCreate,
    AdminUserCreated,
    AdminUserUpdate,
    UserWithRolesRead,
)
from bloomhub.services.role_service import RoleService

logger = logging.getLogger(__name__)


class UserService:
    """
    Admin user management.

    Responsibilities:
      - CRUD on users for admin tooling
      - keep role grants in step with the primary role and email
      - delete role grants together with the user
    """

    def __init__(self, repo: UserRepository, roles: RoleService):
        self.repo = repo
        self.roles = roles

    def _with_roles(self, session: Session, user: User) -> UserWithRolesRead:
        read = UserWithRolesRead.model_validate(user)
        read.roles = sorted(self.roles.roles_for(session, user.email))
        return read

    def list_users(self, session: Session, skip: int, limit: int) -> list[UserWithRolesRead]:
        """List users with pagination (admin only)."""
        return [self._with_roles(session, u) for u in self.repo.list(session, skip=skip, limit=limit)]

    def get_user(self, session: Session, user_id: str) -> User:
        """
        Get a user by id (admin only).

        Raises:
            NotFound(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def read_user(self, session: Session, user_id: str) -> UserWithRolesRead:
        return self._with_roles(session, self.get_user(session, user_id))

    def create_user(
        self,
        session: Session,
        payload: AdminUserCreate,
        policy: AdminEscalationPolicy,
    ) -> AdminUserCreated:
        """
        Create a user on behalf of an admin.

        Without a password a temporary one is generated and returned once.
        Operator emails are reserved.
        """
        email = payload.email.strip().lower()
        if policy.is_operator_email(email) or self.repo.get_by_email(session, email) is not None:
            raise DuplicateEmail()

        temp_password = None
        password = payload.password
        if not password:
            temp_password = secrets.token_urlsafe(9)
            password = temp_password

        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
            is_verified=True,
        )
        try:
            self.repo.add(session, user)
            self.roles.grant(session, email, payload.role)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise DuplicateEmail()
        session.refresh(user)

        logger.info("Admin created user: id=%s role=%s", user.id, user.role)
        created = AdminUserCreated.model_validate(user)
        created.temp_password = temp_password
        return created

    def update_user(
        self,
        session: Session,
        user_id: str,
        payload: AdminUserUpdate,
        policy: AdminEscalationPolicy,
    ) -> UserWithRolesRead:
        """
        Partial update (admin only).

        - email change moves the user's role grants to the new email
        - role change grants the new primary role; moving off "admin"
          also revokes the admin grant, other grants stay
        - blank password leaves the hash unchanged
        """
        user = self.get_user(session, user_id)

        try:
            if payload.email is not None:
                new_email = payload.email.strip().lower()
                if new_email != user.email:
                    taken = self.repo.get_by_email(session, new_email) is not None
                    if taken or policy.is_operator_email(new_email):
                        raise DuplicateEmail()
                    for role in self.roles.roles_for(session, user.email):
                        self.roles.grant(session, new_email, role)
                    self.roles.revoke_all(session, user.email)
                    user.email = new_email

            if payload.first_name is not None:
                user.first_name = payload.first_name
            if payload.last_name is not None:
                user.last_name = payload.last_name
            if payload.is_verified is not None:
                user.is_verified = payload.is_verified
            if payload.role is not None:
                if user.role == "admin" and payload.role != "admin":
                    self.roles.revoke(session, user.email, "admin")
                user.role = payload.role
                self.roles.grant(session, user.email, payload.role)
            if payload.password and payload.password.strip():
                user.password_hash = hash_password(payload.password)

            user.updated_at = datetime.now(timezone.utc)
            self.repo.add(session, user)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise DuplicateEmail()
        session.refresh(user)
        return self._with_roles(session, user)

    def delete_user(self, session: Session, user_id: str) -> None:
        """Delete a user and every role grant of its email (admin only)."""
        user = self.get_user(session, user_id)
        self.roles.revoke_all(session, user.email)
        self.repo.delete(session, user)
        session.commit()
        logger.info("Admin deleted user: id=%s", user_id)

    def grant_role(self, session: Session, user_id: str, role: str) -> UserWithRolesRead:
        user = self.get_user(session, user_id)
        self.roles.grant(session, user.email, role)
        session.commit()
        return self._with_roles(session, user)

    def revoke_role(self, session: Session, user_id: str, role: str) -> UserWithRolesRead:
        user = self.get_user(session, user_id)
        self.roles.revoke(session, user.email, role)
        session.commit()
        return self._with_roles(session, user)
