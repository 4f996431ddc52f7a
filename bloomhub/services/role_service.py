# bloomhub/services/role_service.py
import logging

from sqlmodel import Session

from bloomhub.core.actor import Actor
from bloomhub.core.escalation import AdminEscalationPolicy
from bloomhub.repositories.role_repo import RoleRepository

logger = logging.getLogger(__name__)

ROLES = ("customer", "florist", "admin")


class RoleService:
    """
    Role resolution.

    Role grants are keyed by email, so one person can be customer and
    admin at the same time. Grants are idempotent.
    """

    def __init__(self, repo: RoleRepository):
        self.repo = repo

    def roles_for(self, session: Session, email: str) -> set[str]:
        """All roles granted to `email`; may be empty."""
        return set(self.repo.list_roles(session, email))

    def grant(self, session: Session, email: str, role: str) -> None:
        """Grant `role`. Granting an already-held role is a no-op."""
        if role not in ROLES:
            raise ValueError(f"unknown role: {role}")
        self.repo.grant(session, email, role)

    def revoke(self, session: Session, email: str, role: str) -> None:
        self.repo.revoke(session, email, role)

    def revoke_all(self, session: Session, email: str) -> None:
        self.repo.revoke_all(session, email)

    def is_admin(
        self,
        session: Session,
        actor: Actor,
        policy: AdminEscalationPolicy,
    ) -> bool:
        """
        Admin check.

        Order:
          1. florist tokens never pass
          2. admin tokens pass only for a configured operator subject
          3. escalation allow-list (email or subject), no DB access
          4. primary role column of the users row
          5. "admin" role grant
        """
        if actor.kind == "florist":
            return False
        if actor.kind == "admin":
            if policy.operator(actor.subject) is not None:
                return True
            # Operator removed from config while its token is still live
            logger.warning("Admin token for unlisted subject %s", actor.subject)
            return False
        if policy.matches(email=actor.email, subject=actor.subject):
            return True
        if actor.primary_role == "admin":
            return True
        return "admin" in self.roles_for(session, actor.email)
