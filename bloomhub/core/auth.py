# bloomhub/core/auth.py
"""
Authorization chain as FastAPI dependencies.

Order, for every protected route:
  1. bearer token present           -> else 401
  2. token verifies (sig + expiry)  -> else 401
  3. actor resolved from claim kind -> else 401 (subject gone)
  4. route-specific check           -> 403 (admin) / 401 (wrong token kind)

Guards only read from the database and can be retried safely.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from bloomhub.core.actor import Actor
from bloomhub.core.errors import InsufficientRole, InvalidToken
from bloomhub.core.escalation import AdminEscalationPolicy, get_escalation_policy
from bloomhub.core.security import (
    AdminClaims,
    CustomerClaims,
    FloristClaims,
    TokenService,
    get_token_service,
)
from bloomhub.database import get_session
from bloomhub.repositories.florist_repo import FloristRepository
from bloomhub.repositories.role_repo import RoleRepository
from bloomhub.repositories.user_repo import UserRepository
from bloomhub.services.role_service import RoleService

# HTTP Bearer scheme:
# - auto_error=False => missing/non-Bearer Authorization yields None,
#   so we can answer with our own 401 body.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository()
florist_repo = FloristRepository()
role_service = RoleService(RoleRepository())


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> CustomerClaims | FloristClaims | AdminClaims:
    """Steps 1-2: extract the bearer token and verify it."""
    if credentials is None or not credentials.credentials:
        raise InvalidToken("No token provided")
    return tokens.verify(credentials.credentials)


def get_current_actor(
    claims: CustomerClaims | FloristClaims | AdminClaims = Depends(get_token_claims),
    session: Session = Depends(get_session),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
) -> Actor:
    """
    Step 3: resolve the claims to an actor.

    Raises:
        InvalidToken(401): the subject no longer exists (deleted user
        with a live token, operator removed from config).
    """
    if isinstance(claims, FloristClaims):
        florist = florist_repo.get_auth_by_id(session, claims.florist_id)
        if florist is None:
            raise InvalidToken("Florist not found")
        return Actor(
            kind="florist",
            subject=str(florist.id),
            email=florist.email,
            first_name=florist.first_name,
            last_name=florist.last_name,
            primary_role="florist",
            record=florist,
        )

    if isinstance(claims, AdminClaims):
        operator = policy.operator(claims.sub)
        if operator is None:
            raise InvalidToken("User not found")
        return Actor(
            kind="admin",
            subject=operator.subject,
            email=operator.email,
            first_name=operator.first_name,
            last_name=operator.last_name,
            primary_role="admin",
            record=operator,
        )

    user = user_repo.get_by_id(session, claims.sub)
    if user is None:
        raise InvalidToken("User not found")
    return Actor(
        kind="customer",
        subject=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        primary_role=user.role,
        record=user,
    )


def require_customer(actor: Actor = Depends(get_current_actor)) -> Actor:
    """
    Accept customer (and operator) tokens only.

    A florist token is a different claim shape and is rejected even
    though it verifies.
    """
    if actor.kind == "florist":
        raise InvalidToken("Customer token required")
    return actor


def require_florist(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Accept florist tokens only."""
    if actor.kind != "florist":
        raise InvalidToken("Florist token required")
    return actor


def require_admin(
    actor: Actor = Depends(require_customer),
    session: Session = Depends(get_session),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
) -> Actor:
    """
    Step 4 for admin routes.

    Escalation allow-list first, stored roles second.

    Raises:
        InsufficientRole(403): authenticated but not an admin.
    """
    if not role_service.is_admin(session, actor, policy):
        raise InsufficientRole()
    return actor
