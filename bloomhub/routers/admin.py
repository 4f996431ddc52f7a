# bloomhub/routers/admin.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from bloomhub.core.auth import require_admin
from bloomhub.core.escalation import AdminEscalationPolicy, get_escalation_policy
from bloomhub.database import get_session
from bloomhub.repositories.florist_repo import FloristRepository
from bloomhub.repositories.role_repo import RoleRepository
from bloomhub.repositories.user_repo import UserRepository
from bloomhub.schemas.florist import FloristProfileRead
from bloomhub.schemas.user import (
    AdminUserCreate,
    AdminUserCreated,
    AdminUserUpdate,
    Role,
    RoleGrantRequest,
    UserWithRolesRead,
)
from bloomhub.services.florist_service import FloristService
from bloomhub.services.role_service import RoleService
from bloomhub.services.user_service import UserService

# Every route here runs the full chain, admin check included.
router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

service = UserService(UserRepository(), RoleService(RoleRepository()))
florist_service = FloristService(FloristRepository())


# -------- Users --------


@router.get("/users", response_model=list[UserWithRolesRead])
def list_users(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all users (admin only).

    Pagination via skip/limit.
    """
    return service.list_users(session, skip, limit)


@router.get("/users/{user_id}", response_model=UserWithRolesRead)
def get_user(user_id: str, session: Session = Depends(get_session)):
    """Get a specific user by id (admin only)."""
    return service.read_user(session, user_id)


@router.post(
    "/users",
    response_model=AdminUserCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    payload: AdminUserCreate,
    session: Session = Depends(get_session),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
):
    """
    Create a user (admin only).

    When no password is supplied, `tempPassword` carries the generated one.
    """
    return service.create_user(session, payload, policy)


@router.put("/users/{user_id}", response_model=UserWithRolesRead)
def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    session: Session = Depends(get_session),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
):
    """Update name, email, primary role, verification or password (admin only)."""
    return service.update_user(session, user_id, payload, policy)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, session: Session = Depends(get_session)):
    """Delete a user and its role grants (admin only)."""
    service.delete_user(session, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -------- Role grants --------


@router.post("/users/{user_id}/roles", response_model=UserWithRolesRead)
def grant_role(
    user_id: str,
    payload: RoleGrantRequest,
    session: Session = Depends(get_session),
):
    """Grant a role; granting a held role changes nothing."""
    return service.grant_role(session, user_id, payload.role)


@router.delete("/users/{user_id}/roles/{role}", response_model=UserWithRolesRead)
def revoke_role(user_id: str, role: Role, session: Session = Depends(get_session)):
    """Remove one role grant."""
    return service.revoke_role(session, user_id, role)


# -------- Florists --------


@router.get("/florists", response_model=list[FloristProfileRead])
def list_florists(session: Session = Depends(get_session)):
    """Every registered florist with its profile state (admin only)."""
    return florist_service.list_all(session)
