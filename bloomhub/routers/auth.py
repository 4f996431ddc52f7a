# bloomhub/routers/auth.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from bloomhub.core.actor import Actor
from bloomhub.core.auth import require_customer
from bloomhub.core.escalation import AdminEscalationPolicy, get_escalation_policy
from bloomhub.core.security import TokenService, get_token_service
from bloomhub.database import get_session
from bloomhub.repositories.florist_repo import FloristRepository
from bloomhub.repositories.role_repo import RoleRepository
from bloomhub.repositories.user_repo import UserRepository
from bloomhub.schemas.auth import (
    CustomerAuthResponse,
    CustomerRegister,
    FloristAuthResponse,
    FloristRegister,
    LoginRequest,
)
from bloomhub.schemas.florist import FloristAuthRead
from bloomhub.schemas.user import ActorRead
from bloomhub.services.auth_service import AuthService
from bloomhub.services.florist_service import FloristService
from bloomhub.services.role_service import RoleService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AuthService(UserRepository(), RoleService(RoleRepository()))
florist_service = FloristService(FloristRepository())


# -------- Customers --------


@router.post(
    "/customer/register",
    response_model=CustomerAuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_customer(
    payload: CustomerRegister,
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
):
    """
    Create a customer account and return a session token.

    Errors:
      - 400 missing fields, invalid email or email already registered
    """
    return service.register_customer(session, payload, tokens, policy)


@router.post("/customer/login", response_model=CustomerAuthResponse)
def login_customer(
    payload: LoginRequest,
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
):
    """
    Exchange email/password for a token.

    Errors:
      - 401 "Invalid credentials" for unknown email and wrong password alike
    """
    return service.login_customer(session, payload, tokens, policy)


@router.post("/login", response_model=CustomerAuthResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
):
    """Generic login; same contract as `/auth/customer/login`."""
    return service.login_customer(session, payload, tokens, policy)


@router.get("/user", response_model=ActorRead)
def read_current_user(
    actor: Actor = Depends(require_customer),
    session: Session = Depends(get_session),
    policy: AdminEscalationPolicy = Depends(get_escalation_policy),
):
    """
    Return the authenticated actor with all of its roles.

    Auth:
      - customer or operator token
    """
    return service.describe(session, actor, policy)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout():
    """
    Sessions are stateless; the client discards its token.

    Kept so clients have a single logout call if revocation is added.
    """
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -------- Florists --------


@router.post(
    "/florist/register",
    response_model=FloristAuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_florist(
    payload: FloristRegister,
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Create the florist login only; the storefront is set up later via
    `POST /florist/profile/setup`.
    """
    florist, token = florist_service.register(session, payload, tokens)
    return FloristAuthResponse(florist=FloristAuthRead.model_validate(florist), token=token)


@router.post("/florist/login", response_model=FloristAuthResponse)
def login_florist(
    payload: LoginRequest,
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange florist email/password for a florist token."""
    florist, token = florist_service.login(session, payload, tokens)
    return FloristAuthResponse(florist=FloristAuthRead.model_validate(florist), token=token)
