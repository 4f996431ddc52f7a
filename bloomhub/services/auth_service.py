# bloomhub/services/auth_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from bloomhub.core.actor import Actor
from bloomhub.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidEmail,
    MissingFields,
)
from bloomhub.core.escalation import AdminEscalationPolicy
from bloomhub.core.security import TokenService, hash_password, verify_password
from bloomhub.models.user import User
from bloomhub.repositories.user_repo import UserRepository
from bloomhub.schemas.auth import CustomerAuthResponse, CustomerRegister, LoginRequest
from bloomhub.schemas.base import is_valid_email, missing_fields
from bloomhub.schemas.user import ActorRead, UserRead
from bloomhub.services.role_service import RoleService

logger = logging.getLogger(__name__)

REGISTER_REQUIRED = ("email", "password", "first_name", "last_name")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class AuthService:
    """
    Customer credentials and sessions.

    Responsibilities:
      - registration (user row + "customer" grant, one transaction)
      - credential verification with a single generic failure
      - token issuance
      - describing the current actor for `GET /auth/user`
    """

    def __init__(self, repo: UserRepository, roles: RoleService):
        self.repo = repo
        self.roles = roles

    # ----- Credentials -----

    def register_customer(
        self,
        session: Session,
        payload: CustomerRegister,
        tokens: TokenService,
        policy: AdminEscalationPolicy,
    ) -> CustomerAuthResponse:
        """
        Create a customer and grant the "customer" role.

        Raises:
            MissingFields(400): email/password/firstName/lastName absent.
            InvalidEmail(400): email is not a syntactically valid address.
            DuplicateEmail(400): a user with this email already exists, or
                the email belongs to an operator account.
        """
        missing = missing_fields(payload, REGISTER_REQUIRED)
        if missing:
            raise MissingFields(missing)

        email = normalize_email(payload.email)
        if not is_valid_email(email):
            raise InvalidEmail()
        if policy.is_operator_email(email) or self.repo.get_by_email(session, email) is not None:
            raise DuplicateEmail("Customer")

        user = User(
            email=email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name.strip(),
            last_name=payload.last_name.strip(),
            phone=payload.phone,
            role="customer",
        )
        try:
            self.repo.add(session, user)
            self.roles.grant(session, email, "customer")
            session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            session.rollback()
            raise DuplicateEmail("Customer")
        session.refresh(user)

        logger.info("Customer registered: id=%s", user.id)
        return CustomerAuthResponse(
            user=UserRead.model_validate(user),
            token=tokens.issue_customer(user.id, user.email),
        )

    def verify_customer(self, session: Session, email: str | None, password: str | None) -> User:
        """
        Return the user whose credentials match.

        Raises:
            InvalidCredentials(401): unknown email and wrong password alike.
        """
        user = self.repo.get_by_email(session, normalize_email(email))
        if user is None or not verify_password(password or "", user.password_hash):
            raise InvalidCredentials()
        return user

    def login_customer(
        self,
        session: Session,
        payload: LoginRequest,
        tokens: TokenService,
        policy: AdminEscalationPolicy,
    ) -> CustomerAuthResponse:
        """
        Customer login.

        Configured operator accounts are checked first and receive an
        admin token; everyone else goes through the users table. Any
        failure is the same 401.
        """
        missing = missing_fields(payload, ("email", "password"))
        if missing:
            raise MissingFields(missing)

        operator = policy.authenticate_operator(payload.email, payload.password)
        if operator is not None:
            logger.warning("Operator login: subject=%s", operator.subject)
            return CustomerAuthResponse(
                user=UserRead(
                    id=operator.subject,
                    email=operator.email,
                    first_name=operator.first_name,
                    last_name=operator.last_name,
                    role="admin",
                    is_verified=True,
                ),
                token=tokens.issue_admin(operator.subject, operator.email),
            )

        user = self.verify_customer(session, payload.email, payload.password)
        logger.info("Customer login: id=%s", user.id)
        return CustomerAuthResponse(
            user=UserRead.model_validate(user),
            token=tokens.issue_customer(user.id, user.email),
        )

    # ----- Current actor -----

    def describe(
        self,
        session: Session,
        actor: Actor,
        policy: AdminEscalationPolicy,
    ) -> ActorRead:
        """Resolved actor with its granted roles and the admin verdict."""
        is_admin = self.roles.is_admin(session, actor, policy)
        if actor.kind == "admin":
            roles = ["admin", "customer", "florist"]
        else:
            roles = sorted(self.roles.roles_for(session, actor.email))

        return ActorRead(
            id=actor.subject,
            email=actor.email,
            first_name=actor.first_name,
            last_name=actor.last_name,
            role="admin" if actor.kind == "admin" else actor.primary_role,
            roles=roles,
            is_admin=is_admin,
            kind=actor.kind,
        )
