# bloomhub/services/florist_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from bloomhub.core.errors import (
    AuthRecordNotFound,
    DuplicateEmail,
    InvalidCredentials,
    InvalidEmail,
    MissingFields,
)
from bloomhub.core.security import TokenService, hash_password, verify_password
from bloomhub.models.florist import BusinessProfile, FloristAuth
from bloomhub.repositories.florist_repo import FloristRepository
from bloomhub.schemas.auth import FloristRegister, LoginRequest
from bloomhub.schemas.base import is_valid_email, missing_fields
from bloomhub.schemas.florist import (
    BusinessProfileRead,
    FloristAuthRead,
    FloristProfileRead,
    ProfileSetup,
)

logger = logging.getLogger(__name__)

REGISTER_REQUIRED = ("email", "password", "first_name", "last_name")
PROFILE_REQUIRED = ("business_name", "address", "city", "state", "zip_code")


def is_profile_complete(business: BusinessProfile | None) -> bool:
    """
    A florist is ready to be shown to customers when a business profile
    row exists AND its business name is non-blank.

    A missing row and a row with an empty name are the same state.
    Every completeness check in the codebase goes through this function.
    """
    return business is not None and bool((business.business_name or "").strip())


class FloristService:
    """
    Florist identity management.

    A florist is two records:
      - FloristAuth: created at registration, used by every auth check
      - BusinessProfile: created later by profile setup, possibly never

    States:
      Unregistered -> NoProfile -> ProfileIncomplete -> ProfileComplete
    """

    def __init__(self, repo: FloristRepository):
        self.repo = repo

    # ----- Authentication -----

    def register(
        self,
        session: Session,
        payload: FloristRegister,
        tokens: TokenService,
    ) -> tuple[FloristAuth, str]:
        """
        Create the florist auth record only. No business profile is
        created here.

        Raises:
            MissingFields(400), InvalidEmail(400), DuplicateEmail(400)
        """
        missing = missing_fields(payload, REGISTER_REQUIRED)
        if missing:
            raise MissingFields(missing)

        email = payload.email.strip().lower()
        if not is_valid_email(email):
            raise InvalidEmail()
        if self.repo.get_auth_by_email(session, email) is not None:
            raise DuplicateEmail("Florist")

        auth = FloristAuth(
            email=email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name.strip(),
            last_name=payload.last_name.strip(),
            is_verified=False,
        )
        try:
            self.repo.add_auth(session, auth)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise DuplicateEmail("Florist")
        session.refresh(auth)

        logger.info("Florist auth created: id=%s", auth.id)
        return auth, tokens.issue_florist(auth.id, auth.email)

    def verify(self, session: Session, email: str | None, password: str | None) -> FloristAuth:
        """
        Check credentials against florist_auth only.

        Raises:
            InvalidCredentials(401): unknown email or wrong password.
        """
        auth = self.repo.get_auth_by_email(session, (email or "").strip().lower())
        if auth is None or not verify_password(password or "", auth.password_hash):
            raise InvalidCredentials()
        return auth

    def login(
        self,
        session: Session,
        payload: LoginRequest,
        tokens: TokenService,
    ) -> tuple[FloristAuth, str]:
        missing = missing_fields(payload, ("email", "password"))
        if missing:
            raise MissingFields(missing)

        auth = self.verify(session, payload.email, payload.password)
        logger.info("Florist login: id=%s", auth.id)
        return auth, tokens.issue_florist(auth.id, auth.email)

    # ----- Business profile -----

    def _require_auth(self, session: Session, florist_auth_id: int) -> FloristAuth:
        auth = self.repo.get_auth_by_id(session, florist_auth_id)
        if auth is None:
            raise AuthRecordNotFound(florist_auth_id)
        return auth

    def get_profile(
        self,
        session: Session,
        florist_auth_id: int,
    ) -> tuple[FloristAuth, BusinessProfile | None]:
        """
        Load the auth record and its business profile (None if not set up).

        Raises:
            AuthRecordNotFound: no auth row for `florist_auth_id`.
        """
        auth = self._require_auth(session, florist_auth_id)
        return auth, self.repo.get_business(session, florist_auth_id)

    def read_profile(self, session: Session, florist_auth_id: int) -> FloristProfileRead:
        auth, business = self.get_profile(session, florist_auth_id)
        return self.to_read(auth, business)

    def upsert_profile(
        self,
        session: Session,
        florist_auth_id: int,
        payload: ProfileSetup,
    ) -> BusinessProfile:
        """
        Create or update the business profile of a florist.

        Raises:
            MissingFields(400): a required storefront field is absent/blank.
            AuthRecordNotFound: no auth row for `florist_auth_id`.
        """
        missing = missing_fields(payload, PROFILE_REQUIRED)
        if missing:
            raise MissingFields(missing)

        auth = self._require_auth(session, florist_auth_id)
        business = self.repo.upsert_business(session, auth, payload.model_dump())
        session.commit()
        session.refresh(business)

        logger.info(
            "Business profile saved: florist_auth_id=%s complete=%s",
            florist_auth_id,
            is_profile_complete(business),
        )
        return business

    # ----- Listings -----

    def list_public(self, session: Session) -> list[BusinessProfile]:
        """Active florists that customers may see (complete profiles only)."""
        return [
            b for b in self.repo.list_business(session, only_active=True)
            if is_profile_complete(b)
        ]

    def list_all(self, session: Session) -> list[FloristProfileRead]:
        """Every florist auth record joined with its profile (admin view)."""
        return [
            self.to_read(auth, self.repo.get_business(session, auth.id))
            for auth in self.repo.list_auth(session)
        ]

    @staticmethod
    def to_read(auth: FloristAuth, business: BusinessProfile | None) -> FloristProfileRead:
        return FloristProfileRead(
            auth=FloristAuthRead.model_validate(auth),
            business_profile=(
                BusinessProfileRead.model_validate(business) if business is not None else None
            ),
            profile_complete=is_profile_complete(business),
        )
