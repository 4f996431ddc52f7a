# bloomhub/repositories/florist_repo.py
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Session, select

from bloomhub.models.florist import BusinessProfile, FloristAuth
from bloomhub.repositories.upsert import dialect_insert

# Columns the florist may set through profile setup
PROFILE_FIELDS = (
    "business_name",
    "address",
    "city",
    "state",
    "zip_code",
    "phone",
    "website",
    "profile_summary",
    "years_of_experience",
    "specialties",
    "services",
    "profile_image_url",
)


class FloristRepository:
    """
    Data access for the two florist tables.

    - florist_auth: credentials + personal name
    - florists:     business profile, 0..1 per auth row
    """

    # ----- Auth records -----

    def get_auth_by_id(self, session: Session, florist_id: int) -> FloristAuth | None:
        return session.get(FloristAuth, florist_id)

    def get_auth_by_email(self, session: Session, email: str) -> FloristAuth | None:
        stmt = select(FloristAuth).where(FloristAuth.email == email)
        return session.exec(stmt).first()

    def add_auth(self, session: Session, auth: FloristAuth) -> FloristAuth:
        session.add(auth)
        session.flush()
        return auth

    def list_auth(self, session: Session) -> list[FloristAuth]:
        stmt = select(FloristAuth).order_by(FloristAuth.created_at.desc())
        return list(session.exec(stmt).all())

    # ----- Business profiles -----

    def get_business(self, session: Session, florist_auth_id: int) -> BusinessProfile | None:
        stmt = (
            select(BusinessProfile)
            .where(BusinessProfile.florist_auth_id == florist_auth_id)
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()

    def list_business(self, session: Session, only_active: bool = False) -> list[BusinessProfile]:
        stmt = select(BusinessProfile).order_by(BusinessProfile.created_at.desc())
        if only_active:
            stmt = stmt.where(BusinessProfile.is_active == True)  # noqa: E712
        return list(session.exec(stmt).all())

    def upsert_business(
        self,
        session: Session,
        auth: FloristAuth,
        fields: dict[str, Any],
    ) -> BusinessProfile:
        """
        Create or update the business profile of `auth` in one statement.

        INSERT ... ON CONFLICT (florist_auth_id) DO UPDATE, so two
        concurrent setups for the same florist converge on a single row.
        """
        now = datetime.now(timezone.utc)
        data = {name: fields.get(name) for name in PROFILE_FIELDS}
        data["years_of_experience"] = data["years_of_experience"] or 0
        data["specialties"] = data["specialties"] or []
        data["services"] = data["services"] or []

        stmt = dialect_insert(session, BusinessProfile).values(
            florist_auth_id=auth.id,
            email=auth.email,
            is_active=True,
            is_featured=False,
            created_at=now,
            updated_at=now,
            **data,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["florist_auth_id"],
            set_={**data, "updated_at": now},
        )
        session.execute(stmt)

        return session.exec(
            select(BusinessProfile)
            .where(BusinessProfile.florist_auth_id == auth.id)
            .execution_options(populate_existing=True)
        ).one()
