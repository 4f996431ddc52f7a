# bloomhub/routers/florist.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from bloomhub.core.actor import Actor
from bloomhub.core.auth import require_florist
from bloomhub.database import get_session
from bloomhub.repositories.florist_repo import FloristRepository
from bloomhub.schemas.florist import BusinessProfileRead, FloristProfileRead, ProfileSetup
from bloomhub.services.florist_service import FloristService

router = APIRouter(tags=["Florists"])

repo = FloristRepository()
service = FloristService(repo)


# -------- Florist self-service --------


@router.get("/florist/profile", response_model=FloristProfileRead)
def read_profile(
    florist: Actor = Depends(require_florist),
    session: Session = Depends(get_session),
):
    """
    Return the florist's auth fields and business profile.

    `businessProfile` is null until profile setup has been submitted;
    `profileComplete` is false in that case and when the business name
    is blank.

    Auth:
      - florist token
    """
    return service.read_profile(session, florist.record.id)


@router.post("/florist/profile/setup", response_model=BusinessProfileRead)
def setup_profile(
    payload: ProfileSetup,
    florist: Actor = Depends(require_florist),
    session: Session = Depends(get_session),
):
    """
    Create or update the business profile (one per florist).

    Errors:
      - 400 if businessName, address, city, state or zipCode is missing

    Auth:
      - florist token
    """
    return service.upsert_profile(session, florist.record.id, payload)


# -------- Public endpoints --------


@router.get("/florists", response_model=list[BusinessProfileRead])
def list_florists(session: Session = Depends(get_session)):
    """
    List florists visible to customers.

    Only active florists with a complete profile are returned.
    """
    return service.list_public(session)
