from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from backend.auth.dependencies import get_current_user, require_admin
from backend.auth.service import AuthService, ProfileUpdate
from backend.core.errors import BenignaError
from backend.dependencies import get_app_state, get_store
from backend.models.document import Document
from backend.models.institution import Address, Institution, WorkingHours
from backend.models.user import User, UserRole
from backend.routes.errors import to_http_exception
from backend.services.app_state import AppState
from backend.services.location import format_distance, institutions_near
from backend.services.stats import institution_stats
from backend.storage.file_system import FileSystemStore

router = APIRouter(tags=['institutions'])

DEFAULT_RADIUS_KM = 10.0
MAX_RADIUS_KM = 500.0
ACCOUNT_FIELDS = ('name', 'phone', 'profile_image')


class InstitutionUpdateRequest(Document):
    name: str | None = None
    phone: str | None = None
    description: str | None = None
    profile_image: str | None = None
    address: Address | None = None
    working_hours: list[WorkingHours] | None = None
    accepted_categories: list[str] | None = None
    images: list[str] | None = None


class VerificationRequest(BaseModel):
    verified: bool = True


def get_institution_or_404(app_state: AppState, institution_id: str) -> Institution:
    institution = app_state.get_institution(institution_id)
    if institution is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Institution not found.')
    return institution


def ensure_owner_or_admin(current_user: User, institution_id: str) -> None:
    if current_user.type == UserRole.ADMIN:
        return
    if current_user.type == UserRole.INSTITUTION and current_user.id == institution_id:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail='Only the institution itself or an admin can do this.',
    )


@router.get('/')
def list_institutions(
    category: str | None = Query(default=None),
    verified_only: bool = Query(default=False),
    app_state: AppState = Depends(get_app_state),
):
    institutions = app_state.institutions_accepting(category) if category else app_state.institutions
    if verified_only:
        institutions = [institution for institution in institutions if institution.verified]
    return [institution.public_document() for institution in institutions]


@router.get('/nearby')
def list_nearby_institutions(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(default=DEFAULT_RADIUS_KM, gt=0, le=MAX_RADIUS_KM),
    app_state: AppState = Depends(get_app_state),
):
    return [
        {
            **institution.public_document(),
            'distanceKm': round(distance, 3),
            'distance': format_distance(distance),
        }
        for institution, distance in institutions_near(app_state.institutions, latitude, longitude, radius_km)
    ]


@router.get('/{institution_id}')
def get_institution(institution_id: str, app_state: AppState = Depends(get_app_state)):
    return get_institution_or_404(app_state, institution_id).public_document()


@router.put('/{institution_id}')
def update_institution(
    institution_id: str,
    data: InstitutionUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: FileSystemStore = Depends(get_store),
    app_state: AppState = Depends(get_app_state),
):
    ensure_owner_or_admin(current_user, institution_id)
    institution = get_institution_or_404(app_state, institution_id)

    updates = {
        field: getattr(data, field)
        for field in data.model_fields_set
        if getattr(data, field) is not None
    }
    merged = Institution.model_validate({**institution.model_dump(), **updates})

    try:
        updated = app_state.update_institution(merged)

        # The login account shares the institution id and mirrors its contact fields.
        account_changes = {field: updates[field] for field in ACCOUNT_FIELDS if field in updates}
        service = AuthService(store)
        if account_changes and service.get_user(institution_id) is not None:
            service.update_user(institution_id, ProfileUpdate(**account_changes))
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return updated.public_document()


@router.put('/{institution_id}/verification')
def set_verification(
    institution_id: str,
    data: VerificationRequest,
    current_user: User = Depends(require_admin),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    try:
        institution = app_state.verify_institution(institution_id, data.verified)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return institution.public_document()


@router.get('/{institution_id}/ratings')
def list_institution_ratings(institution_id: str, app_state: AppState = Depends(get_app_state)):
    get_institution_or_404(app_state, institution_id)
    return [rating.to_document() for rating in app_state.ratings_by_institution(institution_id)]


@router.get('/{institution_id}/donations')
def list_institution_donations(
    institution_id: str,
    current_user: User = Depends(get_current_user),
    app_state: AppState = Depends(get_app_state),
):
    ensure_owner_or_admin(current_user, institution_id)
    return [donation.to_document() for donation in app_state.donations_by_institution(institution_id)]


@router.get('/{institution_id}/stats')
def get_institution_stats(
    institution_id: str,
    current_user: User = Depends(get_current_user),
    app_state: AppState = Depends(get_app_state),
):
    ensure_owner_or_admin(current_user, institution_id)
    return institution_stats(app_state.donations_by_institution(institution_id))
