from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, field_validator

from backend.auth.dependencies import get_current_user, require_donor
from backend.core.errors import BenignaError
from backend.dependencies import get_app_state
from backend.models.document import Document
from backend.models.donation import Donation, DonationCondition
from backend.models.user import User, UserRole
from backend.routes.errors import to_http_exception
from backend.services.app_state import AppState

router = APIRouter(tags=['donations'])

MAX_DESCRIPTION_LENGTH = 1000


class CreateDonationRequest(Document):
    institution_id: str
    category: str
    subcategory: str = ''
    description: str = ''
    quantity: int = Field(default=1, gt=0)
    condition: DonationCondition = DonationCondition.USED_GOOD
    images: list[str] = Field(default_factory=list)
    scheduled_date: datetime | None = None

    @field_validator('institution_id', 'category')
    @classmethod
    def validate_required(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Field is required.')
        return normalized

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str) -> str:
        normalized = value.strip()
        if len(normalized) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(f'Description must be {MAX_DESCRIPTION_LENGTH} characters or fewer.')
        return normalized


class ScheduleDonationRequest(Document):
    scheduled_date: datetime


def get_donation_or_404(app_state: AppState, donation_id: str) -> Donation:
    donation = app_state.get_donation(donation_id)
    if donation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Donation not found.')
    return donation


def can_view(current_user: User, donation: Donation) -> bool:
    if current_user.type == UserRole.ADMIN:
        return True
    if current_user.type == UserRole.DONOR:
        return donation.donor_id == current_user.id
    return donation.institution_id == current_user.id


@router.get('/')
def list_donations(
    current_user: User = Depends(get_current_user),
    app_state: AppState = Depends(get_app_state),
):
    if current_user.type == UserRole.ADMIN:
        donations = app_state.donations
    elif current_user.type == UserRole.INSTITUTION:
        donations = app_state.donations_by_institution(current_user.id)
    else:
        donations = app_state.donations_by_donor(current_user.id)
    return [donation.to_document() for donation in donations]


@router.post('/', status_code=status.HTTP_201_CREATED)
def create_donation(
    data: CreateDonationRequest,
    current_user: User = Depends(require_donor),
    app_state: AppState = Depends(get_app_state),
):
    donation = Donation(donor_id=current_user.id, **data.model_dump())
    try:
        donation = app_state.add_donation(donation)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return donation.to_document()


@router.get('/{donation_id}')
def get_donation(
    donation_id: str,
    current_user: User = Depends(get_current_user),
    app_state: AppState = Depends(get_app_state),
):
    donation = get_donation_or_404(app_state, donation_id)
    if not can_view(current_user, donation):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed to view this donation.')
    return donation.to_document()


@router.post('/{donation_id}/schedule')
def schedule_donation(
    donation_id: str,
    data: ScheduleDonationRequest,
    current_user: User = Depends(get_current_user),
    app_state: AppState = Depends(get_app_state),
):
    donation = get_donation_or_404(app_state, donation_id)
    if not can_view(current_user, donation):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed to schedule this donation.')

    try:
        donation = app_state.schedule_donation(donation_id, data.scheduled_date)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return donation.to_document()


@router.post('/{donation_id}/deliver')
def confirm_delivery(
    donation_id: str,
    current_user: User = Depends(get_current_user),
    app_state: AppState = Depends(get_app_state),
):
    donation = get_donation_or_404(app_state, donation_id)
    if current_user.type == UserRole.DONOR or not can_view(current_user, donation):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Only the receiving institution or an admin can confirm delivery.',
        )

    try:
        donation = app_state.mark_delivered(donation_id)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return donation.to_document()
