from fastapi import APIRouter, Depends, Query, status
from pydantic import Field

from backend.auth.dependencies import require_donor
from backend.core.errors import BenignaError
from backend.dependencies import get_app_state
from backend.models.document import Document
from backend.models.rating import Rating
from backend.models.user import User
from backend.routes.errors import to_http_exception
from backend.services.app_state import AppState

router = APIRouter(tags=['ratings'])

MAX_COMMENT_LENGTH = 600


class CreateRatingRequest(Document):
    institution_id: str
    donation_id: str | None = None
    rating: float = Field(ge=1, le=5)
    comment: str = Field(default='', max_length=MAX_COMMENT_LENGTH)


@router.get('/')
def list_ratings(
    institution_id: str | None = Query(default=None),
    app_state: AppState = Depends(get_app_state),
):
    ratings = app_state.ratings_by_institution(institution_id) if institution_id else app_state.ratings
    return [rating.to_document() for rating in ratings]


@router.post('/', status_code=status.HTTP_201_CREATED)
def create_rating(
    data: CreateRatingRequest,
    current_user: User = Depends(require_donor),
    app_state: AppState = Depends(get_app_state),
):
    rating = Rating(donor_id=current_user.id, **data.model_dump())
    try:
        app_state.add_rating(rating)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    institution = app_state.get_institution(rating.institution_id)
    return {
        'rating': rating.to_document(),
        'institution': institution.public_document() if institution else None,
    }
