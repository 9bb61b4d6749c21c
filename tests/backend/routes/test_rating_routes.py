import pytest
from pydantic import ValidationError

from backend.models.institution import Institution
from backend.models.user import User
from backend.routes.rating_routes import CreateRatingRequest, create_rating, list_ratings
from backend.services.app_state import AppState


def test_create_rating_request_rejects_out_of_range_scores() -> None:
    with pytest.raises(ValidationError):
        CreateRatingRequest(institution_id='i1', rating=0)


def test_create_rating_returns_updated_institution(app_state: AppState, donor: User, institution: Institution) -> None:
    first = create_rating(
        data=CreateRatingRequest(institution_id=institution.id, rating=3, comment='Atendimento ok'),
        current_user=donor,
        app_state=app_state,
    )
    second = create_rating(
        data=CreateRatingRequest.model_validate({'institutionId': institution.id, 'rating': 5}),
        current_user=donor,
        app_state=app_state,
    )

    assert first['rating']['donorId'] == donor.id
    assert first['institution']['rating'] == 3
    assert second['institution']['rating'] == 4
    assert second['institution']['totalRatings'] == 2


def test_create_rating_for_unknown_institution(app_state: AppState, donor: User) -> None:
    result = create_rating(
        data=CreateRatingRequest(institution_id='missing', rating=4),
        current_user=donor,
        app_state=app_state,
    )

    assert result['institution'] is None
    assert len(app_state.ratings) == 1


def test_list_ratings_filters_by_institution(app_state: AppState, donor: User, institution: Institution) -> None:
    create_rating(data=CreateRatingRequest(institution_id=institution.id, rating=4), current_user=donor, app_state=app_state)
    create_rating(data=CreateRatingRequest(institution_id='other', rating=2), current_user=donor, app_state=app_state)

    assert len(list_ratings(institution_id=None, app_state=app_state)) == 2
    assert [item['rating'] for item in list_ratings(institution_id=institution.id, app_state=app_state)] == [4]
