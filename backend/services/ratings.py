from backend.models.institution import Institution
from backend.models.rating import Rating


def average_rating(ratings: list[Rating], institution_id: str) -> tuple[float, int]:
    """Mean score and count of the ratings that reference ``institution_id``."""
    scores = [rating.rating for rating in ratings if rating.institution_id == institution_id]
    if not scores:
        return 0.0, 0
    return sum(scores) / len(scores), len(scores)


def apply_rating(institution: Institution, ratings: list[Rating]) -> Institution:
    mean, count = average_rating(ratings, institution.id)
    return institution.model_copy(update={'rating': mean, 'total_ratings': count})
