from backend.models.rating import Rating
from backend.repositories.base import EntityRepository


class RatingRepository(EntityRepository[Rating]):
    collection = 'ratings'
    model = Rating
