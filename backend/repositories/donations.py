from backend.models.donation import Donation
from backend.repositories.base import EntityRepository


class DonationRepository(EntityRepository[Donation]):
    collection = 'donations'
    model = Donation
