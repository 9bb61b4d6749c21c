from backend.models.category import Category
from backend.models.donation import Donation, DonationStatus
from backend.models.institution import Institution
from backend.models.rating import Rating
from backend.models.user import User


def admin_stats(
    users: list[User],
    institutions: list[Institution],
    donations: list[Donation],
    categories: list[Category],
    ratings: list[Rating],
) -> dict:
    return {
        'total_users': len(users),
        'total_institutions': len(institutions),
        'verified_institutions': sum(1 for institution in institutions if institution.verified),
        'total_donations': len(donations),
        'delivered_donations': sum(1 for donation in donations if donation.status == DonationStatus.DELIVERED),
        'total_categories': len(categories),
        'total_ratings': len(ratings),
    }


def institution_stats(donations: list[Donation]) -> dict:
    counts = {status.value: 0 for status in DonationStatus}
    for donation in donations:
        counts[donation.status.value] += 1
    return {'total': len(donations), **counts}
