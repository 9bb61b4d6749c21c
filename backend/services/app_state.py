"""In-memory copies of the entity collections, patched after every write.

``AppState`` sits between the routes and the repositories. Every mutation
writes through the matching repository and then patches the cached list to
mirror the write; nothing is read back. Mutations are serialized by a lock
because sync route handlers run on a thread pool.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from threading import RLock
from typing import Iterator

from sqlalchemy.orm import sessionmaker

from backend.core.errors import EntityNotFoundError
from backend.models.category import Category, Subcategory
from backend.models.document import utc_now
from backend.models.donation import Donation, DonationStatus, ensure_forward_transition
from backend.models.institution import Institution
from backend.models.rating import Rating
from backend.repositories.categories import CategoryRepository
from backend.repositories.donations import DonationRepository
from backend.repositories.institutions import InstitutionRepository
from backend.repositories.ratings import RatingRepository
from backend.services.ratings import apply_rating
from backend.services.scheduling import validate_schedule
from backend.storage.file_system import FileSystemStore

logger = logging.getLogger(__name__)


def _replace(items: list, entity) -> list:
    if any(item.id == entity.id for item in items):
        return [entity if item.id == entity.id else item for item in items]
    return [*items, entity]


class AppState:
    def __init__(self, session_factory: sessionmaker, base_dir: str | None = None):
        self._session_factory = session_factory
        self._base_dir = base_dir
        self._lock = RLock()

        self.institutions: list[Institution] = []
        self.donations: list[Donation] = []
        self.categories: list[Category] = []
        self.ratings: list[Rating] = []

    @contextmanager
    def store(self) -> Iterator[FileSystemStore]:
        db = self._session_factory()
        try:
            yield FileSystemStore(db, base_dir=self._base_dir)
        finally:
            db.close()

    def refresh(self) -> None:
        with self._lock, self.store() as store:
            self.institutions = InstitutionRepository(store).get_all()
            self.donations = DonationRepository(store).get_all()
            self.categories = CategoryRepository(store).get_all()
            self.ratings = RatingRepository(store).get_all()
        logger.info(
            'Loaded %d institutions, %d donations, %d categories, %d ratings',
            len(self.institutions), len(self.donations), len(self.categories), len(self.ratings),
        )

    # Institutions

    def get_institution(self, institution_id: str) -> Institution | None:
        return next((item for item in self.institutions if item.id == institution_id), None)

    def institutions_accepting(self, category_name: str) -> list[Institution]:
        return [item for item in self.institutions if category_name in item.accepted_categories]

    def add_institution(self, institution: Institution) -> Institution:
        with self._lock, self.store() as store:
            InstitutionRepository(store).save(institution)
            self.institutions = [*self.institutions, institution]
        return institution

    def update_institution(self, institution: Institution) -> Institution:
        institution = institution.model_copy(update={'updated_at': utc_now()})
        with self._lock, self.store() as store:
            InstitutionRepository(store).save(institution)
            self.institutions = _replace(self.institutions, institution)
        return institution

    def verify_institution(self, institution_id: str, verified: bool = True) -> Institution:
        with self._lock:
            institution = self._require_institution(institution_id)
            return self.update_institution(institution.model_copy(update={'verified': verified}))

    # Donations

    def get_donation(self, donation_id: str) -> Donation | None:
        return next((item for item in self.donations if item.id == donation_id), None)

    def donations_by_donor(self, donor_id: str) -> list[Donation]:
        return [item for item in self.donations if item.donor_id == donor_id]

    def donations_by_institution(self, institution_id: str) -> list[Donation]:
        return [item for item in self.donations if item.institution_id == institution_id]

    def add_donation(self, donation: Donation) -> Donation:
        """New donations start pending, or scheduled when a date is given."""
        updates: dict = {'status': DonationStatus.PENDING, 'delivered_date': None}
        if donation.scheduled_date is not None:
            updates['scheduled_date'] = validate_schedule(
                self.get_institution(donation.institution_id),
                donation.scheduled_date,
            )
            updates['status'] = DonationStatus.SCHEDULED
        donation = donation.model_copy(update=updates)

        with self._lock, self.store() as store:
            DonationRepository(store).save(donation)
            self.donations = [*self.donations, donation]
        return donation

    def update_donation(self, donation: Donation) -> Donation:
        with self._lock:
            current = self._require_donation(donation.id)
            ensure_forward_transition(current.status, donation.status)

            updates: dict = {'updated_at': utc_now()}
            if donation.status == DonationStatus.DELIVERED and donation.delivered_date is None:
                updates['delivered_date'] = current.delivered_date or utc_now()
            donation = donation.model_copy(update=updates)

            with self.store() as store:
                DonationRepository(store).save(donation)
            self.donations = _replace(self.donations, donation)
        return donation

    def schedule_donation(self, donation_id: str, when: datetime) -> Donation:
        with self._lock:
            current = self._require_donation(donation_id)
            ensure_forward_transition(current.status, DonationStatus.SCHEDULED)
            scheduled_date = validate_schedule(self.get_institution(current.institution_id), when)
            return self.update_donation(current.model_copy(update={
                'status': DonationStatus.SCHEDULED,
                'scheduled_date': scheduled_date,
            }))

    def mark_delivered(self, donation_id: str) -> Donation:
        with self._lock:
            current = self._require_donation(donation_id)
            return self.update_donation(current.model_copy(update={
                'status': DonationStatus.DELIVERED,
                'delivered_date': current.delivered_date or utc_now(),
            }))

    # Ratings

    def ratings_by_institution(self, institution_id: str) -> list[Rating]:
        return [item for item in self.ratings if item.institution_id == institution_id]

    def add_rating(self, rating: Rating) -> Rating:
        """Save the rating and recompute the institution's average and count."""
        with self._lock:
            with self.store() as store:
                RatingRepository(store).save(rating)
            self.ratings = [*self.ratings, rating]

            institution = self.get_institution(rating.institution_id)
            if institution is not None:
                self.update_institution(apply_rating(institution, self.ratings))
        return rating

    # Categories

    def get_category(self, category_id: str) -> Category | None:
        return next((item for item in self.categories if item.id == category_id), None)

    def add_category(self, category: Category) -> Category:
        with self._lock, self.store() as store:
            CategoryRepository(store).save(category)
            self.categories = [*self.categories, category]
        return category

    def update_category(self, category: Category) -> Category:
        category = Category.model_validate(category.model_dump())
        with self._lock, self.store() as store:
            CategoryRepository(store).save(category)
            self.categories = _replace(self.categories, category)
        return category

    def delete_category(self, category_id: str) -> None:
        with self._lock:
            self._require_category(category_id)
            with self.store() as store:
                CategoryRepository(store).delete(category_id)
            self.categories = [item for item in self.categories if item.id != category_id]

    def add_subcategory(self, category_id: str, name: str) -> Subcategory:
        with self._lock:
            category = self._require_category(category_id)
            subcategory = Subcategory(name=name, category_id=category_id)
            self.update_category(category.model_copy(update={
                'subcategories': [*category.subcategories, subcategory],
            }))
        return subcategory

    def update_subcategory(self, category_id: str, subcategory_id: str, name: str) -> Subcategory:
        with self._lock:
            category = self._require_category(category_id)
            if not any(item.id == subcategory_id for item in category.subcategories):
                raise EntityNotFoundError('Subcategory', subcategory_id)
            subcategory = Subcategory(id=subcategory_id, name=name, category_id=category_id)
            self.update_category(category.model_copy(update={
                'subcategories': [
                    subcategory if item.id == subcategory_id else item
                    for item in category.subcategories
                ],
            }))
        return subcategory

    def delete_subcategory(self, category_id: str, subcategory_id: str) -> None:
        with self._lock:
            category = self._require_category(category_id)
            if not any(item.id == subcategory_id for item in category.subcategories):
                raise EntityNotFoundError('Subcategory', subcategory_id)
            self.update_category(category.model_copy(update={
                'subcategories': [item for item in category.subcategories if item.id != subcategory_id],
            }))

    def _require_institution(self, institution_id: str) -> Institution:
        institution = self.get_institution(institution_id)
        if institution is None:
            raise EntityNotFoundError('Institution', institution_id)
        return institution

    def _require_donation(self, donation_id: str) -> Donation:
        donation = self.get_donation(donation_id)
        if donation is None:
            raise EntityNotFoundError('Donation', donation_id)
        return donation

    def _require_category(self, category_id: str) -> Category:
        category = self.get_category(category_id)
        if category is None:
            raise EntityNotFoundError('Category', category_id)
        return category
