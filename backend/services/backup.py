"""JSON export and import of the five entity collections."""

import json
import logging
from datetime import datetime

from pydantic import Field, ValidationError

from backend.core.errors import ImportPayloadError
from backend.models.category import Category
from backend.models.document import Document, utc_now
from backend.models.donation import Donation
from backend.models.institution import Institution
from backend.models.rating import Rating
from backend.models.user import User
from backend.repositories.categories import CategoryRepository
from backend.repositories.donations import DonationRepository
from backend.repositories.institutions import InstitutionRepository
from backend.repositories.ratings import RatingRepository
from backend.repositories.users import UserRepository
from backend.storage.file_system import ENTITY_COLLECTIONS, FileSystemStore

logger = logging.getLogger(__name__)


class ExportBundle(Document):
    users: list[User] = Field(default_factory=list)
    institutions: list[Institution] = Field(default_factory=list)
    donations: list[Donation] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    ratings: list[Rating] = Field(default_factory=list)
    export_date: datetime = Field(default_factory=utc_now)


def build_bundle(store: FileSystemStore) -> ExportBundle:
    return ExportBundle(
        users=UserRepository(store).get_all(),
        institutions=InstitutionRepository(store).get_all(),
        donations=DonationRepository(store).get_all(),
        categories=CategoryRepository(store).get_stored(),
        ratings=RatingRepository(store).get_all(),
    )


def export_data(store: FileSystemStore) -> str:
    return json.dumps(build_bundle(store).to_document(), indent=2, ensure_ascii=False)


def parse_bundle(json_data: str | bytes) -> ExportBundle:
    try:
        payload = json.loads(json_data)
    except (TypeError, ValueError) as exc:
        raise ImportPayloadError('Backup is not valid JSON.') from exc

    if not isinstance(payload, dict):
        raise ImportPayloadError('Backup must be a JSON object.')

    try:
        return ExportBundle.model_validate(payload)
    except ValidationError as exc:
        logger.error('Rejected backup payload: %s', exc.errors(include_url=False))
        raise ImportPayloadError('Backup does not match the export format.') from exc


def import_data(store: FileSystemStore, json_data: str | bytes) -> ExportBundle:
    """Replace every stored entity with the bundle's contents.

    The payload is validated in full before anything is cleared. Images are
    left in place.
    """
    bundle = parse_bundle(json_data)

    removed = store.clear(store.collection_prefix(collection) for collection in ENTITY_COLLECTIONS)
    logger.info('Cleared %d stored keys before import', removed)

    repositories = [
        (UserRepository(store), bundle.users),
        (InstitutionRepository(store), bundle.institutions),
        (DonationRepository(store), bundle.donations),
        (CategoryRepository(store), bundle.categories),
        (RatingRepository(store), bundle.ratings),
    ]
    for repository, entities in repositories:
        for entity in entities:
            repository.save(entity)

    store.initialize_directories()
    return bundle
