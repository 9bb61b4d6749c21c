"""Path-keyed JSON document store on top of the ``storage_entries`` table.

Keys look like file paths (``benigna_data/users/<id>.json``) so the namespace
reads as a directory tree of JSON documents. Directories only exist as
``<path>/.directory`` marker keys.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core import config
from backend.core.errors import StorageError, StorageQuotaExceededError
from backend.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)

ENTITY_COLLECTIONS = ('users', 'institutions', 'donations', 'categories', 'ratings')
IMAGE_FOLDERS = ('profiles', 'institutions', 'donations')
DIRECTORY_MARKER = '.directory'
SCAN_BATCH_SIZE = 500


class FileSystemStore:
    def __init__(self, db: Session, base_dir: str | None = None, quota_bytes: int | None = None):
        self.db = db
        self.base_dir = base_dir or config.STORAGE_BASE_DIR
        self.quota_bytes = config.STORAGE_QUOTA_BYTES if quota_bytes is None else quota_bytes

    def collection_prefix(self, collection: str) -> str:
        return f'{self.base_dir}/{collection}/'

    def entity_key(self, collection: str, entity_id: str) -> str:
        return f'{self.base_dir}/{collection}/{entity_id}.json'

    def put(self, key: str, value: Any) -> None:
        payload = json.dumps(value, indent=2, ensure_ascii=False)
        size = len(payload.encode('utf-8'))

        try:
            entry = self.db.query(StorageEntry).filter(StorageEntry.key == key).first()
            self._check_quota(size - (entry.size_bytes if entry else 0))

            if entry is None:
                entry = StorageEntry(key=key, value=payload, size_bytes=size)
                self.db.add(entry)
            else:
                entry.value = payload
                entry.size_bytes = size
                entry.updated_at = datetime.now(timezone.utc)

            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Error writing %s', key)
            raise StorageError(f'Could not write {key}.') from exc

    def get(self, key: str) -> Any | None:
        try:
            entry = self.db.query(StorageEntry.value).filter(StorageEntry.key == key).first()
        except SQLAlchemyError:
            logger.exception('Error reading %s', key)
            return None

        if entry is None:
            return None

        try:
            return json.loads(entry.value)
        except json.JSONDecodeError:
            logger.exception('Corrupt document at %s', key)
            return None

    def scan(self, prefix: str, suffix: str = '.json') -> list[Any]:
        """Return every document whose key starts with ``prefix``.

        Walks the whole namespace in insertion order. Any unreadable document
        makes the whole scan come back empty.
        """
        values: list[Any] = []
        try:
            rows = (
                self.db.query(StorageEntry.key, StorageEntry.value)
                .order_by(StorageEntry.id.asc())
                .yield_per(SCAN_BATCH_SIZE)
            )
            for key, value in rows:
                if key.startswith(prefix) and key.endswith(suffix):
                    values.append(json.loads(value))
        except (SQLAlchemyError, json.JSONDecodeError):
            logger.exception('Error scanning %s', prefix)
            return []

        return values

    def keys(self, prefix: str) -> list[str]:
        try:
            rows = self.db.query(StorageEntry.key).order_by(StorageEntry.id.asc()).all()
        except SQLAlchemyError:
            logger.exception('Error listing keys under %s', prefix)
            return []
        return [key for (key,) in rows if key.startswith(prefix)]

    def delete(self, key: str) -> None:
        try:
            self.db.query(StorageEntry).filter(StorageEntry.key == key).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Error deleting %s', key)
            raise StorageError(f'Could not delete {key}.') from exc

    def clear(self, prefixes: Iterable[str]) -> int:
        prefixes = tuple(prefixes)
        doomed = [key for key in self.keys(self.base_dir) if key.startswith(prefixes)]

        try:
            for start in range(0, len(doomed), SCAN_BATCH_SIZE):
                batch = doomed[start:start + SCAN_BATCH_SIZE]
                self.db.query(StorageEntry).filter(StorageEntry.key.in_(batch)).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Error clearing %s', ', '.join(prefixes))
            raise StorageError('Could not clear stored data.') from exc

        return len(doomed)

    def create_directory(self, path: str) -> None:
        self.put(f'{path}/{DIRECTORY_MARKER}', {'created': datetime.now(timezone.utc).isoformat()})

    def initialize_directories(self) -> None:
        directories = [*ENTITY_COLLECTIONS, *(f'images/{folder}' for folder in IMAGE_FOLDERS)]
        for directory in directories:
            marker = f'{self.base_dir}/{directory}/{DIRECTORY_MARKER}'
            if self.get(marker) is None:
                self.create_directory(f'{self.base_dir}/{directory}')

    def usage_bytes(self) -> int:
        return int(self.db.query(func.coalesce(func.sum(StorageEntry.size_bytes), 0)).scalar())

    def _check_quota(self, additional_bytes: int) -> None:
        if self.quota_bytes <= 0 or additional_bytes <= 0:
            return
        if self.usage_bytes() + additional_bytes > self.quota_bytes:
            raise StorageQuotaExceededError('Storage quota exceeded.')
