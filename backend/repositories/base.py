import logging
from typing import Generic, TypeVar

from pydantic import ValidationError

from backend.models.document import Document
from backend.storage.file_system import FileSystemStore

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Document)


class EntityRepository(Generic[T]):
    """get / get_all / save / delete for one collection of documents."""

    collection: str
    model: type[T]

    def __init__(self, store: FileSystemStore):
        self.store = store

    def key_for(self, entity_id: str) -> str:
        return self.store.entity_key(self.collection, entity_id)

    def get(self, entity_id: str) -> T | None:
        return self._parse(self.store.get(self.key_for(entity_id)))

    def get_all(self) -> list[T]:
        documents = self.store.scan(self.store.collection_prefix(self.collection))
        entities = [self._parse(document) for document in documents]
        return [entity for entity in entities if entity is not None]

    def save(self, entity: T) -> T:
        self.store.put(self.key_for(entity.id), entity.to_document())
        return entity

    def delete(self, entity_id: str) -> None:
        self.store.delete(self.key_for(entity_id))

    def _parse(self, document) -> T | None:
        if document is None:
            return None
        try:
            return self.model.model_validate(document)
        except ValidationError:
            logger.exception('Skipping malformed %s document', self.collection)
            return None
