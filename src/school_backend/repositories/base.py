"""
Generic cache-backed entity repository.

Reads go through the entity cache and fall back to a full, populated reload
from the record store. Writes go to the record store first and are then
applied to the cached list in place; all other cached collections are
evicted and the written record is verified in the cache.

Concrete repositories only declare configuration:

    >>> class ChatRepository(EntityRepository):
    ...     entity_type = "chats"
    ...     model = Chat
    ...     ttl = 120
    ...     population_paths = (PopulationPath("messages", "messages"), ...)
"""

import logging
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Type

from school_backend.cache import EntityCache
from school_backend.exceptions.errors import DatabaseError, RetrievalError
from school_backend.model.base import generate_id
from school_backend.population import PopulationPath, Populator
from school_backend.repositories.record_store import RecordStore, column_names

logger = logging.getLogger(__name__)


class EntityRepository:
    """
    Cache-backed access to one entity type.

    Args:
        record_store: Durable store of the records
        cache: Shared entity cache
        populator: Reference expander
        ttl_scale: Multiplier applied to ``ttl``
    """

    entity_type: ClassVar[str]
    model: ClassVar[Type]
    ttl: ClassVar[float] = 600
    population_paths: ClassVar[Sequence[PopulationPath]] = ()

    def __init__(
        self,
        record_store: RecordStore,
        cache: EntityCache,
        populator: Populator,
        ttl_scale: float = 1.0,
    ):
        self.record_store = record_store
        self.cache = cache
        self.populator = populator
        self.ttl_scale = ttl_scale

    @property
    def effective_ttl(self) -> float:
        return self.ttl * self.ttl_scale

    # ========================================================================
    # Loading
    # ========================================================================

    async def _load(self) -> List[dict]:
        """Full reload of the collection with references populated."""
        documents = await self.record_store.get_all_documents(self.model)
        if documents is None:
            raise DatabaseError(
                f"Failed to load {self.entity_type}",
                operation="query",
                entity_type=self.entity_type,
            )
        return await self.populator.populate_many(self.entity_type, documents)

    async def reload(self) -> List[dict]:
        """Force a refresh, e.g. after a write reported a CacheError."""
        return await self.cache.refresh(self.entity_type, self._load, self.effective_ttl)

    # ========================================================================
    # Reads
    # ========================================================================

    async def get_all(self) -> List[dict]:
        return await self.cache.get_or_refresh(self.entity_type, self._load, self.effective_ttl)

    async def get_by_id(self, entity_id: str) -> Optional[dict]:
        """Cached record with ``entity_id``, or ``None`` when there is none."""
        for record in await self.get_all():
            if record.get("id") == entity_id:
                return record
        return None

    async def get_all_by_rule(self, rule: Dict[str, Any]) -> List[dict]:
        """
        Query the record store directly with an equality rule.

        Raises:
            RetrievalError: the rule is not a mapping of known fields
            DatabaseError: the store query failed
        """
        self._validate_rule(rule)
        documents = await self.record_store.get_documents_by_rule(self.model, rule)
        if documents is None:
            raise DatabaseError(
                f"Failed to query {self.entity_type}",
                operation="query",
                entity_type=self.entity_type,
            )
        return await self.populator.populate_many(self.entity_type, documents)

    def _validate_rule(self, rule: Any) -> None:
        if not isinstance(rule, dict):
            raise RetrievalError(
                f"Rule for {self.entity_type} must be an object, got {type(rule).__name__}",
                entity_type=self.entity_type,
            )
        unknown = sorted(set(rule) - set(column_names(self.model)))
        if unknown:
            raise RetrievalError(
                f"Unknown field(s) for {self.entity_type}: {', '.join(unknown)}",
                entity_type=self.entity_type,
            )

    # ========================================================================
    # Writes
    # ========================================================================

    async def create(self, record: Dict[str, Any]) -> dict:
        """
        Persist a new record under a freshly generated id.

        Raises:
            DatabaseError: the store did not create the record
            CacheError: the record could not be verified in the cache
        """
        await self.get_all()

        payload = {key: value for key, value in record.items() if key != "id"}
        payload["id"] = generate_id()
        created = await self.record_store.create_document(self.model, payload)
        if not created:
            raise DatabaseError(
                f"Failed to create {self.entity_type}",
                operation="creation",
                entity_type=self.entity_type,
            )

        populated = await self.populator.populate(self.entity_type, created)
        self.cache.append(self.entity_type, populated, self.effective_ttl)
        self.cache.invalidate_all(keep=self.entity_type)
        await self.cache.verify_in_cache(self.entity_type, populated, self._load, self.effective_ttl)

        logger.info(f"Created {self.entity_type} {populated['id']}")
        return populated

    async def update(self, entity_id: str, record: Dict[str, Any]) -> dict:
        """
        Persist changes to an existing record.

        Raises:
            DatabaseError: no record with ``entity_id`` or the store failed
            CacheError: the record could not be verified in the cache
        """
        await self.get_all()

        updated = await self.record_store.update_document(self.model, entity_id, record)
        if not updated:
            raise DatabaseError(
                f"Failed to update {self.entity_type} {entity_id}",
                operation="update",
                entity_type=self.entity_type,
                entity_id=entity_id,
            )

        populated = await self.populator.populate(self.entity_type, updated)
        self.cache.replace(self.entity_type, entity_id, populated, self.effective_ttl)
        self.cache.invalidate_all(keep=self.entity_type)
        await self.cache.verify_in_cache(self.entity_type, populated, self._load, self.effective_ttl)

        logger.info(f"Updated {self.entity_type} {entity_id}")
        return populated

    async def delete(self, entity_id: str) -> bool:
        """
        Delete a record.

        Raises:
            DatabaseError: no record with ``entity_id`` or the store failed
        """
        await self.get_all()

        deleted = await self.record_store.delete_document(self.model, entity_id)
        if not deleted:
            raise DatabaseError(
                f"Failed to delete {self.entity_type} {entity_id}",
                operation="deletion",
                entity_type=self.entity_type,
                entity_id=entity_id,
            )

        self.cache.remove(self.entity_type, entity_id, self.effective_ttl)
        self.cache.invalidate_all(keep=self.entity_type)

        logger.warning(f"Deleted {self.entity_type} {entity_id}")
        return True
