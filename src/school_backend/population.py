"""
Reference expansion ("population") of entity records.

Reference fields hold either a single id or a list of ids. Populating a
record replaces those ids with the referenced records, which are themselves
populated along their own declared paths until the depth budget runs out.
With the default depth of 2 a Subject gets its courses, each course gets its
members, teacher, chat, ... and those third-level records keep raw ids.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from school_backend.exceptions.errors import DatabaseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopulationPath:
    """Reference ``field`` of a record pointing at records of entity type ``target``."""
    field: str
    target: str


def _ref_id(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return value.get("id")
    return value


def _collect_ids(records: Iterable[dict], field: str) -> List[str]:
    ids = []
    for record in records:
        value = record.get(field)
        values = value if isinstance(value, list) else [value]
        for item in values:
            ref = _ref_id(item)
            if ref is not None and ref not in ids:
                ids.append(ref)
    return ids


class Populator:
    """
    Expands reference fields using the record store.

    Args:
        record_store: RecordStore used for batched id lookups
        models: Entity type -> SQLAlchemy model
        paths: Entity type -> population paths declared for it
        depth: Levels of references to expand
    """

    def __init__(
        self,
        record_store,
        models: Mapping[str, type],
        paths: Mapping[str, Sequence[PopulationPath]],
        depth: int = 2,
    ):
        self.record_store = record_store
        self.models = models
        self.paths = paths
        self.depth = depth

    async def populate(self, entity_type: str, record: dict) -> dict:
        populated = await self.populate_many(entity_type, [record])
        return populated[0]

    async def populate_many(self, entity_type: str, records: List[dict], depth: Optional[int] = None) -> List[dict]:
        """Return populated copies of ``records``; the inputs are left untouched."""
        depth = self.depth if depth is None else depth
        result = [dict(record) for record in records]
        paths = self.paths.get(entity_type, ())
        if depth <= 0 or not paths or not result:
            return result

        for path in paths:
            ids = _collect_ids(result, path.field)
            if not ids:
                continue
            targets = await self._fetch(path.target, ids)
            targets = await self.populate_many(path.target, targets, depth - 1)
            by_id: Dict[str, dict] = {target["id"]: target for target in targets}

            for record in result:
                if path.field not in record:
                    continue
                value = record[path.field]
                if isinstance(value, list):
                    # dangling references are dropped
                    record[path.field] = [
                        by_id[_ref_id(item)] for item in value if _ref_id(item) in by_id
                    ]
                elif value is not None:
                    record[path.field] = by_id.get(_ref_id(value))

        return result

    async def _fetch(self, entity_type: str, ids: List[str]) -> List[dict]:
        model = self.models.get(entity_type)
        if model is None:
            raise DatabaseError(f"Unknown entity type '{entity_type}' in population path", entity_type=entity_type)

        documents = await self.record_store.get_documents_by_ids(model, ids)
        if documents is None:
            raise DatabaseError(
                f"Referenced {entity_type} could not be loaded",
                operation="query",
                entity_type=entity_type,
            )
        if len(documents) != len(ids):
            logger.debug(f"Population of {entity_type}: {len(ids) - len(documents)} dangling reference(s)")
        return documents
