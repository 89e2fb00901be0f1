"""
Entity repositories.

``RepositoryRegistry`` builds one repository per entity type, all sharing a
single record store, entity cache and populator.
"""

from typing import Dict, Iterator, Type

from school_backend.cache import EntityCache
from school_backend.population import Populator
from school_backend.repositories.base import EntityRepository
from school_backend.repositories.record_store import RecordStore
from school_backend.repositories.setup import SchoolRepository, SetupAccountRepository
from school_backend.repositories.general import (
    BlackboardRepository,
    ClassRepository,
    CourseRepository,
    GradeRepository,
    SubjectRepository,
)
from school_backend.repositories.messages import ChatRepository, MessageRepository
from school_backend.repositories.clubs import ClubRepository
from school_backend.repositories.events import EventRepository, EventTicketRepository
from school_backend.repositories.users import UserAccountRepository, UserRepository

REPOSITORY_CLASSES: tuple[Type[EntityRepository], ...] = (
    SchoolRepository,
    SetupAccountRepository,
    GradeRepository,
    ClassRepository,
    CourseRepository,
    SubjectRepository,
    BlackboardRepository,
    ChatRepository,
    MessageRepository,
    ClubRepository,
    EventRepository,
    EventTicketRepository,
    UserRepository,
    UserAccountRepository,
)


class RepositoryRegistry:
    """
    All entity repositories of one application.

    Repositories are reachable by entity key and as attributes:

        >>> registry["chats"] is registry.chats
        True
    """

    def __init__(
        self,
        record_store: RecordStore,
        cache: EntityCache,
        ttl_scale: float = 1.0,
        population_depth: int = 2,
    ):
        self.record_store = record_store
        self.cache = cache
        self.populator = Populator(
            record_store,
            models={cls.entity_type: cls.model for cls in REPOSITORY_CLASSES},
            paths={cls.entity_type: cls.population_paths for cls in REPOSITORY_CLASSES},
            depth=population_depth,
        )
        self._repositories: Dict[str, EntityRepository] = {
            cls.entity_type: cls(record_store, cache, self.populator, ttl_scale=ttl_scale)
            for cls in REPOSITORY_CLASSES
        }

    def __getitem__(self, entity_type: str) -> EntityRepository:
        return self._repositories[entity_type]

    def __getattr__(self, entity_type: str) -> EntityRepository:
        try:
            return self.__dict__["_repositories"][entity_type]
        except KeyError:
            raise AttributeError(entity_type) from None

    def __iter__(self) -> Iterator[EntityRepository]:
        return iter(self._repositories.values())

    def __contains__(self, entity_type: str) -> bool:
        return entity_type in self._repositories

    def keys(self):
        return self._repositories.keys()


__all__ = [
    "EntityRepository",
    "RecordStore",
    "RepositoryRegistry",
    "REPOSITORY_CLASSES",
    "SchoolRepository",
    "SetupAccountRepository",
    "GradeRepository",
    "ClassRepository",
    "CourseRepository",
    "SubjectRepository",
    "BlackboardRepository",
    "ChatRepository",
    "MessageRepository",
    "ClubRepository",
    "EventRepository",
    "EventTicketRepository",
    "UserRepository",
    "UserAccountRepository",
]
