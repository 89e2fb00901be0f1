from school_backend.interfaces.base import EntityInterface, EntityCreate, EntityUpdate, RuleQuery
from school_backend.interfaces.setup import SchoolInterface, SetupAccountInterface
from school_backend.interfaces.general import (
    BlackboardInterface,
    ClassInterface,
    CourseInterface,
    GradeInterface,
    SubjectInterface,
)
from school_backend.interfaces.messages import ChatInterface, MessageInterface
from school_backend.interfaces.clubs import ClubInterface
from school_backend.interfaces.events import EventInterface, EventTicketInterface
from school_backend.interfaces.users import UserAccountInterface, UserInterface

ENTITY_INTERFACES = (
    SchoolInterface,
    SetupAccountInterface,
    GradeInterface,
    ClassInterface,
    CourseInterface,
    SubjectInterface,
    BlackboardInterface,
    ChatInterface,
    MessageInterface,
    ClubInterface,
    EventInterface,
    EventTicketInterface,
    UserInterface,
    UserAccountInterface,
)

__all__ = [
    "EntityInterface",
    "EntityCreate",
    "EntityUpdate",
    "RuleQuery",
    "ENTITY_INTERFACES",
]
