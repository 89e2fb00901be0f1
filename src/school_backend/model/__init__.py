from .base import Base, metadata, Document, EntityMixin
from .setup import School, SetupAccount
from .general import Grade, SchoolClass, Course, Subject, Blackboard
from .messages import Chat, Message, CHAT_TYPES
from .clubs import Club, CLUB_STATES
from .events import Event, EventTicket
from .users import User, UserAccount, USER_TYPES

__all__ = [
    'Base',
    'metadata',
    'EntityMixin',
    'Document',
    # Setup
    'School',
    'SetupAccount',
    # General
    'Grade',
    'SchoolClass',
    'Course',
    'Subject',
    'Blackboard',
    # Messaging
    'Chat',
    'Message',
    'CHAT_TYPES',
    # Clubs and events
    'Club',
    'CLUB_STATES',
    'Event',
    'EventTicket',
    # Users
    'User',
    'UserAccount',
    'USER_TYPES',
]
