from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import Field

from school_backend.interfaces.base import EntityCreate, EntityInterface, EntityUpdate, Ref, RefList


class ChatType(str, Enum):
    PRIVATE = "PRIVATE"
    GROUP = "GROUP"
    COURSE = "COURSE"
    CLUB = "CLUB"


class ChatCreate(EntityCreate):
    type: ChatType = Field(description="Kind of chat")
    name: str = Field(min_length=1, max_length=255)
    avatar: Optional[str] = Field(None, max_length=2048)
    targets: RefList = Field(default_factory=list)
    courses: RefList = Field(default_factory=list)
    clubs: RefList = Field(default_factory=list)
    messages: RefList = Field(default_factory=list)


class ChatUpdate(EntityUpdate):
    nullable = frozenset({'avatar'})

    type: Optional[ChatType] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    avatar: Optional[str] = Field(None, max_length=2048)
    targets: Optional[RefList] = None
    courses: Optional[RefList] = None
    clubs: Optional[RefList] = None
    messages: Optional[RefList] = None


class ChatInterface(EntityInterface):
    create = ChatCreate
    update = ChatUpdate
    entity_type = "chats"
    endpoint = "chats"


class MessageCreate(EntityCreate):
    chat: Ref = None
    author: Ref = None
    content: List[Dict[str, Any]] = Field(default_factory=list, description="Text, image, file, video or poll parts")
    reactions: List[Dict[str, Any]] = Field(default_factory=list)
    edits: List[Dict[str, Any]] = Field(default_factory=list)
    date: Optional[int] = Field(None, description="Epoch milliseconds")


class MessageUpdate(EntityUpdate):
    nullable = frozenset({'chat', 'author', 'date'})

    chat: Ref = None
    author: Ref = None
    content: Optional[List[Dict[str, Any]]] = None
    reactions: Optional[List[Dict[str, Any]]] = None
    edits: Optional[List[Dict[str, Any]]] = None
    date: Optional[int] = None


class MessageInterface(EntityInterface):
    create = MessageCreate
    update = MessageUpdate
    entity_type = "messages"
    endpoint = "messages"
