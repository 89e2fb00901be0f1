from enum import Enum
from typing import Any, Dict, Optional
from pydantic import Field

from school_backend.interfaces.base import EntityCreate, EntityInterface, EntityUpdate, Ref, RefList


class ClubState(str, Enum):
    SUGGESTED = "SUGGESTED"
    REJECTED = "REJECTED"
    ACCEPTED = "ACCEPTED"


class ClubCreate(EntityCreate):
    name: str = Field(min_length=1, max_length=255)
    details: Dict[str, Any] = Field(default_factory=dict, description="Description, location, meeting time, requirements, rules")
    state: ClubState = ClubState.SUGGESTED
    leaders: RefList = Field(default_factory=list)
    members: RefList = Field(default_factory=list)
    events: RefList = Field(default_factory=list)
    chat: Ref = None


class ClubUpdate(EntityUpdate):
    nullable = frozenset({'chat'})

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    details: Optional[Dict[str, Any]] = None
    state: Optional[ClubState] = None
    leaders: Optional[RefList] = None
    members: Optional[RefList] = None
    events: Optional[RefList] = None
    chat: Ref = None


class ClubInterface(EntityInterface):
    create = ClubCreate
    update = ClubUpdate
    entity_type = "clubs"
    endpoint = "clubs"
