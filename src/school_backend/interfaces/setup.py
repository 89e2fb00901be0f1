from typing import Optional
from pydantic import Field

from school_backend.interfaces.base import EntityCreate, EntityInterface, EntityUpdate, Ref, RefList


class SchoolCreate(EntityCreate):
    name: str = Field(min_length=1, max_length=255, description="School name")
    grades: RefList = Field(default_factory=list)
    courses: RefList = Field(default_factory=list)
    members: RefList = Field(default_factory=list)
    classes: RefList = Field(default_factory=list)
    messages: RefList = Field(default_factory=list)
    subjects: RefList = Field(default_factory=list)
    clubs: RefList = Field(default_factory=list)
    events: RefList = Field(default_factory=list)
    blackboards: RefList = Field(default_factory=list)


class SchoolUpdate(EntityUpdate):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    grades: Optional[RefList] = None
    courses: Optional[RefList] = None
    members: Optional[RefList] = None
    classes: Optional[RefList] = None
    messages: Optional[RefList] = None
    subjects: Optional[RefList] = None
    clubs: Optional[RefList] = None
    events: Optional[RefList] = None
    blackboards: Optional[RefList] = None


class SchoolInterface(EntityInterface):
    create = SchoolCreate
    update = SchoolUpdate
    entity_type = "schools"
    endpoint = "schools"


class SetupAccountCreate(EntityCreate):
    school_name: str = Field(min_length=1, max_length=255, description="Name of the school being set up")
    school: Ref = Field(None, description="Assigned once the school is created")


class SetupAccountUpdate(EntityUpdate):
    nullable = frozenset({'school'})

    school_name: Optional[str] = Field(None, min_length=1, max_length=255)
    school: Ref = None


class SetupAccountInterface(EntityInterface):
    create = SetupAccountCreate
    update = SetupAccountUpdate
    entity_type = "setup_accounts"
    endpoint = "setup-accounts"
