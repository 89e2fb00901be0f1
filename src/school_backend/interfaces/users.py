from enum import Enum
from typing import List, Optional
from pydantic import Field

from school_backend.interfaces.base import EntityCreate, EntityInterface, EntityUpdate, Ref, RefList


class UserType(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class UserCreate(EntityCreate):
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    avatar: Optional[str] = Field(None, max_length=2048)
    type: UserType
    classes: RefList = Field(default_factory=list)
    extra_courses: RefList = Field(default_factory=list)
    blackboards: RefList = Field(default_factory=list)
    clubs: RefList = Field(default_factory=list)
    chats: RefList = Field(default_factory=list)


class UserUpdate(EntityUpdate):
    nullable = frozenset({'avatar'})

    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, min_length=1, max_length=255)
    avatar: Optional[str] = Field(None, max_length=2048)
    type: Optional[UserType] = None
    classes: Optional[RefList] = None
    extra_courses: Optional[RefList] = None
    blackboards: Optional[RefList] = None
    clubs: Optional[RefList] = None
    chats: Optional[RefList] = None


class UserInterface(EntityInterface):
    create = UserCreate
    update = UserUpdate
    entity_type = "users"
    endpoint = "users"


class UserAccountCreate(EntityCreate):
    user: Ref = None
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)
    settings: List[str] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)


class UserAccountUpdate(EntityUpdate):
    nullable = frozenset({'user'})

    user: Ref = None
    username: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=1, max_length=255)
    settings: Optional[List[str]] = None
    permissions: Optional[List[str]] = None


class UserAccountInterface(EntityInterface):
    create = UserAccountCreate
    update = UserAccountUpdate
    entity_type = "user_accounts"
    endpoint = "user-accounts"
