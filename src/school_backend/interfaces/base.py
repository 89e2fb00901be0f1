"""
DTO interfaces for the entity endpoints.

Each interface names the pydantic create/update bodies of one entity type,
the repository key it is stored under and the endpoint it is served at.
"""

from abc import ABC
from typing import Annotated, Any, ClassVar, Dict, FrozenSet, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Reference fields carry ids of other entities
RefId = Annotated[str, Field(max_length=36)]
Ref = Optional[RefId]
RefList = List[RefId]


class EntityInterface(ABC):
    create: BaseModel = None
    update: BaseModel = None
    entity_type: str = None
    endpoint: str = None


class EntityCreate(BaseModel):
    """Base for create bodies; unknown properties, including a client ``id``, are dropped."""

    model_config = ConfigDict(extra='ignore')


class EntityUpdate(BaseModel):
    """
    Base for update bodies; every field is optional and only set fields are written.

    An explicit ``null`` is accepted only for fields listed in ``nullable``,
    the columns that may be cleared.
    """

    model_config = ConfigDict(extra='ignore')

    nullable: ClassVar[FrozenSet[str]] = frozenset()

    @field_validator('*')
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        if value is None and info.field_name not in cls.nullable:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class RuleQuery(BaseModel):
    """Body of the filter endpoint: field -> required value."""

    rule: Dict[str, Any] = Field(default_factory=dict, description="Equality rule on record fields")
