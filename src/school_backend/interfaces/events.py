from typing import Any, Dict, List, Optional
from pydantic import Field, model_validator

from school_backend.interfaces.base import EntityCreate, EntityInterface, EntityUpdate, Ref, RefList


class EventCreate(EntityCreate):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    host: Optional[str] = Field(None, max_length=255)
    start_date: Optional[int] = Field(None, description="Epoch milliseconds")
    end_date: Optional[int] = Field(None, description="Epoch milliseconds")
    information: List[Dict[str, Any]] = Field(default_factory=list)
    tickets: RefList = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_dates(self):
        if self.start_date is not None and self.end_date is not None and self.end_date < self.start_date:
            raise ValueError('end_date must not be before start_date')
        return self


class EventUpdate(EntityUpdate):
    nullable = frozenset({'description', 'location', 'host', 'start_date', 'end_date'})

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    host: Optional[str] = Field(None, max_length=255)
    start_date: Optional[int] = None
    end_date: Optional[int] = None
    information: Optional[List[Dict[str, Any]]] = None
    tickets: Optional[RefList] = None


class EventInterface(EntityInterface):
    create = EventCreate
    update = EventUpdate
    entity_type = "events"
    endpoint = "events"


class EventTicketCreate(EntityCreate):
    event: Ref = None
    buyer: Ref = None
    price: float = Field(0.0, ge=0)
    sale_date: Optional[int] = Field(None, description="Epoch milliseconds")


class EventTicketUpdate(EntityUpdate):
    nullable = frozenset({'event', 'buyer', 'sale_date'})

    event: Ref = None
    buyer: Ref = None
    price: Optional[float] = Field(None, ge=0)
    sale_date: Optional[int] = None


class EventTicketInterface(EntityInterface):
    create = EventTicketCreate
    update = EventTicketUpdate
    entity_type = "event_tickets"
    endpoint = "event-tickets"
