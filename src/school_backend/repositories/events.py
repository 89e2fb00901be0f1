from school_backend.model import Event, EventTicket
from school_backend.population import PopulationPath as P
from school_backend.repositories.base import EntityRepository


class EventRepository(EntityRepository):
    entity_type = "events"
    model = Event
    ttl = 10 * 60
    population_paths = (P("tickets", "event_tickets"),)


class EventTicketRepository(EntityRepository):
    entity_type = "event_tickets"
    model = EventTicket
    ttl = 10 * 60
    population_paths = (
        P("event", "events"),
        P("buyer", "users"),
    )
