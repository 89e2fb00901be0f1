from school_backend.model import Club
from school_backend.population import PopulationPath as P
from school_backend.repositories.base import EntityRepository


class ClubRepository(EntityRepository):
    entity_type = "clubs"
    model = Club
    ttl = 10 * 60
    population_paths = (
        P("leaders", "users"),
        P("members", "users"),
        P("events", "events"),
        P("chat", "chats"),
    )
