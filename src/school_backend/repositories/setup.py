from school_backend.model import School, SetupAccount
from school_backend.population import PopulationPath as P
from school_backend.repositories.base import EntityRepository


class SchoolRepository(EntityRepository):
    entity_type = "schools"
    model = School
    ttl = 10 * 60
    population_paths = (
        P("grades", "grades"),
        P("classes", "classes"),
        P("courses", "courses"),
        P("subjects", "subjects"),
        P("members", "users"),
        P("clubs", "clubs"),
        P("events", "events"),
        P("blackboards", "blackboards"),
        P("messages", "messages"),
    )


class SetupAccountRepository(EntityRepository):
    entity_type = "setup_accounts"
    model = SetupAccount
    ttl = 10 * 60
    population_paths = (P("school", "schools"),)
