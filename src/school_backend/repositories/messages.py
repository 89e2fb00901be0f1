from school_backend.model import Chat, Message
from school_backend.population import PopulationPath as P
from school_backend.repositories.base import EntityRepository


class ChatRepository(EntityRepository):
    """Chats change often, so they expire after two minutes."""

    entity_type = "chats"
    model = Chat
    ttl = 2 * 60
    population_paths = (
        P("messages", "messages"),
        P("targets", "users"),
        P("courses", "courses"),
        P("clubs", "clubs"),
    )


class MessageRepository(EntityRepository):
    entity_type = "messages"
    model = Message
    ttl = 2 * 60
    population_paths = (
        P("chat", "chats"),
        P("author", "users"),
    )
