from typing import Optional

from school_backend.model import User, UserAccount
from school_backend.population import PopulationPath as P
from school_backend.repositories.base import EntityRepository


class UserRepository(EntityRepository):
    entity_type = "users"
    model = User
    ttl = 10 * 60
    population_paths = (
        P("classes", "classes"),
        P("extra_courses", "courses"),
        P("blackboards", "blackboards"),
        P("clubs", "clubs"),
        P("chats", "chats"),
    )


class UserAccountRepository(EntityRepository):
    entity_type = "user_accounts"
    model = UserAccount
    ttl = 10 * 60
    population_paths = (P("user", "users"),)

    async def get_by_username(self, username: str) -> Optional[dict]:
        for account in await self.get_all():
            if account.get("username") == username:
                return account
        return None
