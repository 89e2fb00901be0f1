from school_backend.api.api_builder import CrudRouter, get_repositories
from school_backend.api.system import system_router

__all__ = ["CrudRouter", "get_repositories", "system_router"]
