from typing import Annotated, Optional
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status

from school_backend.exceptions import NotFoundException
from school_backend.interfaces.base import EntityInterface, RuleQuery
from school_backend.repositories import EntityRepository, RepositoryRegistry


def get_repositories(request: Request) -> RepositoryRegistry:
    """FastAPI dependency returning the application's repository registry."""
    return request.app.state.repositories


class CrudRouter:

    id_type = "id"

    path: str
    dto: EntityInterface

    def __init__(self, dto, endpoint: Optional[str] = None):
        self.dto = dto
        if endpoint is None:
            self.path = self.dto.endpoint
        else:
            self.path = endpoint

        self.router = APIRouter()

    def _repository(self, repositories: RepositoryRegistry) -> EntityRepository:
        return repositories[self.dto.entity_type]

    def create(self):
        async def route(
                entity: self.dto.create,
                repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
        ) -> dict:
            return await self._repository(repositories).create(entity.model_dump(mode="json"))
        return route

    def get(self):
        async def route(
                id: str,
                repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
        ) -> dict:
            record = await self._repository(repositories).get_by_id(id)
            if record is None:
                raise NotFoundException(detail=f"{self.dto.entity_type} {id} not found")
            return record
        return route

    def list(self):
        async def route(
                response: Response,
                repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
        ) -> list[dict]:
            records = await self._repository(repositories).get_all()
            response.headers["X-Total-Count"] = str(len(records))
            return records
        return route

    def filter(self):
        async def route(
                query: RuleQuery,
                response: Response,
                repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
        ) -> list[dict]:
            records = await self._repository(repositories).get_all_by_rule(query.rule)
            response.headers["X-Total-Count"] = str(len(records))
            return records
        return route

    def update(self):
        async def route(
                id: str,
                entity: self.dto.update,
                repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
        ) -> dict:
            return await self._repository(repositories).update(
                id, entity.model_dump(mode="json", exclude_unset=True)
            )
        return route

    def delete(self):
        async def route(
                id: str,
                repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
        ):
            await self._repository(repositories).delete(id)
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return route

    def register_routes(self, app: FastAPI, prefix: str = "/api"):

        scope_name = self.path.replace("/", "").replace("-", " ").replace("_", " ")

        self.router.add_api_route("", self.create(), methods=["POST"],
                    status_code=status.HTTP_201_CREATED, name=f"{self.create.__name__} {scope_name.capitalize()}")
        self.router.add_api_route("", self.list(), methods=["GET"],
                    status_code=status.HTTP_200_OK, name=f"{self.list.__name__} {scope_name.capitalize()}")
        self.router.add_api_route("/filter", self.filter(), methods=["POST"],
                    status_code=status.HTTP_200_OK, name=f"{self.filter.__name__} {scope_name.capitalize()}")
        self.router.add_api_route(f"/{{{CrudRouter.id_type}}}", self.get(), methods=["GET"],
                    status_code=status.HTTP_200_OK, name=f"{self.get.__name__} {scope_name.capitalize()}")
        self.router.add_api_route(f"/{{{CrudRouter.id_type}}}", self.update(), methods=["PATCH"],
                    status_code=status.HTTP_200_OK, name=f"{self.update.__name__} {scope_name.capitalize()}")
        self.router.add_api_route(f"/{{{CrudRouter.id_type}}}", self.delete(), methods=["DELETE"],
                    status_code=status.HTTP_204_NO_CONTENT, name=f"{self.delete.__name__} {scope_name.capitalize()}")

        app.include_router(
            self.router,
            prefix=f"{prefix}/{self.path}",
            tags=[scope_name]
        )

        return self
