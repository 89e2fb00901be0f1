from contextlib import asynccontextmanager
import logging
import sys
from typing import Optional

from fastapi import Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from school_backend.api import CrudRouter, system_router
from school_backend.cache import EntityCache
from school_backend.database import configure_engine, get_db, get_engine, init_db
from school_backend.exceptions.error_handlers import register_exception_handlers
from school_backend.interfaces import ENTITY_INTERFACES
from school_backend.middleware import RequestDebuggerMiddleware
from school_backend.redis_cache import build_cache
from school_backend.repositories import RecordStore, RepositoryRegistry
from school_backend.settings import BackendSettings, settings as default_settings

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Stream records to stdout at ``LOG_LEVEL``."""
    logging.basicConfig(
        level=(level or default_settings.LOG_LEVEL).upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def create_app(
    engine: Optional[Engine] = None,
    cache: Optional[EntityCache] = None,
    settings: BackendSettings = default_settings,
) -> FastAPI:
    """
    Assemble the application.

    Args:
        engine: Database engine, built from settings when omitted
        cache: Entity cache, built from settings when omitted
        settings: Backend settings
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_engine = engine if engine is not None else get_engine()
        session_factory = configure_engine(db_engine)
        init_db(db_engine)

        app.state.cache = cache if cache is not None else build_cache(settings)
        app.state.repositories = RepositoryRegistry(
            RecordStore(session_factory),
            app.state.cache,
            ttl_scale=settings.CACHE_TTL_SCALE,
        )
        logger.info(
            f"Backend started: {len(app.state.repositories.keys())} entity types, "
            f"cache backend '{settings.CACHE_BACKEND}'"
        )
        yield
        if engine is None:
            db_engine.dispose()

    app = FastAPI(lifespan=lifespan)

    # Register custom exception handlers for structured error responses
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Total-Count", "X-Request-ID"],
    )
    app.add_middleware(RequestDebuggerMiddleware)

    for interface in ENTITY_INTERFACES:
        CrudRouter(interface).register_routes(app)

    app.include_router(
        system_router,
        prefix="/api/system",
        tags=["system"],
    )

    @app.head("/", status_code=204)
    def get_status_head(db: Session = Depends(get_db)):
        db.execute(text("SELECT 1"))
        return Response(status_code=204)

    return app


configure_logging()
app = create_app()
