import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trainfinder.api.routes.health import router as health_router
from trainfinder.api.routes.trains import router as trains_router
from trainfinder.api.routes.transport import router as transport_router
from trainfinder.core.config import get_settings
from trainfinder.core.deps import Services, build_services
from trainfinder.upstream.http import configure_logging_if_needed

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.services is None:
        app.state.services = build_services(get_settings())
    services: Services = app.state.services

    configure_logging_if_needed(services.settings.log_level)
    if services.settings.scheduler_enabled:
        services.scheduler.start()
    else:
        logger.info("Index scheduler disabled; use POST /trains/rebuild-index")

    try:
        yield
    finally:
        services.scheduler.stop()
        services.client.close()


def create_app(services: Optional[Services] = None) -> FastAPI:
    app = FastAPI(title="Trainfinder API", lifespan=lifespan)
    app.state.services = services

    # Any origin may call the API; the mobile and web clients are served from different hosts.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(trains_router)
    app.include_router(transport_router)
    return app


app = create_app()
