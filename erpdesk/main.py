from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from erpdesk import __version__
from erpdesk.admin import mount_admin
from erpdesk.core.config import settings
from erpdesk.core.database import engine
from erpdesk.core.exceptions import ConflictError, ERPError, NotFoundError
from erpdesk.core.logging import setup_logging
from erpdesk.core.redis import close_redis, redis_client
from erpdesk.schemas import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Startup
    app.state.redis = redis_client
    logger.info("%s %s starting (%s)", settings.app_name, __version__, settings.app_env)
    yield
    # Shutdown
    await close_redis()
    await engine.dispose()


async def erp_error_handler(request: Request, exc: ERPError) -> JSONResponse:
    """Last-resort mapping for domain errors a route did not translate itself."""
    logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc)
    body = ErrorResponse(detail=exc.message, error_code=exc.error_code)
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ConflictError):
        status_code = 409
    else:
        status_code = 400
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.app_debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_exception_handler(ERPError, erp_error_handler)  # type: ignore[arg-type]

    # Register routes
    from erpdesk.api.v1.router import api_v1_router
    from erpdesk.web.dashboard import router as dashboard_router

    app.include_router(api_v1_router, prefix="/api/v1")
    app.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])

    # Mount SQLAdmin
    mount_admin(app, engine)

    return app


app = create_app()
