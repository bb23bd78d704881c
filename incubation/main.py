"""FastAPI application entry point."""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from incubation.config import get_settings
from incubation.core.exceptions import (
    ConfigurationError,
    DependencyUnavailable,
    EngineError,
    EntityNotFound,
    InputValidationError,
    NotEligible,
)
from incubation.logging_config import configure_logging
from incubation.models import ErrorResponse
from incubation.routers import (
    health_router,
    scoring_router,
    evaluations_router,
    conflicts_router,
    eligibility_router,
)
from incubation.services import get_database_service

logger = structlog.get_logger(__name__)

# Engine errors and the HTTP status they map to; first match wins
ERROR_STATUS: list[tuple[type[EngineError], int]] = [
    (ConfigurationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InputValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (EntityNotFound, status.HTTP_404_NOT_FOUND),
    (NotEligible, status.HTTP_409_CONFLICT),
    (DependencyUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: EngineError) -> int:
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    configure_logging(settings.debug)
    logger.info("app_starting", app_name=settings.app_name, debug=settings.debug)
    if settings.auto_create_tables:
        get_database_service().create_tables()
        logger.info("tables_created")
    yield
    logger.info("app_stopping", app_name=settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
        ## Incubation Progression Engine API

        Evaluation scoring and stage progression for an incubation program.

        ### Features:
        - Weighted scoring over five fixed dimensions or a rubric template
        - Conflict-of-interest gate on every evaluation attempt, with audit log
        - Eligibility checks with per-requirement hints
        - Explicit, idempotent stage advance

        ### Stages:
        - **Hotel de Projetos**
        - **Pré-Residência**
        - **Residência**
        """,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(scoring_router)
    app.include_router(evaluations_router)
    app.include_router(conflicts_router)
    app.include_router(eligibility_router)

    @app.exception_handler(EngineError)
    async def engine_exception_handler(request: Request, exc: EngineError):
        code = status_for(exc)
        log = logger.error if code >= 500 else logger.info
        log("request_failed", path=request.url.path, error_code=exc.error_code, detail=exc.message)
        body = ErrorResponse(detail=exc.message, error_code=exc.error_code, context=exc.details)
        return JSONResponse(status_code=code, content=body.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error": str(exc)}
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("incubation.main:app", host="0.0.0.0", port=8000, reload=True)
