import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from leaselink.core.config import Settings
from leaselink.core.database import Base, build_engine, build_session_factory
from leaselink.core.logging_setup import configure_logging
from leaselink.core.startup_checks import ensure_tables_exist, validate_database_environment
from leaselink.db.seed import seed_demo_data
from leaselink.middleware.observability import ObservabilityMiddleware
from leaselink.middleware.session import SessionMiddleware
import leaselink.models  # noqa: F401  registers every table before create_all
from leaselink.routers.auth import router as auth_router
from leaselink.routers.properties import router as properties_router
from leaselink.routers.tenants import router as tenants_router
from leaselink.routers.tickets import router as tickets_router
from leaselink.routers.units import router as units_router
from leaselink.services.errors import LeaseLinkError

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
SERVICE_NAME = "LeaseLink API"


def _startup_tasks(app: FastAPI) -> None:
    settings: Settings = app.state.settings
    engine = app.state.engine
    try:
        validate_database_environment(settings)
        Base.metadata.create_all(bind=engine)
        ensure_tables_exist(engine)
        if settings.seed_demo_data:
            db = app.state.session_factory()
            try:
                seed_demo_data(db)
            finally:
                db.close()
        else:
            logger.info("%s demo seed disabled", STARTUP_PREFIX)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    _startup_tasks(app)
    yield


async def _leaselink_error_handler(request: Request, exc: LeaseLinkError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        if loc and loc[-1] not in fields:
            fields.append(loc[-1])
    detail = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
    return JSONResponse(status_code=400, content={"detail": detail})


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("unhandled database error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=SERVICE_NAME,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url)
    app.state.session_factory = build_session_factory(app.state.engine)

    # last added runs first: CORS, then request logging, then session decoding
    app.add_middleware(SessionMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LeaseLinkError, _leaselink_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)

    app.include_router(auth_router)
    app.include_router(tickets_router)
    app.include_router(properties_router)
    app.include_router(units_router)
    app.include_router(tenants_router)

    @app.get("/")
    def root():
        return {"status": "ok"}

    @app.get("/api/health")
    def health():
        return {"status": "ok", "service": SERVICE_NAME}

    logger.info("%s app created env=%s", STARTUP_PREFIX, settings.env)
    return app


app = create_app()
