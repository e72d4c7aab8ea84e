"""Module: main."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.api import api_router
from app.core.config import Settings
from app.core.errors import InventoryError
from app.core.logging_config import configure_logging
from app.db.store import InventoryStore
from app.services.notifier import NotificationSender, build_sender
from app.services.reports import DailyReporter
from app.services.worker import StockWorker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: InventoryStore = app.state.store
    try:
        store.ping()
    except SQLAlchemyError:
        logger.critical("Could not connect to the database, shutting down", exc_info=True)
        raise SystemExit(1)

    logger.info("Connected to the database")
    yield
    store.dispose()


def _validation_message(error: dict) -> str:
    loc = ".".join(str(part) for part in error["loc"] if part != "body")
    return f"{loc}: {error['msg']}" if loc else error["msg"]


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "errors": [_validation_message(error) for error in exc.errors()],
        },
    )


async def inventory_error_handler(request: Request, exc: InventoryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


def create_app(
    settings: Settings | None = None,
    store: InventoryStore | None = None,
    sender: NotificationSender | None = None,
) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    store = store or InventoryStore.from_url(settings.database_url)
    sender = sender or build_sender(settings)

    app = FastAPI(title="MedStock API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.worker = StockWorker(store, sender, settings.timezone, settings.expiry_lookahead_days)
    app.state.reporter = DailyReporter(store, sender, settings.timezone, settings.expiry_lookahead_days)

    app.include_router(api_router, prefix="/api")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "MedStock backend is running"}

    return app
