import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from transfer_api.config.database.db_config import Base, build_engine, build_session_factory
from transfer_api.config.logging_config import configure_logging
from transfer_api.config.project_config import Settings, get_settings
from transfer_api.health.health_controller import router as health_router
from transfer_api.transactions.confirmation import ConfirmationBackend, DelayedConfirmation
from transfer_api.transactions.dedup_registry import DedupRegistry
from transfer_api.transactions.task_scheduler import TaskScheduler
from transfer_api.transactions.transaction_controller import router as transactions_router
from transfer_api.transactions.transaction_errors import TransactionError
from transfer_api.transactions.transaction_repository import TransactionRepository
from transfer_api.transactions.transaction_service import TransactionService
from transfer_api.transactions.transaction_worker import CompletionWorker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    repository = TransactionRepository(build_session_factory(engine))
    registry = DedupRegistry()
    scheduler = TaskScheduler()
    confirmation = app.state.confirmation or DelayedConfirmation(settings.confirmation_delay_s)
    worker = CompletionWorker(repository, registry, confirmation)

    app.state.repository = repository
    app.state.registry = registry
    app.state.scheduler = scheduler
    app.state.transaction_service = TransactionService(
        repository, registry, scheduler, worker, default_currency=settings.default_currency
    )
    logger.info(f"{settings.service_name} {settings.version} started")

    yield

    # workers still running after the grace period leave their records in PROCESSING
    await scheduler.drain(timeout=settings.shutdown_grace_s)
    engine.dispose()
    logger.info(f"{settings.service_name} stopped")


async def transaction_error_handler(request: Request, exc: TransactionError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    confirmation: Optional[ConfirmationBackend] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.service_name, version=settings.version, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.confirmation = confirmation

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TransactionError, transaction_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health_router)
    app.include_router(transactions_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
