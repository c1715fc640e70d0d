import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from billing import __version__
from billing.core.config import Settings, get_settings
from billing.core.container import ApplicationContainer
from billing.core.exceptions import InvalidArgumentError, PaymentError, PaymentInternalError
from billing.core.logging_setup import configure_logging
from billing.infrastructure.database import dispose_engine, init_db
from billing.interfaces.http import create_api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings.logging)
    container = ApplicationContainer.build(settings)
    container.init_infrastructure()
    await init_db()
    app.state.container = container
    logger.info("%s %s started (%s)", settings.project_name, __version__, settings.environment)
    try:
        yield
    finally:
        await container.aclose()
        await dispose_engine()


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return InvalidArgumentError.default_message
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", InvalidArgumentError.default_message)
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, exc: PaymentError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = InvalidArgumentError(_validation_message(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
        error = PaymentInternalError("Storage unavailable, please retry")
        return JSONResponse(status_code=error.status_code, content=error.to_payload())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.project_name,
        description="Token purchase and payment verification service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
