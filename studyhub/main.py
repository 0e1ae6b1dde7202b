"""FastAPI application entry point for the StudyHub API."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from studyhub.api.routes.assignments import router as assignments_router
from studyhub.api.routes.assistant import router as assistant_router
from studyhub.api.routes.users import router as users_router
from studyhub.config import Settings, get_settings
from studyhub.core.errors import AppError
from studyhub.database import create_db_engine, init_db
from studyhub.logging_utils import configure_logging
from studyhub.schemas.envelope import ErrorEnvelope
from studyhub.services.assistant_service import AssistantService
from studyhub.services.completion import CompletionProvider
from studyhub.services.uploads import UPLOADS_URL_PREFIX

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ErrorEnvelope(message=message, errors=errors)),
    )


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[CompletionProvider] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; read from the environment when omitted
        provider: Completion provider for the assistant; OpenAI when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    engine = create_db_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("Database initialized")
        yield
        engine.dispose()

    app = FastAPI(
        title="StudyHub API",
        description="Assignments, users and the AI homework assistant",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.assistant_service = AssistantService(settings, provider)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    app.include_router(users_router)
    app.include_router(assignments_router)
    app.include_router(assistant_router)

    # Stored attachments are served by their relative path
    settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Render service errors in the failure envelope."""
        return _error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Missing or malformed request fields are a 400."""
        return _error_response(
            400,
            "Validation failed",
            [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ],
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unhandled exceptions with a generic error response.

        Internal error details stay in the log.
        """
        logger.exception("Unhandled exception: %s", exc)
        return _error_response(500, "Internal server error")

    return app


if __name__ == "__main__":
    import uvicorn

    # Same as: uvicorn --factory studyhub.main:create_app
    uvicorn.run("studyhub.main:create_app", factory=True, host="0.0.0.0", port=get_settings().PORT)
