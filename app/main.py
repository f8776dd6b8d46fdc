"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.tasks import router as tasks_router
from app.config import get_settings
from app.context import AppContext, build_context
from app.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create the API application around an explicit context.

    Args:
        context: Pre-built context (tests inject one); built from
            environment settings when omitted
    """
    if context is None:
        settings = get_settings()
        configure_logging(settings.LOG_LEVEL)
        context = build_context(settings)

    app = FastAPI(
        title="TaskApp API",
        description="Task management API with event-driven notifications",
        version="1.0.0",
    )
    app.state.context = context

    if not context.settings.JWT_SECRET:
        logger.warning(
            "JWT_SECRET is not set, bearer token claims are not verified; "
            "only run behind a gateway authorizer",
            extra={"environment": context.settings.ENVIRONMENT},
        )

    cors_origins = [origin for origin in {context.settings.FRONTEND_URL, "http://localhost:3000"} if origin]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["OPTIONS", "POST", "GET", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Errors are returned as {"message": ...}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Error handling request",
            extra={"method": request.method, "path": request.url.path},
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    app.include_router(tasks_router)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
