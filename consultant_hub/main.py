"""FastAPI application entrypoint."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from consultant_hub.config import settings
from consultant_hub.api import analysis_router, readme_router, records_router, session_router
from consultant_hub.auth.session import SessionStore
from consultant_hub.db.session import init_db
from consultant_hub.errors import ConsultantHubError, DispatchError, ValidationError
from consultant_hub.utils.logging_utils import StructuredLogger

logger = StructuredLogger("consultant_hub.api")


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy to HTTP responses with an ``{"error": ...}`` body."""

    @app.exception_handler(DispatchError)
    async def dispatch_error_handler(request: Request, exc: DispatchError):
        # Upstream details are already logged by the gateway client
        return JSONResponse(status_code=exc.status_code, content={"error": exc.user_message})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning("Request rejected", path=request.url.path, error=exc.message, details=exc.details)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "details": exc.details})

    @app.exception_handler(ConsultantHubError)
    async def app_error_handler(request: Request, exc: ConsultantHubError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message, error_type=type(exc).__name__)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning("Malformed request", path=request.url.path, error=message)
        return JSONResponse(
            status_code=400,
            content={"error": message, "details": jsonable_encoder(errors)}
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    """Build the FastAPI application with routers, CORS and error handlers."""
    app = FastAPI(
        title=settings.app_name,
        description="Project knowledge, meeting analysis and AI research for consulting teams",
        version="0.1.0"
    )

    # Sessions live for the lifetime of this application instance
    app.state.session_store = SessionStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(session_router.router)
    app.include_router(records_router.router)
    app.include_router(readme_router.router)
    app.include_router(analysis_router.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


# Create database tables
init_db()

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "consultant_hub.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.app_debug
    )
