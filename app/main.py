from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from typing import Optional
import time
import logging

from .api.v1.appointments import router as appointments_router
from .core.config import Settings, settings as default_settings
from .core.database import Database, init_db
from .core.exceptions import AppointmentServiceError, ValidationFailed

# Configure logging
logging.basicConfig(level=default_settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around its own database so instances never share storage."""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="API for managing patient appointments",
        openapi_url="/api/openapi.json",
        docs_url="/api-docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings
    app.state.database = Database(settings.get_database_url, echo=settings.DB_ECHO)

    # Middleware setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS
    )

    # Custom middleware for request logging, timing and security headers
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)

        # Log request
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        return response

    # Exception handlers
    @app.exception_handler(AppointmentServiceError)
    async def service_error_handler(request: Request, exc: AppointmentServiceError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Only reachable for bodies that are not JSON at all
        details = [
            {
                "type": "field",
                "value": None,
                "msg": error.get("msg", "Invalid request"),
                "path": ".".join(str(part) for part in error.get("loc", ())[1:]),
                "location": str(error.get("loc", ("body",))[0]),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=ValidationFailed.status_code,
            content={"error": ValidationFailed.error, "details": details}
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Route not found",
                "message": "The requested resource was not found",
                "path": str(request.url.path)
            }
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Internal server error: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )

    # Include routers
    app.include_router(appointments_router, prefix="/api")

    # Startup and shutdown events
    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup."""
        logger.info(f"Starting {settings.APP_NAME}...")

        database = app.state.database
        logger.info(f"Using {database.url.get_backend_name()} database")

        # Initialize database
        try:
            init_db(database)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            raise

        logger.info("Application startup complete")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on application shutdown."""
        logger.info(f"Shutting down {settings.APP_NAME}...")
        app.state.database.dispose()

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "OK",
            "message": f"{settings.APP_NAME} is running",
            "timestamp": time.time(),
            "version": settings.VERSION
        }

    # Root endpoint
    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.VERSION,
            "docs": "/api-docs",
            "redoc": "/redoc",
            "health": "/health",
            "endpoints": {
                "appointments": "/api/appointments",
                "openapi": "/api/openapi.json"
            }
        }

    return app


# Create FastAPI application
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        log_level="info"
    )
