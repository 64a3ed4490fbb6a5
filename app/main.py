# Standard library imports
from contextlib import asynccontextmanager

# Third-party imports
from fastapi import FastAPI, Request
from fastapi.exceptions import (
    HTTPException as StarletteHTTPException,
    RequestValidationError,
)
from fastapi.middleware.cors import CORSMiddleware

# Local imports
from app.api.v1.routes.router import router as api_v1_router
from app.core.config import settings
from app.core.exceptions import AppError, ServerError
from app.core.logging_config import get_logger
from app.core.response import error_response, validation_error_response
from app.db.seed.admin import seed_default_admin

# Initialize centralized logger
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown operations."""
    # Startup: make sure an admin can log in on a fresh database
    await seed_default_admin()
    yield


# Initialize FastAPI
app = FastAPI(
    title="Business Simulation API",
    description="API for running classroom business-simulation games",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Include the router with prefix
app.include_router(
    api_v1_router,
    prefix="/api/v1",
)


# Domain errors raised by services and dependencies
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.error_code}: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return error_response(
        exc.message,
        data=exc.data,
        status_code=exc.status_code,
        error_code=exc.error_code,
    )


# Custom exception handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with logging"""
    # exc.detail might be a dict or str
    msg = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    logger.warning(
        f"HTTP Exception: {exc.status_code} - {msg}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else None,
        },
    )

    return error_response(msg, status_code=exc.status_code)


# Pydantic validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Structured validation error details with logging"""
    error_count = len(exc.errors())
    logger.warning(
        f"Validation Error: {error_count} field(s) failed validation",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": error_count,
        },
    )

    return validation_error_response(exc.errors(), status_code=422)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = ServerError()
    return error_response(error.message, status_code=error.status_code, error_code=error.error_code)


# Add CORS middleware
logger.info(f"Configuring CORS middleware with origins: {settings.ALLOWED_ORIGINS}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
)


# Run the app
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
