import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.core.exceptions import (
    InvalidInputError,
    ResourceNotFoundError,
    WrappedComputationError,
)
from app.api.v1.router import api_router
from app.api.v1.wrapped import legacy_router
from app.db.session import init_db

settings = get_settings()

# Configure logging - suppress noisy third-party loggers
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Silence noisy third-party libraries
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Gava Wrapped...")
    await init_db()
    yield
    # Shutdown
    logger.info("Shutting down Gava Wrapped...")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="""
## Gava Wrapped API

Annual "wrapped" statistics for the Gava gift-exchange platform.

### Features
- **Spending**: Gifts bought, total spend and the most expensive gift of the year
- **Timing**: Last-minute purchases between December 18 and 25
- **Lists**: Lists created, the fullest list and the most active day
- **Suggestions**: Who suggested the most gifts for your lists
""",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "wrapped", "description": "Annual wrapped report"},
        {"name": "health", "description": "Health checks"},
    ],
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(InvalidInputError)
async def invalid_input_exception_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "invalid_input",
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(ResourceNotFoundError)
async def not_found_exception_handler(request: Request, exc: ResourceNotFoundError):
    return JSONResponse(
        status_code=404,
        content={
            "error": "not_found",
            "message": exc.message,
        },
    )


@app.exception_handler(WrappedComputationError)
async def wrapped_computation_exception_handler(
    request: Request, exc: WrappedComputationError
):
    logger.error(f"WrappedComputationError: {exc.message} (details={exc.details})")

    content = {
        "error": "Failed to calculate wrapped data",
        "message": exc.message,
    }

    # Include detailed error info in debug mode
    if settings.DEBUG:
        content["debug"] = {"details": exc.details}

    return JSONResponse(status_code=500, content=content)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle FastAPI HTTPExceptions with consistent format."""
    error_type = {
        400: "bad_request",
        404: "not_found",
        422: "validation_error",
    }.get(exc.status_code, "http_error")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": error_type,
            "message": exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        },
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error occurred")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
app.include_router(legacy_router, tags=["wrapped"])


# Root health check
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": settings.SERVICE_NAME}


def run():
    """Serve the app with uvicorn (the `gava-wrapped` console script)."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
