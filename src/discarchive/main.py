"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from discarchive import __version__
from discarchive.api import (
    discs_router,
    episodes_router,
    movies_router,
    others_router,
    photo_sets_router,
    series_router,
    sizes_router,
    volumes_router,
)
from discarchive.core.config import settings
from discarchive.core.exceptions import DiscArchiveError
from discarchive.database import init_db

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting Disc Archive Server v{__version__}")

    logger.info("Initializing database...")
    await init_db()
    logger.info("Database initialized")

    logger.info(f"Server ready on {settings.host}:{settings.port}")

    yield

    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title="Disc Archive Server",
    description="Optical disc catalogue with burned-resource tracking",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for web UI (if added later)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DiscArchiveError)
async def discarchive_error_handler(request: Request, exc: DiscArchiveError) -> JSONResponse:
    """Render domain errors with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def jsonable_errors(errors) -> list[dict]:
    """Strip non-serializable context from pydantic error entries."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with the first problem spelled out."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    detail = f"{location}: {message}" if location else message
    return JSONResponse(
        status_code=400,
        content={"detail": detail, "errors": jsonable_errors(errors)},
    )


# Include routers
app.include_router(discs_router)
app.include_router(movies_router)
app.include_router(others_router)
app.include_router(series_router)
app.include_router(episodes_router)
app.include_router(photo_sets_router)
app.include_router(volumes_router)
app.include_router(sizes_router)


@app.get("/")
async def root() -> dict:
    """Root endpoint with server info."""
    return {
        "name": "Disc Archive Server",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "discarchive.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
