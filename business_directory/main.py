"""FastAPI application entry point for the Business Directory service."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from business_directory.config import Settings, get_settings
from business_directory.dependencies import (
    close_es_client,
    get_app_settings,
    get_document_store,
    init_es_client,
)
from business_directory.exceptions import DocumentStoreError, NotFound, StoreUnavailable
from business_directory.routers import (
    admin_router,
    businesses_router,
    complaints_router,
    reviews_router,
)
from business_directory.services.document_store import DocumentStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S"
    )
    # Reduce verbosity of the transport layer
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown events."""
    configure_logging(get_settings())
    logger.info("Starting Business Directory...")
    try:
        await init_es_client()
        logger.info("Elasticsearch client initialized")
    except Exception as e:
        logger.warning(f"Could not initialize Elasticsearch client: {e}")

    yield

    logger.info("Shutting down Business Directory...")
    await close_es_client()
    logger.info("Elasticsearch client closed")


app = FastAPI(
    title="Business Directory",
    description="Business listings with reviews, complaints and derived rating statistics",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(businesses_router)
app.include_router(reviews_router)
app.include_router(complaints_router)
app.include_router(admin_router)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error(f"Document store unavailable for {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Document store unavailable"})


@app.exception_handler(DocumentStoreError)
async def document_store_error_handler(request: Request, exc: DocumentStoreError):
    logger.error(f"Document store error for {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": f"Document store error: {exc}"})


@app.get("/health")
async def health_check(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Health check endpoint.

    Returns the status of the application and its document store.
    """
    store_ok = await store.ping()

    return JSONResponse(
        status_code=200 if store_ok else 503,
        content={
            "status": "healthy" if store_ok else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "app": settings.app_name,
            "version": settings.app_version,
            "checks": {
                "elasticsearch": "healthy" if store_ok else "unhealthy",
            },
        },
    )


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "business_directory.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
