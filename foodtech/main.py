"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from foodtech.core.config import settings
from foodtech.core.middleware import setup_middleware
from foodtech.core.exceptions import FoodTechError

from foodtech.api.auth import router as auth_router
from foodtech.api.navigation import router as navigation_router
from foodtech.api.attachments import router as attachments_router
from foodtech.api.analytics import router as analytics_router
from foodtech.api.samples import router as samples_router
from foodtech.api.workflow import router as workflow_router
from foodtech.api.kb import router as kb_router
from foodtech.api.admin import router as admin_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("foodtech")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting FoodTech Workflow API")
    try:
        from foodtech.services.storage_service import storage_service
        for bucket in (settings.PURCHASE_BUCKET, settings.RD_BUCKET, settings.KB_BUCKET):
            storage_service.ensure_bucket(bucket)
        logger.info("MinIO buckets ready")
    except Exception as e:
        logger.warning("MinIO not available: %s", e)

    from foodtech.services.cache_service import cache_service
    if cache_service.health_check():
        logger.info("Redis connected")
    else:
        logger.warning("Redis not available, attachment lists will not be cached")

    yield

    logger.info("Shutting down FoodTech Workflow API")


app = FastAPI(
    title="FoodTech Workflow API",
    description="R&D, procurement and knowledge-base workflows",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)


@app.exception_handler(FoodTechError)
async def foodtech_exception_handler(request: Request, exc: FoodTechError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"{field}: {message}" if field else message},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Register routers
app.include_router(auth_router, prefix="/api")
app.include_router(navigation_router, prefix="/api")
app.include_router(attachments_router, prefix="/api")
app.include_router(analytics_router, prefix="/api")
app.include_router(samples_router, prefix="/api")
app.include_router(workflow_router, prefix="/api")
app.include_router(kb_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/api/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
