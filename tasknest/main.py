from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn
import logging
import sys

from tasknest.core.config import settings
from tasknest.core.database_utils import (
    check_database_connection,
    create_tables,
    get_db_session,
    get_missing_tables,
)
from tasknest import crud

# Configure logging
handlers = [logging.StreamHandler(sys.stdout)]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=handlers,
)

logger = logging.getLogger(__name__)


def seed_admin_user() -> None:
    with get_db_session() as db:
        admin, created = crud.user.ensure_admin(
            db,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            name=settings.ADMIN_NAME,
        )
        if created:
            logger.info(f"Seeded admin account {admin.email}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting up {settings.PROJECT_NAME} backend...")

    try:
        missing_tables = get_missing_tables()
        if missing_tables and settings.AUTO_CREATE_TABLES:
            logger.info(f"Creating missing database tables: {missing_tables}")
            create_tables()
        elif missing_tables:
            logger.warning(f"Missing database tables: {missing_tables}")
            logger.warning("Run scripts/setup_database.py before starting the server")
        else:
            logger.info("All required database tables exist")
    except Exception as e:
        logger.warning(f"Could not check database tables: {e}")

    if settings.SEED_ADMIN_ON_STARTUP:
        try:
            seed_admin_user()
        except Exception as e:
            logger.error(f"Failed to seed admin account: {e}")

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME} backend...")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="TaskNest - personal reminders and categories",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"CORS configured for {settings.ENVIRONMENT.value} environment with origins: {settings.allowed_cors_origins}")

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    from tasknest.api.v1.api import api_router

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


# Create the FastAPI app instance
app = create_application()


@app.get("/health", tags=["Health Check"])
def health_check():
    """Health check endpoint"""
    db_status = "healthy" if check_database_connection() else "unhealthy"
    user_count = None
    if db_status == "healthy":
        try:
            with get_db_session() as db:
                user_count = crud.user.count(db)
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            db_status = "unhealthy"

    return {
        "status": "healthy",
        "version": settings.VERSION,
        "project": settings.PROJECT_NAME,
        "database": db_status,
        "user_count": user_count,
    }


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Global HTTP exception handler, also covering routing 404/405"""
    logger.error(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.detail,
            "status_code": exc.status_code,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies, query strings and path ids are client errors (400)"""
    logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "error": True,
            "message": "Validation error",
            "status_code": 400,
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc} - {request.url}")
    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "message": "Internal server error",
            "status_code": 500,
        },
    )


if __name__ == "__main__":
    uvicorn.run(
        "tasknest.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.is_development,
        log_level="info",
    )
