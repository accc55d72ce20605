"""
E-Shop Platform - Backend API
Catalog, orders, users and checkout for the storefront and admin panel
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

# Import API routers
from app.api import categories, orders, products, users
from app.core.auth import AccessGateMiddleware, build_password_context
from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.exceptions import PersistenceError, register_exception_handlers
from app.services.upload_service import UPLOADS_URL_PATH

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    db: Database = app.state.db

    if settings.DB_AUTO_MIGRATE:
        try:
            db.ensure_schema()
        except PersistenceError as e:
            # API still starts; /health reports the database as disconnected
            logger.error(f"Schema check failed at startup: {e.message}")

    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} serving on {settings.api_prefix}")
    yield
    db.close()


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Configuration; defaults to the process-wide settings
        db: Database handle; defaults to a lazily-connecting pool on DATABASE_URL
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    # Create the FastAPI application
    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db or Database(settings)
    app.state.pwd_context = build_password_context(settings.PWD_SALT)

    register_exception_handlers(app)

    # Middleware: the last one added runs first (CORS -> access log -> gate)
    app.add_middleware(AccessGateMiddleware, settings=settings)

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        elapsed_ms = round((time.time() - start_time) * 1000, 2)
        length = response.headers.get("content-length", "-")
        logger.info(f"{request.method} {request.url.path} {response.status_code} {length} - {elapsed_ms} ms")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    # Uploaded product images
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount(f"/{UPLOADS_URL_PATH}", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    # Include API routers
    api = settings.api_prefix
    app.include_router(products.router, prefix=f"{api}/products", tags=["Products"])
    app.include_router(categories.router, prefix=f"{api}/categories", tags=["Categories"])
    app.include_router(orders.router, prefix=f"{api}/orders", tags=["Orders"])
    app.include_router(users.router, prefix=f"{api}/users", tags=["Users"])

    @app.get("/")
    async def root():
        """Root endpoint - API status"""
        return {
            "message": settings.API_TITLE,
            "status": "online",
            "version": settings.API_VERSION,
            "api": api,
        }

    @app.get("/health")
    async def health():
        """Health check endpoint for monitoring - tests database connectivity"""
        start_time = time.time()

        db_latency_ms = None
        db_error = None
        try:
            db_latency_ms = app.state.db.ping()
            db_status = "connected"
        except PersistenceError as e:
            db_status = "disconnected"
            db_error = e.message

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "service": "eshop-api",
            "version": settings.API_VERSION,
            "database": {
                "status": db_status,
                "latency_ms": db_latency_ms,
                "error": db_error,
            },
            "total_latency_ms": round((time.time() - start_time) * 1000, 2),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("app.main:app", host=_settings.API_HOST, port=_settings.API_PORT)
