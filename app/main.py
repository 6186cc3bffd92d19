"""
Arsip & Surat BIAK - Main Application
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.utils.logger import setup_logger
from app.api.routes import router
from app.api.auth_routes import router as auth_router
from app.api.archive_routes import router as archive_router
from app.api.catalog_routes import router as catalog_router
from app.api.static_field_routes import router as static_field_router
from app.api.education_routes import router as education_router
from app.api.letter_routes import router as letter_router
from app.services.storage_service import storage_service

settings = get_settings()
setup_logger()
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("=" * 50)
    logger.info("  Arsip & Surat BIAK v%s Starting (%s)", APP_VERSION, settings.app_env)
    logger.info("=" * 50)
    logger.info("[Storage] Upload directory: %s", os.path.abspath(storage_service.upload_dir))
    logger.info("[Server] Ready to accept connections!")

    yield

    # Shutdown
    logger.info("Arsip & Surat BIAK Stopped")


# Create FastAPI app
app = FastAPI(
    title="Arsip & Surat BIAK",
    description="Katalog arsip fisik dan pelacakan surat BIAK",
    version=APP_VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Error handlers: semua error dibalas {"success": false, "message": ...} ===

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "Invalid request", "detail": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})


# Uploaded files
storage_service.ensure_dir()
app.mount("/uploads", StaticFiles(directory=storage_service.upload_dir), name="uploads")

# Include API routes
app.include_router(router)
app.include_router(auth_router)
app.include_router(archive_router)
app.include_router(catalog_router)
app.include_router(static_field_router)
app.include_router(education_router)
app.include_router(letter_router)


@app.get("/")
async def api_info():
    """API Info endpoint"""
    return {
        "name": "Arsip & Surat BIAK",
        "version": APP_VERSION,
        "environment": settings.app_env,
        "features": ["Archive Catalog", "Static Field Hierarchy", "Letter Tracking", "Rekap Export"],
        "storage": storage_service.info(),
        "docs": "/docs"
    }
