import os
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from create_tables import create_tables
from database import SessionLocal
from log_config import RequestIdMiddleware, setup_logging

from modules.auth.middleware import RequestGuardMiddleware
from modules.common.errors import ServiceError
from modules.uploads.job import start_storage_sweep_job
from modules.uploads.services.upload_service import PUBLIC_PREFIX
from modules.users.services.seed import seed_reference_data
from modules.auth.controllers.auth_controller import router as auth_router
from modules.maintenance.controllers.maintenance_controller import router as maintenance_router
from modules.projects.controllers.project_controller import router as project_router
from modules.events.controllers.event_controller import router as event_router
from modules.chat.controllers.chat_controller import router as chat_router
from modules.notifications.controllers.notification_controller import router as notification_router
from modules.users.controllers.profile_controller import router as profile_router
from modules.uploads.controllers.upload_controller import router as upload_router
from modules.logs.controllers.log_controller import router as log_router
from modules.dashboard.controllers.stats_controller import router as stats_router

setup_logging()
logger = structlog.get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup logic ---
    logger.info("app_starting", app=settings.app_name)
    os.makedirs(settings.upload_dir, exist_ok=True)
    if settings.auto_create_db:
        create_tables()
        logger.info("tables_ready")
    if settings.seed_demo_data:
        with SessionLocal() as session:
            seed_reference_data(session)
    scheduler = None
    if settings.enable_storage_sweep:
        scheduler = start_storage_sweep_job()
        logger.info("storage_sweep_scheduled", hours=settings.storage_sweep_hours)
    yield
    # --- Shutdown logic ---
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    logger.info("app_stopped")

app = FastAPI(
    title=settings.app_name,
    description="Internal IT service portal: maintenance issues, projects, calendar, chat and notifications",
    version="1.0.0",
    lifespan=lifespan
)

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse({"error": message}, status_code=400)

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)

# Last added runs first: request id, then CORS, then the session guard
app.add_middleware(RequestGuardMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=[
        "Accept",
        "Accept-Language",
        "Content-Language",
        "Content-Type",
        "Authorization",
        "X-Requested-With",
        "X-Request-ID",
        "Origin",
    ],
    expose_headers=["X-Request-ID"],
    max_age=86400,
)
app.add_middleware(RequestIdMiddleware)

# Routers
app.include_router(auth_router)
app.include_router(maintenance_router)
app.include_router(project_router)
app.include_router(event_router)
app.include_router(chat_router)
app.include_router(notification_router)
app.include_router(profile_router)
app.include_router(upload_router)
app.include_router(log_router)
app.include_router(stats_router)

app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
