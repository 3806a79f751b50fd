"""
TipStorm - FastAPI Application
Subscription-gated betting tips: accounts, plans, slips and manual payments.
"""
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
from pathlib import Path

from app.database import init_db
from app.config import settings
from app.core.exceptions import AppError
from app.core.security import now_utc
from app.services.expiry_scheduler import ExpirySweepScheduler

from app.api.routes import (
    health,
    auth,
    users,
    slips,
    subscriptions,
)

logging.basicConfig(
    level=logging.DEBUG if settings.app_debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)
scheduler = ExpirySweepScheduler(
    cron=settings.expiry_sweep_cron,
    poll_seconds=settings.expiry_sweep_poll_seconds,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting TipStorm API...")

    try:
        init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")

    logger.info(f"API running on {settings.app_env} environment")
    if settings.expiry_sweep_enabled:
        scheduler.start()
        app.state.expiry_scheduler = scheduler
    yield
    if settings.expiry_sweep_enabled:
        await scheduler.stop()
    logger.info("Shutting down TipStorm API...")


app = FastAPI(
    title=settings.app_name,
    description="Backend API for TipStorm",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _failure(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _failure(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")


@app.get("/")
async def root() -> dict:
    return {
        "name": settings.app_name,
        "message": "TipStorm backend running",
        "environment": settings.app_env,
        "timestamp": now_utc().isoformat(),
    }


app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, tags=["Auth"])
app.include_router(users.router, tags=["Users"])
app.include_router(slips.router, tags=["Slips"])
app.include_router(subscriptions.router, tags=["Subscriptions"])



def resolve_frontend_file(root: Path, full_path: str) -> Path | None:
    """File under ``root`` for a request path, falling back to index.html."""
    candidate = (root / full_path).resolve()
    if candidate.is_file() and root in candidate.parents:
        return candidate
    index = root / "index.html"
    return index if index.is_file() else None


def mount_frontend(target: FastAPI, directory: str) -> bool:
    """Serve a single-page build for every GET no API route matched."""
    if not directory or not Path(directory).is_dir():
        return False
    root = Path(directory).resolve()

    @target.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str) -> FileResponse:
        path = resolve_frontend_file(root, full_path)
        if path is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
        return FileResponse(path)

    logger.info("Serving frontend from %s", root)
    return True


# Registered last so API routes take precedence.
mount_frontend(app, settings.frontend_dir)
